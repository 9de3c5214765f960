"""Multi-provider LLM layer with an adaptive model capability cache.

This package sends single prompts to interchangeable providers and learns
per-model request constraints (output ceiling, temperature support, token
limit field name) from provider listings and from failed requests.

Usage:
    from promptline.llm import PromptClient, ModelCache

    client = PromptClient.from_settings(settings)
    text = await client.run_prompt("anthropic", "claude-sonnet-4-20250514", "Hello!")
"""

# Core types
from promptline.llm.types import (
    ModelInfo,
    ProviderName,
    ResolvedParams,
)

# Errors
from promptline.errors import (
    CacheWriteError,
    ConfigError,
    MissingApiKeyError,
    PromptNotFoundError,
    PromptlineError,
    ProviderError,
)

# Capability cache, resolution and learning
from promptline.llm.model_cache import CacheEntry, ModelCache
from promptline.llm.capabilities import resolve_parameters
from promptline.llm.learner import (
    extract_max_tokens,
    extract_max_tokens_param,
    learn_from_error,
)

# Client and Factory
from promptline.llm.client import PromptClient
from promptline.llm.factory import (
    create_adapter,
    list_provider_names,
    split_model,
)

__all__ = [
    # Core types
    "ModelInfo",
    "ProviderName",
    "ResolvedParams",
    # Errors
    "CacheWriteError",
    "ConfigError",
    "MissingApiKeyError",
    "PromptNotFoundError",
    "PromptlineError",
    "ProviderError",
    # Cache
    "CacheEntry",
    "ModelCache",
    "resolve_parameters",
    "extract_max_tokens",
    "extract_max_tokens_param",
    "learn_from_error",
    # Client
    "PromptClient",
    "create_adapter",
    "list_provider_names",
    "split_model",
]
