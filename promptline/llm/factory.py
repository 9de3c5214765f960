"""Factory functions for creating LLM adapters.

This module provides:
- The ordered list of supported provider names
- Adapter instantiation by provider name
- Splitting of ``provider:model`` strings
"""

from typing import Optional

import httpx

from promptline.config.settings import Settings
from promptline.errors import ConfigError
from promptline.llm.adapters.base import BaseAdapter
from promptline.llm.types import ProviderName


def list_provider_names() -> list[str]:
    """All provider names, in listing order."""
    return [p.value for p in ProviderName]


def create_adapter(
    name: str,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> BaseAdapter:
    """Create adapter instance for the named provider.

    Credentials are read here but only checked when a request needs them.

    Raises:
        ConfigError: If the provider is unknown
    """
    try:
        provider = ProviderName.parse(name)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    if provider == ProviderName.OPENAI:
        from promptline.llm.adapters.openai import OpenAIAdapter
        return OpenAIAdapter(settings, client)
    elif provider == ProviderName.ANTHROPIC:
        from promptline.llm.adapters.anthropic import AnthropicAdapter
        return AnthropicAdapter(settings, client)
    elif provider == ProviderName.GOOGLE:
        from promptline.llm.adapters.gemini import GeminiAdapter
        return GeminiAdapter(settings, client)
    elif provider == ProviderName.OPENROUTER:
        from promptline.llm.adapters.openrouter import OpenRouterAdapter
        return OpenRouterAdapter(settings, client)
    elif provider == ProviderName.GROQ:
        from promptline.llm.adapters.groq import GroqAdapter
        return GroqAdapter(settings, client)
    elif provider == ProviderName.TOGETHER:
        from promptline.llm.adapters.together import TogetherAdapter
        return TogetherAdapter(settings, client)
    elif provider == ProviderName.MISTRAL:
        from promptline.llm.adapters.mistral import MistralAdapter
        return MistralAdapter(settings, client)
    else:
        from promptline.llm.adapters.deepseek import DeepSeekAdapter
        return DeepSeekAdapter(settings, client)


def split_model(
    model: Optional[str],
    provider: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> tuple[str, str]:
    """Resolve (provider, model) from CLI values and configured defaults.

    ``model`` may be ``provider:model``; only the first colon splits, so
    model ids containing colons survive.

    Examples:
        >>> split_model("openai:gpt-4o")
        ('openai', 'gpt-4o')

    Raises:
        ConfigError: No model, or no provider to pair it with.
    """
    model = model or (settings.default_model if settings else None)
    if not model:
        raise ConfigError(
            "No model specified. Use -m <provider:model> or set default_model in config.toml."
        )

    if ":" in model:
        prefix, _, rest = model.partition(":")
        try:
            return ProviderName.parse(prefix).value, rest
        except ValueError:
            # Not a provider prefix; treat the whole string as the model id.
            pass

    provider = provider or (settings.default_provider if settings else None)
    if not provider:
        raise ConfigError(
            "No provider specified in model and no default provider in config."
        )
    try:
        return ProviderName.parse(provider).value, model
    except ValueError as e:
        raise ConfigError(str(e)) from e
