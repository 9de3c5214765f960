"""OpenAI provider adapter."""

from typing import Optional

import httpx

from promptline.config.settings import Settings
from promptline.llm.adapters.openai_compat import OpenAICompatAdapter

# Sourced from OpenAI's model documentation.
MAX_OUTPUT_TOKENS: dict[str, int] = {
    "gpt-5": 128000,
    "gpt-5-mini": 128000,
    "gpt-4.1": 32768,
    "gpt-4.1-mini": 32768,
    "gpt-4o": 16384,
    "gpt-4o-mini": 16384,
    "gpt-4-turbo": 4096,
    "gpt-4-turbo-preview": 4096,
    "gpt-4-32k": 8192,  # The 32k context model still has an 8k output limit.
    "gpt-4": 8192,
    "gpt-3.5-turbo-16k": 4096,
    "gpt-3.5-turbo": 4096,
    "o1": 100000,
    "o3": 100000,
    "o3-mini": 100000,
    "o4-mini": 100000,
}

REASONING_PREFIXES = ("o1", "o3", "o4", "gpt-5")


def is_reasoning_model(model: str) -> bool:
    """Reasoning families reject temperature and use max_completion_tokens."""
    return model.lower().startswith(REASONING_PREFIXES)


class OpenAIAdapter(OpenAICompatAdapter):
    """OpenAI chat completions API."""

    name = "openai"
    base_url = "https://api.openai.com/v1"
    static_models = (
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4.1",
        "gpt-4-turbo",
        "gpt-4",
        "gpt-3.5-turbo",
        "gpt-5",
        "o3-mini",
    )

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        super().__init__(settings, client)
        if settings.openai_max_tokens_param:
            self.default_max_tokens_param = settings.openai_max_tokens_param

    def get_max_tokens(self, model: str) -> Optional[int]:
        return MAX_OUTPUT_TOKENS.get(model)

    def supports_temperature(self, model: str) -> bool:
        return not is_reasoning_model(model)

    def token_limit_param(self, model: str) -> Optional[str]:
        if is_reasoning_model(model):
            return "max_completion_tokens"
        return None
