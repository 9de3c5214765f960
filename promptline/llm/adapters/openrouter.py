"""OpenRouter unified API. OpenAI-compatible, with richer model listings."""

from typing import Any

from promptline.llm.adapters.openai_compat import OpenAICompatAdapter
from promptline.llm.types import ModelInfo


class OpenRouterAdapter(OpenAICompatAdapter):
    name = "openrouter"
    base_url = "https://openrouter.ai/api/v1"
    static_models = (
        "openai/gpt-4o",
        "anthropic/claude-sonnet-4",
        "google/gemini-2.5-flash",
        "meta-llama/llama-3.3-70b-instruct",
    )

    def parse_model_entry(self, entry: dict[str, Any]) -> ModelInfo:
        top = entry.get("top_provider") or {}
        params = entry.get("supported_parameters")
        info = self.model_info(entry["id"], top.get("max_completion_tokens"))
        if isinstance(params, list) and "temperature" not in params:
            info.supports_temperature = False
        return info
