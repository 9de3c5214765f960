"""Mistral AI inference API. OpenAI-compatible."""

from typing import Optional

from promptline.llm.adapters.openai_compat import OpenAICompatAdapter

MAX_OUTPUT_TOKENS: dict[str, int] = {
    "mistral-large-latest": 32768,
    "open-mixtral-8x7b": 32768,
    "open-mistral-7b": 32768,
}


class MistralAdapter(OpenAICompatAdapter):
    name = "mistral"
    base_url = "https://api.mistral.ai/v1"
    static_models = (
        "mistral-large-latest",
        "mistral-medium-latest",
        "mistral-small-latest",
        "open-mistral-7b",
    )

    def get_max_tokens(self, model: str) -> Optional[int]:
        # Output is rarely capped below the context window; 8192 is a safe floor.
        return MAX_OUTPUT_TOKENS.get(model, 8192)
