"""DeepSeek chat API. OpenAI-compatible."""

from typing import Optional

from promptline.llm.adapters.openai_compat import OpenAICompatAdapter

MAX_OUTPUT_TOKENS: dict[str, int] = {
    "deepseek-chat": 8192,
    "deepseek-coder": 16384,
    "deepseek-reasoner": 65536,
}


class DeepSeekAdapter(OpenAICompatAdapter):
    name = "deepseek"
    base_url = "https://api.deepseek.com"
    static_models = ("deepseek-chat", "deepseek-reasoner")

    def get_max_tokens(self, model: str) -> Optional[int]:
        return MAX_OUTPUT_TOKENS.get(model)

    def supports_temperature(self, model: str) -> bool:
        # The reasoner silently ignores sampling parameters.
        return model != "deepseek-reasoner"
