"""Together AI inference API. OpenAI-compatible."""

from typing import Any

from promptline.llm.adapters.openai_compat import OpenAICompatAdapter
from promptline.llm.types import ModelInfo


class TogetherAdapter(OpenAICompatAdapter):
    name = "together"
    base_url = "https://api.together.xyz/v1"
    static_models = (
        "meta-llama/Llama-3.3-70B-Instruct-Turbo",
        "mistralai/Mixtral-8x7B-Instruct-v0.1",
        "Qwen/Qwen2.5-72B-Instruct-Turbo",
    )

    async def fetch_models(self) -> list[ModelInfo]:
        # Together returns a bare list rather than {"data": [...]}.
        response = await self.client.get(f"{self.base_url}/models", headers=self.headers())
        data: Any = self.check_response(response, allow_list=True)
        entries = data["data"] if isinstance(data, dict) else data
        return [
            self.parse_model_entry(entry)
            for entry in entries
            if entry.get("type", "chat") == "chat"
        ]
