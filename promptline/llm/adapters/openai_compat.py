"""Shared adapter for OpenAI-compatible chat APIs.

Used by OpenAI, OpenRouter, Groq, Together, Mistral and DeepSeek.
"""

from typing import Any, Optional

from promptline.llm.adapters.base import BaseAdapter
from promptline.llm.types import ModelInfo


def build_chat_payload(
    model: str,
    prompt: str,
    temperature: Optional[float],
    max_tokens: int,
    max_tokens_param: str,
) -> dict[str, Any]:
    """Chat completion body with a single user message."""
    payload: dict[str, Any] = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        max_tokens_param: max_tokens,
    }
    if temperature is not None:
        payload["temperature"] = temperature
    return payload


def extract_chat_text(data: Any) -> Optional[str]:
    """First choice's message content, or None."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) and content else None


class OpenAICompatAdapter(BaseAdapter):
    """Adapter for any API speaking the OpenAI chat/completions dialect."""

    base_url: str = ""

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.require_key()}"}

    async def send(
        self,
        model: str,
        prompt: str,
        temperature: Optional[float],
        max_tokens: int,
        max_tokens_param: str,
    ) -> str:
        headers = self.headers()
        response = await self.client.post(
            f"{self.base_url}/chat/completions",
            headers=headers,
            json=build_chat_payload(model, prompt, temperature, max_tokens, max_tokens_param),
        )
        text = extract_chat_text(self.check_response(response))
        if text is None:
            raise self.empty_response()
        return text

    def parse_model_entry(self, entry: dict[str, Any]) -> ModelInfo:
        """Turn one ``/models`` entry into a record. Override for richer listings."""
        return self.model_info(entry["id"])

    async def fetch_models(self) -> list[ModelInfo]:
        response = await self.client.get(f"{self.base_url}/models", headers=self.headers())
        data = self.check_response(response)
        return [self.parse_model_entry(entry) for entry in data["data"]]
