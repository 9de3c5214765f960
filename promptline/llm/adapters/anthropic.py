"""Anthropic provider adapter.

Anthropic's Messages API is not OpenAI-compatible: authentication uses the
``x-api-key`` header, ``max_tokens`` is mandatory and temperature is capped
at 1.0.
"""

from typing import Any, Optional

from promptline.llm.adapters.base import BaseAdapter
from promptline.llm.types import ModelInfo

API_VERSION = "2023-06-01"

MAX_OUTPUT_TOKENS: dict[str, int] = {
    "claude-opus-4-1-20250805": 32000,
    "claude-opus-4-20250514": 32000,
    "claude-sonnet-4-5-20250929": 64000,
    "claude-sonnet-4-20250514": 64000,
    "claude-3-7-sonnet-20250219": 64000,
    "claude-3-5-haiku-20241022": 8192,
    "claude-3-5-sonnet-20241022": 8192,
    "claude-3-opus-20240229": 4096,
}


class AnthropicAdapter(BaseAdapter):
    """Anthropic Messages API."""

    name = "anthropic"
    base_url = "https://api.anthropic.com/v1"
    static_models = tuple(MAX_OUTPUT_TOKENS)

    def headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.require_key(),
            "anthropic-version": API_VERSION,
        }

    def get_max_tokens(self, model: str) -> Optional[int]:
        return MAX_OUTPUT_TOKENS.get(model)

    def sanitize(
        self,
        model: str,
        temperature: Optional[float],
        max_tokens: int,
    ) -> tuple[Optional[float], int]:
        """Anthropic accepts temperature in [0, 1]."""
        if temperature is not None and temperature > 1.0:
            temperature = 1.0
        return temperature, max_tokens

    async def send(
        self,
        model: str,
        prompt: str,
        temperature: Optional[float],
        max_tokens: int,
        max_tokens_param: str,
    ) -> str:
        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            max_tokens_param: max_tokens,
        }
        if temperature is not None:
            payload["temperature"] = temperature

        response = await self.client.post(
            f"{self.base_url}/messages",
            headers=self.headers(),
            json=payload,
        )
        data = self.check_response(response)

        # Handle content blocks; only text blocks carry output.
        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type", "text") == "text" and block.get("text"):
                return block["text"]
        raise self.empty_response()

    async def fetch_models(self) -> list[ModelInfo]:
        response = await self.client.get(
            f"{self.base_url}/models",
            headers=self.headers(),
            params={"limit": 1000},
        )
        data = self.check_response(response)
        return [self.model_info(entry["id"]) for entry in data["data"]]
