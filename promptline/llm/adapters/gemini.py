"""Google Gemini provider adapter (Generative Language API)."""

from typing import Any, Optional

from promptline.llm.adapters.base import BaseAdapter
from promptline.llm.types import ModelInfo


class GeminiAdapter(BaseAdapter):
    """Gemini ``generateContent`` API, authenticated with an API key."""

    name = "google"
    base_url = "https://generativelanguage.googleapis.com/v1beta"
    default_max_tokens_param = "maxOutputTokens"
    static_models = (
        "gemini-2.5-pro",
        "gemini-2.5-flash",
        "gemini-2.0-flash",
    )

    def headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.require_key()}

    async def send(
        self,
        model: str,
        prompt: str,
        temperature: Optional[float],
        max_tokens: int,
        max_tokens_param: str,
    ) -> str:
        generation_config: dict[str, Any] = {max_tokens_param: max_tokens}
        if temperature is not None:
            generation_config["temperature"] = temperature

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        response = await self.client.post(
            f"{self.base_url}/models/{model}:generateContent",
            headers=self.headers(),
            json=payload,
        )
        data = self.check_response(response)

        for candidate in data.get("candidates") or []:
            content = candidate.get("content") if isinstance(candidate, dict) else None
            parts = content.get("parts") if isinstance(content, dict) else None
            for part in parts or []:
                if isinstance(part, dict) and isinstance(part.get("text"), str) and part["text"]:
                    return part["text"]
        raise self.empty_response()

    async def fetch_models(self) -> list[ModelInfo]:
        models: list[ModelInfo] = []
        params: dict[str, Any] = {"pageSize": 1000}

        while True:
            response = await self.client.get(
                f"{self.base_url}/models",
                headers=self.headers(),
                params=params,
            )
            data = self.check_response(response)
            for entry in data.get("models") or []:
                if "generateContent" not in entry.get("supportedGenerationMethods", []):
                    continue
                # Names come back as "models/gemini-2.5-flash".
                model_id = entry["name"].rsplit("/", 1)[-1]
                models.append(self.model_info(model_id, entry.get("outputTokenLimit")))

            token = data.get("nextPageToken")
            if not token:
                return models
            params = {"pageSize": 1000, "pageToken": token}
