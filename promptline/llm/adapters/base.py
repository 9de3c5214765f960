"""Base adapter interface for LLM providers.

Every provider integration implements the same small contract so the cache,
resolver and learner never need to know about wire formats:

- ``list_models()``: best-effort enumeration with whatever capability data the
  provider exposes. Network or credential problems fall back to a static list.
- ``invoke()``: exactly one request. Temperature is sent only when not None.
- ``sanitize()``: pure per-model-family request rules, identity by default.
"""

import os
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
import structlog

from promptline.config.settings import Settings
from promptline.errors import MissingApiKeyError, ProviderError
from promptline.llm.types import ModelInfo

logger = structlog.get_logger()


class BaseAdapter(ABC):
    """Abstract base for LLM provider adapters."""

    name: str = ""
    default_max_tokens_param: str = "max_tokens"
    static_models: tuple[str, ...] = ()

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.api_key_var = settings.api_key_var(self.name)
        self.api_key = os.environ.get(self.api_key_var) or None
        self.client = client or httpx.AsyncClient(timeout=settings.request_timeout_seconds)

    def require_key(self) -> str:
        """Return the API key or raise MissingApiKeyError."""
        if not self.api_key:
            raise MissingApiKeyError(self.name, self.api_key_var)
        return self.api_key

    async def aclose(self) -> None:
        await self.client.aclose()

    # ------------------------------------------------------------------
    # Built-in per-model knowledge
    # ------------------------------------------------------------------

    def get_max_tokens(self, model: str) -> Optional[int]:
        """Documented output ceiling for ``model``, if known."""
        return None

    def supports_temperature(self, model: str) -> bool:
        return True

    def token_limit_param(self, model: str) -> Optional[str]:
        """Request field for the token limit when it differs from the default."""
        return None

    def sanitize(
        self,
        model: str,
        temperature: Optional[float],
        max_tokens: int,
    ) -> tuple[Optional[float], int]:
        """Apply hard per-model rules to requested parameters.

        Returns (temperature or None to omit, max_tokens).
        """
        if not self.supports_temperature(model):
            return None, max_tokens
        return temperature, max_tokens

    def model_info(self, model: str, max_output_tokens: Optional[int] = None) -> ModelInfo:
        """Build a record from listing data plus built-in knowledge."""
        return ModelInfo(
            id=model,
            max_output_tokens=max_output_tokens or self.get_max_tokens(model),
            supports_temperature=self.supports_temperature(model),
            max_tokens_param=self.token_limit_param(model),
        )

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    @abstractmethod
    async def fetch_models(self) -> list[ModelInfo]:
        """Query the provider's live model listing. May raise."""
        pass

    def fallback_models(self) -> list[ModelInfo]:
        return [self.model_info(m) for m in self.static_models]

    async def list_models(self) -> list[ModelInfo]:
        """Live listing when possible, static list otherwise. Sorted by id."""
        if not self.api_key:
            logger.debug("model_listing_static", provider=self.name, reason="no_api_key")
            models = self.fallback_models()
        else:
            try:
                models = await self.fetch_models()
            except (httpx.HTTPError, ProviderError, ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning("model_listing_failed", provider=self.name, error=str(e))
                models = self.fallback_models()

        unique = {m.id: m for m in models}
        return [unique[k] for k in sorted(unique)]

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    @abstractmethod
    async def send(
        self,
        model: str,
        prompt: str,
        temperature: Optional[float],
        max_tokens: int,
        max_tokens_param: str,
    ) -> str:
        """Provider-specific request. Returns the first text output."""
        pass

    async def invoke(
        self,
        model: str,
        prompt: str,
        temperature: Optional[float],
        max_tokens: int,
        max_tokens_param: Optional[str] = None,
    ) -> str:
        """Send one prompt as a single user message and return the text reply.

        Raises:
            MissingApiKeyError: No credential configured.
            ProviderError: The provider rejected the request or returned no text.
        """
        param = max_tokens_param or self.token_limit_param(model) or self.default_max_tokens_param
        start_time = time.perf_counter()

        try:
            text = await self.send(model, prompt, temperature, max_tokens, param)
        except httpx.HTTPError as e:
            raise ProviderError(self.name, f"request failed: {e}") from e

        logger.info(
            "provider_request_completed",
            provider=self.name,
            model=model,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        return text

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def check_response(self, response: httpx.Response, allow_list: bool = False) -> Any:
        """Raise ProviderError for non-2xx responses, else return parsed JSON.

        The body must be a JSON object, or an array when ``allow_list`` is set.
        """
        if response.is_error:
            raise ProviderError(self.name, f"HTTP {response.status_code}: {response.text}")
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(self.name, f"invalid JSON response: {e}") from e

        if isinstance(data, dict) or (allow_list and isinstance(data, list)):
            return data
        raise ProviderError(self.name, f"unexpected response shape: {type(data).__name__}")

    def empty_response(self) -> ProviderError:
        return ProviderError(self.name, "Empty response")
