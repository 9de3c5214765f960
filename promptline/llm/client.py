"""PromptClient - cache-aware orchestration of single prompt runs.

This module ties the capability cache, parameter resolver, learner and
provider adapters together.

Usage:
    from promptline.llm import PromptClient

    client = PromptClient.from_settings(settings)
    text = await client.run_prompt("openai", "gpt-4o", "Hello!")

    lines = await client.list_all_models()
"""

from pathlib import Path
from typing import Callable, Optional, Union

import structlog

from promptline.config.settings import Settings
from promptline.errors import CacheWriteError, ConfigError, PromptlineError, ProviderError
from promptline.llm.adapters.base import BaseAdapter
from promptline.llm.capabilities import resolve_parameters
from promptline.llm.factory import create_adapter, list_provider_names
from promptline.llm.learner import record_failure
from promptline.llm.model_cache import ModelCache
from promptline.llm.types import ModelInfo

logger = structlog.get_logger()

AdapterFactory = Callable[[str, Settings], BaseAdapter]


class PromptClient:
    """Runs prompts and model listings against providers.

    The cache is passed in explicitly; ``None`` disables it, which behaves
    exactly like a cache that always misses. Nothing is learned or saved
    while the cache is disabled.
    """

    def __init__(
        self,
        settings: Settings,
        cache: Optional[ModelCache] = None,
        cache_path: Optional[Path] = None,
        adapter_factory: AdapterFactory = create_adapter,
    ):
        self.settings = settings
        self.cache = cache
        self.cache_path = cache_path or settings.cache_path()
        self.adapter_factory = adapter_factory

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "PromptClient":
        """Load the cache from disk when enabled and build a client."""
        path = settings.cache_path()
        cache = ModelCache.load(path) if settings.cache_enabled() else None
        return cls(settings, cache=cache, cache_path=path, **kwargs)

    @property
    def ttl_hours(self) -> int:
        return self.settings.cache_ttl_hours()

    def cached_model(self, provider: str, model: str) -> Optional[ModelInfo]:
        """Fresh cached record for ``model``, or None."""
        if self.cache is None:
            return None
        return self.cache.get_model(provider, model, self.ttl_hours)

    def save_cache(self) -> None:
        """Persist the cache, logging instead of raising on failure."""
        if self.cache is None:
            return
        try:
            self.cache.save(self.cache_path)
        except CacheWriteError as e:
            logger.warning("model_cache_save_failed", path=str(e.path), error=e.reason)

    # ------------------------------------------------------------------
    # Prompt runs
    # ------------------------------------------------------------------

    async def run_prompt(
        self,
        provider: str,
        model: str,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Union[str, int, None] = None,
    ) -> str:
        """Send ``prompt`` to ``provider:model`` and return the raw text.

        On a provider failure the error text is mined for corrections that
        are saved for later runs; the original error is re-raised unchanged.
        """
        adapter = self.adapter_factory(provider, self.settings)
        try:
            params = resolve_parameters(
                adapter,
                model,
                self.settings,
                cli_temperature=temperature,
                cli_max_tokens=max_tokens,
                cached=self.cached_model(provider, model),
            )
            logger.debug(
                "request_parameters_resolved",
                provider=provider,
                model=model,
                temperature=params.temperature,
                max_tokens=params.max_tokens,
                max_tokens_param=params.max_tokens_param,
            )

            try:
                return await adapter.invoke(
                    model,
                    prompt,
                    params.temperature,
                    params.max_tokens,
                    params.max_tokens_param,
                )
            except ProviderError as e:
                if self.cache is not None:
                    record_failure(self.cache, provider, model, e.message, self.cache_path)
                raise
        finally:
            await adapter.aclose()

    # ------------------------------------------------------------------
    # Model listings
    # ------------------------------------------------------------------

    async def get_models(self, provider: str) -> list[ModelInfo]:
        """Models for one provider, from a fresh cache entry or a live listing."""
        if self.cache is not None:
            cached = self.cache.get(provider, self.ttl_hours)
            if cached is not None:
                logger.debug("model_cache_hit", provider=provider, models=len(cached))
                return cached

        adapter = self.adapter_factory(provider, self.settings)
        try:
            models = await adapter.list_models()
        finally:
            await adapter.aclose()

        if self.cache is not None:
            self.cache.set(provider, models)
        return models

    async def list_all_models(self, providers: Optional[list[str]] = None) -> list[str]:
        """Sorted ``provider:model`` lines for the given (default: all) providers.

        Providers are queried one after another; a failing provider is logged
        and skipped. The cache is saved once at the end.

        Raises:
            ConfigError: No provider produced any model.
        """
        lines: list[str] = []
        for name in providers or list_provider_names():
            try:
                models = await self.get_models(name)
            except PromptlineError as e:
                logger.warning("model_listing_skipped", provider=name, error=str(e))
                continue
            lines.extend(f"{name}:{m.id}" for m in models)

        self.save_cache()

        if not lines:
            raise ConfigError(
                "Could not fetch any models. Check your API keys and network connection."
            )
        return sorted(lines)
