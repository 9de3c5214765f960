"""Tests for PromptClient orchestration."""

from unittest.mock import MagicMock

import pytest

from promptline.config.settings import Settings
from promptline.errors import ConfigError, ProviderError
from promptline.llm.client import PromptClient
from promptline.llm.model_cache import ModelCache
from promptline.llm.types import ModelInfo
from tests.fakes import FakeAdapter


def make_client(settings, cache, cache_path, adapters):
    """Client whose factory hands out pre-built adapters by provider name."""
    created = []

    def factory(name, _settings):
        adapter = adapters[name]
        created.append(name)
        return adapter

    client = PromptClient(settings, cache=cache, cache_path=cache_path, adapter_factory=factory)
    client.created = created
    return client


class TestRunPrompt:
    """Tests for single prompt runs."""

    @pytest.mark.asyncio
    async def test_returns_text_and_sends_resolved_params(self, settings, cache, cache_path):
        adapter = FakeAdapter(settings, reply="hello")
        client = make_client(settings, cache, cache_path, {"openai": adapter})

        text = await client.run_prompt("openai", "gpt-4o", "hi", temperature=0.7, max_tokens="100")

        assert text == "hello"
        assert adapter.calls == [{
            "model": "gpt-4o",
            "prompt": "hi",
            "temperature": 0.7,
            "max_tokens": 100,
            "max_tokens_param": "max_tokens",
        }]
        assert adapter.closed

    @pytest.mark.asyncio
    async def test_fresh_cached_record_applied(self, settings, cache, cache_path):
        cache.set("openai", [ModelInfo(
            id="gpt-5",
            max_output_tokens=8192,
            supports_temperature=False,
            max_tokens_param="max_completion_tokens",
        )])
        adapter = FakeAdapter(settings)
        client = make_client(settings, cache, cache_path, {"openai": adapter})

        await client.run_prompt("openai", "gpt-5", "hi", temperature=0.9, max_tokens="max")

        call = adapter.calls[0]
        assert call["temperature"] is None
        assert call["max_tokens"] == 8192
        assert call["max_tokens_param"] == "max_completion_tokens"

    @pytest.mark.asyncio
    async def test_seed_record_applied(self, settings, tmp_path, cache_path, clock):
        seeded = ModelCache.load(tmp_path / "absent.json", clock=clock)
        adapter = FakeAdapter(settings)
        client = make_client(settings, seeded, cache_path, {"openai": adapter})

        await client.run_prompt("openai", "o3-mini", "hi", temperature=0.5)

        call = adapter.calls[0]
        assert call["temperature"] is None
        assert call["max_tokens_param"] == "max_completion_tokens"

    @pytest.mark.asyncio
    async def test_stale_record_ignored(self, settings, cache, cache_path, clock):
        cache.set("openai", [ModelInfo(id="gpt-4o", supports_temperature=False)])
        clock.advance(hours=24)
        adapter = FakeAdapter(settings)
        client = make_client(settings, cache, cache_path, {"openai": adapter})

        await client.run_prompt("openai", "gpt-4o", "hi", temperature=0.4)

        assert adapter.calls[0]["temperature"] == 0.4

    @pytest.mark.asyncio
    async def test_failure_learns_and_reraises(self, settings, cache, cache_path, clock):
        """The original error propagates; the correction is persisted."""
        adapter = FakeAdapter(settings, error="HTTP 400: max_tokens: 64000 > 8192")
        client = make_client(settings, cache, cache_path, {"openai": adapter})

        with pytest.raises(ProviderError) as exc_info:
            await client.run_prompt("openai", "big-model", "hi", max_tokens="64000")

        assert exc_info.value.message == "HTTP 400: max_tokens: 64000 > 8192"
        assert len(adapter.calls) == 1  # no retry
        assert cache.get_model("openai", "big-model", 24).max_output_tokens == 8192
        reloaded = ModelCache.load(cache_path, clock=clock)
        assert reloaded.get_model("openai", "big-model").max_output_tokens == 8192

    @pytest.mark.asyncio
    async def test_learned_limit_used_next_time(self, settings, cache, cache_path):
        failing = FakeAdapter(settings, error="limit of 2048")
        client = make_client(settings, cache, cache_path, {"openai": failing})
        with pytest.raises(ProviderError):
            await client.run_prompt("openai", "m", "hi", max_tokens="4000")

        working = FakeAdapter(settings)
        client = make_client(settings, cache, cache_path, {"openai": working})
        await client.run_prompt("openai", "m", "hi", max_tokens="4000")
        assert working.calls[0]["max_tokens"] == 2048

    @pytest.mark.asyncio
    async def test_unrecognized_failure_learns_nothing(self, settings, cache, cache_path):
        adapter = FakeAdapter(settings, error="HTTP 401: invalid key")
        client = make_client(settings, cache, cache_path, {"openai": adapter})

        with pytest.raises(ProviderError):
            await client.run_prompt("openai", "m", "hi")

        assert cache.entries == {}
        assert not cache_path.exists()


class TestCacheDisabled:
    """A disabled cache behaves like one that always misses."""

    @pytest.mark.asyncio
    async def test_run_prompt_ignores_cache(self, cache_path):
        settings = Settings(model_cache=False)
        adapter = FakeAdapter(settings, error="limit of 10")
        client = make_client(settings, None, cache_path, {"openai": adapter})

        with pytest.raises(ProviderError):
            await client.run_prompt("openai", "m", "hi")
        assert not cache_path.exists()

    @pytest.mark.asyncio
    async def test_listing_never_touches_store(self, cache_path):
        settings = Settings(model_cache=False)
        adapter = FakeAdapter(settings, models=[ModelInfo(id="a")])
        client = make_client(settings, None, cache_path, {"openai": adapter})

        assert await client.list_all_models(["openai"]) == ["openai:a"]
        assert not cache_path.exists()

    def test_from_settings_skips_loading(self, monkeypatch):
        load = MagicMock()
        monkeypatch.setattr(ModelCache, "load", load)
        client = PromptClient.from_settings(Settings(model_cache=False))
        assert client.cache is None
        load.assert_not_called()


class TestListModels:
    """Tests for model listings."""

    @pytest.mark.asyncio
    async def test_cache_hit_skips_adapter(self, settings, cache, cache_path):
        cache.set("groq", [ModelInfo(id="llama")])
        client = make_client(settings, cache, cache_path, {})

        assert await client.get_models("groq") == [ModelInfo(id="llama")]
        assert client.created == []

    @pytest.mark.asyncio
    async def test_miss_fetches_and_stores(self, settings, cache, cache_path):
        adapter = FakeAdapter(settings, models=[ModelInfo(id="b"), ModelInfo(id="a")])
        client = make_client(settings, cache, cache_path, {"openai": adapter})

        models = await client.get_models("openai")

        assert [m.id for m in models] == ["b", "a"]
        assert cache.get("openai", 24) == models
        assert adapter.closed

    @pytest.mark.asyncio
    async def test_list_all_sorted_and_saved_once(self, settings, cache, cache_path, clock):
        adapters = {
            "openai": FakeAdapter(settings, models=[ModelInfo(id="gpt-4o")]),
            "groq": FakeAdapter(settings, models=[ModelInfo(id="llama")]),
        }
        client = make_client(settings, cache, cache_path, adapters)

        lines = await client.list_all_models(["openai", "groq"])

        assert lines == ["groq:llama", "openai:gpt-4o"]
        reloaded = ModelCache.load(cache_path, clock=clock)
        assert set(reloaded.entries) == {"openai", "groq"}

    @pytest.mark.asyncio
    async def test_first_run_lists_live_models(self, settings, tmp_path, cache_path, clock):
        """A seed-only cache does not stand in for the provider's listing."""
        seeded = ModelCache.load(tmp_path / "absent.json", clock=clock)
        adapter = FakeAdapter(settings, models=[ModelInfo(id="account-fine-tune")])
        client = make_client(settings, seeded, cache_path, {"openai": adapter})

        assert await client.list_all_models(["openai"]) == ["openai:account-fine-tune"]
        assert client.created == ["openai"]
        assert seeded.get("openai", 24) == [ModelInfo(id="account-fine-tune")]

    @pytest.mark.asyncio
    async def test_failing_provider_skipped(self, settings, cache, cache_path):
        def factory(name, _settings):
            if name == "bogus":
                raise ConfigError("Unknown provider: bogus")
            return FakeAdapter(settings, models=[ModelInfo(id="x")])

        client = PromptClient(settings, cache=cache, cache_path=cache_path, adapter_factory=factory)
        assert await client.list_all_models(["bogus", "openai"]) == ["openai:x"]

    @pytest.mark.asyncio
    async def test_no_models_is_error(self, settings, cache, cache_path):
        adapter = FakeAdapter(settings, models=[])
        client = make_client(settings, cache, cache_path, {"openai": adapter})
        with pytest.raises(ConfigError):
            await client.list_all_models(["openai"])

    @pytest.mark.asyncio
    async def test_save_failure_not_fatal(self, settings, cache, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        adapter = FakeAdapter(settings, models=[ModelInfo(id="a")])
        client = make_client(settings, cache, blocker / "cache.json", {"openai": adapter})
        assert await client.list_all_models(["openai"]) == ["openai:a"]
