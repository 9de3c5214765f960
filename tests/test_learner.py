"""Tests for learning model constraints from error messages."""

import pytest

from promptline.llm.learner import (
    extract_max_tokens,
    extract_max_tokens_param,
    learn_from_error,
    record_failure,
)
from promptline.llm.model_cache import ModelCache
from promptline.llm.types import ModelInfo


class TestExtractMaxTokens:
    """Tests for limit extraction."""

    @pytest.mark.parametrize("message, expected", [
        ("64000 > 8192", 8192),
        ("max_tokens: 64000 > 8192, which is the maximum allowed number of output tokens", 8192),
        ("Requested tokens exceed the limit of 4096", 4096),
        ("requested tokens exceed the LIMIT OF 4096", 4096),
        ("maximum allowed is 8192", 8192),
        ("Maximum is 2048 tokens", 2048),
        ("value above maximum 1024", 1024),
    ])
    def test_recognized_phrasings(self, message, expected):
        assert extract_max_tokens(message) == expected

    @pytest.mark.parametrize("message", [
        "Invalid API key",
        "HTTP 500: internal server error",
        "",
    ])
    def test_unrelated_message(self, message):
        assert extract_max_tokens(message) is None

    def test_first_pattern_wins(self):
        """The '>' form takes precedence over later phrasings."""
        message = "100000 > 32000; the limit of 16000 applies"
        assert extract_max_tokens(message) == 32000

    def test_limit_of_before_maximum(self):
        message = "maximum allowed is 8192 but the limit of 4096 applies here"
        assert extract_max_tokens(message) == 4096


class TestExtractParam:
    """Tests for parameter-name extraction."""

    def test_use_instead(self):
        message = ("Unsupported parameter: 'max_tokens' is not supported with this model. "
                   "Use 'max_completion_tokens' instead.")
        assert extract_max_tokens_param(message) == "max_completion_tokens"

    def test_case_insensitive(self):
        assert extract_max_tokens_param("USE 'maxOutputTokens' INSTEAD") == "maxOutputTokens"

    def test_no_phrase(self):
        assert extract_max_tokens_param("'max_tokens' is not supported") is None


class TestLearnFromError:
    """Tests for folding corrections into the cache."""

    def test_no_match_leaves_cache_untouched(self, cache):
        assert learn_from_error(cache, "openai", "gpt-4o", "Invalid API key") is None
        assert cache.entries == {}

    def test_synthesizes_record_when_absent(self, cache):
        record = learn_from_error(cache, "anthropic", "claude-x", "64000 > 8192")
        assert record == ModelInfo(id="claude-x", max_output_tokens=8192)
        assert cache.get_model("anthropic", "claude-x", 24) == record

    def test_preserves_existing_fields(self, cache):
        cache.set("openai", [ModelInfo(id="gpt-5", supports_temperature=False, max_output_tokens=128000)])
        learn_from_error(cache, "openai", "gpt-5", "Use 'max_completion_tokens' instead.")
        record = cache.get_model("openai", "gpt-5", 24)
        assert record.supports_temperature is False
        assert record.max_output_tokens == 128000
        assert record.max_tokens_param == "max_completion_tokens"

    def test_both_extractions_fire(self, cache):
        message = "limit of 4096 exceeded; use 'max_completion_tokens' instead"
        record = learn_from_error(cache, "openai", "o3", message)
        assert record.max_output_tokens == 4096
        assert record.max_tokens_param == "max_completion_tokens"

    def test_does_not_mutate_cached_object_before_update(self, cache):
        original = ModelInfo(id="m", max_output_tokens=100)
        cache.set("groq", [original])
        learn_from_error(cache, "groq", "m", "limit of 50")
        assert original.max_output_tokens == 100


class TestRecordFailure:
    """Tests for learn-and-persist."""

    def test_persists_learned_record(self, cache, cache_path, clock):
        record_failure(cache, "anthropic", "claude-x", "64000 > 8192", cache_path)
        reloaded = ModelCache.load(cache_path, clock=clock)
        assert reloaded.get_model("anthropic", "claude-x").max_output_tokens == 8192

    def test_nothing_learned_nothing_saved(self, cache, cache_path):
        assert record_failure(cache, "openai", "gpt-4o", "boom", cache_path) is None
        assert not cache_path.exists()

    def test_save_failure_is_not_fatal(self, cache, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        record = record_failure(cache, "openai", "gpt-4o", "limit of 10", blocker / "cache.json")
        assert record.max_output_tokens == 10
