"""Resolution of final request parameters for one model.

Inputs, highest precedence first:

1. CLI overrides (temperature; max tokens as a number or the literal ``max``)
2. The adapter's built-in sanitizer rules for the model family
3. The cached capability record for the exact model id
4. Configured defaults, used only when the CLI gives nothing

The resolver never validates temperature ranges itself; clamping belongs to
adapter sanitizers.
"""

from typing import Optional, Union

import structlog

from promptline.config.settings import Settings
from promptline.llm.adapters.base import BaseAdapter
from promptline.llm.types import ModelInfo, ResolvedParams

logger = structlog.get_logger()

MAX_SENTINEL = "max"
# Used for ``--max-tokens max`` when no ceiling is known for the model.
FALLBACK_MAX_TOKENS = 4096


def requested_temperature(cli_temperature: Optional[float], settings: Settings) -> float:
    if cli_temperature is not None:
        return cli_temperature
    return settings.resolve_temperature()


def requested_max_tokens(
    cli_max_tokens: Union[str, int, None],
    settings: Settings,
    cached: Optional[ModelInfo] = None,
) -> int:
    """Interpret the CLI max-tokens value.

    ``max`` asks for the model's known ceiling. Empty or non-numeric values
    fall back to the configured default instead of failing.
    """
    if cli_max_tokens is None:
        return settings.resolve_max_tokens()

    if isinstance(cli_max_tokens, int):
        value = cli_max_tokens
    else:
        text = cli_max_tokens.strip()
        if text.lower() == MAX_SENTINEL:
            if cached is not None and cached.max_output_tokens:
                return cached.max_output_tokens
            return FALLBACK_MAX_TOKENS
        try:
            value = int(text)
        except ValueError:
            logger.debug("max_tokens_unparsed", value=cli_max_tokens)
            return settings.resolve_max_tokens()

    if value <= 0:
        return settings.resolve_max_tokens()
    return value


def resolve_parameters(
    adapter: BaseAdapter,
    model: str,
    settings: Settings,
    cli_temperature: Optional[float] = None,
    cli_max_tokens: Union[str, int, None] = None,
    cached: Optional[ModelInfo] = None,
) -> ResolvedParams:
    """Compute (temperature or omit, max_tokens, token field name) for a request.

    Args:
        adapter: Provider adapter supplying the sanitizer.
        model: Model id within the provider.
        settings: Configured defaults.
        cli_temperature: ``--temperature`` value, if given.
        cli_max_tokens: ``--max-tokens`` value, if given.
        cached: Fresh cached record for ``model``; None when the cache is
            disabled, stale, or has no entry.
    """
    temperature = requested_temperature(cli_temperature, settings)
    max_tokens = requested_max_tokens(cli_max_tokens, settings, cached)

    final_temperature, final_max_tokens = adapter.sanitize(model, temperature, max_tokens)
    max_tokens_param = None

    if cached is not None:
        if not cached.supports_temperature:
            final_temperature = None
        if cached.max_output_tokens:
            final_max_tokens = min(final_max_tokens, cached.max_output_tokens)
        max_tokens_param = cached.max_tokens_param

    return ResolvedParams(
        temperature=final_temperature,
        max_tokens=final_max_tokens,
        max_tokens_param=max_tokens_param,
    )
