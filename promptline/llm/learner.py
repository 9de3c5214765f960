"""Learn model constraints from provider error messages.

After a failed request the error text is scanned for a small, fixed set of
vendor phrasings. Anything recognized is written into the model cache so the
next invocation avoids the same failure. The failed request itself is never
retried.
"""

import re
from pathlib import Path
from typing import Optional

import structlog

from promptline.errors import CacheWriteError
from promptline.llm.model_cache import ModelCache
from promptline.llm.types import ModelInfo

logger = structlog.get_logger()

# Tried in order; the first pattern that matches wins.
LIMIT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(\d+)\s*>\s*(\d+)"),  # "requested > allowed"
    re.compile(r"limit of\s+(\d+)", re.IGNORECASE),
    re.compile(r"maximum\s+(?:allowed\s+)?(?:is\s+)?(\d+)", re.IGNORECASE),
)

PARAM_PATTERN = re.compile(r"use\s+'([^']+)'\s+instead", re.IGNORECASE)


def extract_max_tokens(message: str) -> Optional[int]:
    """Corrected output-token ceiling named in ``message``, if any."""
    for pattern in LIMIT_PATTERNS:
        match = pattern.search(message)
        if match:
            # The ceiling is always the last group ("64000 > 8192" -> 8192).
            return int(match.group(match.lastindex or 1))
    return None


def extract_max_tokens_param(message: str) -> Optional[str]:
    """Replacement token-limit field name suggested by ``message``, if any."""
    match = PARAM_PATTERN.search(message)
    return match.group(1) if match else None


def learn_from_error(
    cache: ModelCache,
    provider: str,
    model: str,
    message: str,
) -> Optional[ModelInfo]:
    """Fold corrections found in ``message`` into the cached record for ``model``.

    Returns the updated record, or None when nothing was recognized.
    """
    limit = extract_max_tokens(message)
    param = extract_max_tokens_param(message)
    if limit is None and param is None:
        return None

    # Start from whatever we know, fresh or not, so earlier facts survive.
    existing = cache.get_model(provider, model)
    record = existing.model_copy() if existing else ModelInfo(id=model)
    if limit is not None:
        record.max_output_tokens = limit
    if param is not None:
        record.max_tokens_param = param

    cache.update_one(provider, record)
    logger.info(
        "model_capability_learned",
        provider=provider,
        model=model,
        max_output_tokens=limit,
        max_tokens_param=param,
    )
    return record


def record_failure(
    cache: ModelCache,
    provider: str,
    model: str,
    message: str,
    cache_path: Path,
) -> Optional[ModelInfo]:
    """Learn from a failure and persist the cache. Save errors are only logged."""
    record = learn_from_error(cache, provider, model, message)
    if record is None:
        return None

    try:
        cache.save(cache_path)
    except CacheWriteError as e:
        logger.warning("model_cache_save_failed", path=str(e.path), error=e.reason)
    return record
