"""Persistent per-provider cache of model capability records.

The cache lives as JSON at ``<config dir>/model_cache.json``. The document is
flat: provider names are the top-level keys::

    {
      "openai": {
        "timestamp": 1718000000,
        "records": [
          {"id": "gpt-4o", "max_output_tokens": 16384, "supports_temperature": true}
        ]
      }
    }

Entries expire after a TTL counted in whole hours. Expired entries are never
evicted, only ignored by :meth:`ModelCache.get` until they are overwritten.

Entries copied from the seed keep timestamp 0. They never satisfy
:meth:`ModelCache.get`, so listings always go to the provider, but their
records still answer :meth:`ModelCache.get_model` regardless of age.

Loading never raises: a missing or unreadable file falls back to the seed
document shipped with the package, and a broken seed falls back to an empty
cache. Saving raises :class:`CacheWriteError`, which every caller treats as
best-effort.
"""

import json
import time
from importlib import resources
from pathlib import Path
from typing import Any, Callable, Optional

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from promptline.errors import CacheWriteError
from promptline.llm.types import ModelInfo

logger = structlog.get_logger()

SEED_RESOURCE = "data/model_cache_seed.json"
SEED_TIMESTAMP = 0

Clock = Callable[[], float]


class CacheEntry(BaseModel):
    """One provider's record list and the time it was written."""

    model_config = ConfigDict(extra="ignore")

    timestamp: int
    # Older files call the list "models"; both spellings load.
    records: list[ModelInfo] = Field(
        default_factory=list,
        validation_alias=AliasChoices("records", "models"),
    )

    @property
    def is_seed(self) -> bool:
        """True until a listing or a learned record has written this entry."""
        return self.timestamp == SEED_TIMESTAMP


def parse_document(raw: str) -> dict[str, CacheEntry]:
    """Parse the cache document, skipping top-level keys that are not entries.

    Raises:
        ValueError: ``raw`` is not JSON or not a JSON object.
    """
    data: Any = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")

    entries: dict[str, CacheEntry] = {}
    for key, value in data.items():
        try:
            entries[key.lower()] = CacheEntry.model_validate(value)
        except ValidationError as e:
            logger.warning("model_cache_key_skipped", key=key, error=str(e))
    return entries


class ModelCache:
    """In-memory capability store with explicit load/save lifecycle."""

    def __init__(
        self,
        entries: Optional[dict[str, CacheEntry]] = None,
        clock: Clock = time.time,
    ):
        self.entries: dict[str, CacheEntry] = entries or {}
        self._clock = clock

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path, clock: Clock = time.time) -> "ModelCache":
        """Load from disk, else from the bundled seed, else empty."""
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
            return cls(parse_document(raw), clock=clock)
        except FileNotFoundError:
            logger.debug("model_cache_missing", path=str(path))
        except (OSError, ValueError) as e:
            logger.warning("model_cache_unreadable", path=str(path), error=str(e))

        return cls.from_seed(clock=clock)

    @classmethod
    def from_seed(cls, clock: Clock = time.time) -> "ModelCache":
        """Build a cache from the seed document shipped with the package.

        Seed entries keep timestamp 0: the resolver may use their records,
        but a listing still queries the provider.
        """
        try:
            raw = resources.files("promptline.llm").joinpath(SEED_RESOURCE).read_text(encoding="utf-8")
            entries = parse_document(raw)
        except (OSError, ValueError) as e:
            logger.warning("model_cache_seed_unreadable", error=str(e))
            return cls(clock=clock)

        for entry in entries.values():
            entry.timestamp = SEED_TIMESTAMP
        return cls(entries, clock=clock)

    def to_dict(self) -> dict:
        """Serialize to the flat document shape."""
        return {
            provider: {
                "timestamp": entry.timestamp,
                "records": [r.model_dump(exclude_none=True) for r in entry.records],
            }
            for provider, entry in sorted(self.entries.items())
        }

    def save(self, path: Path) -> None:
        """Write the whole cache to ``path``, creating parent directories."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise CacheWriteError(path, str(e)) from e
        logger.debug("model_cache_saved", path=str(path), providers=len(self.entries))

    # ------------------------------------------------------------------
    # Lookup and mutation
    # ------------------------------------------------------------------

    def _now(self) -> int:
        return int(self._clock())

    def age_hours(self, provider: str) -> Optional[int]:
        """Whole hours since the provider's entry was written, or None."""
        entry = self.entries.get(provider.lower())
        if entry is None:
            return None
        return max(0, self._now() - entry.timestamp) // 3600

    def get(self, provider: str, ttl_hours: int) -> Optional[list[ModelInfo]]:
        """Return the provider's records if the entry is younger than ``ttl_hours``.

        Seed entries never count as fresh.
        """
        entry = self.entries.get(provider.lower())
        if entry is None or entry.is_seed:
            return None
        if self.age_hours(provider) >= ttl_hours:
            return None
        return list(entry.records)

    def get_model(
        self,
        provider: str,
        model_id: str,
        ttl_hours: Optional[int] = None,
    ) -> Optional[ModelInfo]:
        """Find one record by id.

        With ``ttl_hours`` only a fresh or seed entry is searched; without it
        the lookup ignores age.
        """
        entry = self.entries.get(provider.lower())
        if entry is None:
            return None
        if ttl_hours is not None and not entry.is_seed and self.get(provider, ttl_hours) is None:
            return None

        for record in entry.records:
            if record.id == model_id:
                return record
        return None

    def set(self, provider: str, records: list[ModelInfo]) -> None:
        """Replace the provider's whole record list and refresh its timestamp."""
        self.entries[provider.lower()] = CacheEntry(
            timestamp=self._now(),
            records=list(records),
        )

    def update_one(self, provider: str, record: ModelInfo) -> None:
        """Replace the record with the same id, or append it.

        A written entry's timestamp is refreshed as well, so a learned
        correction is visible for a full TTL window. A seed entry keeps its
        seed timestamp so the next listing still queries the provider.
        """
        entry = self.entries.get(provider.lower())
        if entry is None:
            self.set(provider, [record])
            return

        for i, existing in enumerate(entry.records):
            if existing.id == record.id:
                entry.records[i] = record
                break
        else:
            entry.records.append(record)
        if not entry.is_seed:
            entry.timestamp = self._now()
