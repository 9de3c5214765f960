"""Core type definitions shared by the cache, resolver, learner and adapters."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProviderName(str, Enum):
    """Supported LLM providers, in listing order."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    OPENROUTER = "openrouter"
    GROQ = "groq"
    TOGETHER = "together"
    MISTRAL = "mistral"
    DEEPSEEK = "deepseek"

    @classmethod
    def parse(cls, value: str) -> "ProviderName":
        """Case-insensitive lookup; raises ValueError for unknown names."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown provider: {value}") from None


class ModelInfo(BaseModel):
    """What we know about one model's request constraints."""

    model_config = ConfigDict(extra="ignore")

    id: str
    max_output_tokens: Optional[int] = None
    supports_temperature: bool = True
    max_tokens_param: Optional[str] = None  # Field carrying the token limit, e.g. "max_completion_tokens"


class ResolvedParams(BaseModel):
    """Final request parameters handed to an adapter."""
    temperature: Optional[float] = None  # None means omit the field entirely
    max_tokens: int
    max_tokens_param: Optional[str] = None  # None means the adapter's default field
