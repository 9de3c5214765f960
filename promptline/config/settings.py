"""
Application Settings - Pydantic-based configuration management.

Values come from (highest precedence first) explicit keyword arguments,
``PROMPTLINE_*`` environment variables, then the TOML config file at
``~/.config/promptline/config.toml`` (or the path given with ``--config``).
Every field is optional; missing values fall through to built-in defaults.
"""

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from promptline.errors import ConfigError

APP_NAME = "promptline"

DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 4096
DEFAULT_CACHE_TTL_HOURS = 24

DEFAULT_API_KEY_VARS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GEMINI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "groq": "GROQ_API_KEY",
    "together": "TOGETHER_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
}


def config_dir() -> Path:
    """Directory holding config.toml, model_cache.json and prompts/."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_NAME


def default_config_path() -> Path:
    return config_dir() / "config.toml"


def expand_home(path: str) -> Path:
    """Expand a leading ``~/``; anything else is returned as-is."""
    if path.startswith("~/"):
        return Path.home() / path[2:]
    return Path(path)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and config.toml.

    All settings can be overridden via ``PROMPTLINE_<FIELD>`` variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROMPTLINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Model selection
    # -------------------------------------------------------------------------
    default_provider: Optional[str] = Field(default=None, description="Provider used when --model has no prefix")
    default_model: Optional[str] = Field(default=None, description="Model, optionally as provider:model")

    # -------------------------------------------------------------------------
    # Request defaults
    # -------------------------------------------------------------------------
    temperature: Optional[float] = Field(default=None, description="Default sampling temperature")
    max_tokens: Optional[int] = Field(default=None, ge=1, description="Default output token limit")
    request_timeout_seconds: float = Field(default=120.0, gt=0, description="HTTP timeout per request")

    # -------------------------------------------------------------------------
    # Prompts
    # -------------------------------------------------------------------------
    prompts_dir: Optional[str] = Field(default=None, description="Directory of <name>.md prompt templates")

    # -------------------------------------------------------------------------
    # Model capability cache
    # -------------------------------------------------------------------------
    model_cache: Optional[bool] = Field(default=None, description="Enable the model capability cache")
    model_cache_ttl_hours: Optional[int] = Field(default=None, ge=0, description="Cache entry lifetime in hours")

    # -------------------------------------------------------------------------
    # Advanced
    # -------------------------------------------------------------------------
    api_key_vars: dict[str, str] = Field(
        default_factory=dict,
        description="Per-provider override of the API key environment variable",
    )
    openai_max_tokens_param: Optional[str] = Field(
        default=None,
        description="Request field carrying the token limit for OpenAI",
    )

    def resolve_temperature(self) -> float:
        return self.temperature if self.temperature is not None else DEFAULT_TEMPERATURE

    def resolve_max_tokens(self) -> int:
        return self.max_tokens if self.max_tokens is not None else DEFAULT_MAX_TOKENS

    def cache_enabled(self) -> bool:
        return True if self.model_cache is None else self.model_cache

    def cache_ttl_hours(self) -> int:
        if self.model_cache_ttl_hours is None:
            return DEFAULT_CACHE_TTL_HOURS
        return self.model_cache_ttl_hours

    def cache_path(self) -> Path:
        return config_dir() / "model_cache.json"

    def resolved_prompts_dir(self) -> Path:
        if self.prompts_dir:
            return expand_home(self.prompts_dir)
        return config_dir() / "prompts"

    def api_key_var(self, provider: str) -> str:
        """Environment variable holding ``provider``'s API key."""
        provider = provider.lower()
        if provider in self.api_key_vars:
            return self.api_key_vars[provider]
        return DEFAULT_API_KEY_VARS.get(provider, f"{provider.upper()}_API_KEY")


def _flatten_toml(data: dict[str, Any]) -> dict[str, Any]:
    """Map the ``[advanced]`` tables of config.toml onto flat settings fields."""
    values = {k: v for k, v in data.items() if k != "advanced"}
    advanced = data.get("advanced") or {}
    # Provider names are matched lowercase wherever the table appears.
    key_vars = advanced.get("api_key_vars", values.get("api_key_vars"))
    if isinstance(key_vars, dict):
        values["api_key_vars"] = {k.lower(): v for k, v in key_vars.items()}
    openai = advanced.get("openai") or {}
    if "max_tokens_param" in openai:
        values["openai_max_tokens_param"] = openai["max_tokens_param"]
    return values


def load_settings(config_path: Optional[str] = None, **overrides: Any) -> Settings:
    """
    Build settings from the TOML file at ``config_path`` (or the default path).

    Environment variables take precedence over file values.

    Raises:
        ConfigError: The file exists but is not valid TOML or has bad values.
    """
    path = Path(config_path) if config_path else default_config_path()

    file_values: dict[str, Any] = {}
    if path.exists():
        try:
            with path.open("rb") as f:
                file_values = _flatten_toml(tomllib.load(f))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        # Instantiating from env alone tells us which fields the environment set.
        from_env = Settings(**overrides)
        explicit = from_env.model_fields_set
        merged = {k: v for k, v in file_values.items() if k not in explicit}
        merged.update(from_env.model_dump(include=explicit))
        return Settings(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


@lru_cache
def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings for ``config_path``, loaded once per process.
    """
    return load_settings(config_path)
