"""Exception hierarchy. Every error surfaced to the user derives from PromptlineError."""


class PromptlineError(Exception):
    """Base class for every error surfaced to the command line."""


class MissingApiKeyError(PromptlineError):
    """No credential available for a provider."""

    def __init__(self, provider: str, env_var: str | None = None):
        self.provider = provider
        self.env_var = env_var
        hint = f" (set {env_var})" if env_var else ""
        super().__init__(f"Missing API key for provider: {provider}{hint}")


class ProviderError(PromptlineError):
    """A provider rejected a request or returned nothing usable.

    `message` keeps the raw provider text so the learner can inspect it.
    """

    def __init__(self, provider: str, message: str):
        self.provider = provider
        self.message = message
        super().__init__(f"Provider {provider} error: {message}")


class ConfigError(PromptlineError):
    """Configuration or command-line input cannot be used."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Configuration error: {message}")


class PromptNotFoundError(PromptlineError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Prompt not found: {name}")


class CacheWriteError(PromptlineError):
    """Persisting the model cache failed. Callers treat this as best-effort."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write model cache to {path}: {reason}")
