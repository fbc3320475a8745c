"""Frozen configuration handed to the orchestrator."""

from dataclasses import dataclass

from station_facts.core.exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class FrozenConfig:
    """Immutable configuration for one orchestrator.

    The API key is redacted from ``repr`` so configs can be logged safely.
    """

    api_key: str | None
    model: str
    request_timeout_s: float | None = None
    max_web_sources: int = 3

    def __repr__(self) -> str:
        """Repr with redacted API key for safe debugging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"FrozenConfig(api_key={api_key_display!r}, model={self.model!r}, "
            f"request_timeout_s={self.request_timeout_s!r}, "
            f"max_web_sources={self.max_web_sources!r})"
        )

    __str__ = __repr__

    def require_api_key(self) -> str:
        """Return the API key or fail before any network attempt."""
        if not self.api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY is not set. Set the environment variable, add it "
                "to a .env file, or pass api_key programmatically."
            )
        return self.api_key
