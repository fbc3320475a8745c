"""Configuration schema and validation using Pydantic.

Validates and coerces configuration values from the environment, an
optional .env file and programmatic overrides into typed settings with
defaults.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "gemini-2.5-flash"


class StationFactsSettings(BaseSettings):
    """Pydantic settings schema for station lookups.

    Reads ``GEMINI_*`` environment variables (``GEMINI_API_KEY``,
    ``GEMINI_MODEL``, ``GEMINI_REQUEST_TIMEOUT_S``, ``GEMINI_MAX_WEB_SOURCES``).
    """

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Google Gemini API key",
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Gemini model identifier",
        min_length=1,
    )

    request_timeout_s: float | None = Field(
        default=None,
        description="Overall timeout for the backend call; None waits indefinitely",
        gt=0,
    )

    max_web_sources: int = Field(
        default=3,
        description="How many web citations to surface",
        ge=0,
    )

    @field_validator("api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v: Any) -> Any:
        """Treat an empty or whitespace-only key as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary of resolved values."""
        return {
            "api_key": self.api_key,
            "model": self.model,
            "request_timeout_s": self.request_timeout_s,
            "max_web_sources": self.max_web_sources,
        }
