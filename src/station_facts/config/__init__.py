"""Configuration for station lookups.

Configuration is resolved once and frozen:

    config = resolve_config()                      # environment only
    config = resolve_config({"model": "gemini-2.5-pro"})
    config = resolve_config(env_file=".env.local")

Precedence: programmatic > environment (.env values included) > defaults.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from station_facts.core.exceptions import ConfigurationError

from .schema import DEFAULT_MODEL, StationFactsSettings
from .types import FrozenConfig

log = logging.getLogger(__name__)


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    env_file: str | Path | None = None,
) -> FrozenConfig:
    """Resolve configuration from all sources and freeze it.

    Args:
        programmatic: Overrides with the highest precedence. Keys set to None
            are ignored so callers can pass optional CLI values straight in.
        env_file: Optional .env file read in addition to the environment.
            Real environment variables win over values from the file.

    Returns:
        FrozenConfig ready for the orchestrator.

    Raises:
        ConfigurationError: If any value fails validation or the env file is
            missing.
    """
    overrides = {k: v for k, v in (programmatic or {}).items() if v is not None}
    if env_file is not None and not Path(env_file).exists():
        raise ConfigurationError(f"Environment file not found: {env_file}")

    try:
        settings = StationFactsSettings(_env_file=env_file, **overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    config = FrozenConfig(**settings.to_dict())
    log.debug("Resolved configuration: %r", config)
    return config


__all__ = [
    "DEFAULT_MODEL",
    "FrozenConfig",
    "StationFactsSettings",
    "resolve_config",
]
