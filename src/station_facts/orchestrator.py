"""Single entry point for station lookups.

``StationFactOrchestrator.get_station_fact`` builds the prompt, awaits the
backend once and threads the reply through parsing, normalization,
disambiguation and grounding extraction. Text that is not JSON degrades the
response (``structured_data=None``) and mistyped fields fall back to their
defaults instead of raising. Only configuration and transport problems
reach the caller as exceptions.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from station_facts.adapters.gemini import GeminiAdapter
from station_facts.config import FrozenConfig, resolve_config
from station_facts.core.exceptions import (
    ContractViolation,
    StationFactsError,
    TransportError,
)
from station_facts.core.models import StationResponseSchema
from station_facts.core.types import (
    FactResponse,
    Failure,
    Location,
    StationQuery,
)
from station_facts.pipeline.grounding import GroundingExtractor
from station_facts.pipeline.normalizer import FieldNormalizer
from station_facts.pipeline.prompt_builder import PromptBuilder
from station_facts.pipeline.resolver import DisambiguationResolver
from station_facts.pipeline.response_parser import ResponseParser
from station_facts.telemetry import TelemetryContext

if TYPE_CHECKING:
    from station_facts.adapters.base import GenerationAdapter
    from station_facts.core.types import PromptPayload
    from station_facts.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)

# --- Telemetry scopes ---
T_PROMPT = "station.prompt"
T_GENERATE = "station.generate"
T_PARSE = "station.parse"
T_RESOLVE = "station.resolve"

type LocationLike = Location | Mapping[str, float] | Sequence[float]


def as_location(value: LocationLike | None) -> Location | None:
    """Coerce a ``{latitude, longitude}`` mapping or ``(lat, lon)`` pair."""
    if value is None or isinstance(value, Location):
        return value
    if isinstance(value, Mapping):
        return Location(value["latitude"], value["longitude"])
    latitude, longitude = value
    return Location(latitude, longitude)


class StationFactOrchestrator:
    """Runs one lookup per call; holds no per-query state.

    The backend is injected as a ``GenerationAdapter``. Without one, a
    ``GeminiAdapter`` is built from the configured API key at call time.
    """

    def __init__(
        self,
        adapter: GenerationAdapter | None = None,
        *,
        adapter_factory: Callable[[str], GenerationAdapter] | None = None,
        config: FrozenConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        telemetry: TelemetryContextProtocol | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        """Create an orchestrator.

        Args:
            adapter: Backend used for every call. Takes precedence over
                ``adapter_factory``.
            adapter_factory: Builds an adapter from the API key; defaults to
                ``GeminiAdapter``.
            config: Frozen configuration; resolved from the environment when
                omitted.
            clock: Zero-argument callable returning the local time embedded in
                the prompt. Defaults to ``datetime.now``.
            telemetry: Optional telemetry context for stage timings.
            prompt_builder: Optional custom prompt builder.
        """
        self._adapter = adapter
        self._adapter_factory = adapter_factory or GeminiAdapter
        self._config = config if config is not None else resolve_config()
        self._clock = clock or datetime.now
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._parser = ResponseParser()
        self._normalizer = FieldNormalizer()
        self._resolver = DisambiguationResolver()
        self._extractor = GroundingExtractor(self._config.max_web_sources)

    @property
    def config(self) -> FrozenConfig:
        return self._config

    async def get_station_fact(
        self,
        station_name: str,
        location: LocationLike | None = None,
    ) -> FactResponse:
        """Look up one station.

        Args:
            station_name: Free-text station name. The caller ensures it is
                non-empty; surrounding whitespace is removed here.
            location: Optional user position used to bias grounding.

        Returns:
            FactResponse. ``structured_data`` is None exactly when the reply
            text could not be decoded as a JSON object; ``raw_text`` is always set.

        Raises:
            ConfigurationError: No adapter was injected and no API key is
                configured. Raised before any network attempt.
            TransportError: The backend call failed or timed out.
        """
        if not isinstance(station_name, str):
            raise TypeError("station_name must be a str")
        query = StationQuery(station_name.strip(), as_location(location))
        adapter = self._select_adapter()

        with self._telemetry(T_PROMPT):
            payload = self._prompt_builder.build(query, self._clock())
        log.debug(
            "Prompt for %r: %d chars, location bias: %s",
            query.station_name,
            len(payload.text),
            payload.has_location_bias,
        )

        reply = await self._generate(adapter, payload)

        with self._telemetry(T_PARSE):
            parsed = self._parser.parse(reply)
            structured = self._shape(parsed.text)

        with self._telemetry(T_RESOLVE):
            resolution = self._resolver.resolve(structured)
            sources = self._extractor.extract(parsed.metadata)

        log.debug("Lookup for %r finished as %s", query.station_name, resolution.kind)
        return FactResponse(
            structured_data=structured,
            raw_text=parsed.text,
            grounding_metadata=parsed.metadata,
            resolution=resolution,
            sources=sources,
        )

    # --- Internal helpers ---

    def _select_adapter(self) -> GenerationAdapter:
        if self._adapter is not None:
            return self._adapter
        api_key = self._config.require_api_key()
        try:
            return self._adapter_factory(api_key)
        except Exception as e:
            raise TransportError(f"Failed to initialize backend client: {e}") from e

    async def _generate(
        self, adapter: GenerationAdapter, payload: PromptPayload
    ) -> Mapping[str, Any]:
        timeout = self._config.request_timeout_s
        try:
            with self._telemetry(T_GENERATE, model=self._config.model):
                async with asyncio.timeout(timeout):
                    return await adapter.generate(
                        model_name=self._config.model,
                        prompt=payload.text,
                        config=payload.config,
                    )
        except TimeoutError as e:
            raise TransportError(
                f"Backend call timed out after {timeout}s"
            ) from e
        except StationFactsError:
            raise
        except Exception as e:
            log.error("Backend call failed: %s", e)
            raise TransportError(f"Backend call failed: {e}") from e

    def _shape(self, text: str) -> StationResponseSchema | None:
        decoded = self._parser.decode(text)
        if isinstance(decoded, Failure):
            log.warning("Failed to parse JSON response: %s", decoded.error)
            log.debug("Raw response text: %s", text)
            return None

        # Field coercions are total, so any decoded object yields a record.
        payload = self._normalizer.normalize(decoded.value)
        try:
            return StationResponseSchema.model_validate(payload)
        except ValidationError as e:
            violation = ContractViolation(
                f"Reply does not fit the station schema ({e.error_count()} errors)"
            )
            log.warning("%s; reading it as an empty record: %s", violation, e)
            return StationResponseSchema()


async def get_station_fact(
    station_name: str,
    location: LocationLike | None = None,
    *,
    adapter: GenerationAdapter | None = None,
    config: FrozenConfig | None = None,
) -> FactResponse:
    """Look up one station with a throwaway orchestrator.

    See ``StationFactOrchestrator.get_station_fact``.
    """
    orchestrator = StationFactOrchestrator(adapter, config=config)
    return await orchestrator.get_station_fact(station_name, location)


class QuerySession:
    """Numbers lookups so results of superseded queries can be dropped.

    Interactive callers may start a new lookup before the previous one
    finishes. Every ``lookup`` takes a new generation; a lookup that finishes
    after a newer one has started returns None (and swallows its own
    errors) rather than overwriting the newer result.
    """

    def __init__(self, orchestrator: StationFactOrchestrator) -> None:
        self._orchestrator = orchestrator
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def lookup(
        self,
        station_name: str,
        location: LocationLike | None = None,
    ) -> FactResponse | None:
        self._generation += 1
        generation = self._generation
        try:
            response = await self._orchestrator.get_station_fact(
                station_name, location
            )
        except StationFactsError:
            if self.is_current(generation):
                raise
            log.debug("Ignoring error from superseded lookup %d", generation)
            return None

        if not self.is_current(generation):
            log.debug(
                "Discarding reply for lookup %d; lookup %d is newer",
                generation,
                self._generation,
            )
            return None
        return response
