"""Core data types that flow through the lookup pipeline.

Each query is represented by immutable values: the query itself, the
rendered prompt, the unwrapped backend reply, the disambiguation outcome and
the final ``FactResponse`` handed to the caller. Nothing here is retained
between queries.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import math
from types import MappingProxyType
import typing

if typing.TYPE_CHECKING:
    from station_facts.core.models import (
        GroundingMetadata,
        GroundingSource,
        StationData,
        StationResponseSchema,
    )

# --- Minimal guard helpers ---


def _freeze_mapping(m: Mapping[str, object] | None) -> Mapping[str, object] | None:
    """Return an immutable mapping view or None."""
    if m is None or isinstance(m, MappingProxyType):
        return m
    return MappingProxyType(dict(m))


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Result type for recoverable stages ---
# Stages that may legitimately fail on model output (decoding, shaping)
# return a value instead of raising, so the orchestrator can degrade.


@dataclasses.dataclass(frozen=True, slots=True)
class Success[T]:
    """A successful stage result."""

    value: T


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[E]:
    """A failed stage result, containing the error."""

    error: E


type Result[T, E] = Success[T] | Failure[E]

# --- Query side ---


@dataclasses.dataclass(frozen=True, slots=True)
class Location:
    """A WGS84 coordinate in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        for name, value, limit in (
            ("latitude", self.latitude, 90.0),
            ("longitude", self.longitude, 180.0),
        ):
            _require(
                condition=isinstance(value, int | float)
                and not isinstance(value, bool),
                message="must be numeric (int|float)",
                exc=TypeError,
                field_name=name,
            )
            _require(
                condition=math.isfinite(value) and -limit <= value <= limit,
                message=f"must be within [-{limit:g}, {limit:g}]",
                field_name=name,
            )

    def as_lat_lng(self) -> dict[str, float]:
        """Return the coordinate in the backend's ``lat_lng`` shape."""
        return {"latitude": float(self.latitude), "longitude": float(self.longitude)}


@dataclasses.dataclass(frozen=True, slots=True)
class StationQuery:
    """A single user query. Emptiness is checked by the caller."""

    station_name: str
    location: Location | None = None

    def __post_init__(self) -> None:
        """Validate field types."""
        _require(
            condition=isinstance(self.station_name, str),
            message="must be a str",
            exc=TypeError,
            field_name="station_name",
        )
        _require(
            condition=self.location is None or isinstance(self.location, Location),
            message="must be a Location or None",
            exc=TypeError,
            field_name="location",
        )


@dataclasses.dataclass(frozen=True, slots=True)
class PromptPayload:
    """Rendered instruction text plus the library-owned tool configuration.

    ``config`` is translated to provider types at the adapter seam.
    """

    text: str
    config: Mapping[str, object]

    def __post_init__(self) -> None:
        """Freeze the config mapping."""
        _require(
            condition=isinstance(self.text, str) and self.text != "",
            message="must be a non-empty str",
            exc=TypeError,
            field_name="text",
        )
        object.__setattr__(self, "config", _freeze_mapping(self.config))

    @property
    def has_location_bias(self) -> bool:
        return "tool_config" in self.config


# --- Reply side ---


@dataclasses.dataclass(frozen=True, slots=True)
class ParsedReply:
    """Unwrapped reply text and its grounding side channel."""

    text: str
    metadata: GroundingMetadata | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class GroundingSources:
    """Citations selected for display: one map and a few web pages."""

    map_source: GroundingSource | None = None
    web_sources: tuple[GroundingSource, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.map_source is None and not self.web_sources


# --- Disambiguation outcomes ---


@dataclasses.dataclass(frozen=True, slots=True)
class Ambiguous:
    """Several stations share the name; the user must pick one."""

    candidates: tuple[str, ...]
    kind: typing.Literal["ambiguous"] = "ambiguous"


@dataclasses.dataclass(frozen=True, slots=True)
class Resolved:
    """A single station was identified."""

    data: StationData
    kind: typing.Literal["resolved"] = "resolved"


@dataclasses.dataclass(frozen=True, slots=True)
class Unresolved:
    """Nothing actionable came back (unparsed reply or broken contract)."""

    reason: str
    kind: typing.Literal["unresolved"] = "unresolved"


type Resolution = Ambiguous | Resolved | Unresolved

# --- Final result ---


@dataclasses.dataclass(frozen=True, slots=True)
class FactResponse:
    """Everything a caller needs to render one query.

    ``structured_data`` is None exactly when the reply could not be decoded
    or shaped; ``raw_text`` is always the unwrapped reply text.
    """

    structured_data: StationResponseSchema | None
    raw_text: str
    grounding_metadata: GroundingMetadata | None = None
    resolution: Resolution = Unresolved("unparsed")
    sources: GroundingSources = GroundingSources()

    @property
    def is_ambiguous(self) -> bool:
        return isinstance(self.resolution, Ambiguous)

    @property
    def is_resolved(self) -> bool:
        return isinstance(self.resolution, Resolved)
