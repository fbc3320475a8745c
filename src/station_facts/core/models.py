"""Pydantic models for the station response wire schema.

The JSON comes from a generative model, not a fixed serializer, so every
field is optional at the boundary and carries an explicit default. Wire names
are camelCase (``colorHex``); Python attributes are snake_case (``color_hex``).
Both spellings are accepted on input, which also lets grounding metadata be
read from either the REST shape or the SDK's ``model_dump()`` shape.
"""

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_LINE_COLOR = "#0f172a"
DEFAULT_LINE_TEXT_COLOR = "#ffffff"

_TRUTHY = frozenset({"true", "yes", "y", "1", "on", "t"})

# --- Lenient field coercions ---


def _scalar_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return None


def _as_text(value: Any) -> str:
    """Read any JSON value as text.

    Arrays and objects (a structured ``location``, say) are flattened by
    joining their scalar members; anything else unreadable becomes "".
    """
    text = _scalar_text(value)
    if text is not None:
        return text
    if isinstance(value, Mapping):
        value = list(value.values())
    if isinstance(value, list | tuple):
        parts = (_scalar_text(item) for item in value)
        return ", ".join(p.strip() for p in parts if p and p.strip())
    return ""


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    if isinstance(value, int | float):
        return bool(value)
    return False


def _mapping_or_none(value: Any) -> Any:
    return value if isinstance(value, Mapping) else None


def _mapping_items(value: Any) -> Any:
    """Keep only object entries of a list; anything else becomes empty."""
    if not isinstance(value, list | tuple):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _string_items(value: Any) -> Any:
    if not isinstance(value, list | tuple):
        return []
    return [
        item
        for item in value
        if isinstance(item, str | int | float) and not isinstance(item, bool)
    ]


Text = Annotated[str, BeforeValidator(_as_text)]
OptionalText = Annotated[str | None, BeforeValidator(_scalar_text)]
Flag = Annotated[bool, BeforeValidator(_coerce_flag)]


class _WireModel(BaseModel):
    """Shared configuration for all wire models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


# --- Station payload ---


class StepFreeAccess(_WireModel):
    status: Text = ""
    details: Text = ""


class TransitLine(_WireModel):
    """A line, route or operator brand calling at the station."""

    name: Text = ""
    color_hex: str = DEFAULT_LINE_COLOR
    text_color_hex: str = DEFAULT_LINE_TEXT_COLOR
    provider_url: OptionalText = None

    @field_validator("color_hex", mode="before")
    @classmethod
    def _default_color(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            return DEFAULT_LINE_COLOR
        return value

    @field_validator("text_color_hex", mode="before")
    @classmethod
    def _default_text_color(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            return DEFAULT_LINE_TEXT_COLOR
        return value

    @field_validator("provider_url", mode="before")
    @classmethod
    def _blank_url_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class BusInfo(_WireModel):
    route: Text = ""
    destination: Text = ""
    next_arrival: OptionalText = None


class CoachInfo(_WireModel):
    provider: Text = ""
    route: Text = ""
    link: Text = ""


class DepartureInfo(_WireModel):
    destination: Text = ""
    time: Text = ""
    platform: OptionalText = None
    status: OptionalText = None
    operator: OptionalText = None


def _step_free_shape(value: Any) -> Any:
    # A bare phrase is read as the status line.
    if isinstance(value, str):
        return {"status": value}
    return value if isinstance(value, Mapping) else {}


class StationData(_WireModel):
    """Resolved station record. Missing lists are read as empty."""

    official_name: Text = ""
    route_description: Text = ""
    location: Text = ""
    opening_info: Text = ""
    fun_fact: Text = ""
    historical_context: Text = ""
    operational_status: Text = ""
    step_free_access: Annotated[StepFreeAccess, BeforeValidator(_step_free_shape)] = (
        Field(default_factory=StepFreeAccess)
    )
    has_toilets: Flag = False
    lines: Annotated[list[TransitLine], BeforeValidator(_mapping_items)] = Field(
        default_factory=list
    )
    buses: Annotated[list[BusInfo], BeforeValidator(_mapping_items)] = Field(
        default_factory=list
    )
    coaches: Annotated[list[CoachInfo], BeforeValidator(_mapping_items)] = Field(
        default_factory=list
    )
    next_departures: Annotated[
        list[DepartureInfo], BeforeValidator(_mapping_items)
    ] = Field(default_factory=list)


class StationResponseSchema(_WireModel):
    """Top-level reply: either a candidate list or a station record.

    ``is_ambiguous`` is authoritative; see ``DisambiguationResolver`` for how
    inconsistent combinations are classified.
    """

    is_ambiguous: Flag = False
    candidates: Annotated[list[str], BeforeValidator(_string_items)] = Field(
        default_factory=list
    )
    data: Annotated[StationData | None, BeforeValidator(_mapping_or_none)] = None


# --- Grounding side channel ---


class GroundingSource(_WireModel):
    uri: Text = ""
    title: Text = ""

    @property
    def is_populated(self) -> bool:
        return bool(self.uri.strip())


class GroundingChunk(_WireModel):
    """One citation. Exactly one of ``web`` or ``maps`` is meaningful."""

    web: Annotated[GroundingSource | None, BeforeValidator(_mapping_or_none)] = None
    maps: Annotated[GroundingSource | None, BeforeValidator(_mapping_or_none)] = None


class GroundingMetadata(_WireModel):
    grounding_chunks: Annotated[
        list[GroundingChunk], BeforeValidator(_mapping_items)
    ] = Field(default_factory=list)
    web_search_queries: Annotated[list[str], BeforeValidator(_string_items)] = Field(
        default_factory=list
    )
