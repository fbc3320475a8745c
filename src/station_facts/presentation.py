"""Render-time categorization and plain-text rendering.

Operational status and step-free access arrive as free text. They are
bucketed here, when displayed, rather than at parse time.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from station_facts.core.types import Ambiguous, Resolved

if TYPE_CHECKING:
    from station_facts.core.models import StationData
    from station_facts.core.types import FactResponse, GroundingSources


class StatusCategory(str, Enum):
    """Traffic-light bucket for an operational status line."""

    GOOD = "good"
    DISRUPTED = "disrupted"
    CLOSED = "closed"


class StepFreeCategory(str, Enum):
    """Bucket for a step-free access status line."""

    FULL = "full"
    PARTIAL = "partial"
    NONE = "none"


class DepartureCategory(str, Enum):
    """Bucket for a departure board status."""

    ON_TIME = "on time"
    DELAYED = "delayed"
    CANCELLED = "cancelled"


_GOOD_MARKERS = ("good", "operational", "normal", "on time")
_CLOSED_MARKERS = ("closure", "suspended", "closed")
_NO_STEP_FREE_MARKERS = ("no step-free", "not accessible", "no access")
_PARTIAL_STEP_FREE_MARKERS = ("partial", "some", "limited")

NOTHING_FOUND = "No station information was found. Try a more specific name."


def categorize_status(status: str | None) -> StatusCategory:
    """Bucket an operational status; anything unrecognised counts as disrupted."""
    s = (status or "").lower()
    if any(marker in s for marker in _GOOD_MARKERS):
        return StatusCategory.GOOD
    if any(marker in s for marker in _CLOSED_MARKERS):
        return StatusCategory.CLOSED
    return StatusCategory.DISRUPTED


def categorize_step_free(status: str | None) -> StepFreeCategory:
    """Bucket a step-free status. Negative phrasings are checked first."""
    s = (status or "").lower()
    if any(marker in s for marker in _NO_STEP_FREE_MARKERS):
        return StepFreeCategory.NONE
    if any(marker in s for marker in _PARTIAL_STEP_FREE_MARKERS):
        return StepFreeCategory.PARTIAL
    return StepFreeCategory.FULL


def categorize_departure_status(status: str | None) -> DepartureCategory:
    """Bucket a departure status; anything not on time or cancelled is delayed."""
    s = (status or "").lower()
    if "time" in s:
        return DepartureCategory.ON_TIME
    if "cancel" in s:
        return DepartureCategory.CANCELLED
    return DepartureCategory.DELAYED


def render_text(response: FactResponse) -> str:
    """Render a lookup result for a terminal."""
    resolution = response.resolution
    if isinstance(resolution, Ambiguous):
        lines = ["Several stations match. Did you mean:"]
        lines.extend(
            f"  {i}. {name}" for i, name in enumerate(resolution.candidates, 1)
        )
        return "\n".join(lines)
    if isinstance(resolution, Resolved):
        return "\n".join(
            [*_render_station(resolution.data), *_render_sources(response.sources)]
        )
    return NOTHING_FOUND


def _render_station(data: StationData) -> list[str]:
    lines = [data.official_name or "(unnamed station)"]
    if data.route_description:
        lines.append(f"  Route: {data.route_description}")
    if data.location:
        lines.append(f"  Location: {data.location}")
    if data.opening_info:
        lines.append(f"  {data.opening_info}")
    if data.operational_status:
        category = categorize_status(data.operational_status)
        lines.append(f"  Status: {data.operational_status} [{category.value}]")

    step_free = data.step_free_access
    if step_free.status:
        category = categorize_step_free(step_free.status)
        detail = f" - {step_free.details}" if step_free.details else ""
        lines.append(f"  Step-free: {step_free.status} [{category.value}]{detail}")
    lines.append(f"  Toilets: {'yes' if data.has_toilets else 'no'}")

    if data.fun_fact:
        lines.append(f"  Fun fact: {data.fun_fact}")
    if data.historical_context:
        lines.append(f"  History: {data.historical_context}")

    if data.lines:
        lines.append("  Lines:")
        for line in data.lines:
            url = f" <{line.provider_url}>" if line.provider_url else ""
            lines.append(f"    - {line.name} ({line.color_hex}){url}")
    if data.next_departures:
        lines.append("  Next departures:")
        for dep in data.next_departures:
            extras = [
                f"platform {dep.platform}" if dep.platform else "",
                dep.operator or "",
                _departure_status(dep.status),
            ]
            suffix = ", ".join(e for e in extras if e)
            lines.append(
                f"    {dep.time} {dep.destination}" + (f" ({suffix})" if suffix else "")
            )
    if data.buses:
        lines.append("  Buses:")
        for bus in data.buses:
            arrival = f" - {bus.next_arrival}" if bus.next_arrival else ""
            lines.append(f"    {bus.route} to {bus.destination}{arrival}")
    if data.coaches:
        lines.append("  Coaches:")
        for coach in data.coaches:
            link = f" <{coach.link}>" if coach.link else ""
            lines.append(f"    {coach.provider}: {coach.route}{link}")
    return lines


def _departure_status(status: str | None) -> str:
    if not status:
        return ""
    return f"{status} [{categorize_departure_status(status).value}]"


def _render_sources(sources: GroundingSources) -> list[str]:
    if sources.is_empty:
        return []
    lines = ["  Sources:"]
    if sources.map_source is not None:
        src = sources.map_source
        lines.append(f"    [map] {src.title or 'Google Maps'} <{src.uri}>")
    for src in sources.web_sources:
        lines.append(f"    [web] {src.title or src.uri} <{src.uri}>")
    return lines
