"""Prompt construction for station lookups.

The prompt is the only contract the backend sees, so it spells out the
ambiguity rule, the per-field formatting rules and the literal JSON schema.
Construction is pure: the same query and clock reading always produce the
same payload.
"""

from __future__ import annotations

from datetime import datetime, time
import json
from typing import TYPE_CHECKING

from station_facts.core.models import DEFAULT_LINE_COLOR
from station_facts.core.types import PromptPayload

if TYPE_CHECKING:
    from station_facts.core.types import StationQuery

STEP_FREE_PHRASES = (
    "Full step-free access",
    "Partial step-free access",
    "No step-free access",
)
DEPARTURE_STATUSES = ("On time", "Delayed", "Scheduled")

# Official brand colours given to the model as anchors.
LINE_COLOR_EXAMPLES = (
    ("Avanti West Coast", "#00455D", "Teal"),
    ("West Midlands Trains", "#F05A22", "Orange"),
    ("London Northwestern", "#00BFA5", "Green"),
    ("LNER", "#CE0E2D", "Red"),
    ("Elizabeth Line", "#6950a1", "Purple"),
    ("Overground", "#ef7b10", "Orange"),
)

RESPONSE_SCHEMA_TEXT = """\
{
  "isAmbiguous": boolean,
  "candidates": string[],
  "data": {
    "officialName": string,
    "routeDescription": string,
    "location": string,
    "openingInfo": string,
    "funFact": string,
    "historicalContext": string,
    "operationalStatus": string,
    "stepFreeAccess": { "status": string, "details": string },
    "hasToilets": boolean,
    "lines": [
      { "name": string, "colorHex": string, "textColorHex": string, "providerUrl": string }
    ],
    "buses": [
      { "route": string, "destination": string, "nextArrival": string }
    ],
    "coaches": [
      { "provider": string, "route": string, "link": string }
    ],
    "nextDepartures": [
      { "destination": string, "time": string, "platform": string, "status": string, "operator": string }
    ]
  }
}"""


def format_local_time(now: datetime | time) -> str:
    """Render a clock reading as 24-hour ``HH:MM``."""
    return now.strftime("%H:%M")


def build_tool_config(query: StationQuery) -> dict[str, object]:
    """Return the library-owned tool configuration for a query.

    Maps and Search grounding are always requested; a retrieval bias is added
    only when the query carries a location.
    """
    config: dict[str, object] = {
        "tools": ({"google_maps": {}}, {"google_search": {}}),
    }
    if query.location is not None:
        config["tool_config"] = {
            "retrieval_config": {"lat_lng": query.location.as_lat_lng()},
        }
    return config


class PromptBuilder:
    """Builds the instruction text and tool configuration for one query."""

    def __init__(self, *, fallback_color: str = DEFAULT_LINE_COLOR) -> None:
        self.fallback_color = fallback_color

    def build(self, query: StationQuery, now: datetime | time) -> PromptPayload:
        """Render the prompt for ``query`` as seen at local time ``now``."""
        text = "\n".join(
            (
                f"User Query: {json.dumps(query.station_name, ensure_ascii=False)}",
                f"Current Local Time: {format_local_time(now)}",
                "",
                "Task: Provide verified, accurate information about the "
                "RAIL/METRO/BUS STATION matching this name.",
                "",
                *self._ambiguity_rules(),
                "",
                *self._field_rules(),
                "",
                "**Format**: STRICT JSON only, no prose around it. Remove ALL "
                "citation tags like [1] or [7, 10] from every text field.",
                "",
                "JSON Schema:",
                RESPONSE_SCHEMA_TEXT,
            )
        )
        return PromptPayload(text=text, config=build_tool_config(query))

    def _ambiguity_rules(self) -> list[str]:
        return [
            "**CRITICAL AMBIGUITY RULE**:",
            '- The user is asking about a STATION. If the query is "Cyprus", '
            '"Bank", "Jordan" or "Waterloo", ASSUME they mean the STATION.',
            "- ONLY set 'isAmbiguous': true if there are MULTIPLE distinct "
            "STATIONS with this name in DIFFERENT cities. Then list their full "
            "names in 'candidates' and omit 'data'.",
        ]

    def _field_rules(self) -> list[str]:
        colors = "\n".join(
            f"     - {name}: {hex_code} ({label})"
            for name, hex_code, label in LINE_COLOR_EXAMPLES
        )
        step_free = ", ".join(f'"{p}"' for p in STEP_FREE_PHRASES)
        statuses = ", ".join(f'"{s}"' for s in DEPARTURE_STATUSES)
        return [
            "**Station Details** (if not ambiguous):",
            "- officialName: Full station name.",
            "- routeDescription: Name of the MAIN LINE or PHYSICAL ROUTE "
            '(e.g. "West Coast Main Line"). Blank string if unknown.',
            '- openingInfo: STRICT FORMAT "Opened: YYYY", or '
            '"Opened: YYYY  Reopened: YYYY" if reopened. Years only, no other '
            "words.",
            "- location: City/address string.",
            "- funFact: A short, interesting, unique fact. MUST BE INCLUDED.",
            "- historicalContext: Brief history.",
            "- lines: ALL lines, routes or operator brands calling here "
            '(metro codes like "U5", regional routes like "RB12", operators '
            'like "LNER").',
            "  - colorHex: ESSENTIAL. OFFICIAL branding colour in HEX, e.g.:",
            colors,
            f"     - If unknown use {self.fallback_color}. NEVER leave blank.",
            "  - textColorHex: readable text colour on top of colorHex.",
            "  - providerUrl: Official website.",
            f"- stepFreeAccess.status: exactly one of {step_free}; "
            "stepFreeAccess.details: short summary.",
            "- hasToilets: boolean.",
            '- operationalStatus: e.g. "Operational" or "Good Service".',
            "- buses: a SEPARATE object for EACH route number.",
            '- coaches: SPECIFIC operator names only (e.g. "National Express"). '
            "If various or unknown, return an EMPTY ARRAY [].",
            f"- nextDepartures: time as HH:MM, final destination, status one of "
            f"{statuses}, specific operator. Use SCHEDULED times if real-time "
            "data is unavailable; empty array only if the station is closed.",
        ]
