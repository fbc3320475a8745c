"""Command line front end.

Examples:
- station-facts "Bank"
- station-facts "Waterloo" --lat 51.5 --lon -0.11
- station-facts "Cyprus" --choose 1 --json
- python -m station_facts "King's Cross" -v
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING, Any

from station_facts.config import resolve_config
from station_facts.core.exceptions import ConfigurationError, TransportError
from station_facts.core.types import Ambiguous, Location
from station_facts.orchestrator import StationFactOrchestrator
from station_facts.presentation import render_text
from station_facts.telemetry import InMemoryReporter, TelemetryContext

if TYPE_CHECKING:
    from collections.abc import Sequence

    from station_facts.core.types import FactResponse

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TRANSPORT = 1
EXIT_CONFIG = 2

RETRY_MESSAGE = "We couldn't retrieve information right now. Please try again."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="station-facts",
        description="Look up facts, lines and departures for a rail/metro station.",
    )
    parser.add_argument("station", help="Station name to look up")
    parser.add_argument("--lat", type=float, help="Your latitude (decimal degrees)")
    parser.add_argument("--lon", type=float, help="Your longitude (decimal degrees)")
    parser.add_argument("--model", help="Gemini model identifier")
    parser.add_argument(
        "--timeout", type=float, help="Overall backend timeout in seconds"
    )
    parser.add_argument("--env-file", help="Optional .env file with GEMINI_* values")
    parser.add_argument(
        "--choose",
        type=int,
        metavar="N",
        help="If the name is ambiguous, look up candidate N (1-based)",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print machine-readable JSON"
    )
    parser.add_argument(
        "--telemetry",
        action="store_true",
        help="Print stage timings (needs GEMINI_TELEMETRY=1)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def response_to_json(response: FactResponse) -> dict[str, Any]:
    """Serialize a response using wire (camelCase) field names."""
    sources = response.sources
    return {
        "structuredData": (
            response.structured_data.model_dump(mode="json", by_alias=True)
            if response.structured_data is not None
            else None
        ),
        "rawText": response.raw_text,
        "resolution": response.resolution.kind,
        "sources": {
            "map": (
                sources.map_source.model_dump(mode="json")
                if sources.map_source is not None
                else None
            ),
            "web": [s.model_dump(mode="json") for s in sources.web_sources],
        },
    }


def _location(args: argparse.Namespace) -> Location | None:
    if args.lat is None and args.lon is None:
        return None
    if args.lat is None or args.lon is None:
        raise ValueError("--lat and --lon must be given together")
    return Location(args.lat, args.lon)


async def run(args: argparse.Namespace, orchestrator: StationFactOrchestrator) -> str:
    """Run one lookup (plus an optional candidate follow-up) and render it."""
    location = _location(args)
    response = await orchestrator.get_station_fact(args.station, location)

    resolution = response.resolution
    if args.choose is not None and isinstance(resolution, Ambiguous):
        index = args.choose - 1
        if not 0 <= index < len(resolution.candidates):
            raise ValueError(
                f"--choose must be between 1 and {len(resolution.candidates)}"
            )
        chosen = resolution.candidates[index]
        log.info("Ambiguous query %r; looking up %r", args.station, chosen)
        response = await orchestrator.get_station_fact(chosen, location)

    if args.json:
        return json.dumps(response_to_json(response), indent=2, ensure_ascii=False)
    return render_text(response)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not args.station.strip():
        parser.error("station name must not be empty")

    reporter = InMemoryReporter() if args.telemetry else None
    try:
        config = resolve_config(
            {"model": args.model, "request_timeout_s": args.timeout},
            env_file=args.env_file,
        )
        orchestrator = StationFactOrchestrator(
            config=config,
            telemetry=TelemetryContext(reporter) if reporter else None,
        )
        output = asyncio.run(run(args, orchestrator))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except TransportError as e:
        log.debug("Lookup failed", exc_info=e)
        print(RETRY_MESSAGE, file=sys.stderr)
        return EXIT_TRANSPORT
    except ValueError as e:
        parser.error(str(e))

    print(output)
    if reporter is not None:
        print(reporter.get_report(), file=sys.stderr)
    return EXIT_OK
