"""Station fact lookups backed by grounded Gemini replies."""

import importlib.metadata
import logging

from station_facts.config import FrozenConfig, StationFactsSettings, resolve_config
from station_facts.core.exceptions import (
    ConfigurationError,
    ContractViolation,
    ParseFailure,
    StationFactsError,
    TransportError,
)
from station_facts.core.models import (
    DEFAULT_LINE_COLOR,
    BusInfo,
    CoachInfo,
    DepartureInfo,
    GroundingChunk,
    GroundingMetadata,
    GroundingSource,
    StationData,
    StationResponseSchema,
    StepFreeAccess,
    TransitLine,
)
from station_facts.core.types import (
    Ambiguous,
    FactResponse,
    Failure,
    GroundingSources,
    Location,
    PromptPayload,
    Resolution,
    Resolved,
    Result,
    StationQuery,
    Success,
    Unresolved,
)
from station_facts.orchestrator import (
    QuerySession,
    StationFactOrchestrator,
    get_station_fact,
)
from station_facts.presentation import (
    DepartureCategory,
    StatusCategory,
    StepFreeCategory,
    categorize_departure_status,
    categorize_status,
    categorize_step_free,
    render_text,
)
from station_facts.telemetry import TelemetryContext, TelemetryReporter

try:
    __version__ = importlib.metadata.version("station-facts")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Entry points
    "get_station_fact",
    "StationFactOrchestrator",
    "QuerySession",
    # Configuration
    "resolve_config",
    "FrozenConfig",
    "StationFactsSettings",
    # Query and result types
    "Location",
    "StationQuery",
    "PromptPayload",
    "FactResponse",
    "GroundingSources",
    "Resolution",
    "Ambiguous",
    "Resolved",
    "Unresolved",
    "Result",
    "Success",
    "Failure",
    # Wire models
    "StationResponseSchema",
    "StationData",
    "StepFreeAccess",
    "TransitLine",
    "BusInfo",
    "CoachInfo",
    "DepartureInfo",
    "GroundingMetadata",
    "GroundingChunk",
    "GroundingSource",
    "DEFAULT_LINE_COLOR",
    # Presentation
    "DepartureCategory",
    "StatusCategory",
    "StepFreeCategory",
    "categorize_departure_status",
    "categorize_status",
    "categorize_step_free",
    "render_text",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
    # Exceptions
    "StationFactsError",
    "ConfigurationError",
    "TransportError",
    "ParseFailure",
    "ContractViolation",
]
