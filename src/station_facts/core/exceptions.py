"""Exceptions for station fact lookups.

Only ``ConfigurationError`` and ``TransportError`` ever reach a caller of
``get_station_fact``. ``ParseFailure`` and ``ContractViolation`` describe
degraded replies; the pipeline carries them as values and logs them.
"""


class StationFactsError(Exception):
    """Base exception for station fact lookups."""


class ConfigurationError(StationFactsError):
    """Raised when required configuration (such as the API key) is missing or invalid."""


class TransportError(StationFactsError):
    """Raised when the generative backend call fails or times out."""


class ParseFailure(StationFactsError):
    """Backend text could not be decoded into a JSON object."""

    def __init__(self, message: str, text: str = "") -> None:
        super().__init__(message)
        self.text = text


class ContractViolation(StationFactsError):
    """Decoded JSON does not fit the station response schema."""
