"""Citation stripping over the free-text fields of a decoded reply."""

from __future__ import annotations

from collections.abc import Mapping
import copy
from typing import Any

from .sanitizer import strip_citations

# Wire names of the free-text leaves under ``data``.
FREE_TEXT_FIELDS = (
    "funFact",
    "historicalContext",
    "operationalStatus",
    "openingInfo",
    "routeDescription",
)
STEP_FREE_TEXT_FIELDS = ("status", "details")


def _strip_nested(value: Any) -> Any:
    # Arrays and objects are flattened to text later; clean their strings now.
    if value is None or isinstance(value, str):
        return strip_citations(value)
    if isinstance(value, list):
        return [_strip_nested(item) for item in value]
    if isinstance(value, dict):
        return {k: _strip_nested(v) for k, v in value.items()}
    return value


def _sanitize_keys(obj: dict[str, Any], keys: tuple[str, ...]) -> None:
    for key in keys:
        if key in obj:
            obj[key] = _strip_nested(obj[key])


class FieldNormalizer:
    """Applies ``strip_citations`` to the free-text fields of a payload.

    Works on the decoded JSON object before it is shaped into models, so a
    key that is absent stays absent. Ambiguous replies carry no ``data`` and
    pass through untouched, as do lists, booleans and colours.
    """

    def normalize(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Return a sanitized deep copy of ``payload``."""
        result = copy.deepcopy(dict(payload))
        data = result.get("data")
        if not isinstance(data, dict):
            return result

        _sanitize_keys(data, FREE_TEXT_FIELDS)

        step_free = data.get("stepFreeAccess")
        if isinstance(step_free, dict):
            _sanitize_keys(step_free, STEP_FREE_TEXT_FIELDS)
        elif isinstance(step_free, str):
            data["stepFreeAccess"] = strip_citations(step_free)
        return result
