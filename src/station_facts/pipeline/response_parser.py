"""Reply unwrapping and JSON decoding.

``ResponseParser.parse`` turns the backend's reply envelope into the
canonical raw text plus grounding metadata. ``ResponseParser.decode`` turns
that text into a JSON object. Decoding never raises: malformed model output
is an expected condition and comes back as a ``Failure``.
"""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from station_facts.core.exceptions import ParseFailure
from station_facts.core.models import GroundingMetadata
from station_facts.core.types import Failure, ParsedReply, Result, Success

log = logging.getLogger(__name__)

EMPTY_REPLY_TEXT = "{}"

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```$")


def _field(mapping: Mapping[str, Any], snake: str, camel: str) -> Any:
    """Read a key in either SDK (snake_case) or REST (camelCase) spelling."""
    value = mapping.get(snake)
    if value is None:
        value = mapping.get(camel)
    return value


def unwrap_code_fence(text: str) -> str:
    """Trim ``text`` and remove a surrounding ```` ```json ```` / ```` ``` ```` fence."""
    text = text.strip()
    if not text.startswith("```"):
        return text
    text = _FENCE_OPEN_RE.sub("", text, count=1)
    return _FENCE_CLOSE_RE.sub("", text, count=1)


def _balanced_object_span(text: str) -> str | None:
    """Return the first balanced ``{...}`` span in ``text``, if any.

    Braces inside string literals are skipped.
    """
    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escape = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


class ResponseParser:
    """Extracts text and grounding metadata from a backend reply."""

    def parse(self, reply: Mapping[str, Any] | Any) -> ParsedReply:
        """Unwrap the first candidate of ``reply``.

        Text fragments are joined with no separator. A reply with no
        candidate or no text is read as ``"{}"``.

        Args:
            reply: Reply mapping (REST or SDK-dump shape), or an SDK response
                object exposing ``model_dump``.

        Returns:
            ParsedReply with the fence-stripped text and validated metadata.
        """
        if not isinstance(reply, Mapping) and hasattr(reply, "model_dump"):
            reply = reply.model_dump(mode="json", exclude_none=True)
        if not isinstance(reply, Mapping):
            log.warning("Backend reply has unexpected type %s", type(reply).__name__)
            return ParsedReply(text=EMPTY_REPLY_TEXT)

        candidates = reply.get("candidates")
        candidate = (
            candidates[0] if isinstance(candidates, list | tuple) and candidates else None
        )
        if not isinstance(candidate, Mapping):
            return ParsedReply(text=EMPTY_REPLY_TEXT)

        text = self._join_text(candidate) or EMPTY_REPLY_TEXT
        metadata = self._read_metadata(
            _field(candidate, "grounding_metadata", "groundingMetadata")
        )
        return ParsedReply(text=unwrap_code_fence(text), metadata=metadata)

    def decode(self, text: str) -> Result[dict[str, Any], ParseFailure]:
        """Decode reply text into a JSON object.

        Strict parsing is tried first; if it fails, the first balanced object
        embedded in surrounding prose is tried. A valid JSON value that is not
        an object is also a failure.
        """
        try:
            value = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            span = _balanced_object_span(text) if isinstance(text, str) else None
            if span is None or span == text:
                return Failure(ParseFailure(f"Reply is not valid JSON: {e}", text))
            try:
                value = json.loads(span)
            except json.JSONDecodeError as e2:
                return Failure(ParseFailure(f"Reply is not valid JSON: {e2}", text))
            log.debug("Recovered JSON object embedded in %d chars of text", len(text))

        if not isinstance(value, dict):
            return Failure(
                ParseFailure(
                    f"Reply JSON is a {type(value).__name__}, expected an object",
                    text,
                )
            )
        return Success(value)

    def _join_text(self, candidate: Mapping[str, Any]) -> str:
        content = candidate.get("content")
        if not isinstance(content, Mapping):
            return ""
        parts = content.get("parts") or ()
        return "".join(
            part["text"]
            for part in parts
            if isinstance(part, Mapping) and isinstance(part.get("text"), str)
        )

    def _read_metadata(self, raw: Any) -> GroundingMetadata | None:
        if raw is None:
            return None
        try:
            return GroundingMetadata.model_validate(raw)
        except ValidationError as e:
            log.warning("Dropping malformed grounding metadata: %s", e)
            return None
