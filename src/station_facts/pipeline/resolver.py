"""Classification of a decoded reply into a disambiguation outcome."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from station_facts.core.types import Ambiguous, Resolution, Resolved, Unresolved

if TYPE_CHECKING:
    from station_facts.core.models import StationResponseSchema

log = logging.getLogger(__name__)

REASON_UNPARSED = "unparsed"
REASON_NO_CANDIDATES = "ambiguous_without_candidates"
REASON_NO_DATA = "no_data"


class DisambiguationResolver:
    """Maps every ``{is_ambiguous, candidates, data}`` combination to an outcome.

    The flag is authoritative when it comes with candidates. Otherwise a
    present ``data`` record resolves the query whatever the flag says, since
    the backend does not always honour it. Anything else is unresolved.
    """

    def resolve(self, schema: StationResponseSchema | None) -> Resolution:
        if schema is None:
            return Unresolved(REASON_UNPARSED)

        candidates = tuple(
            name for name in (c.strip() for c in schema.candidates) if name
        )
        if schema.is_ambiguous and candidates:
            return Ambiguous(candidates)
        if schema.data is not None:
            if schema.is_ambiguous:
                log.debug("Reply flagged ambiguous without candidates; using data")
            return Resolved(schema.data)
        if schema.is_ambiguous:
            log.warning("Reply flagged ambiguous but listed no candidates")
            return Unresolved(REASON_NO_CANDIDATES)
        return Unresolved(REASON_NO_DATA)
