"""Selection of displayable citations from grounding metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING

from station_facts.core.types import GroundingSources

if TYPE_CHECKING:
    from station_facts.core.models import GroundingMetadata

DEFAULT_MAX_WEB_SOURCES = 3


class GroundingExtractor:
    """Picks one map source and the first few web sources.

    A station has one canonical map, so only the first Maps chunk is kept.
    Web chunks keep the backend's order and are capped for display density,
    not ranked.
    """

    def __init__(self, max_web_sources: int = DEFAULT_MAX_WEB_SOURCES) -> None:
        if max_web_sources < 0:
            raise ValueError("max_web_sources must be >= 0")
        self.max_web_sources = max_web_sources

    def extract(self, metadata: GroundingMetadata | None) -> GroundingSources:
        if metadata is None or not metadata.grounding_chunks:
            return GroundingSources()

        chunks = metadata.grounding_chunks
        map_source = next(
            (c.maps for c in chunks if c.maps is not None and c.maps.is_populated),
            None,
        )
        web_sources = [
            c.web for c in chunks if c.web is not None and c.web.is_populated
        ]
        return GroundingSources(
            map_source=map_source,
            web_sources=tuple(web_sources[: self.max_web_sources]),
        )
