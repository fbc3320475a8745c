"""Live lookups against the real Gemini backend.

Skipped unless GEMINI_API_KEY and ENABLE_API_TESTS=1 are set.
"""

import pytest

from station_facts import get_station_fact, resolve_config

pytestmark = pytest.mark.api


@pytest.mark.asyncio
async def test_well_known_station_resolves():
    response = await get_station_fact("London Paddington", config=resolve_config())

    assert response.raw_text
    assert response.is_resolved or response.is_ambiguous
