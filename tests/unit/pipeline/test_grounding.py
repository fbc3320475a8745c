import pytest

from station_facts.core.models import GroundingMetadata
from station_facts.core.types import GroundingSources
from station_facts.pipeline.grounding import GroundingExtractor
from tests.fixtures.replies import maps_chunk, web_chunk

pytestmark = pytest.mark.unit


def metadata(*chunks):
    return GroundingMetadata.model_validate({"grounding_chunks": list(chunks)})


def test_first_map_and_first_three_web_sources():
    meta = metadata(
        web_chunk(1),
        maps_chunk(1),
        web_chunk(2),
        web_chunk(3),
        maps_chunk(2),
        web_chunk(4),
        web_chunk(5),
    )
    sources = GroundingExtractor().extract(meta)
    assert sources.map_source is not None
    assert sources.map_source.title == "Map 1"
    assert [s.title for s in sources.web_sources] == ["Web 1", "Web 2", "Web 3"]


@pytest.mark.parametrize("meta", [None, metadata()])
def test_no_chunks_is_empty_not_error(meta):
    sources = GroundingExtractor().extract(meta)
    assert sources == GroundingSources()
    assert sources.is_empty


def test_maps_only():
    sources = GroundingExtractor().extract(metadata(maps_chunk(7)))
    assert sources.map_source.uri.endswith("cid=7")
    assert sources.web_sources == ()


def test_chunks_without_uri_are_skipped():
    meta = metadata({"maps": {"title": "no uri"}}, maps_chunk(2), {"web": {"uri": ""}})
    sources = GroundingExtractor().extract(meta)
    assert sources.map_source.title == "Map 2"
    assert sources.web_sources == ()


def test_custom_web_cap():
    meta = metadata(*(web_chunk(i) for i in range(5)))
    assert len(GroundingExtractor(max_web_sources=1).extract(meta).web_sources) == 1
    assert GroundingExtractor(max_web_sources=0).extract(meta).web_sources == ()


def test_negative_cap_rejected():
    with pytest.raises(ValueError):
        GroundingExtractor(max_web_sources=-1)
