import json

import pytest

from station_facts.core.exceptions import ParseFailure
from station_facts.core.types import Failure, Success
from station_facts.pipeline.response_parser import ResponseParser, unwrap_code_fence
from tests.fixtures.replies import (
    fenced,
    make_reply,
    maps_chunk,
    station_payload,
    web_chunk,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def parser():
    return ResponseParser()


def test_parts_are_joined_without_separator(parser):
    parsed = parser.parse(make_reply('{"isAmbiguous": ', "false}"))
    assert parsed.text == '{"isAmbiguous": false}'


def test_only_first_candidate_is_used(parser):
    reply = make_reply('{"a": 1}')
    reply["candidates"].append({"content": {"parts": [{"text": '{"b": 2}'}]}})
    assert parser.parse(reply).text == '{"a": 1}'


@pytest.mark.parametrize(
    "reply",
    [
        {},
        {"candidates": []},
        {"candidates": None},
        {"candidates": [{}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"inline_data": {}}]}}]},
    ],
)
def test_missing_text_reads_as_empty_object(parser, reply):
    assert parser.parse(reply).text == "{}"


def test_non_mapping_reply_reads_as_empty_object(parser):
    assert parser.parse(["not", "a", "reply"]).text == "{}"


def test_sdk_like_object_is_dumped(parser):
    class _Response:
        def model_dump(self, **_kwargs):
            return make_reply('{"ok": true}')

    assert parser.parse(_Response()).text == '{"ok": true}'


@pytest.mark.parametrize("lang", ["json", "", "JSON"])
def test_code_fence_is_removed(parser, lang):
    payload = station_payload()
    parsed = parser.parse(make_reply("  " + fenced(payload, lang=lang) + "\n"))
    assert json.loads(parsed.text) == payload


def test_fence_unwrapping_matches_direct_parse(parser):
    payload = {"isAmbiguous": True, "candidates": ["Cyprus (London)", "Cyprus (Lagos)"]}
    direct = parser.decode(json.dumps(payload))
    wrapped = parser.decode(parser.parse(make_reply(fenced(payload))).text)
    assert isinstance(direct, Success)
    assert isinstance(wrapped, Success)
    assert direct.value == wrapped.value == payload


def test_unwrap_code_fence_leaves_plain_text():
    assert unwrap_code_fence("  not json at all \n") == "not json at all"


def test_metadata_snake_and_camel_case(parser):
    chunks = [web_chunk(1), maps_chunk(1)]
    for camel in (False, True):
        parsed = parser.parse(make_reply("{}", chunks=chunks, camel=camel))
        assert parsed.metadata is not None
        assert len(parsed.metadata.grounding_chunks) == 2
        assert parsed.metadata.grounding_chunks[1].maps.uri.startswith("https://maps")


def test_metadata_survives_unparseable_text(parser):
    parsed = parser.parse(make_reply("not json at all", chunks=[web_chunk(1)]))
    assert parsed.text == "not json at all"
    assert parsed.metadata is not None


def test_malformed_metadata_is_dropped(parser):
    reply = make_reply("{}")
    reply["candidates"][0]["grounding_metadata"] = {"grounding_chunks": [{"web": 5}]}
    assert parser.parse(reply).metadata is None


def test_decode_plain_text_fails_without_raising(parser):
    result = parser.decode("not json at all")
    assert isinstance(result, Failure)
    assert isinstance(result.error, ParseFailure)
    assert result.error.text == "not json at all"


def test_decode_truncated_json_fails(parser):
    assert isinstance(parser.decode('{"isAmbiguous": false, "data": {'), Failure)


@pytest.mark.parametrize("text", ["[1, 2]", '"just a string"', "42", "null"])
def test_decode_rejects_non_object_json(parser, text):
    assert isinstance(parser.decode(text), Failure)


def test_decode_repairs_prose_wrapped_object(parser):
    text = 'Here is the data you asked for: {"isAmbiguous": false, "note": "a } b"} Enjoy!'
    result = parser.decode(text)
    assert isinstance(result, Success)
    assert result.value == {"isAmbiguous": False, "note": "a } b"}
