import itertools

import pytest

from station_facts.core.models import StationResponseSchema
from station_facts.core.types import Ambiguous, Resolved, Unresolved
from station_facts.pipeline.resolver import (
    REASON_NO_CANDIDATES,
    REASON_NO_DATA,
    REASON_UNPARSED,
    DisambiguationResolver,
)

pytestmark = pytest.mark.unit

DATA = {"officialName": "Bank"}
CANDIDATES = ["Cyprus (London)", "Cyprus (Nicosia)"]


def schema(*, is_ambiguous, candidates, data):
    payload = {"isAmbiguous": is_ambiguous, "candidates": candidates}
    if data is not None:
        payload["data"] = data
    return StationResponseSchema.model_validate(payload)


@pytest.fixture
def resolver():
    return DisambiguationResolver()


@pytest.mark.parametrize(
    ("is_ambiguous", "candidates", "data"),
    list(itertools.product([True, False], [[], CANDIDATES], [None, DATA])),
)
def test_every_combination_is_classified(resolver, is_ambiguous, candidates, data):
    outcome = resolver.resolve(
        schema(is_ambiguous=is_ambiguous, candidates=candidates, data=data)
    )
    assert isinstance(outcome, Ambiguous | Resolved | Unresolved)
    if is_ambiguous and candidates:
        assert outcome == Ambiguous(tuple(CANDIDATES))
    elif data is not None:
        assert isinstance(outcome, Resolved)
        assert outcome.data.official_name == "Bank"
    else:
        assert isinstance(outcome, Unresolved)


def test_unparsed_reply(resolver):
    assert resolver.resolve(None) == Unresolved(REASON_UNPARSED)


def test_ambiguous_without_candidates_is_unresolved(resolver):
    outcome = resolver.resolve(schema(is_ambiguous=True, candidates=[], data=None))
    assert outcome == Unresolved(REASON_NO_CANDIDATES)


def test_no_data_no_flag_is_unresolved(resolver):
    outcome = resolver.resolve(schema(is_ambiguous=False, candidates=[], data=None))
    assert outcome == Unresolved(REASON_NO_DATA)


def test_data_resolves_despite_flag(resolver):
    outcome = resolver.resolve(schema(is_ambiguous=True, candidates=[], data=DATA))
    assert outcome.kind == "resolved"


def test_blank_candidates_are_dropped(resolver):
    outcome = resolver.resolve(
        schema(is_ambiguous=True, candidates=["  ", " Cyprus (London) "], data=None)
    )
    assert outcome == Ambiguous(("Cyprus (London)",))


def test_only_blank_candidates_is_unresolved(resolver):
    outcome = resolver.resolve(schema(is_ambiguous=True, candidates=["", " "], data=None))
    assert isinstance(outcome, Unresolved)
