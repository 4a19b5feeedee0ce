"""
Unit tests for the feature encoder.
"""

import pytest

from scenario_matcher.config.exceptions import EncodingError
from scenario_matcher.models.feature_vector import (
    FEATURE_DOMAINS,
    FEATURE_FIELDS,
    C1Behavior,
    C1Context,
    CandleAction,
    CandleClose,
    FeatureVector,
    Observation,
)
from scenario_matcher.services.feature_encoder import FIELD_CODES, decode_vector, encode_input

DEFAULT_INPUT = {
    "c1_context": "inside_pdr",
    "c1_behavior": "ranging",
    "c2_action": "breaks_low",
    "c2_close": "inside",
    "c3_action": "breaks_high",
    "c3_close": "inside",
    "c4_action": "inside_bar",
    "c4_close": "inside",
}


def test_encode_default_input():
    """Test encoding the default form input."""
    vector = encode_input(Observation(**DEFAULT_INPUT))

    assert vector == FeatureVector(
        c1_context=0,
        c1_behavior=0,
        c2_action=2,
        c2_close=0,
        c3_action=1,
        c3_close=0,
        c4_action=0,
        c4_close=0,
    )


def test_encode_accepts_mapping():
    """Test that a plain mapping of choice strings is encoded like an Observation."""
    assert encode_input(DEFAULT_INPUT) == encode_input(Observation(**DEFAULT_INPUT))


@pytest.mark.parametrize(
    "field,choice,code",
    [
        ("c1_context", C1Context.INSIDE_PDR, 0),
        ("c1_context", C1Context.BREAKS_PDH, 1),
        ("c1_context", C1Context.BREAKS_PDL, 2),
        ("c1_behavior", C1Behavior.RANGING, 0),
        ("c1_behavior", C1Behavior.TRENDS_UP, 1),
        ("c1_behavior", C1Behavior.TRENDS_DOWN, 2),
        ("c3_action", CandleAction.INSIDE_BAR, 0),
        ("c3_action", CandleAction.BREAKS_HIGH, 1),
        ("c3_action", CandleAction.BREAKS_LOW, 2),
        ("c3_action", CandleAction.WHIPSAW, 3),
        ("c4_close", CandleClose.INSIDE, 0),
        ("c4_close", CandleClose.ABOVE, 1),
        ("c4_close", CandleClose.BELOW, 2),
    ],
)
def test_encode_lookup_tables(field, choice, code):
    """Test each enumeration maps to its documented code."""
    observation = Observation(**{**DEFAULT_INPUT, field: choice})

    assert getattr(encode_input(observation), field) == code


def test_lookup_tables_cover_domains():
    """Test every field's table maps its whole enumeration onto 0..domain-1."""
    for field in FEATURE_FIELDS:
        codes = sorted(FIELD_CODES[field].values())
        assert codes == list(range(FEATURE_DOMAINS[field]))


def test_encode_is_deterministic():
    """Test the same observation always yields the same vector."""
    observation = Observation(**DEFAULT_INPUT)

    vectors = {encode_input(observation) for _ in range(5)}

    assert len(vectors) == 1


def test_encode_rejects_unknown_choice():
    """Test out-of-domain input is rejected, not clamped."""
    with pytest.raises(EncodingError) as exc_info:
        encode_input({**DEFAULT_INPUT, "c2_action": "gaps_up"})

    assert "c2_action" in str(exc_info.value)


def test_encode_rejects_missing_field():
    """Test a missing field is rejected."""
    partial = dict(DEFAULT_INPUT)
    del partial["c4_close"]

    with pytest.raises(EncodingError):
        encode_input(partial)


def test_feature_vector_rejects_out_of_domain_value():
    """Test vectors cannot be built with values outside the field domain."""
    with pytest.raises(ValueError):
        FeatureVector(c1_context=3, c1_behavior=0, c2_action=0, c2_close=0, c3_action=0, c3_close=0, c4_action=0, c4_close=0)

    with pytest.raises(ValueError):
        FeatureVector(c1_context=0, c1_behavior=0, c2_action=4, c2_close=0, c3_action=0, c3_close=0, c4_action=0, c4_close=0)


def test_feature_vector_is_immutable(base_vector):
    """Test vectors are frozen."""
    with pytest.raises(ValueError):
        base_vector.c1_context = 1


def test_decode_vector_inverts_encode():
    """Test decoding a vector returns the encoded observation."""
    observation = Observation(**{**DEFAULT_INPUT, "c1_context": "breaks_pdl", "c4_action": "whipsaw", "c4_close": "below"})

    assert decode_vector(encode_input(observation)) == observation
