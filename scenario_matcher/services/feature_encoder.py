"""
Feature encoder.

Maps a categorical Observation onto a FeatureVector through fixed lookup
tables. Catalog vectors are authored against the same tables, so encoding
must stay pure and deterministic.
"""

from typing import Any, Dict, Mapping, Union
from pydantic import ValidationError

from ..config.exceptions import EncodingError
from ..models.feature_vector import (
    FEATURE_FIELDS,
    C1Behavior,
    C1Context,
    CandleAction,
    CandleClose,
    FeatureVector,
    Observation,
)

C1_CONTEXT_CODES: Dict[C1Context, int] = {
    C1Context.INSIDE_PDR: 0,
    C1Context.BREAKS_PDH: 1,
    C1Context.BREAKS_PDL: 2,
}

C1_BEHAVIOR_CODES: Dict[C1Behavior, int] = {
    C1Behavior.RANGING: 0,
    C1Behavior.TRENDS_UP: 1,
    C1Behavior.TRENDS_DOWN: 2,
}

CANDLE_ACTION_CODES: Dict[CandleAction, int] = {
    CandleAction.INSIDE_BAR: 0,
    CandleAction.BREAKS_HIGH: 1,
    CandleAction.BREAKS_LOW: 2,
    CandleAction.WHIPSAW: 3,
}

CANDLE_CLOSE_CODES: Dict[CandleClose, int] = {
    CandleClose.INSIDE: 0,
    CandleClose.ABOVE: 1,
    CandleClose.BELOW: 2,
}

# Lookup table used for each field
FIELD_CODES: Dict[str, Dict[Any, int]] = {
    "c1_context": C1_CONTEXT_CODES,
    "c1_behavior": C1_BEHAVIOR_CODES,
    "c2_action": CANDLE_ACTION_CODES,
    "c2_close": CANDLE_CLOSE_CODES,
    "c3_action": CANDLE_ACTION_CODES,
    "c3_close": CANDLE_CLOSE_CODES,
    "c4_action": CANDLE_ACTION_CODES,
    "c4_close": CANDLE_CLOSE_CODES,
}


def _to_observation(observation: Union[Observation, Mapping[str, Any]]) -> Observation:
    if isinstance(observation, Observation):
        return observation
    try:
        return Observation.model_validate(observation)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            errors.append(f"{field}: {error['msg']}")
        raise EncodingError("Invalid observation:\n" + "\n".join(errors)) from e


def encode_input(observation: Union[Observation, Mapping[str, Any]]) -> FeatureVector:
    """
    Encode an observation into a feature vector.

    Args:
        observation: Observation model or a mapping of field name to choice string

    Returns:
        FeatureVector with every field inside its domain

    Raises:
        EncodingError: If a field is missing or holds a value outside its enumeration
    """
    obs = _to_observation(observation)
    return FeatureVector(**{name: FIELD_CODES[name][getattr(obs, name)] for name in FEATURE_FIELDS})


def decode_vector(vector: FeatureVector) -> Observation:
    """Inverse of encode_input: map each code back to its choice."""
    values = {}
    for name in FEATURE_FIELDS:
        reverse = {code: choice for choice, code in FIELD_CODES[name].items()}
        values[name] = reverse[getattr(vector, name)]
    return Observation(**values)
