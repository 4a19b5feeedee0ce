"""
Feature vector and observation models.

An Observation is the categorical, user-facing description of a four-candle
pattern. A FeatureVector is its numeric encoding used for distance scoring.
Both carry the same eight fields, one per candle sub-observation.
"""

from enum import Enum
from typing import Dict, Tuple
from pydantic import BaseModel, ConfigDict, Field


class C1Context(str, Enum):
    """Where the first candle sits relative to the prior day's range."""

    INSIDE_PDR = "inside_pdr"
    BREAKS_PDH = "breaks_pdh"
    BREAKS_PDL = "breaks_pdl"


class C1Behavior(str, Enum):
    """How the first candle trades."""

    RANGING = "ranging"
    TRENDS_UP = "trends_up"
    TRENDS_DOWN = "trends_down"


class CandleAction(str, Enum):
    """What candles 2-4 do relative to the previous candle."""

    INSIDE_BAR = "inside_bar"
    BREAKS_HIGH = "breaks_high"
    BREAKS_LOW = "breaks_low"
    WHIPSAW = "whipsaw"


class CandleClose(str, Enum):
    """Where candles 2-4 close relative to the previous candle."""

    INSIDE = "inside"
    ABOVE = "above"
    BELOW = "below"


# Field order is fixed; every vector and observation uses exactly these fields
FEATURE_FIELDS: Tuple[str, ...] = (
    "c1_context",
    "c1_behavior",
    "c2_action",
    "c2_close",
    "c3_action",
    "c3_close",
    "c4_action",
    "c4_close",
)

# Number of distinct values each field can take
FEATURE_DOMAINS: Dict[str, int] = {
    "c1_context": len(C1Context),
    "c1_behavior": len(C1Behavior),
    "c2_action": len(CandleAction),
    "c2_close": len(CandleClose),
    "c3_action": len(CandleAction),
    "c3_close": len(CandleClose),
    "c4_action": len(CandleAction),
    "c4_close": len(CandleClose),
}


class FeatureVector(BaseModel):
    """Numeric encoding of a four-candle observation."""

    c1_context: int = Field(ge=0, le=2, description="0=inside_pdr, 1=breaks_pdh, 2=breaks_pdl")
    c1_behavior: int = Field(ge=0, le=2, description="0=ranging, 1=trends_up, 2=trends_down")
    c2_action: int = Field(ge=0, le=3, description="0=inside_bar, 1=breaks_high, 2=breaks_low, 3=whipsaw")
    c2_close: int = Field(ge=0, le=2, description="0=inside, 1=above, 2=below")
    c3_action: int = Field(ge=0, le=3)
    c3_close: int = Field(ge=0, le=2)
    c4_action: int = Field(ge=0, le=3)
    c4_close: int = Field(ge=0, le=2)

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    def as_tuple(self) -> Tuple[int, ...]:
        """Return field values in FEATURE_FIELDS order."""
        return tuple(getattr(self, name) for name in FEATURE_FIELDS)


class Observation(BaseModel):
    """User-described four-candle pattern (categorical choices)."""

    c1_context: C1Context
    c1_behavior: C1Behavior
    c2_action: CandleAction
    c2_close: CandleClose
    c3_action: CandleAction
    c3_close: CandleClose
    c4_action: CandleAction
    c4_close: CandleClose

    model_config = ConfigDict(frozen=True, extra="forbid")
