"""
Match result models.

RankedMatch is produced for every scored catalog entry; MatchResult is the
reduced form returned for the single best match.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from .scenario import Scenario


class MatchType(str, Enum):
    """Whether the query matched a scenario on every field."""

    EXACT = "exact"
    INFERRED = "inferred"


class MatchResult(BaseModel):
    """Best match for a query."""

    scenario: Scenario
    match_type: MatchType
    similarity: float = Field(ge=0.0, le=1.0, description="1 - distance, rounded to 4 decimals")
    confidence_weight: float = Field(description="Weight from the learning store (opaque, not clamped)")

    model_config = ConfigDict(frozen=True)


class RankedMatch(BaseModel):
    """One scored catalog entry."""

    scenario: Scenario
    distance: float = Field(ge=0.0, le=1.0, description="Weighted normalized distance (0 = identical)")
    similarity: float = Field(ge=0.0, le=1.0)
    match_type: MatchType
    confidence_weight: float
    weight_is_fallback: bool = Field(
        default=False,
        description="True when the weight lookup failed and the fallback weight was substituted",
    )

    model_config = ConfigDict(frozen=True)

    def to_result(self) -> MatchResult:
        """Drop the raw distance and fallback flag."""
        return MatchResult(
            scenario=self.scenario,
            match_type=self.match_type,
            similarity=self.similarity,
            confidence_weight=self.confidence_weight,
        )
