"""
Matching API endpoints.

Provides REST API endpoints for:
- Encoding an observation into a feature vector
- Ranking catalog scenarios against an observation or feature vector
- Returning the single best match
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, model_validator

from ..config.logging import get_logger
from ..models.feature_vector import FeatureVector, Observation
from ..models.match import MatchResult, RankedMatch
from ..services.feature_encoder import encode_input
from ..services.match_selector import MatchSelector
from .dependencies import get_match_selector

logger = get_logger(__name__)

router = APIRouter(tags=["matches"])


class MatchRequest(BaseModel):
    """Match request: exactly one of observation or features."""

    observation: Optional[Observation] = None
    features: Optional[FeatureVector] = None
    top_k: Optional[int] = Field(default=None, ge=0, description="Number of matches (default: MATCHER_DEFAULT_TOP_K)")

    @model_validator(mode="after")
    def validate_query(self):
        if (self.observation is None) == (self.features is None):
            raise ValueError("Provide exactly one of 'observation' or 'features'")
        return self

    def query_vector(self) -> FeatureVector:
        if self.features is not None:
            return self.features
        return encode_input(self.observation)


class MatchListResponse(BaseModel):
    """Ranked matches for a query."""

    query: FeatureVector
    matches: List[RankedMatch]


@router.post("/encode", response_model=FeatureVector)
async def encode_observation(observation: Observation) -> FeatureVector:
    """Encode an observation into its feature vector."""
    return encode_input(observation)


@router.post("/matches", response_model=MatchListResponse)
async def find_matches(
    match_request: MatchRequest,
    selector: MatchSelector = Depends(get_match_selector),
) -> MatchListResponse:
    """Rank catalog scenarios by distance to the query."""
    query = match_request.query_vector()
    matches = await selector.find_matches(query, match_request.top_k)
    logger.info(
        "Matches returned",
        requested_top_k=match_request.top_k,
        returned=len(matches),
        best_scenario_id=matches[0].scenario.id if matches else None,
    )
    return MatchListResponse(query=query, matches=matches)


@router.post("/matches/best", response_model=MatchResult)
async def find_best_match(
    match_request: MatchRequest,
    selector: MatchSelector = Depends(get_match_selector),
) -> MatchResult:
    """Closest scenario to the query; top_k is ignored."""
    best = await selector.find_best_match(match_request.query_vector())
    if best is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Scenario catalog is empty")
    return best
