"""
Match selector.

Scores a query against every catalog scenario, attaches confidence weights
and returns the closest scenarios.

Weight lookups for one request run concurrently and independently. A lookup
that fails or times out gets the fallback weight and is flagged; it never
removes the scenario from the ranking. Cancelling the calling task cancels
that request's in-flight lookups only.
"""

import asyncio
from typing import List, Optional, Tuple

from ..config.logging import get_logger
from ..config.settings import settings
from ..models.feature_vector import FeatureVector
from ..models.match import MatchResult, RankedMatch
from .distance_ranker import DistanceRanker, distance_ranker, similarity_from_distance
from .scenario_catalog import ScenarioCatalog
from .weight_store import WeightStore

logger = get_logger(__name__)


def clamp_top_k(top_k: int, catalog_size: int) -> int:
    """Clamp a requested result count into [0, catalog_size]."""
    return max(0, min(top_k, catalog_size))


class MatchSelector:
    """Ranks catalog scenarios by distance to a query."""

    def __init__(
        self,
        catalog: ScenarioCatalog,
        weight_store: WeightStore,
        ranker: Optional[DistanceRanker] = None,
        fallback_weight: Optional[float] = None,
        weight_timeout_seconds: Optional[float] = None,
    ):
        """
        Initialize match selector.

        Args:
            catalog: Scenario catalog (read-only)
            weight_store: Confidence weight source
            ranker: Distance ranker (default: global ranker with the default weight table)
            fallback_weight: Weight used when a lookup fails (default: MATCHER_FALLBACK_WEIGHT)
            weight_timeout_seconds: Per-lookup timeout (default: WEIGHT_STORE_TIMEOUT_SECONDS)
        """
        self.catalog = catalog
        self.weight_store = weight_store
        self.ranker = ranker or distance_ranker
        self.fallback_weight = (
            settings.matcher_fallback_weight if fallback_weight is None else fallback_weight
        )
        self.weight_timeout_seconds = (
            settings.weight_store_timeout_seconds if weight_timeout_seconds is None else weight_timeout_seconds
        )

    async def _fetch_weight(self, scenario_id: str) -> Tuple[float, bool]:
        """Return (weight, is_fallback) for one scenario."""
        try:
            weight = await asyncio.wait_for(
                self.weight_store.get_weight(scenario_id),
                timeout=self.weight_timeout_seconds,
            )
            return float(weight), False
        except asyncio.TimeoutError:
            logger.warning(
                "Confidence weight lookup timed out, using fallback weight",
                scenario_id=scenario_id,
                timeout=self.weight_timeout_seconds,
                fallback_weight=self.fallback_weight,
            )
        except Exception as e:
            logger.warning(
                "Confidence weight lookup failed, using fallback weight",
                scenario_id=scenario_id,
                error=str(e),
                error_type=type(e).__name__,
                fallback_weight=self.fallback_weight,
            )
        return self.fallback_weight, True

    async def find_matches(self, query: FeatureVector, top_k: Optional[int] = None) -> List[RankedMatch]:
        """
        Rank catalog scenarios by distance to the query.

        Args:
            query: Encoded observation
            top_k: Number of results (default: MATCHER_DEFAULT_TOP_K), clamped to [0, catalog size]

        Returns:
            min(top_k, catalog size) matches, ascending by distance; ties keep catalog order
        """
        if top_k is None:
            top_k = settings.matcher_default_top_k
        scenarios = self.catalog.all_scenarios()
        limit = clamp_top_k(top_k, len(scenarios))
        if limit == 0:
            return []

        scores = [self.ranker.score(query, scenario.features) for scenario in scenarios]
        weights = await asyncio.gather(*(self._fetch_weight(scenario.id) for scenario in scenarios))

        ranked = [
            RankedMatch(
                scenario=scenario,
                distance=distance,
                similarity=similarity_from_distance(distance),
                match_type=match_type,
                confidence_weight=weight,
                weight_is_fallback=is_fallback,
            )
            for scenario, (distance, match_type), (weight, is_fallback) in zip(scenarios, scores, weights)
        ]
        # sorted() is stable: equal distances keep catalog order
        ranked = sorted(ranked, key=lambda m: m.distance)[:limit]

        logger.debug(
            "Scenario matches ranked",
            catalog_size=len(scenarios),
            top_k=limit,
            best_scenario_id=ranked[0].scenario.id,
            best_distance=ranked[0].distance,
            fallback_weights=sum(1 for _, is_fallback in weights if is_fallback),
        )
        return ranked

    async def find_best_match(self, query: FeatureVector) -> Optional[MatchResult]:
        """Closest scenario, or None when the catalog is empty."""
        matches = await self.find_matches(query, 1)
        if not matches:
            return None
        return matches[0].to_result()
