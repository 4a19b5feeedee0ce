"""
Distance ranker.

Weighted nearest-neighbour distance between two feature vectors.

For each field the absolute difference is normalized by the largest possible
difference in that field's domain, multiplied by the field's importance and
accumulated. The distance is the importance-weighted mean of the normalized
differences: 0 means identical, 1 means maximally different on every field.

Earlier candles and directional breaks identify a scenario better than close
behaviour nuances, so they carry more importance.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Mapping, Optional, Tuple

from ..config.exceptions import ConfigurationError
from ..models.feature_vector import FEATURE_DOMAINS, FEATURE_FIELDS, FeatureVector
from ..models.match import MatchType

SIMILARITY_QUANTUM = Decimal("0.0001")


@dataclass(frozen=True)
class FieldWeight:
    """Importance and domain size of one feature field."""

    importance: float
    domain_size: int

    @property
    def max_diff(self) -> int:
        """Largest possible absolute difference between two values of the field."""
        return self.domain_size - 1


FEATURE_WEIGHTS: Dict[str, FieldWeight] = {
    "c1_context": FieldWeight(importance=2.5, domain_size=FEATURE_DOMAINS["c1_context"]),
    "c1_behavior": FieldWeight(importance=1.5, domain_size=FEATURE_DOMAINS["c1_behavior"]),
    "c2_action": FieldWeight(importance=2.0, domain_size=FEATURE_DOMAINS["c2_action"]),
    "c2_close": FieldWeight(importance=1.5, domain_size=FEATURE_DOMAINS["c2_close"]),
    "c3_action": FieldWeight(importance=2.0, domain_size=FEATURE_DOMAINS["c3_action"]),
    "c3_close": FieldWeight(importance=1.5, domain_size=FEATURE_DOMAINS["c3_close"]),
    "c4_action": FieldWeight(importance=1.5, domain_size=FEATURE_DOMAINS["c4_action"]),
    "c4_close": FieldWeight(importance=1.0, domain_size=FEATURE_DOMAINS["c4_close"]),
}


def similarity_from_distance(distance: float) -> float:
    """
    Convert a distance into the similarity reported to callers.

    Rounds 1 - distance to 4 decimal places, halves away from zero.
    """
    return float(Decimal(str(1.0 - distance)).quantize(SIMILARITY_QUANTUM, rounding=ROUND_HALF_UP))


class DistanceRanker:
    """Scores a query vector against candidate vectors."""

    def __init__(self, weights: Optional[Mapping[str, FieldWeight]] = None):
        """
        Initialize distance ranker.

        Args:
            weights: Per-field weighting table (default: FEATURE_WEIGHTS)

        Raises:
            ConfigurationError: If the table does not cover exactly the feature fields
                or contains a non-positive importance or a wrong domain size
        """
        table = dict(weights if weights is not None else FEATURE_WEIGHTS)

        if set(table) != set(FEATURE_FIELDS):
            missing = sorted(set(FEATURE_FIELDS) - set(table))
            unknown = sorted(set(table) - set(FEATURE_FIELDS))
            raise ConfigurationError(f"Feature weight table mismatch: missing={missing}, unknown={unknown}")

        for name, weight in table.items():
            if weight.importance <= 0:
                raise ConfigurationError(f"Importance for '{name}' must be positive, got {weight.importance}")
            if weight.domain_size != FEATURE_DOMAINS[name]:
                raise ConfigurationError(
                    f"Domain size for '{name}' must be {FEATURE_DOMAINS[name]}, got {weight.domain_size}"
                )

        # Both sums run in FEATURE_FIELDS order so that distance(a, b) <= 1 holds exactly
        self._field_weights: Tuple[FieldWeight, ...] = tuple(table[name] for name in FEATURE_FIELDS)
        self._total_importance = sum(w.importance for w in self._field_weights)

    def distance(self, query: FeatureVector, candidate: FeatureVector) -> float:
        """
        Weighted, normalized distance between two vectors.

        Returns:
            Distance in [0, 1]
        """
        total = 0.0
        for q, c, weight in zip(query.as_tuple(), candidate.as_tuple(), self._field_weights):
            total += (abs(q - c) / weight.max_diff) * weight.importance
        return total / self._total_importance

    def score(self, query: FeatureVector, candidate: FeatureVector) -> Tuple[float, MatchType]:
        """
        Score a candidate against the query.

        Returns:
            Tuple of (distance, match type); exact only when distance is 0
        """
        distance = self.distance(query, candidate)
        match_type = MatchType.EXACT if distance == 0 else MatchType.INFERRED
        return distance, match_type


# Global ranker with the default weighting table
distance_ranker = DistanceRanker()
