"""Data models."""

from .feature_vector import (
    FEATURE_DOMAINS,
    FEATURE_FIELDS,
    C1Behavior,
    C1Context,
    CandleAction,
    CandleClose,
    FeatureVector,
    Observation,
)
from .match import MatchResult, MatchType, RankedMatch
from .scenario import Bias, CandleConditions, Category, Scenario, ScenarioCatalogDocument

__all__ = [
    "FEATURE_DOMAINS",
    "FEATURE_FIELDS",
    "C1Behavior",
    "C1Context",
    "CandleAction",
    "CandleClose",
    "FeatureVector",
    "Observation",
    "MatchResult",
    "MatchType",
    "RankedMatch",
    "Bias",
    "CandleConditions",
    "Category",
    "Scenario",
    "ScenarioCatalogDocument",
]
