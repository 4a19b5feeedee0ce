"""Matching services."""

from .distance_ranker import FEATURE_WEIGHTS, DistanceRanker, FieldWeight, distance_ranker, similarity_from_distance
from .feature_encoder import decode_vector, encode_input
from .match_selector import MatchSelector, clamp_top_k
from .scenario_catalog import ScenarioCatalog, ScenarioCatalogLoader, get_category_label, load_catalog
from .weight_store import (
    HttpWeightStore,
    InMemoryWeightStore,
    PostgresWeightStore,
    WeightStore,
    create_weight_store,
)

__all__ = [
    "FEATURE_WEIGHTS",
    "DistanceRanker",
    "FieldWeight",
    "distance_ranker",
    "similarity_from_distance",
    "decode_vector",
    "encode_input",
    "MatchSelector",
    "clamp_top_k",
    "ScenarioCatalog",
    "ScenarioCatalogLoader",
    "get_category_label",
    "load_catalog",
    "HttpWeightStore",
    "InMemoryWeightStore",
    "PostgresWeightStore",
    "WeightStore",
    "create_weight_store",
]
