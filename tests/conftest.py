"""
Pytest configuration and fixtures.
"""

import os

# Settings are instantiated at import time; required values must exist first
os.environ.setdefault("SCENARIO_MATCHER_API_KEY", "test-api-key")
os.environ["WEIGHT_STORE_BACKEND"] = "memory"
os.environ.pop("SCENARIO_CATALOG_PATH", None)

import pytest

from scenario_matcher.models.feature_vector import FeatureVector
from scenario_matcher.models.scenario import Bias, CandleConditions, Category, Scenario
from scenario_matcher.services.scenario_catalog import ScenarioCatalog

# Encoding of the default form input:
# inside_pdr / ranging / breaks_low+inside / breaks_high+inside / inside_bar+inside
BASE_FEATURES = {
    "c1_context": 0,
    "c1_behavior": 0,
    "c2_action": 2,
    "c2_close": 0,
    "c3_action": 1,
    "c3_close": 0,
    "c4_action": 0,
    "c4_close": 0,
}


def make_vector(**overrides) -> FeatureVector:
    """Base feature vector with some fields replaced."""
    return FeatureVector(**{**BASE_FEATURES, **overrides})


def make_scenario(scenario_id: str, features: FeatureVector, **kwargs) -> Scenario:
    """Minimal scenario for tests."""
    defaults = {
        "label": scenario_id.upper(),
        "category": Category.VETTED,
        "conditions": CandleConditions(c1="c1", c2="c2", c3="c3", c4="c4"),
        "entry": "entry",
        "bias": Bias.BULLISH,
        "target": "target",
    }
    defaults.update(kwargs)
    return Scenario(id=scenario_id, features=features, **defaults)


@pytest.fixture
def base_vector() -> FeatureVector:
    return make_vector()


@pytest.fixture
def single_scenario_catalog(base_vector) -> ScenarioCatalog:
    """Catalog with one scenario whose features equal base_vector."""
    return ScenarioCatalog([make_scenario("only", base_vector)], version="test")


@pytest.fixture
def small_catalog() -> ScenarioCatalog:
    """
    Five scenarios at known distances from base_vector.

    tie_a and tie_b are equally distant (one 3-valued field of importance 1.5
    moved by one step), listed in that order.
    """
    return ScenarioCatalog(
        [
            make_scenario("far", make_vector(c1_context=2, c1_behavior=2), category=Category.PDL_BREAK, bias=Bias.BEARISH),
            make_scenario("tie_a", make_vector(c2_close=1), category=Category.INSIDE_PDR),
            make_scenario("exact", make_vector()),
            make_scenario("tie_b", make_vector(c1_behavior=1), category=Category.INSIDE_PDR),
            make_scenario("near", make_vector(c4_close=1), category=Category.WHIPSAW, bias=Bias.MIXED),
        ],
        version="test",
    )
