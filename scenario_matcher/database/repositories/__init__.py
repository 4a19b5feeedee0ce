"""Database repositories package."""

from .scenario_weight_repo import ScenarioWeightRepository

__all__ = [
    "ScenarioWeightRepository",
]
