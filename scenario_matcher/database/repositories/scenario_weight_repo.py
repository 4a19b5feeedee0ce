"""
Scenario weight database repository.

Read access to the scenario_weights table maintained by the learning process:

    scenario_id  TEXT PRIMARY KEY
    weight       DOUBLE PRECISION NOT NULL
    updated_at   TIMESTAMPTZ NOT NULL
"""

from typing import Optional

from ..base import BaseRepository
from ...config.logging import get_logger

logger = get_logger(__name__)


class ScenarioWeightRepository(BaseRepository):
    """Repository for scenario_weights table operations."""

    @property
    def table_name(self) -> str:
        """Return the table name."""
        return "scenario_weights"

    async def get_weight(self, scenario_id: str) -> Optional[float]:
        """
        Get the confidence weight of a scenario.

        Returns:
            Weight, or None if the scenario has no row yet

        Raises:
            DatabaseError: If the lookup fails
        """
        value = await self._fetch_column("weight", "scenario_id", scenario_id)
        if value is None:
            logger.debug("No weight recorded for scenario", scenario_id=scenario_id)
            return None
        return float(value)
