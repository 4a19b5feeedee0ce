"""
Confidence weight stores.

A weight store returns the confidence weight the learning process keeps for
each scenario. Weights are opaque floats; nothing here clamps them.
Scenarios the store has no record of get the store's default weight.
"""

from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional
from urllib.parse import quote

import httpx

from ..config.exceptions import ConfigurationError, DatabaseError, WeightStoreError
from ..config.logging import get_logger
from ..config.settings import Settings, settings as default_settings
from ..database.repositories.scenario_weight_repo import ScenarioWeightRepository

logger = get_logger(__name__)


class WeightStore(ABC):
    """Read contract for confidence weights."""

    name: str = "abstract"

    def __init__(self, default_weight: float = 1.0):
        """
        Initialize weight store.

        Args:
            default_weight: Weight returned for scenarios with no recorded history
        """
        self.default_weight = default_weight

    @abstractmethod
    async def get_weight(self, scenario_id: str) -> float:
        """
        Get the confidence weight for a scenario.

        Raises:
            WeightStoreError: If the lookup fails
        """
        pass


class InMemoryWeightStore(WeightStore):
    """Weights held in a dict."""

    name = "memory"

    def __init__(self, weights: Optional[Mapping[str, float]] = None, default_weight: float = 1.0):
        super().__init__(default_weight=default_weight)
        self._weights: Dict[str, float] = dict(weights or {})

    async def get_weight(self, scenario_id: str) -> float:
        return self._weights.get(scenario_id, self.default_weight)


class PostgresWeightStore(WeightStore):
    """Weights read from the scenario_weights table."""

    name = "postgres"

    def __init__(self, repository: Optional[ScenarioWeightRepository] = None, default_weight: float = 1.0):
        super().__init__(default_weight=default_weight)
        self._repository = repository or ScenarioWeightRepository()

    async def get_weight(self, scenario_id: str) -> float:
        try:
            weight = await self._repository.get_weight(scenario_id)
        except DatabaseError as e:
            raise WeightStoreError(f"Weight lookup failed for scenario '{scenario_id}': {e}") from e
        return self.default_weight if weight is None else weight


class HttpWeightStore(WeightStore):
    """Weights served by the learning service REST API."""

    name = "http"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 2.0,
        default_weight: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP weight store.

        Args:
            base_url: Learning service base URL
            api_key: Value for the X-API-Key header
            timeout: Request timeout in seconds
            default_weight: Weight returned when the service has no record (404)
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(default_weight=default_weight)
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def get_weight(self, scenario_id: str) -> float:
        url = f"{self.base_url}/weights/{quote(scenario_id, safe='')}"
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, headers=headers)
                if response.status_code == 404:
                    logger.debug("No weight recorded for scenario", scenario_id=scenario_id)
                    return self.default_weight
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise WeightStoreError(f"Weight lookup timed out for scenario '{scenario_id}'") from e
        except httpx.HTTPError as e:
            raise WeightStoreError(f"Weight lookup failed for scenario '{scenario_id}': {e}") from e
        except ValueError as e:
            raise WeightStoreError(f"Invalid weight response for scenario '{scenario_id}': {e}") from e

        try:
            return float(data["weight"])
        except (KeyError, TypeError, ValueError) as e:
            raise WeightStoreError(f"Invalid weight response for scenario '{scenario_id}': {data!r}") from e


def create_weight_store(config: Optional[Settings] = None) -> WeightStore:
    """
    Build the weight store selected by WEIGHT_STORE_BACKEND.

    Raises:
        ConfigurationError: If the backend name is unknown
    """
    config = config or default_settings
    backend = config.weight_store_backend
    default_weight = config.weight_store_default_weight

    if backend == "memory":
        store: WeightStore = InMemoryWeightStore(default_weight=default_weight)
    elif backend == "postgres":
        store = PostgresWeightStore(default_weight=default_weight)
    elif backend == "http":
        store = HttpWeightStore(
            base_url=config.weight_store_url,
            api_key=config.weight_store_api_key,
            timeout=config.weight_store_timeout_seconds,
            default_weight=default_weight,
        )
    else:
        raise ConfigurationError(f"Unknown weight store backend: {backend}")

    logger.info("Weight store created", backend=store.name, default_weight=default_weight)
    return store
