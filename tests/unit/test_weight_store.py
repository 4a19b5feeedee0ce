"""
Unit tests for confidence weight stores and the weight repository.
"""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from scenario_matcher.config.exceptions import (
    DatabaseConnectionError,
    DatabaseQueryError,
    WeightStoreError,
)
from scenario_matcher.config.settings import Settings
from scenario_matcher.database.repositories.scenario_weight_repo import ScenarioWeightRepository
from scenario_matcher.services.weight_store import (
    HttpWeightStore,
    InMemoryWeightStore,
    PostgresWeightStore,
    create_weight_store,
)


def http_store(handler, **kwargs) -> HttpWeightStore:
    return HttpWeightStore(
        base_url="http://learning-service:4900/",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestInMemoryWeightStore:
    """Tests for the in-memory weight store."""

    @pytest.mark.asyncio
    async def test_returns_recorded_weight(self):
        """Test recorded weights are returned as stored."""
        store = InMemoryWeightStore({"vetted_01": 0.72, "whipsaw_01": 1.4})

        assert await store.get_weight("vetted_01") == 0.72
        assert await store.get_weight("whipsaw_01") == 1.4

    @pytest.mark.asyncio
    async def test_returns_default_for_unknown_scenario(self):
        """Test scenarios without history get the default weight."""
        store = InMemoryWeightStore(default_weight=0.25)

        assert await store.get_weight("vetted_01") == 0.25

    def test_store_copies_weights(self):
        """Test later changes to the source mapping are not seen."""
        weights = {"a": 1.0}
        store = InMemoryWeightStore(weights)
        weights["a"] = 2.0

        assert store._weights == {"a": 1.0}


class TestPostgresWeightStore:
    """Tests for the PostgreSQL-backed weight store."""

    @pytest.mark.asyncio
    async def test_returns_repository_weight(self):
        """Test the repository value is returned."""
        repository = AsyncMock(spec=ScenarioWeightRepository)
        repository.get_weight.return_value = 0.6
        store = PostgresWeightStore(repository=repository)

        assert await store.get_weight("vetted_01") == 0.6
        repository.get_weight.assert_awaited_once_with("vetted_01")

    @pytest.mark.asyncio
    async def test_missing_row_returns_default(self):
        """Test a scenario without a row gets the default weight."""
        repository = AsyncMock(spec=ScenarioWeightRepository)
        repository.get_weight.return_value = None
        store = PostgresWeightStore(repository=repository, default_weight=0.5)

        assert await store.get_weight("vetted_01") == 0.5

    @pytest.mark.asyncio
    async def test_database_error_becomes_weight_store_error(self):
        """Test database failures surface as WeightStoreError."""
        repository = AsyncMock(spec=ScenarioWeightRepository)
        repository.get_weight.side_effect = DatabaseQueryError("boom")
        store = PostgresWeightStore(repository=repository)

        with pytest.raises(WeightStoreError, match="vetted_01"):
            await store.get_weight("vetted_01")


class TestScenarioWeightRepository:
    """Tests for the scenario weight repository."""

    @pytest.mark.asyncio
    async def test_get_weight_queries_by_scenario_id(self):
        """Test the weight query and float conversion."""
        with patch("scenario_matcher.database.base.db_pool") as mock_pool:
            mock_pool.fetchval = AsyncMock(return_value=1)
            repository = ScenarioWeightRepository()

            weight = await repository.get_weight("pdh_break_02")

        assert weight == 1.0
        assert isinstance(weight, float)
        mock_pool.fetchval.assert_awaited_once_with(
            "SELECT weight FROM scenario_weights WHERE scenario_id = $1", "pdh_break_02"
        )

    @pytest.mark.asyncio
    async def test_get_weight_missing_row(self):
        """Test a missing row returns None."""
        with patch("scenario_matcher.database.base.db_pool") as mock_pool:
            mock_pool.fetchval = AsyncMock(return_value=None)

            assert await ScenarioWeightRepository().get_weight("pdh_break_02") is None

    @pytest.mark.asyncio
    async def test_database_errors_propagate(self):
        """Test pool errors are re-raised unchanged."""
        with patch("scenario_matcher.database.base.db_pool") as mock_pool:
            mock_pool.fetchval = AsyncMock(side_effect=DatabaseConnectionError("down"))

            with pytest.raises(DatabaseConnectionError):
                await ScenarioWeightRepository().get_weight("pdh_break_02")

    @pytest.mark.asyncio
    async def test_unexpected_errors_become_query_errors(self):
        """Test other failures are wrapped as DatabaseQueryError."""
        with patch("scenario_matcher.database.base.db_pool") as mock_pool:
            mock_pool.fetchval = AsyncMock(side_effect=RuntimeError("bad"))

            with pytest.raises(DatabaseQueryError):
                await ScenarioWeightRepository().get_weight("pdh_break_02")


class TestHttpWeightStore:
    """Tests for the HTTP weight store."""

    @pytest.mark.asyncio
    async def test_returns_weight_from_response(self):
        """Test a 200 response yields its weight."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["api_key"] = request.headers.get("X-API-Key")
            return httpx.Response(200, json={"scenario_id": "vetted_01", "weight": 0.83})

        store = http_store(handler, api_key="learning-key")

        assert await store.get_weight("vetted_01") == 0.83
        assert seen["url"] == "http://learning-service:4900/weights/vetted_01"
        assert seen["api_key"] == "learning-key"

    @pytest.mark.asyncio
    async def test_scenario_id_is_escaped_in_path(self):
        """Test ids with URL delimiters stay inside one path segment."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["raw_path"] = request.url.raw_path
            seen["query"] = request.url.query
            return httpx.Response(200, json={"weight": 0.1})

        assert await http_store(handler).get_weight("pdh/break?x=1#2") == 0.1
        assert seen["raw_path"] == b"/weights/pdh%2Fbreak%3Fx%3D1%232"
        assert seen["query"] == b""

    @pytest.mark.asyncio
    async def test_no_api_key_header_without_key(self):
        """Test the X-API-Key header is omitted when no key is configured."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["has_key"] = "X-API-Key" in request.headers
            return httpx.Response(200, json={"weight": "1.5"})

        assert await http_store(handler).get_weight("vetted_01") == 1.5
        assert seen["has_key"] is False

    @pytest.mark.asyncio
    async def test_not_found_returns_default(self):
        """Test a 404 means no history and yields the default weight."""
        store = http_store(lambda request: httpx.Response(404), default_weight=0.4)

        assert await store.get_weight("vetted_01") == 0.4

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        """Test a 5xx response raises WeightStoreError."""
        store = http_store(lambda request: httpx.Response(500, text="oops"))

        with pytest.raises(WeightStoreError):
            await store.get_weight("vetted_01")

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        """Test a non-JSON body raises WeightStoreError."""
        store = http_store(lambda request: httpx.Response(200, text="not json"))

        with pytest.raises(WeightStoreError, match="Invalid weight response"):
            await store.get_weight("vetted_01")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"weight": None}, {"weight": "high"}, ["weight"]])
    async def test_invalid_payload_raises(self, payload):
        """Test a response without a numeric weight raises WeightStoreError."""
        store = http_store(lambda request: httpx.Response(200, content=json.dumps(payload)))

        with pytest.raises(WeightStoreError, match="Invalid weight response"):
            await store.get_weight("vetted_01")

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        """Test a transport timeout raises WeightStoreError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(WeightStoreError, match="timed out"):
            await http_store(handler).get_weight("vetted_01")

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        """Test a connection failure raises WeightStoreError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(WeightStoreError):
            await http_store(handler).get_weight("vetted_01")


class TestCreateWeightStore:
    """Tests for weight store selection from settings."""

    def make_settings(self, **env) -> Settings:
        return Settings(SCENARIO_MATCHER_API_KEY="test-api-key", **env)

    def test_memory_backend(self):
        """Test the memory backend is built with the configured default weight."""
        store = create_weight_store(self.make_settings(WEIGHT_STORE_BACKEND="memory", WEIGHT_STORE_DEFAULT_WEIGHT=0.3))

        assert isinstance(store, InMemoryWeightStore)
        assert store.default_weight == 0.3

    def test_postgres_backend(self):
        """Test the postgres backend."""
        store = create_weight_store(self.make_settings(WEIGHT_STORE_BACKEND="postgres"))

        assert isinstance(store, PostgresWeightStore)
        assert store.name == "postgres"

    def test_http_backend(self):
        """Test the http backend takes URL, key and timeout from settings."""
        store = create_weight_store(
            self.make_settings(
                WEIGHT_STORE_BACKEND="HTTP",
                WEIGHT_STORE_URL="http://weights.local:9000/",
                WEIGHT_STORE_API_KEY="secret",
                WEIGHT_STORE_TIMEOUT_SECONDS=0.5,
            )
        )

        assert isinstance(store, HttpWeightStore)
        assert store.base_url == "http://weights.local:9000"
        assert store.api_key == "secret"
        assert store.timeout == 0.5

    def test_defaults_to_global_settings(self):
        """Test the global settings are used when none are passed."""
        assert isinstance(create_weight_store(), InMemoryWeightStore)
