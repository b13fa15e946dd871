"""Unit tests for mem_bridge.tools.

Tests cover:
1. Search, timeline and batch fetch request shapes
2. Parameter validation and error responses
3. Worker unavailable / HTTP failure degradation
4. Tools never touch session state
5. Tool definitions
"""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode

import httpx
import pytest

from mem_bridge.client import WorkerClient
from mem_bridge.core.errors import ValidationError
from mem_bridge.core.models import SearchParams, TimelineParams
from mem_bridge.tools import (
    GET_OBSERVATIONS_TOOL,
    SEARCH_TOOL,
    TIMELINE_TOOL,
    TOOL_DEFINITIONS,
    QueryTools,
)
from mem_bridge.tools.query import (
    BATCH_PATH,
    SEARCH_PATH,
    TIMELINE_PATH,
    UNAVAILABLE_MESSAGE,
    validate_params,
)
from tests.conftest import FakeWorker, json_body


@pytest.fixture
def tools(client: WorkerClient) -> QueryTools:
    return QueryTools(client)


# =============================================================================
# search
# =============================================================================


@pytest.mark.unit
class TestSearch:
    @pytest.mark.asyncio
    async def test_returns_decoded_json(self, tools: QueryTools, worker: FakeWorker) -> None:
        payload = {"results": [{"id": 1, "title": "auth fix"}]}
        worker.route("GET", SEARCH_PATH, httpx.Response(200, json=payload))

        assert await tools.search({"query": "auth"}) == payload

    @pytest.mark.asyncio
    async def test_query_string(self, tools: QueryTools, worker: FakeWorker) -> None:
        worker.route("GET", SEARCH_PATH, httpx.Response(200, json={}))

        await tools.search(
            {
                "query": "auth bug",
                "limit": 5,
                "project": "api",
                "type": "observation",
                "dateStart": "2024-01-01",
                "dateEnd": "2024-02-01T00:00:00Z",
            }
        )

        params = dict(worker.calls(SEARCH_PATH)[0].url.params)
        assert params == {
            "query": "auth bug",
            "limit": "5",
            "project": "api",
            "type": "observation",
            "dateStart": "2024-01-01",
            "dateEnd": "2024-02-01T00:00:00Z",
        }

    @pytest.mark.asyncio
    async def test_default_limit_and_omitted_fields(
        self, tools: QueryTools, worker: FakeWorker
    ) -> None:
        worker.route("GET", SEARCH_PATH, httpx.Response(200, json={}))
        await tools.search(query="x", project=None)

        params = dict(worker.calls(SEARCH_PATH)[0].url.params)
        assert params == {"query": "x", "limit": "20"}

    @pytest.mark.asyncio
    async def test_kwargs_override_params(self, tools: QueryTools, worker: FakeWorker) -> None:
        worker.route("GET", SEARCH_PATH, httpx.Response(200, json={}))
        await tools.search({"query": "a", "limit": 3}, limit=9)
        assert worker.calls(SEARCH_PATH)[0].url.params["limit"] == "9"

    @pytest.mark.asyncio
    async def test_invalid_type(self, tools: QueryTools, worker: FakeWorker) -> None:
        result = await tools.search({"type": "everything"})

        assert result["error"].startswith("Invalid parameters: type:")
        assert worker.calls(SEARCH_PATH) == []

    @pytest.mark.asyncio
    async def test_invalid_date(self, tools: QueryTools, worker: FakeWorker) -> None:
        result = await tools.search({"dateStart": "last tuesday"})
        assert "dateStart" in result["error"]

    @pytest.mark.asyncio
    async def test_unknown_parameter(self, tools: QueryTools) -> None:
        result = await tools.search({"qurey": "typo"})
        assert "qurey" in result["error"]

    @pytest.mark.asyncio
    async def test_non_object_params(self, tools: QueryTools) -> None:
        result = await tools.search(["auth"])  # type: ignore[arg-type]
        assert result == {"error": "Invalid parameters: expected an object"}

    @pytest.mark.asyncio
    async def test_http_failure(self, tools: QueryTools, worker: FakeWorker) -> None:
        worker.route("GET", SEARCH_PATH, httpx.Response(500))
        assert await tools.search({"query": "x"}) == {"error": "Search failed: 500"}

    @pytest.mark.asyncio
    async def test_transport_failure(self, tools: QueryTools, worker: FakeWorker) -> None:
        worker.route("GET", SEARCH_PATH, httpx.ConnectError("refused"))
        result = await tools.search({"query": "x"})
        assert result["error"].startswith("Search error: ")

    @pytest.mark.asyncio
    async def test_malformed_response(self, tools: QueryTools, worker: FakeWorker) -> None:
        worker.route("GET", SEARCH_PATH, httpx.Response(200, text="<html>"))
        result = await tools.search({"query": "x"})
        assert result["error"].startswith("Search error: ")


# =============================================================================
# timeline
# =============================================================================


@pytest.mark.unit
class TestTimeline:
    @pytest.mark.asyncio
    async def test_anchor(self, tools: QueryTools, worker: FakeWorker) -> None:
        worker.route("GET", TIMELINE_PATH, httpx.Response(200, json={"items": []}))

        result = await tools.timeline({"anchor": 42, "depth_before": 1})

        assert result == {"items": []}
        params = dict(worker.calls(TIMELINE_PATH)[0].url.params)
        assert params == {"anchor": "42", "depth_before": "1", "depth_after": "3"}

    @pytest.mark.asyncio
    async def test_query_instead_of_anchor(self, tools: QueryTools, worker: FakeWorker) -> None:
        worker.route("GET", TIMELINE_PATH, httpx.Response(200, json={}))
        await tools.timeline(query="login", project="api")

        params = dict(worker.calls(TIMELINE_PATH)[0].url.params)
        assert params["query"] == "login"
        assert params["project"] == "api"
        assert "anchor" not in params

    @pytest.mark.asyncio
    async def test_negative_depth_rejected(self, tools: QueryTools, worker: FakeWorker) -> None:
        result = await tools.timeline({"anchor": 1, "depth_after": -1})
        assert result["error"].startswith("Invalid parameters: depth_after:")
        assert worker.calls(TIMELINE_PATH) == []

    @pytest.mark.asyncio
    async def test_http_failure(self, tools: QueryTools, worker: FakeWorker) -> None:
        worker.route("GET", TIMELINE_PATH, httpx.Response(404))
        assert await tools.timeline({"anchor": 1}) == {"error": "Timeline failed: 404"}


# =============================================================================
# get_observations
# =============================================================================


@pytest.mark.unit
class TestGetObservations:
    @pytest.mark.asyncio
    async def test_posts_exact_ids(self, tools: QueryTools, worker: FakeWorker) -> None:
        records = [{"id": 3}, {"id": 1}]
        worker.route("POST", BATCH_PATH, httpx.Response(200, json=records))

        assert await tools.get_observations({"ids": [3, 1]}) == records
        assert json_body(worker.calls(BATCH_PATH)[0]) == {"ids": [3, 1]}

    @pytest.mark.asyncio
    async def test_ids_required(self, tools: QueryTools, worker: FakeWorker) -> None:
        result = await tools.get_observations({})
        assert result["error"].startswith("Invalid parameters: ids:")
        assert worker.calls(BATCH_PATH) == []

    @pytest.mark.asyncio
    async def test_non_integer_ids_rejected(self, tools: QueryTools) -> None:
        result = await tools.get_observations({"ids": ["abc"]})
        assert "ids.0" in result["error"]

    @pytest.mark.asyncio
    async def test_http_failure(self, tools: QueryTools, worker: FakeWorker) -> None:
        worker.route("POST", BATCH_PATH, httpx.Response(500))
        assert await tools.get_observations({"ids": [1]}) == {"error": "Fetch failed: 500"}


# =============================================================================
# Shared behavior
# =============================================================================


@pytest.mark.unit
class TestUnavailableWorker:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, params",
        [
            ("search", {"query": "x"}),
            ("timeline", {"anchor": 1}),
            ("get_observations", {"ids": [1]}),
        ],
    )
    async def test_returns_error(
        self, tools: QueryTools, worker: FakeWorker, method: str, params: dict
    ) -> None:
        worker.ready = False
        result = await getattr(tools, method)(params)

        assert result == {"error": UNAVAILABLE_MESSAGE}
        assert worker.non_readiness_calls() == []

    @pytest.mark.asyncio
    async def test_checked_before_validation(self, tools: QueryTools, worker: FakeWorker) -> None:
        worker.ready = False
        assert await tools.get_observations({}) == {"error": UNAVAILABLE_MESSAGE}


@pytest.mark.unit
class TestValidateParams:
    def test_returns_model(self) -> None:
        params = validate_params(SearchParams, {"query": "a", "dateStart": None})
        assert params.query == "a"
        assert params.date_start is None

    def test_raises_bridge_validation_error(self) -> None:
        with pytest.raises(ValidationError, match="limit"):
            validate_params(SearchParams, {"limit": 0})

    def test_query_params_round_trip(self) -> None:
        params = validate_params(
            SearchParams,
            {"query": "a&b=c ü", "project": "my proj", "dateStart": "2024-03-01"},
        )
        encoded = urlencode(params.to_query_params())
        assert dict(parse_qsl(encoded)) == params.to_query_params()
        assert SearchParams.model_validate(dict(parse_qsl(encoded))) == params

    def test_timeline_defaults(self) -> None:
        params = validate_params(TimelineParams, None)
        assert params.to_query_params() == {"depth_before": "3", "depth_after": "3"}


@pytest.mark.unit
class TestToolDefinitions:
    def test_names(self) -> None:
        assert set(TOOL_DEFINITIONS) == {SEARCH_TOOL, TIMELINE_TOOL, GET_OBSERVATIONS_TOOL}

    def test_schemas_are_objects(self) -> None:
        for definition in TOOL_DEFINITIONS.values():
            assert definition["description"]
            assert definition["parameters"]["type"] == "object"

    def test_ids_required(self) -> None:
        assert TOOL_DEFINITIONS[GET_OBSERVATIONS_TOOL]["parameters"]["required"] == ["ids"]
