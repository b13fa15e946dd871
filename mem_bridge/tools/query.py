"""Query tool facade: search, timeline and batch fetch.

Each call is independent and stateless:

    liveness gate -> validate params -> worker call -> decoded JSON

Failures come back as ``{"error": "..."}`` so the calling agent can reason
about them.  Nothing here raises or touches session state.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError

from mem_bridge.client import WorkerClient
from mem_bridge.core.errors import ValidationError, WorkerUnavailableError
from mem_bridge.core.models import BatchFetchParams, SearchParams, TimelineParams, ToolParams
from mem_bridge.core.response_types import ToolErrorResponse
from mem_bridge.core.results import Failure, WorkerResult

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/search"
TIMELINE_PATH = "/api/timeline"
BATCH_PATH = "/api/observations/batch"

UNAVAILABLE_MESSAGE = str(WorkerUnavailableError())

ParamsT = TypeVar("ParamsT", bound=ToolParams)


def tool_error(message: str) -> ToolErrorResponse:
    return {"error": message}


def validate_params(
    model_cls: type[ParamsT],
    params: Mapping[str, Any] | None,
    overrides: Mapping[str, Any] | None = None,
) -> ParamsT:
    """Build tool parameters from agent-supplied values.

    Explicit ``None`` values are treated as omitted.

    Raises:
        ValidationError: If *params* is not an object or a value is invalid.
    """
    if params is not None and not isinstance(params, Mapping):
        raise ValidationError("Invalid parameters: expected an object")

    merged = {**(params or {}), **(overrides or {})}
    cleaned = {key: value for key, value in merged.items() if value is not None}
    try:
        return model_cls.model_validate(cleaned)
    except PydanticValidationError as exc:
        problems = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err["loc"]) or "params"
            problems.append(f"{location}: {err['msg']}")
        raise ValidationError("Invalid parameters: " + "; ".join(problems)) from exc


def _failure_message(label: str, failure: Failure) -> str:
    status = getattr(failure.error, "status_code", None)
    if status is not None:
        return f"{label} failed: {status}"
    return f"{label} error: {failure.message}"


class QueryTools:
    """Read-only memory tools backed by the worker."""

    def __init__(self, client: WorkerClient) -> None:
        self._client = client

    async def search(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Any:
        """Search memory for an index of matching records."""
        return await self._run("Search", SearchParams, SEARCH_PATH, params, kwargs)

    async def timeline(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Any:
        """Chronological context around an anchor observation."""
        return await self._run("Timeline", TimelineParams, TIMELINE_PATH, params, kwargs)

    async def get_observations(
        self, params: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> Any:
        """Full detail for exactly the requested observation IDs."""
        return await self._run("Fetch", BatchFetchParams, BATCH_PATH, params, kwargs)

    # ------------------------------------------------------------------

    async def _call(self, path: str, model: ToolParams) -> WorkerResult:
        if isinstance(model, BatchFetchParams):
            return await self._client.post_json(path, model.to_body())
        return await self._client.get_json(path, model.to_query_params())

    async def _run(
        self,
        label: str,
        model_cls: type[ToolParams],
        path: str,
        params: Mapping[str, Any] | None,
        kwargs: dict[str, Any],
    ) -> Any:
        if not await self._client.ensure_worker():
            logger.debug("%s skipped: worker unavailable", label)
            return tool_error(UNAVAILABLE_MESSAGE)

        try:
            model = validate_params(model_cls, params, kwargs)
        except ValidationError as exc:
            logger.debug("%s rejected: %s", label, exc)
            return tool_error(str(exc))

        try:
            result = await self._call(path, model)
        except Exception as exc:
            logger.warning("%s crashed: %s", label, exc, exc_info=True)
            return tool_error(f"{label} error: {exc}")

        if isinstance(result, Failure):
            logger.warning("%s failed (%s): %s", label, result.reason, result.message)
            return tool_error(_failure_message(label, result))
        return result.value
