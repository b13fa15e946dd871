"""HTTP client for the memory worker service.

Wraps one ``httpx.AsyncClient``.  ``ensure_worker`` is the liveness gate that
every dispatch and query must pass first; the request helpers return
``Success``/``Failure`` results and never raise.

Example:
    async with WorkerClient(settings) as client:
        if await client.ensure_worker():
            result = await client.get_json("/api/search", {"query": "auth"})
"""

from __future__ import annotations

import asyncio
import json
import logging
from types import TracebackType
from typing import Any

import httpx

from mem_bridge.config import Settings, get_settings
from mem_bridge.core.errors import (
    MalformedResponseError,
    WorkerResponseError,
    WorkerTransportError,
)
from mem_bridge.core.results import Failure, Success, WorkerResult

logger = logging.getLogger(__name__)

READINESS_PATH = "/api/readiness"


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class WorkerClient:
    """Async client for the worker's JSON-over-HTTP API.

    Args:
        settings: Connection settings; defaults to the global settings.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._http = httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.request_timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    async def __aenter__(self) -> WorkerClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Liveness
    # ------------------------------------------------------------------

    async def ensure_worker(self) -> bool:
        """Check that the worker answers ``GET /api/readiness`` in time.

        The whole call, connect included, is bounded by
        ``settings.readiness_timeout``.

        Returns:
            ``True`` on a 2xx answer; ``False`` on any error, non-2xx
            status or timeout.  Never raises.
        """
        deadline = self._settings.readiness_timeout
        try:
            response = await asyncio.wait_for(
                self._http.get(READINESS_PATH, timeout=deadline),
                timeout=deadline,
            )
        except Exception as exc:
            logger.debug("Worker readiness check failed at %s: %s", self.base_url, _describe(exc))
            return False

        if not response.is_success:
            logger.debug("Worker not ready at %s: HTTP %d", self.base_url, response.status_code)
            return False
        return True

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def _send(self, method: str, path: str, **kwargs: Any) -> WorkerResult:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            return Failure(WorkerTransportError(f"{method} {path} failed: {_describe(exc)}"))

        if not response.is_success:
            return Failure(WorkerResponseError(response.status_code, path))
        return Success(response)

    async def get_json(self, path: str, params: dict[str, str] | None = None) -> WorkerResult:
        """GET *path* and decode the JSON body."""
        result = await self._send("GET", path, params=params)
        if not result.ok:
            return result
        return _decode_json(result.value, path)

    async def get_text(self, path: str, params: dict[str, str] | None = None) -> WorkerResult:
        """GET *path* and return the body as text."""
        result = await self._send("GET", path, params=params)
        if not result.ok:
            return result
        return Success(result.value.text)

    async def post_json(
        self,
        path: str,
        body: Any,
        *,
        expect_body: bool = True,
    ) -> WorkerResult:
        """POST *body* as JSON.

        Args:
            path: Endpoint path.
            body: JSON-serializable request body.
            expect_body: When ``False`` the response body is ignored and the
                result value is ``None``.
        """
        try:
            # Tool payloads can hold anything; stringify what json can't handle
            content = json.dumps(body, default=str)
        except (TypeError, ValueError) as exc:
            return Failure(WorkerTransportError(f"Cannot encode body for {path}: {_describe(exc)}"))

        result = await self._send(
            "POST",
            path,
            content=content,
            headers={"Content-Type": "application/json"},
        )
        if not result.ok:
            return result
        if not expect_body:
            return Success(None)
        return _decode_json(result.value, path)


def _decode_json(response: httpx.Response, path: str) -> WorkerResult:
    try:
        return Success(response.json())
    except ValueError as exc:
        return Failure(MalformedResponseError(f"Invalid JSON from {path}: {_describe(exc)}"))
