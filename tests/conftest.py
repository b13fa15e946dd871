"""Pytest fixtures for memory bridge tests.

The memory worker is faked with ``httpx.MockTransport``: ``FakeWorker``
records every request and answers from a small route table, so tests can
assert on exactly which calls left the bridge.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Generator
from typing import Any, Union

import httpx
import pytest

from mem_bridge.adapters import OpenCodeAdapter, PlatformAdapter
from mem_bridge.client import READINESS_PATH, WorkerClient
from mem_bridge.config import Settings, override_settings, reset_settings
from mem_bridge.core.logging import PACKAGE_LOGGER
from mem_bridge.plugin import MemoryPlugin

Responder = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeWorker:
    """In-process stand-in for the memory worker service."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Responder] = {}
        self.ready: bool | Exception = True

    def route(self, method: str, path: str, responder: Responder) -> None:
        self.routes[(method, path)] = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == "GET" and request.url.path == READINESS_PATH:
            if isinstance(self.ready, Exception):
                raise self.ready
            return httpx.Response(200 if self.ready else 503)

        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(responder, Exception):
            raise responder
        if callable(responder):
            return responder(request)
        return responder

    def calls(self, path: str) -> list[httpx.Request]:
        """Requests sent to *path*, in order."""
        return [r for r in self.requests if r.url.path == path]

    def non_readiness_calls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path != READINESS_PATH]


def json_body(request: httpx.Request) -> Any:
    return json.loads(request.content)


# ---------------------------------------------------------------------------
# Basic fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def restore_package_logger() -> Generator[None, None, None]:
    """Undo ``configure_logging`` so caplog keeps seeing package records."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    """Settings with short deadlines, ignoring any local .env file."""
    settings = Settings(
        host="127.0.0.1",
        port=37777,
        readiness_timeout=1.0,
        request_timeout=2.0,
        default_project="unknown",
        _env_file=None,
    )
    override_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def worker() -> FakeWorker:
    return FakeWorker()


@pytest.fixture
def client(worker: FakeWorker, test_settings: Settings) -> WorkerClient:
    return WorkerClient(test_settings, transport=httpx.MockTransport(worker.handler))


@pytest.fixture
def make_plugin(
    worker: FakeWorker, test_settings: Settings
) -> Callable[..., MemoryPlugin]:
    """Build plugins wired to the fake worker."""

    def factory(
        adapter: PlatformAdapter | None = None,
        project: object = "demo",
        directory: str | None = "/work/demo",
    ) -> MemoryPlugin:
        client = WorkerClient(test_settings, transport=httpx.MockTransport(worker.handler))
        return MemoryPlugin(
            adapter or OpenCodeAdapter(),
            project=project,
            directory=directory,
            settings=test_settings,
            client=client,
        )

    return factory
