"""TypedDict shapes for worker request and response bodies.

Keys use the worker's wire names, which mix camelCase and snake_case.
"""

from __future__ import annotations

from typing import Any, TypedDict

from typing_extensions import NotRequired


class SessionInitRequest(TypedDict):
    """Body of ``POST /api/sessions/init``."""

    contentSessionId: str
    project: str
    prompt: str


class SessionInitResponse(TypedDict):
    """Body returned by ``POST /api/sessions/init``."""

    sessionDbId: NotRequired[int]


class ObservationRequest(TypedDict):
    """Body of ``POST /api/sessions/observations``."""

    contentSessionId: str
    tool_name: str
    tool_input: Any
    tool_response: Any
    cwd: str


class SummarizeRequest(TypedDict):
    """Body of ``POST /api/sessions/summarize``."""

    contentSessionId: str
    last_assistant_message: str


class BatchFetchRequest(TypedDict):
    """Body of ``POST /api/observations/batch``."""

    ids: list[int]


class ToolErrorResponse(TypedDict):
    """What a query tool returns instead of raising."""

    error: str
