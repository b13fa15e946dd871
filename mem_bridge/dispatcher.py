"""Event dispatcher: one handler per canonical event kind.

Every handler follows the same shape::

    gate(s) -> build JSON body -> call worker -> WorkerResult

Gates are the session-initialized check (for session-scoped events, checked
first because it costs nothing) and the liveness probe.  A closed gate is a
successful no-op: ``Success(None)``.  Handlers never raise for worker
problems; they hand back a ``Failure`` and let ``plugin.py`` log it.

Endpoint map:

    session init          POST /api/sessions/init
    tool execution        POST /api/sessions/observations
    context injection     GET  /api/context/inject?projects=<name>
    session compacting    POST /api/sessions/summarize
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from mem_bridge.client import WorkerClient
from mem_bridge.core.errors import MalformedResponseError
from mem_bridge.core.models import HookResult, NormalizedHookInput
from mem_bridge.core.response_types import (
    ObservationRequest,
    SessionInitRequest,
    SessionInitResponse,
    SummarizeRequest,
)
from mem_bridge.core.results import Failure, Success, WorkerResult
from mem_bridge.session import Session, SessionSequencer

logger = logging.getLogger(__name__)

INIT_PATH = "/api/sessions/init"
OBSERVATIONS_PATH = "/api/sessions/observations"
CONTEXT_PATH = "/api/context/inject"
SUMMARIZE_PATH = "/api/sessions/summarize"

UNKNOWN_TOOL = "unknown"

# Claude Code name for the hook that carries injected context
CONTEXT_EVENT_NAME = "SessionStart"

SKIPPED: WorkerResult = Success(None)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def _message_text(content: Any) -> str:
    """Text of a message ``content``: a string or a list of text parts."""
    if isinstance(content, str):
        return content
    if isinstance(content, Sequence) and not isinstance(content, (bytes, bytearray)):
        parts = [
            part.get("text")
            for part in content
            if isinstance(part, Mapping) and isinstance(part.get("text"), str)
        ]
        return "\n".join(parts)
    return ""


def last_assistant_message(messages: Sequence[Any] | None) -> str:
    """Content of the final assistant-authored message, or ``""``.

    Earlier assistant turns and all user/tool turns are ignored.
    """
    for message in reversed(messages or ()):
        if isinstance(message, Mapping) and message.get("role") == "assistant":
            return _message_text(message.get("content"))
    return ""


def append_context(existing: str | None, addition: str | None) -> str | None:
    """Append *addition* to *existing*, separated by one blank line.

    Blank or missing additions leave *existing* untouched (same object).
    """
    if not addition or not addition.strip():
        return existing
    if not existing:
        # No leading blank line when there is nothing to separate from
        return addition
    return f"{existing}\n\n{addition}"


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class EventDispatcher:
    """Maps canonical events to worker calls for one session."""

    def __init__(self, client: WorkerClient, sequencer: SessionSequencer) -> None:
        self._client = client
        self._sequencer = sequencer

    @property
    def session(self) -> Session:
        return self._sequencer.session

    async def init_session(self, event: NormalizedHookInput) -> WorkerResult:
        """Send ``sessions/init`` for the first prompt of the session.

        The first prompt uses up the only attempt, even when the worker is
        down; later prompts never initialize.
        """
        if not self._sequencer.begin_initialization():
            return SKIPPED
        if not await self._client.ensure_worker():
            logger.debug("Worker unavailable, session init abandoned")
            return SKIPPED

        body: SessionInitRequest = {
            "contentSessionId": self.session.session_id,
            "project": self.session.project,
            "prompt": event.prompt or "",
        }
        result = await self._client.post_json(INIT_PATH, body)
        if isinstance(result, Failure):
            if result.reason != MalformedResponseError.reason:
                return result
            # 2xx with an unreadable body still counts as initialized
            logger.debug("Ignoring unreadable sessions/init body: %s", result.message)
            payload: SessionInitResponse = {}
        else:
            payload = result.value if isinstance(result.value, Mapping) else {}

        remote_id = payload.get("sessionDbId")
        self._sequencer.complete_initialization(remote_id)
        return Success(self.session.remote_session_id)

    async def capture_observation(self, event: NormalizedHookInput) -> WorkerResult:
        """Forward one tool execution as an observation."""
        if not self._sequencer.can_dispatch:
            return SKIPPED
        if not await self._client.ensure_worker():
            logger.debug("Worker unavailable, observation dropped")
            return SKIPPED

        body: ObservationRequest = {
            "contentSessionId": self.session.session_id,
            "tool_name": event.tool_name or UNKNOWN_TOOL,
            "tool_input": event.tool_input,
            "tool_response": event.tool_response,
            "cwd": self.session.directory or event.cwd,
        }
        return await self._client.post_json(OBSERVATIONS_PATH, body, expect_body=False)

    async def inject_context(self, event: NormalizedHookInput) -> WorkerResult:
        """Fetch memory context for the project.

        Returns:
            ``Success(HookResult)``; the result carries no context when the
            worker returned nothing but whitespace.
        """
        if not await self._client.ensure_worker():
            logger.debug("Worker unavailable, context injection skipped")
            return SKIPPED

        result = await self._client.get_text(CONTEXT_PATH, {"projects": self.session.project})
        if not result.ok:
            return result

        context = result.value
        if not context.strip():
            return Success(HookResult())
        return Success(HookResult.with_context(context, CONTEXT_EVENT_NAME))

    async def summarize(self, event: NormalizedHookInput) -> WorkerResult:
        """Ask the worker to summarize, passing only the last assistant turn."""
        if not self._sequencer.can_dispatch:
            return SKIPPED
        if not await self._client.ensure_worker():
            logger.debug("Worker unavailable, summarization skipped")
            return SKIPPED

        body: SummarizeRequest = {
            "contentSessionId": self.session.session_id,
            "last_assistant_message": last_assistant_message(event.messages),
        }
        return await self._client.post_json(SUMMARIZE_PATH, body, expect_body=False)
