"""Memory plugin entry point.

Gives a host persistent memory across sessions by:

1. Initializing a worker session on the first user message
2. Capturing tool executions as observations
3. Injecting context from past sessions into the system prompt
4. Asking for a summary when the session is compacted
5. Exposing search tools for querying memory

One ``MemoryPlugin`` is one host session.  Every hook is fail-open: worker
failures and unexpected exceptions are logged here, at the outermost
boundary, and never reach the host.

Example:
    plugin = create_plugin(project={"name": "api"}, directory="/src/api")
    hooks = plugin.hooks
    await hooks["chat.message"]({"content": "fix the login bug"}, {})
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable, Mapping, MutableMapping
from dataclasses import dataclass, replace
from typing import Any, TypeVar

from mem_bridge.adapters import PlatformAdapter, get_adapter
from mem_bridge.client import WorkerClient
from mem_bridge.config import Settings, get_settings
from mem_bridge.core.models import HookResult
from mem_bridge.core.results import Failure, WorkerResult
from mem_bridge.dispatcher import EventDispatcher, append_context
from mem_bridge.session import Session, SessionSequencer, new_session
from mem_bridge.tools.definitions import (
    GET_OBSERVATIONS_TOOL,
    SEARCH_TOOL,
    TIMELINE_TOOL,
    TOOL_DEFINITIONS,
)
from mem_bridge.tools.query import QueryTools

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

# OpenCode hook names
CHAT_MESSAGE_HOOK = "chat.message"
TOOL_EXECUTE_AFTER_HOOK = "tool.execute.after"
SYSTEM_TRANSFORM_HOOK = "experimental.chat.system.transform"
SESSION_COMPACTING_HOOK = "experimental.session.compacting"


@dataclass(frozen=True)
class ToolSpec:
    """A callable tool as registered with the host."""

    name: str
    description: str
    parameters: dict[str, Any]
    execute: Callable[..., Awaitable[Any]]


def fail_open(hook_name: str) -> Callable[[F], F]:
    """Log and swallow anything a hook raises; the host sees ``None``."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception:
                logger.warning("%s hook failed", hook_name, exc_info=True)
                return None

        return wrapper  # type: ignore[return-value]

    return decorator


def project_name(project: object) -> str | None:
    """Name from a host project value: a string, a mapping or an object."""
    if isinstance(project, str):
        return project or None
    if isinstance(project, Mapping):
        name = project.get("name")
    else:
        name = getattr(project, "name", None)
    return name if isinstance(name, str) and name else None


def merge_system_prompt(output: object, context: str) -> bool:
    """Append *context* to ``output.system`` in place.

    A string ``system`` gets the context after a blank line; a list-valued
    ``system`` gets it as a new element.

    Returns:
        ``True`` if *output* was modified.
    """
    if isinstance(output, MutableMapping):
        current = output.get("system")
    else:
        current = getattr(output, "system", None)

    if isinstance(current, list):
        current.append(context)
        return True
    if current is not None and not isinstance(current, str):
        logger.debug("Unexpected system prompt type %s; not modified", type(current).__name__)
        return False

    merged = append_context(current, context)
    if isinstance(output, MutableMapping):
        output["system"] = merged
    else:
        setattr(output, "system", merged)
    return True


class MemoryPlugin:
    """Memory integration for one host session.

    Args:
        adapter: Platform adapter for the host.
        project: Host project (string, mapping or object with ``name``).
        directory: Host working directory; used as the observation ``cwd``.
        settings: Bridge settings; defaults to the global settings.
        client: Worker client; built from *settings* when omitted.
    """

    def __init__(
        self,
        adapter: PlatformAdapter,
        project: object = None,
        directory: str | None = None,
        settings: Settings | None = None,
        client: WorkerClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self.adapter = adapter
        self.session: Session = new_session(
            adapter.platform,
            project_name(project) or self._settings.default_project,
            directory,
        )
        self._client = client or WorkerClient(self._settings)
        self._sequencer = SessionSequencer(self.session)
        self._dispatcher = EventDispatcher(self._client, self._sequencer)
        self._queries = QueryTools(self._client)

    # ------------------------------------------------------------------
    # Host surface
    # ------------------------------------------------------------------

    @property
    def hooks(self) -> dict[str, Callable[..., Awaitable[Any]]]:
        return {
            CHAT_MESSAGE_HOOK: self.chat_message,
            TOOL_EXECUTE_AFTER_HOOK: self.tool_executed,
            SYSTEM_TRANSFORM_HOOK: self.system_transform,
            SESSION_COMPACTING_HOOK: self.session_compacting,
        }

    @property
    def tools(self) -> dict[str, ToolSpec]:
        executors = {
            SEARCH_TOOL: self._queries.search,
            TIMELINE_TOOL: self._queries.timeline,
            GET_OBSERVATIONS_TOOL: self._queries.get_observations,
        }
        return {
            name: ToolSpec(
                name=name,
                description=TOOL_DEFINITIONS[name]["description"],
                parameters=TOOL_DEFINITIONS[name]["parameters"],
                execute=executor,
            )
            for name, executor in executors.items()
        }

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    @fail_open(CHAT_MESSAGE_HOOK)
    async def chat_message(self, input: object, output: object = None) -> Any:
        """First user message: initialize the worker session (once)."""
        event = self.adapter.normalize_input(input)
        await self._contain(CHAT_MESSAGE_HOOK, self._dispatcher.init_session(event))
        return self.adapter.format_output(HookResult())

    @fail_open(TOOL_EXECUTE_AFTER_HOOK)
    async def tool_executed(self, input: object, tool_output: object = None) -> Any:
        """After a tool runs: record it as an observation."""
        event = self.adapter.normalize_input(input)
        if event.tool_response is None and tool_output is not None:
            event = replace(event, tool_response=tool_output)
        await self._contain(TOOL_EXECUTE_AFTER_HOOK, self._dispatcher.capture_observation(event))
        return self.adapter.format_output(HookResult())

    @fail_open(SYSTEM_TRANSFORM_HOOK)
    async def system_transform(self, input: object, output: object = None) -> Any:
        """Before the model call: append memory context to the system prompt."""
        event = self.adapter.normalize_input(input)
        result = await self._contain(SYSTEM_TRANSFORM_HOOK, self._dispatcher.inject_context(event))

        hook_result = HookResult()
        if result is not None and isinstance(result.value, HookResult):
            hook_result = result.value

        context = hook_result.additional_context
        if context and output is not None:
            merge_system_prompt(output, context)
        return self.adapter.format_output(hook_result)

    @fail_open(SESSION_COMPACTING_HOOK)
    async def session_compacting(self, input: object, output: object = None) -> Any:
        """On compaction: trigger a summary of the latest assistant turn."""
        event = self.adapter.normalize_input(input)
        await self._contain(SESSION_COMPACTING_HOOK, self._dispatcher.summarize(event))
        return self.adapter.format_output(HookResult())

    async def _contain(
        self, hook_name: str, pending: Awaitable[WorkerResult]
    ) -> WorkerResult | None:
        result = await pending
        if isinstance(result, Failure):
            logger.warning("%s: worker call failed (%s): %s", hook_name, result.reason, result.message)
            return None
        return result


def create_plugin(
    project: object = None,
    directory: str | None = None,
    platform: str = "opencode",
    settings: Settings | None = None,
) -> MemoryPlugin:
    """Build a plugin for *platform*.

    Raises:
        ConfigurationError: If *platform* has no adapter.
    """
    return MemoryPlugin(
        get_adapter(platform),
        project=project,
        directory=directory,
        settings=settings,
    )
