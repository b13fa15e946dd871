"""Data models for the memory bridge.

Hook envelopes are frozen dataclasses (built on every host event, no
validation needed).  Query tool parameters are pydantic models because they
arrive from the calling agent and must be validated before serialization.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mem_bridge.core.response_types import BatchFetchRequest

# ---------------------------------------------------------------------------
# Hook envelopes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NormalizedHookInput:
    """Canonical event envelope produced by every platform adapter.

    Optional fields the host did not send stay ``None``.
    """

    session_id: str
    cwd: str
    platform: str
    prompt: str | None = None
    tool_name: str | None = None
    tool_input: Any = None
    tool_response: Any = None
    transcript_path: str | None = None
    messages: list[Any] | None = None


@dataclass(frozen=True)
class HookSpecificOutput:
    """Host-specific part of a hook result."""

    additional_context: str | None = None
    hook_event_name: str | None = None


@dataclass(frozen=True)
class HookResult:
    """Canonical response envelope consumed by ``format_output``.

    ``continue_`` defaults to ``True``: the bridge never blocks the host.
    """

    continue_: bool = True
    hook_specific_output: HookSpecificOutput = field(default_factory=HookSpecificOutput)

    @classmethod
    def with_context(cls, context: str, event_name: str | None = None) -> HookResult:
        return cls(
            hook_specific_output=HookSpecificOutput(
                additional_context=context,
                hook_event_name=event_name,
            )
        )

    @property
    def additional_context(self) -> str | None:
        return self.hook_specific_output.additional_context


# ---------------------------------------------------------------------------
# Query tool parameters
# ---------------------------------------------------------------------------

SearchType = Literal["observation", "summary", "session"]

SEARCH_TYPES: tuple[str, ...] = ("observation", "summary", "session")

DEFAULT_SEARCH_LIMIT = 20
DEFAULT_TIMELINE_DEPTH = 3


class ToolParams(BaseModel):
    """Shared config: wire names are accepted, unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_query_params(self) -> dict[str, str]:
        """Serialize to query-string pairs, dropping unset values."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        return {key: str(value) for key, value in data.items()}


class SearchParams(ToolParams):
    """Parameters for ``mem-search``."""

    query: str | None = None
    limit: int = Field(default=DEFAULT_SEARCH_LIMIT, ge=1)
    project: str | None = None
    result_type: SearchType | None = Field(default=None, alias="type")
    date_start: str | None = Field(default=None, alias="dateStart")
    date_end: str | None = Field(default=None, alias="dateEnd")

    @field_validator("date_start", "date_end")
    @classmethod
    def _check_iso_date(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValueError(f"expected an ISO date, got {value!r}") from exc
        return value


class TimelineParams(ToolParams):
    """Parameters for ``mem-timeline``.

    ``anchor`` and ``query`` are alternatives; the worker resolves which
    one to use.
    """

    anchor: int | None = None
    query: str | None = None
    depth_before: int = Field(default=DEFAULT_TIMELINE_DEPTH, ge=0)
    depth_after: int = Field(default=DEFAULT_TIMELINE_DEPTH, ge=0)
    project: str | None = None


class BatchFetchParams(ToolParams):
    """Parameters for ``mem-get-observations``."""

    ids: list[int]

    def to_body(self) -> BatchFetchRequest:
        return {"ids": list(self.ids)}
