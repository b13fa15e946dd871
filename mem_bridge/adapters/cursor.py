"""Cursor platform adapter.

Cursor uses ``conversation_id``, ``workspace_roots``, ``tool_output`` or
``result_json`` where Claude Code uses ``session_id``, ``cwd`` and
``tool_response``, and expects a flat ``{"continue", "additional_context"}``
response.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from mem_bridge.adapters.base import (
    UNKNOWN_SESSION,
    as_mapping,
    fallback_cwd,
    pick_first,
    pick_list,
    pick_str,
)
from mem_bridge.core.models import HookResult, NormalizedHookInput


def _workspace_root(data: Mapping[str, Any]) -> str | None:
    roots = data.get("workspace_roots")
    if isinstance(roots, list) and roots and isinstance(roots[0], str):
        return _fix_drive_path(roots[0])
    return None


def _fix_drive_path(path: str) -> str:
    """Turn Cursor's ``/c:/Users/...`` into ``C:/Users/...``."""
    if len(path) >= 3 and path[0] == "/" and path[2] == ":":
        return path[1].upper() + path[2:]
    return path


class CursorAdapter:
    """Adapter for Cursor hooks."""

    platform = "cursor"

    def normalize_input(self, raw: object) -> NormalizedHookInput:
        data = as_mapping(raw)

        return NormalizedHookInput(
            session_id=pick_str(data, "conversation_id", "session_id") or UNKNOWN_SESSION,
            cwd=_workspace_root(data) or pick_str(data, "cwd") or fallback_cwd(),
            platform=self.platform,
            prompt=pick_str(data, "prompt"),
            tool_name=pick_str(data, "tool_name"),
            tool_input=data.get("tool_input"),
            tool_response=pick_first(data, "tool_output", "result_json", "tool_response"),
            transcript_path=pick_str(data, "transcript_path"),
            messages=pick_list(data, "messages"),
        )

    def format_output(self, result: HookResult) -> Any:
        output: dict[str, Any] = {"continue": result.continue_}
        if result.additional_context:
            output["additional_context"] = result.additional_context
        return output
