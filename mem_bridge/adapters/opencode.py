"""OpenCode platform adapter.

Unlike Claude Code and Cursor, which exchange JSON over stdin/stdout,
OpenCode hands structured objects straight to plugin callbacks.  Field names
are camelCase; tool events may nest the tool under ``tool``.

Accepted shapes::

    chat message     {"sessionId", "prompt"} or {"content"}
    tool execution   {"sessionId", "toolName", "toolInput", "toolOutput"}
                     or {"tool": {"name", "input"}}
    system transform {"sessionId", "cwd"} or {"directory"}
    compacting       {"sessionId", "messages": [...]}
"""

from __future__ import annotations

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


class OpenCodeAdapter:
    """Adapter for OpenCode plugin callbacks."""

    platform = "opencode"

    def normalize_input(self, raw: object) -> NormalizedHookInput:
        data = as_mapping(raw)
        tool = as_mapping(data.get("tool"))

        return NormalizedHookInput(
            session_id=pick_str(data, "sessionId") or UNKNOWN_SESSION,
            cwd=pick_str(data, "cwd", "directory") or fallback_cwd(),
            platform=self.platform,
            prompt=pick_str(data, "prompt", "content"),
            tool_name=pick_str(data, "toolName") or pick_str(tool, "name"),
            tool_input=data.get("toolInput", tool.get("input")),
            tool_response=pick_first(data, "toolOutput", "toolResponse"),
            transcript_path=None,  # OpenCode has no transcript files
            messages=pick_list(data, "messages"),
        )

    def format_output(self, result: HookResult) -> Any:
        """Context injection returns the bare context; everything else a status."""
        if result.additional_context:
            return result.additional_context
        return {"success": result.continue_}
