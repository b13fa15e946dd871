"""Claude Code platform adapter.

Claude Code hooks receive snake_case JSON on stdin (``session_id``, ``cwd``,
``tool_name``, ``tool_input``, ``tool_response``, ``transcript_path``) and
read their response from stdout.
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

# Response for informational hooks: keep going, don't echo into the transcript
_QUIET_CONTINUE: dict[str, bool] = {"continue": True, "suppressOutput": True}


class ClaudeCodeAdapter:
    """Adapter for Claude Code stdin/stdout hooks."""

    platform = "claude-code"

    def normalize_input(self, raw: object) -> NormalizedHookInput:
        data = as_mapping(raw)

        return NormalizedHookInput(
            session_id=pick_str(data, "session_id") or UNKNOWN_SESSION,
            cwd=pick_str(data, "cwd") or fallback_cwd(),
            platform=self.platform,
            prompt=pick_str(data, "prompt"),
            tool_name=pick_str(data, "tool_name"),
            tool_input=data.get("tool_input"),
            tool_response=pick_first(data, "tool_response", "tool_output"),
            transcript_path=pick_str(data, "transcript_path"),
            messages=pick_list(data, "messages"),
        )

    def format_output(self, result: HookResult) -> Any:
        context = result.additional_context
        if context:
            output: dict[str, Any] = {"additionalContext": context}
            if result.hook_specific_output.hook_event_name:
                output["hookEventName"] = result.hook_specific_output.hook_event_name
            return {"hookSpecificOutput": output}
        if not result.continue_:
            return {"continue": False}
        return dict(_QUIET_CONTINUE)
