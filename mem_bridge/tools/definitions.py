"""Tool definitions exposed to the host agent.

The three tools form a narrowing workflow: ``mem-search`` returns an index
of IDs, ``mem-timeline`` shows what happened around one of them, and
``mem-get-observations`` fetches full detail for the final selection.
"""

from typing import Any

from mem_bridge.core.models import DEFAULT_SEARCH_LIMIT, DEFAULT_TIMELINE_DEPTH, SEARCH_TYPES

SEARCH_TOOL = "mem-search"
TIMELINE_TOOL = "mem-timeline"
GET_OBSERVATIONS_TOOL = "mem-get-observations"

# Common parameter: project filter shared by search and timeline
_PROJECT_PARAM: dict[str, Any] = {
    "project": {
        "type": "string",
        "description": "Filter by project name",
    },
}


def _with_project(properties: dict[str, Any]) -> dict[str, Any]:
    """Add the project filter to tool properties."""
    return {**properties, **_PROJECT_PARAM}


TOOL_DEFINITIONS: dict[str, dict[str, Any]] = {
    SEARCH_TOOL: {
        "description": (
            "Search memory. Returns an index with IDs for observations, summaries, "
            f"and sessions. Use this first, then {TIMELINE_TOOL} for context, "
            f"then {GET_OBSERVATIONS_TOOL} for full details."
        ),
        "parameters": {
            "type": "object",
            "properties": _with_project(
                {
                    "query": {
                        "type": "string",
                        "description": "Search query (natural language)",
                    },
                    "limit": {
                        "type": "integer",
                        "description": f"Maximum results (default: {DEFAULT_SEARCH_LIMIT})",
                        "minimum": 1,
                        "default": DEFAULT_SEARCH_LIMIT,
                    },
                    "type": {
                        "type": "string",
                        "enum": list(SEARCH_TYPES),
                        "description": "Filter by type",
                    },
                    "dateStart": {
                        "type": "string",
                        "description": "Filter from date (ISO format)",
                    },
                    "dateEnd": {
                        "type": "string",
                        "description": "Filter to date (ISO format)",
                    },
                }
            ),
        },
    },
    TIMELINE_TOOL: {
        "description": (
            "Get chronological context around a memory observation. "
            f"Use after {SEARCH_TOOL} to understand context."
        ),
        "parameters": {
            "type": "object",
            "properties": _with_project(
                {
                    "anchor": {
                        "type": "integer",
                        "description": "Observation ID to anchor timeline",
                    },
                    "query": {
                        "type": "string",
                        "description": "Alternative: find anchor by query",
                    },
                    "depth_before": {
                        "type": "integer",
                        "description": f"Items before anchor (default: {DEFAULT_TIMELINE_DEPTH})",
                        "minimum": 0,
                        "default": DEFAULT_TIMELINE_DEPTH,
                    },
                    "depth_after": {
                        "type": "integer",
                        "description": f"Items after anchor (default: {DEFAULT_TIMELINE_DEPTH})",
                        "minimum": 0,
                        "default": DEFAULT_TIMELINE_DEPTH,
                    },
                }
            ),
        },
    },
    GET_OBSERVATIONS_TOOL: {
        "description": (
            "Fetch full details for specific observation IDs. Use after "
            f"{SEARCH_TOOL} and {TIMELINE_TOOL} to get complete information."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "ids": {
                    "type": "array",
                    "items": {"type": "integer"},
                    "description": "Array of observation IDs to fetch",
                },
            },
            "required": ["ids"],
        },
    },
}
