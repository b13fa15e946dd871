"""Memory query tools exposed to the host agent."""

from mem_bridge.tools.definitions import (
    GET_OBSERVATIONS_TOOL,
    SEARCH_TOOL,
    TIMELINE_TOOL,
    TOOL_DEFINITIONS,
)
from mem_bridge.tools.query import QueryTools

__all__ = [
    "TOOL_DEFINITIONS",
    "SEARCH_TOOL",
    "TIMELINE_TOOL",
    "GET_OBSERVATIONS_TOOL",
    "QueryTools",
]
