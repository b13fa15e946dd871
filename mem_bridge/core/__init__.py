"""Core components for the memory bridge."""

from mem_bridge.core.errors import (
    ConfigurationError,
    MalformedResponseError,
    MemBridgeError,
    ValidationError,
    WorkerError,
    WorkerResponseError,
    WorkerTransportError,
    WorkerUnavailableError,
)
from mem_bridge.core.models import (
    BatchFetchParams,
    HookResult,
    HookSpecificOutput,
    NormalizedHookInput,
    SearchParams,
    TimelineParams,
    ToolParams,
)
from mem_bridge.core.results import Failure, Success, WorkerResult

__all__ = [
    # Errors
    "MemBridgeError",
    "ConfigurationError",
    "ValidationError",
    "WorkerError",
    "WorkerUnavailableError",
    "WorkerTransportError",
    "WorkerResponseError",
    "MalformedResponseError",
    # Models
    "NormalizedHookInput",
    "HookResult",
    "HookSpecificOutput",
    "SearchParams",
    "TimelineParams",
    "BatchFetchParams",
    "ToolParams",
    # Results
    "Success",
    "Failure",
    "WorkerResult",
]
