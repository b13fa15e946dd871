"""mem-bridge - hook normalization and dispatch for coding-agent memory."""

__version__ = "0.1.0"

# Re-export core components for convenience
from mem_bridge.adapters import (
    ClaudeCodeAdapter,
    CursorAdapter,
    OpenCodeAdapter,
    PlatformAdapter,
    get_adapter,
)
from mem_bridge.client import WorkerClient
from mem_bridge.config import Settings, get_settings
from mem_bridge.core import (
    ConfigurationError,
    HookResult,
    MemBridgeError,
    NormalizedHookInput,
    WorkerError,
)
from mem_bridge.plugin import MemoryPlugin, ToolSpec, create_plugin
from mem_bridge.session import Session, SessionSequencer, SessionState

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "MemBridgeError",
    "ConfigurationError",
    "WorkerError",
    # Models
    "NormalizedHookInput",
    "HookResult",
    # Adapters
    "PlatformAdapter",
    "OpenCodeAdapter",
    "ClaudeCodeAdapter",
    "CursorAdapter",
    "get_adapter",
    # Runtime
    "WorkerClient",
    "Session",
    "SessionSequencer",
    "SessionState",
    "MemoryPlugin",
    "ToolSpec",
    "create_plugin",
]
