"""Host platform adapters."""

from __future__ import annotations

from mem_bridge.adapters.base import PlatformAdapter
from mem_bridge.adapters.claude_code import ClaudeCodeAdapter
from mem_bridge.adapters.cursor import CursorAdapter
from mem_bridge.adapters.opencode import OpenCodeAdapter
from mem_bridge.core.errors import ConfigurationError

_ADAPTERS: dict[str, type[PlatformAdapter]] = {
    OpenCodeAdapter.platform: OpenCodeAdapter,
    ClaudeCodeAdapter.platform: ClaudeCodeAdapter,
    CursorAdapter.platform: CursorAdapter,
}

PLATFORMS: tuple[str, ...] = tuple(_ADAPTERS)


def get_adapter(platform: str) -> PlatformAdapter:
    """Build the adapter for *platform*.

    Raises:
        ConfigurationError: If the platform is not supported.
    """
    try:
        return _ADAPTERS[platform]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown platform {platform!r}; expected one of {', '.join(PLATFORMS)}"
        ) from None


__all__ = [
    "PlatformAdapter",
    "OpenCodeAdapter",
    "ClaudeCodeAdapter",
    "CursorAdapter",
    "PLATFORMS",
    "get_adapter",
]
