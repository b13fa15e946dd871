"""Platform adapter contract and defensive field access helpers.

An adapter is a stateless pair of pure functions: ``normalize_input`` turns a
host-native payload into a ``NormalizedHookInput`` and ``format_output`` turns
a ``HookResult`` into whatever that host expects back.  Nothing outside the
adapters branches on platform identity.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Protocol

from mem_bridge.core.models import HookResult, NormalizedHookInput

UNKNOWN_SESSION = "unknown"


class PlatformAdapter(Protocol):
    """Structural type every host adapter satisfies."""

    platform: str

    def normalize_input(self, raw: object) -> NormalizedHookInput:
        """Map a host payload to the canonical envelope.  Never raises."""
        ...

    def format_output(self, result: HookResult) -> Any:
        """Shape a hook result the way the host expects."""
        ...


def as_mapping(raw: object) -> Mapping[str, Any]:
    """Return *raw* if it is a mapping, else an empty dict."""
    return raw if isinstance(raw, Mapping) else {}


def pick_first(data: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key present with a non-None value, else ``None``."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def pick_str(data: Mapping[str, Any], *keys: str) -> str | None:
    """Like ``pick_first`` but only accepts string values."""
    for key in keys:
        value = data.get(key)
        if isinstance(value, str):
            return value
    return None


def pick_list(data: Mapping[str, Any], key: str) -> list[Any] | None:
    value = data.get(key)
    return list(value) if isinstance(value, (list, tuple)) else None


def fallback_cwd() -> str:
    """Working directory used when the host does not send one."""
    try:
        return os.getcwd()
    except OSError:
        # cwd was deleted under us
        return ""
