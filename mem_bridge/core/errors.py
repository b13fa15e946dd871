"""Custom exceptions for the memory bridge.

Worker errors are carried as the reason inside a ``Failure`` result
(see ``mem_bridge.core.results``).  Nothing in this package raises them
across a host-facing boundary.
"""


class MemBridgeError(Exception):
    """Base exception for all memory bridge errors."""

    pass


class ConfigurationError(MemBridgeError):
    """Raised when configuration is invalid (e.g. unknown platform)."""

    pass


class ValidationError(MemBridgeError):
    """Raised when tool parameters fail validation."""

    pass


class WorkerError(MemBridgeError):
    """Base for failures talking to the memory worker service."""

    reason: str = "worker"


class WorkerUnavailableError(WorkerError):
    """The liveness probe failed; the worker is down or slow."""

    reason = "unavailable"

    def __init__(self, message: str = "Worker service unavailable") -> None:
        super().__init__(message)


class WorkerTransportError(WorkerError):
    """Network error or timeout during a dispatch or query."""

    reason = "transport"


class WorkerResponseError(WorkerError):
    """The worker answered with a non-success HTTP status."""

    reason = "http_status"

    def __init__(self, status_code: int, path: str = "") -> None:
        self.status_code = status_code
        self.path = path
        super().__init__(f"Worker returned HTTP {status_code} for {path or 'request'}")


class MalformedResponseError(WorkerError):
    """The worker answered 2xx but the body could not be decoded."""

    reason = "malformed"
