"""Error types for the cosmolith event pipeline.

Categories:
- Config/Watcher: store read failures, unknown keys, watcher setup
- Event conversion: unexpected value shapes in stored settings
- Dispatch: missing backend, unrouted events
- IPC/Backend: connection, disconnection and rejected commands
- Environment: session detection
"""

__all__ = [
    "ConfigReadError",
    "CosmolithError",
    "DetectionError",
    "EventConversionError",
    "IpcCommandError",
    "IpcConnectionError",
    "IpcDisconnectedError",
    "IpcError",
    "NoCompositorError",
    "UnhandledEventError",
    "WatcherSetupError",
    "is_transport_error",
]


class CosmolithError(Exception):
    """Base class for every error raised by cosmolith."""


class ConfigReadError(CosmolithError):
    """A value could not be read from the configuration store."""

    def __init__(self, namespace: str, key: str, reason: str = "") -> None:
        self.namespace = namespace
        self.key = key
        super().__init__(f"config read failed: {namespace}.{key}" + (f" ({reason})" if reason else ""))


class WatcherSetupError(CosmolithError):
    """The configuration store could not be watched."""

    def __init__(self, namespace: str, reason: str) -> None:
        self.namespace = namespace
        super().__init__(f"watcher setup failed for {namespace}: {reason}")


class EventConversionError(CosmolithError):
    """A stored value does not have the expected shape."""

    def __init__(self, domain: str, reason: str) -> None:
        self.domain = domain
        super().__init__(f"event conversion failed for {domain}: {reason}")


class NoCompositorError(CosmolithError):
    """No compositor backend is available."""

    def __init__(self) -> None:
        super().__init__("no compositor backend available")


class UnhandledEventError(CosmolithError):
    """An event type has no route to a capability method."""

    def __init__(self, compositor: str, event: object) -> None:
        self.compositor = compositor
        self.event = event
        super().__init__(f"{compositor}: no handler for {type(event).__name__}")


class IpcError(CosmolithError):
    """Base class for backend IPC failures."""

    def __init__(self, compositor: str, command: str, reason: str = "") -> None:
        self.compositor = compositor
        self.command = command
        self.reason = reason
        super().__init__(f"{compositor} command failed: {command}" + (f" ({reason})" if reason else ""))


class IpcConnectionError(IpcError):
    """The backend socket or bus could not be reached."""


class IpcDisconnectedError(IpcError):
    """The backend connection dropped in the middle of a call."""


class IpcCommandError(IpcError):
    """The backend answered, but rejected the command."""


class DetectionError(CosmolithError):
    """The running desktop could not be identified."""


def is_transport_error(exc: BaseException) -> bool:
    """Return True if `exc` means the connection itself is broken.

    Rejected commands are not transport errors: retrying them on a fresh
    connection would fail the same way.
    """
    if isinstance(exc, IpcCommandError):
        return False
    return isinstance(exc, IpcConnectionError | IpcDisconnectedError | ConnectionError | OSError | EOFError)
