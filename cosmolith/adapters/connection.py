"""Lazily opened backend connection with a single reconnect on transport errors."""

import asyncio
from collections.abc import Awaitable, Callable
from enum import StrEnum
from logging import Logger
from typing import Generic, TypeVar

from ..errors import IpcDisconnectedError, IpcError, is_transport_error

__all__ = ["ConnectionState", "GuardedConnection"]

C = TypeVar("C")
R = TypeVar("R")


class ConnectionState(StrEnum):
    """Lifecycle of a backend connection."""

    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    FAILED = "failed"


class GuardedConnection(Generic[C]):
    """Own one connection object, shared by every call of an adapter.

    The connection is opened on first use. When a call fails because of the
    transport (socket refused, closed, reset), the connection is dropped,
    opened again and the call is retried exactly once. A second failure is
    raised and leaves the connection in the `FAILED` state; the next call
    starts from scratch.

    Rejected commands are not transport errors and are raised right away.
    """

    def __init__(
        self,
        name: str,
        connect: Callable[[], Awaitable[C]],
        log: Logger,
        close: Callable[[C], Awaitable[None]] | None = None,
    ) -> None:
        """Initialize the connection holder.

        Args:
            name: backend name, used in errors
            connect: coroutine function returning a new connection
            log: logger of the owning adapter
            close: coroutine function closing a connection
        """
        self.name = name
        self.log = log
        self._connect = connect
        self._close = close
        self._lock = asyncio.Lock()
        self._conn: C | None = None
        self.state = ConnectionState.UNCONNECTED

    async def _drop(self) -> None:
        conn, self._conn = self._conn, None
        if conn is not None and self._close is not None:
            try:
                await self._close(conn)
            except OSError as e:
                self.log.debug("Error closing %s connection: %s", self.name, e)

    async def _open(self) -> C:
        if self._conn is None:
            self._conn = await self._connect()
        return self._conn

    async def call(self, operation: Callable[[C], Awaitable[R]], description: str) -> R:
        """Run `operation(connection)`, reconnecting once on a transport error.

        Args:
            operation: coroutine function using the connection
            description: what is being done, for logs and errors
        """
        async with self._lock:
            try:
                return await self._call(operation, description)
            except asyncio.CancelledError:
                # a reply may still be on its way, it must not answer the next request
                self.log.warning("%s: %s cancelled, dropping the connection", self.name, description)
                await self._drop()
                self.state = ConnectionState.UNCONNECTED
                raise

    async def _call(self, operation: Callable[[C], Awaitable[R]], description: str) -> R:
        if self.state == ConnectionState.FAILED:
            self.state = ConnectionState.UNCONNECTED
        try:
            result = await operation(await self._open())
        except Exception as e:  # pylint: disable=broad-except
            if not is_transport_error(e):
                raise
            self.log.warning("%s connection problem (%s), reconnecting...", self.name, e)
            self.state = ConnectionState.RECONNECTING
            await self._drop()
        else:
            self.state = ConnectionState.CONNECTED
            return result

        try:
            result = await operation(await self._open())
        except Exception as e:  # pylint: disable=broad-except
            if not is_transport_error(e):
                self.state = ConnectionState.CONNECTED
                raise
            self.state = ConnectionState.FAILED
            await self._drop()
            self.log.error("%s connection failed: %s", self.name, e)
            if isinstance(e, IpcError):
                raise
            raise IpcDisconnectedError(self.name, description, str(e)) from e
        self.state = ConnectionState.CONNECTED
        return result

    async def connect(self) -> None:
        """Open the connection now instead of on first use."""
        async with self._lock:
            await self._open()
            self.state = ConnectionState.CONNECTED

    async def close(self) -> None:
        """Close the connection, if open."""
        async with self._lock:
            await self._drop()
            self.state = ConnectionState.UNCONNECTED
