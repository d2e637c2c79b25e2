"""Niri adapter.

Niri reads its input settings from its own configuration file, only the
active keyboard layout can be changed at runtime: the layout is looked up in
the list configured in niri, then selected by index.
"""

import asyncio
import os
import re
from collections.abc import Awaitable, Callable
from logging import Logger
from typing import Any

from ..errors import IpcCommandError
from ..ipc import niri_request, open_niri_socket
from .backend import Compositor
from .connection import GuardedConnection

NiriStreams = tuple[asyncio.StreamReader, asyncio.StreamWriter]


async def _close(streams: NiriStreams) -> None:
    _, writer = streams
    writer.close()
    await writer.wait_closed()


def find_layout(names: list[str], wanted: str) -> int | None:
    """Return the index of the niri layout matching the XKB layout `wanted`.

    niri reports descriptive names (eg: "English (US)"), so an exact match is tried first,
    then a whole word of the name (eg: "us"), then any part of it.
    """
    lowered = [name.lower() for name in names]
    matchers = (
        lambda name: name == wanted,
        lambda name: wanted in re.findall(r"\w+", name),
        lambda name: wanted in name,
    )
    for matches in matchers:
        for index, name in enumerate(lowered):
            if matches(name):
                return index
    return None


class Niri(Compositor):
    """Niri backend implementation."""

    name = "niri"

    def __init__(self, connect: Callable[[], Awaitable[NiriStreams]] | None = None, log: Logger | None = None) -> None:
        """Initialize the backend.

        Args:
            connect: coroutine function returning a (reader, writer) pair on the niri socket
            log: logger to use
        """
        super().__init__(log)
        self.connection: GuardedConnection[NiriStreams] = GuardedConnection(self.name, connect or open_niri_socket, self.log, close=_close)

    async def init(self) -> None:
        await self.connection.connect()

    def is_running(self) -> bool:
        return bool(os.environ.get("NIRI_SOCKET"))

    async def shutdown(self) -> None:
        await self.connection.close()

    async def request(self, request: str | dict[str, Any]) -> Any:  # noqa: ANN401
        """Send a request and return the `Ok` payload, reconnecting once if needed."""

        async def _send(streams: NiriStreams) -> Any:  # noqa: ANN401
            return await niri_request(*streams, request, self.log)

        return await self.connection.call(_send, str(request))

    async def action(self, name: str, **arguments: Any) -> None:  # noqa: ANN401
        """Run a niri action, eg: `action("SwitchLayout", layout={"Index": 0})`."""
        await self.request({"Action": {name: arguments}})

    async def keyboard_layout(self, layout: str) -> None:
        if not layout:
            return
        reply = await self.request("KeyboardLayouts")
        try:
            names: list[str] = reply["KeyboardLayouts"]["names"]
        except (KeyError, TypeError) as e:
            raise IpcCommandError(self.name, "KeyboardLayouts", f"unexpected reply {reply!r}") from e

        # only the primary layout can be selected
        wanted = layout.split(",")[0].strip().lower()
        index = find_layout(names, wanted)
        if index is not None:
            await self.action("SwitchLayout", layout={"Index": index})
            return
        self.log.warning("Layout %s is not configured in niri (available: %s)", wanted, ", ".join(names))
