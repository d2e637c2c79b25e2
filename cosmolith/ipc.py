"""Low level socket requests to Hyprland and Niri."""

__all__ = [
    "hyprctl",
    "hyprctl_connection",
    "hyprland_socket_path",
    "niri_request",
    "niri_socket_path",
    "open_niri_socket",
    "retry_on_reset",
]

import asyncio
import json
import os
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from functools import wraps
from logging import Logger
from pathlib import Path
from typing import Any

from .errors import IpcCommandError, IpcConnectionError, IpcDisconnectedError


def hyprland_socket_path(signature: str | None = None) -> str:
    """Return the path of the Hyprland control socket.

    Args:
        signature: instance signature, read from the environment if not set

    Raises:
        IpcConnectionError: if no Hyprland instance is known
    """
    signature = signature or os.environ.get("HYPRLAND_INSTANCE_SIGNATURE")
    if not signature:
        raise IpcConnectionError("hyprland", "connect", "HYPRLAND_INSTANCE_SIGNATURE not set")
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR", "")
    folder = f"{runtime_dir}/hypr/{signature}"
    if not runtime_dir or not Path(folder).exists():
        folder = f"/tmp/hypr/{signature}"  # noqa: S108
    return f"{folder}/.socket.sock"


def retry_on_reset(func: Callable) -> Callable:
    """Retry once if the connection got reset."""

    @wraps(func)
    async def wrapper(*args, log: Logger, **kwargs) -> Any:  # noqa: ANN401
        try:
            return await func(*args, **kwargs, log=log)
        except ConnectionResetError:
            log.warning("ipc connection problem, retrying...")
        try:
            return await func(*args, **kwargs, log=log)
        except ConnectionResetError as e:
            log.error("ipc connection failed.")
            raise IpcDisconnectedError("hyprland", str(args[0]) if args else "", "connection reset") from e

    return wrapper


@asynccontextmanager
async def hyprctl_connection(socket_path: str, log: Logger) -> AsyncIterator[tuple[asyncio.StreamReader, asyncio.StreamWriter]]:
    """Context manager for the Hyprland control socket."""
    try:
        ctl_reader, ctl_writer = await asyncio.open_unix_connection(socket_path)
    except FileNotFoundError as e:
        log.critical("hyprctl socket not found! is it running ?")
        raise IpcConnectionError("hyprland", "connect", str(e)) from e
    try:
        yield ctl_reader, ctl_writer
    finally:
        ctl_writer.close()
        await ctl_writer.wait_closed()


@retry_on_reset
async def hyprctl(command: str, base_command: str = "keyword", *, socket_path: str, log: Logger) -> bool:
    """Run an IPC command. Returns success value.

    Args:
        command: command arguments, eg: `input:left_handed true`
        base_command: type of command to send
        socket_path: Hyprland control socket
        log: logger to use in case of error
    """
    log.debug("%s %s", base_command, command)
    async with hyprctl_connection(socket_path, log) as (ctl_reader, ctl_writer):
        ctl_writer.write(f"/{base_command} {command}".encode())
        await ctl_writer.drain()
        resp = await ctl_reader.read(100)
    # remove "\n" from the response
    resp = b"".join(resp.split(b"\n"))
    if resp != b"ok":
        log.error("FAILED %s", resp)
        return False
    return True


# Niri {{{


def niri_socket_path() -> str:
    """Return the path of the Niri socket.

    Raises:
        IpcConnectionError: if NIRI_SOCKET is not set
    """
    path = os.environ.get("NIRI_SOCKET")
    if not path:
        raise IpcConnectionError("niri", "connect", "NIRI_SOCKET not set")
    return path


async def open_niri_socket(socket_path: str | None = None) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Open a connection to the Niri socket.

    Raises:
        IpcConnectionError: if the socket can't be reached
    """
    path = socket_path or niri_socket_path()
    try:
        return await asyncio.open_unix_connection(path)
    except OSError as e:
        raise IpcConnectionError("niri", "connect", str(e)) from e


async def niri_request(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    request: str | dict[str, Any],
    log: Logger,
) -> Any:  # noqa: ANN401
    """Send one request on an open Niri connection and return the `Ok` payload.

    Requests and replies are single JSON lines.

    Raises:
        IpcDisconnectedError: if the connection closed before the reply
        IpcCommandError: if Niri answered with an error
    """
    payload = json.dumps(request)
    log.debug("niri %s", payload)
    writer.write(payload.encode() + b"\n")
    await writer.drain()
    line = await reader.readline()
    if not line:
        raise IpcDisconnectedError("niri", payload, "connection closed")
    try:
        response = json.loads(line)
    except json.JSONDecodeError as e:
        raise IpcCommandError("niri", payload, f"invalid reply {line!r}") from e
    if isinstance(response, dict) and "Ok" in response:
        return response["Ok"]
    reason = response.get("Err", response) if isinstance(response, dict) else response
    raise IpcCommandError("niri", payload, str(reason))


# }}}
