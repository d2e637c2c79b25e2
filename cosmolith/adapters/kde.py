"""KDE Plasma adapter.

Settings are written to the KDE configuration files with `kwriteconfig6`,
then KWin is asked to reload them over D-Bus.
"""

import asyncio
import os
from collections.abc import Callable
from logging import Logger
from typing import Any

from ..constants import KWRITECONFIG
from ..errors import IpcCommandError, IpcConnectionError
from .backend import Compositor

INPUT_FILE = "kcminputrc"
LAYOUT_FILE = "kxkbrc"


def _session_bus() -> Any:  # noqa: ANN401
    from pydbus import SessionBus  # pylint: disable=import-outside-toplevel

    return SessionBus()


def _kde_value(value: bool | float | str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Kde(Compositor):
    """KDE Plasma backend implementation."""

    name = "kde"

    def __init__(self, bus_factory: Callable[[], Any] = _session_bus, log: Logger | None = None) -> None:
        """Initialize the backend.

        Args:
            bus_factory: returns a pydbus session bus
            log: logger to use
        """
        super().__init__(log)
        self._bus_factory = bus_factory
        self.bus: Any = None

    async def init(self) -> None:
        try:
            self.bus = await asyncio.to_thread(self._bus_factory)
        except Exception as e:  # pylint: disable=broad-except
            raise IpcConnectionError(self.name, "connect", str(e)) from e

    def is_running(self) -> bool:
        return "KDE" in os.environ.get("XDG_CURRENT_DESKTOP", "").upper()

    async def reload(self) -> None:
        """Make KWin reload its configuration."""
        if self.bus is None:
            return

        def _reconfigure() -> None:
            self.bus.get("org.kde.KWin", "/KWin").reconfigure()

        try:
            await asyncio.to_thread(_reconfigure)
        except Exception as e:  # pylint: disable=broad-except
            raise IpcCommandError(self.name, "org.kde.KWin.reconfigure", str(e)) from e

    async def write_config(self, group: str, key: str, value: bool | float | str, file: str = INPUT_FILE) -> None:
        """Write one configuration entry then reload KWin.

        Raises:
            IpcConnectionError: if kwriteconfig6 is not installed
            IpcCommandError: if kwriteconfig6 failed
        """
        args = ["--file", file, "--group", group, "--key", key, _kde_value(value)]
        command = " ".join([KWRITECONFIG, *args])
        self.log.debug(command)
        try:
            proc = await asyncio.create_subprocess_exec(
                KWRITECONFIG,
                *args,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise IpcConnectionError(self.name, command, f"{KWRITECONFIG} not found") from e
        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise IpcCommandError(self.name, command, stderr.decode(errors="replace").strip())
        await self.reload()

    # Touchpad {{{

    async def touchpad_natural_scroll(self, enabled: bool | None) -> None:
        if enabled is not None:
            await self.write_config("Libinput", "NaturalScroll", enabled)

    async def touchpad_tap_enabled(self, enabled: bool) -> None:
        await self.write_config("Libinput", "TapToClick", enabled)

    # }}}

    # Mouse {{{

    async def mouse_left_handed(self, enabled: bool | None) -> None:
        if enabled is not None:
            await self.write_config("Mouse", "LeftHanded", enabled)

    async def mouse_scroll_factor(self, factor: float | None) -> None:
        if factor is not None:
            await self.write_config("Mouse", "WheelScrollLines", factor)

    # }}}

    # Keyboard {{{

    async def keyboard_layout(self, layout: str) -> None:
        await self.write_config("Layout", "LayoutList", layout, file=LAYOUT_FILE)

    async def keyboard_repeat_delay(self, delay: int) -> None:
        await self.write_config("Keyboard", "RepeatDelay", delay)

    async def keyboard_repeat_rate(self, rate: int) -> None:
        await self.write_config("Keyboard", "RepeatRate", rate)

    # }}}
