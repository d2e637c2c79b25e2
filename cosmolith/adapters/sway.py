"""Sway adapter: settings are applied with `input <identifier> <setting> <value>` commands."""

import os
from collections.abc import Awaitable, Callable
from logging import Logger
from typing import Any

from i3ipc import aio

from ..errors import IpcCommandError, IpcConnectionError, IpcDisconnectedError
from ..models import (
    AccelConfig,
    AccelProfile,
    ClickMethod,
    NumlockState,
    ScrollConfig,
    ScrollMethod,
    TapConfig,
)
from .backend import Compositor, clamp_speed, normalize_options
from .connection import GuardedConnection

TOUCHPAD = "type:touchpad"
POINTER = "type:pointer"
KEYBOARD = "type:keyboard"

SCROLL_METHODS: dict[ScrollMethod, str] = {
    ScrollMethod.TWO_FINGER: "two_finger",
    ScrollMethod.EDGE: "edge",
    ScrollMethod.ON_BUTTON_DOWN: "on_button",
    ScrollMethod.NO_SCROLL: "none",
}
CLICK_METHODS: dict[ClickMethod, str] = {
    ClickMethod.BUTTON_AREAS: "button_areas",
    ClickMethod.CLICKFINGER: "clickfinger",
}
ACCEL_PROFILES: dict[AccelProfile, str] = {
    AccelProfile.FLAT: "flat",
    AccelProfile.ADAPTIVE: "adaptive",
}
DEFAULT_TOKEN = "none"


def _toggle(value: bool) -> str:
    return "enabled" if value else "disabled"


async def _default_connect() -> Any:  # noqa: ANN401
    try:
        return await aio.Connection(socket_path=os.environ.get("SWAYSOCK")).connect()
    except Exception as e:  # pylint: disable=W0718
        # OSError, or a bare Exception when i3ipc finds no socket path
        raise IpcConnectionError("sway", "connect", str(e)) from e


async def _close(conn: Any) -> None:  # noqa: ANN401
    # main_quit only stops `main()`, which is never started: release the sockets by hand
    conn._loop.remove_reader(conn._sub_fd)  # pylint: disable=protected-access
    conn._cmd_socket.close()  # pylint: disable=protected-access
    conn._sub_socket.close()  # pylint: disable=protected-access


class Sway(Compositor):
    """Sway backend implementation."""

    name = "sway"

    def __init__(self, connect: Callable[[], Awaitable[Any]] | None = None, log: Logger | None = None) -> None:
        """Initialize the backend.

        Args:
            connect: coroutine function returning a connected `i3ipc.aio.Connection`
            log: logger to use
        """
        super().__init__(log)
        self.connection: GuardedConnection[Any] = GuardedConnection(self.name, connect or _default_connect, self.log, close=_close)

    async def init(self) -> None:
        await self.connection.connect()

    def is_running(self) -> bool:
        return bool(os.environ.get("SWAYSOCK"))

    async def shutdown(self) -> None:
        await self.connection.close()

    async def run_command(self, command: str) -> None:
        """Send one command, reconnecting once if the socket went away.

        Raises:
            IpcCommandError: if sway rejected the command
        """
        self.log.debug(command)

        async def _send(conn: Any) -> None:  # noqa: ANN401
            replies = await conn.command(command)
            if not replies:
                # i3ipc returns no reply when sway closed the socket
                raise IpcDisconnectedError(self.name, command, "connection closed")
            for reply in replies:
                if not reply.success:
                    raise IpcCommandError(self.name, command, reply.error or "")

        await self.connection.call(_send, command)

    async def _input(self, identifier: str, setting: str, value: object) -> None:
        await self.run_command(f"input {identifier} {setting} {value}")

    async def _toggle(self, identifier: str, setting: str, value: bool | None) -> None:
        if value is not None:
            await self._input(identifier, setting, _toggle(value))

    async def _optional(self, identifier: str, setting: str, value: float | None) -> None:
        if value is not None:
            await self._input(identifier, setting, value)

    async def _acceleration(self, identifier: str, accel: AccelConfig | None) -> None:
        if accel is None:
            return
        await self._input(identifier, "pointer_accel", clamp_speed(accel.speed))
        if accel.profile is not None:
            await self._input(identifier, "accel_profile", ACCEL_PROFILES.get(accel.profile, DEFAULT_TOKEN))

    async def _click_method(self, identifier: str, method: ClickMethod | None) -> None:
        if method is not None:
            await self._input(identifier, "click_method", CLICK_METHODS.get(method, DEFAULT_TOKEN))

    async def _scroll_method(self, identifier: str, method: ScrollMethod | None) -> None:
        if method is not None:
            await self._input(identifier, "scroll_method", SCROLL_METHODS.get(method, DEFAULT_TOKEN))

    async def _scroll_config(self, identifier: str, config: ScrollConfig | None) -> None:
        if config is None:
            return
        await self._optional(identifier, "scroll_factor", config.scroll_factor)
        await self._toggle(identifier, "natural_scroll", config.natural_scroll)

    # Touchpad {{{

    async def touchpad_acceleration(self, accel: AccelConfig | None) -> None:
        await self._acceleration(TOUCHPAD, accel)

    async def touchpad_click_method(self, method: ClickMethod | None) -> None:
        await self._click_method(TOUCHPAD, method)

    async def touchpad_disable_while_typing(self, enabled: bool | None) -> None:
        await self._toggle(TOUCHPAD, "dwt", enabled)

    async def touchpad_left_handed(self, enabled: bool | None) -> None:
        await self._toggle(TOUCHPAD, "left_handed", enabled)

    async def touchpad_middle_button_emulation(self, enabled: bool | None) -> None:
        await self._toggle(TOUCHPAD, "middle_emulation", enabled)

    async def touchpad_scroll_config(self, config: ScrollConfig | None) -> None:
        await self._scroll_config(TOUCHPAD, config)

    async def touchpad_scroll_method(self, method: ScrollMethod | None) -> None:
        await self._scroll_method(TOUCHPAD, method)

    async def touchpad_natural_scroll(self, enabled: bool | None) -> None:
        await self._toggle(TOUCHPAD, "natural_scroll", enabled)

    async def touchpad_scroll_factor(self, factor: float | None) -> None:
        await self._optional(TOUCHPAD, "scroll_factor", factor)

    async def touchpad_scroll_button(self, button: int | None) -> None:
        await self._optional(TOUCHPAD, "scroll_button", button)

    async def touchpad_tap_config(self, config: TapConfig | None) -> None:
        if config is None:
            return
        await self._toggle(TOUCHPAD, "tap", config.enabled)
        await self._toggle(TOUCHPAD, "tap_and_drag", config.drag)
        await self._toggle(TOUCHPAD, "drag_lock", config.drag_lock)

    async def touchpad_tap_enabled(self, enabled: bool) -> None:
        await self._toggle(TOUCHPAD, "tap", enabled)

    async def touchpad_tap_drag(self, enabled: bool) -> None:
        await self._toggle(TOUCHPAD, "tap_and_drag", enabled)

    async def touchpad_tap_drag_lock(self, enabled: bool) -> None:
        await self._toggle(TOUCHPAD, "drag_lock", enabled)

    # }}}

    # Mouse {{{

    async def mouse_acceleration(self, accel: AccelConfig | None) -> None:
        await self._acceleration(POINTER, accel)

    async def mouse_click_method(self, method: ClickMethod | None) -> None:
        await self._click_method(POINTER, method)

    async def mouse_disable_while_typing(self, enabled: bool | None) -> None:
        await self._toggle(POINTER, "dwt", enabled)

    async def mouse_left_handed(self, enabled: bool | None) -> None:
        await self._toggle(POINTER, "left_handed", enabled)

    async def mouse_middle_button_emulation(self, enabled: bool | None) -> None:
        await self._toggle(POINTER, "middle_emulation", enabled)

    async def mouse_scroll_config(self, config: ScrollConfig | None) -> None:
        await self._scroll_config(POINTER, config)

    async def mouse_scroll_method(self, method: ScrollMethod | None) -> None:
        await self._scroll_method(POINTER, method)

    async def mouse_natural_scroll(self, enabled: bool | None) -> None:
        await self._toggle(POINTER, "natural_scroll", enabled)

    async def mouse_scroll_factor(self, factor: float | None) -> None:
        await self._optional(POINTER, "scroll_factor", factor)

    async def mouse_scroll_button(self, button: int | None) -> None:
        await self._optional(POINTER, "scroll_button", button)

    # }}}

    # Keyboard {{{

    async def keyboard_rules(self, rules: str) -> None:
        await self._input(KEYBOARD, "xkb_rules", rules)

    async def keyboard_model(self, model: str) -> None:
        await self._input(KEYBOARD, "xkb_model", model)

    async def keyboard_layout(self, layout: str) -> None:
        await self._input(KEYBOARD, "xkb_layout", layout)

    async def keyboard_variant(self, variant: str) -> None:
        await self._input(KEYBOARD, "xkb_variant", variant)

    async def keyboard_options(self, options: str | None) -> None:
        if options is not None:
            await self._input(KEYBOARD, "xkb_options", normalize_options(options))

    async def keyboard_repeat_delay(self, delay: int) -> None:
        await self._input(KEYBOARD, "repeat_delay", delay)

    async def keyboard_repeat_rate(self, rate: int) -> None:
        await self._input(KEYBOARD, "repeat_rate", rate)

    async def keyboard_numlock(self, state: NumlockState) -> None:
        # LastBoot: keep whatever is configured
        if state != NumlockState.LAST_BOOT:
            await self._input(KEYBOARD, "xkb_numlock", _toggle(state == NumlockState.BOOT_ON))

    # }}}
