"""Hyprland adapter: settings are applied with `keyword` requests."""

import os
from logging import Logger

from ..errors import IpcCommandError
from ..ipc import hyprctl, hyprland_socket_path
from ..models import (
    AccelConfig,
    AccelProfile,
    ClickMethod,
    NumlockState,
    ScrollConfig,
    ScrollMethod,
    TapButtonMap,
    TapConfig,
)
from .backend import Compositor, clamp_speed, normalize_options

SCROLL_METHODS: dict[ScrollMethod, str] = {
    ScrollMethod.TWO_FINGER: "2fg",
    ScrollMethod.EDGE: "edge",
    ScrollMethod.ON_BUTTON_DOWN: "on_button",
    ScrollMethod.NO_SCROLL: "none",
}
DEFAULT_SCROLL_METHOD = "none"

ACCEL_PROFILES: dict[AccelProfile, str] = {
    AccelProfile.FLAT: "flat",
    AccelProfile.ADAPTIVE: "adaptive",
}
DEFAULT_ACCEL_PROFILE = "adaptive"

TAP_BUTTON_MAPS: dict[TapButtonMap, str] = {
    TapButtonMap.LEFT_RIGHT_MIDDLE: "lrm",
    TapButtonMap.LEFT_MIDDLE_RIGHT: "lmr",
}
DEFAULT_TAP_BUTTON_MAP = "lrm"


def _token(value: bool | float | str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Hyprland(Compositor):
    """Hyprland backend implementation.

    Hyprland has no per-device touchpad/mouse split for most settings, both
    devices share the `input:` section.
    """

    name = "hyprland"

    def __init__(self, signature: str | None = None, log: Logger | None = None) -> None:
        super().__init__(log)
        self.signature = signature
        self.socket_path = ""

    async def init(self) -> None:
        self.signature = self.signature or os.environ.get("HYPRLAND_INSTANCE_SIGNATURE")
        self.socket_path = hyprland_socket_path(self.signature)

    def is_running(self) -> bool:
        return bool(os.environ.get("HYPRLAND_INSTANCE_SIGNATURE"))

    async def set_keyword(self, key: str, value: bool | float | str) -> None:
        """Set a configuration keyword.

        Raises:
            IpcCommandError: if Hyprland rejected the value
        """
        command = f"{key} {_token(value)}"
        if not await hyprctl(command, "keyword", socket_path=self.socket_path, log=self.log):
            raise IpcCommandError(self.name, f"keyword {command}")

    async def _set_optional(self, key: str, value: bool | float | None) -> None:
        if value is not None:
            await self.set_keyword(key, value)

    async def _set_acceleration(self, accel: AccelConfig | None) -> None:
        if accel is None:
            return
        await self.set_keyword("input:sensitivity", clamp_speed(accel.speed))
        if accel.profile is not None:
            await self.set_keyword("input:accel_profile", ACCEL_PROFILES.get(accel.profile, DEFAULT_ACCEL_PROFILE))

    async def _set_scroll_method(self, method: ScrollMethod | None) -> None:
        if method is not None:
            await self.set_keyword("input:scroll_method", SCROLL_METHODS.get(method, DEFAULT_SCROLL_METHOD))

    # Touchpad {{{

    async def touchpad_acceleration(self, accel: AccelConfig | None) -> None:
        await self._set_acceleration(accel)

    async def touchpad_click_method(self, method: ClickMethod | None) -> None:
        if method is not None:
            await self.set_keyword("input:touchpad:clickfinger_behavior", method == ClickMethod.CLICKFINGER)

    async def touchpad_disable_while_typing(self, enabled: bool | None) -> None:
        await self._set_optional("input:touchpad:disable_while_typing", enabled)

    async def touchpad_left_handed(self, enabled: bool | None) -> None:
        await self._set_optional("input:left_handed", enabled)

    async def touchpad_middle_button_emulation(self, enabled: bool | None) -> None:
        await self._set_optional("input:touchpad:middle_button_emulation", enabled)

    async def touchpad_scroll_config(self, config: ScrollConfig | None) -> None:
        if config is None:
            return
        await self._set_optional("input:touchpad:scroll_factor", config.scroll_factor)
        await self._set_optional("input:touchpad:natural_scroll", config.natural_scroll)

    async def touchpad_scroll_method(self, method: ScrollMethod | None) -> None:
        await self._set_scroll_method(method)

    async def touchpad_natural_scroll(self, enabled: bool | None) -> None:
        await self._set_optional("input:touchpad:natural_scroll", enabled)

    async def touchpad_scroll_factor(self, factor: float | None) -> None:
        await self._set_optional("input:touchpad:scroll_factor", factor)

    async def touchpad_tap_config(self, config: TapConfig | None) -> None:
        if config is None:
            return
        await self.set_keyword("input:touchpad:tap-to-click", config.enabled)
        await self.set_keyword("input:touchpad:tap-and-drag", config.drag)
        await self.set_keyword("input:touchpad:drag_lock", config.drag_lock)

    async def touchpad_tap_enabled(self, enabled: bool) -> None:
        await self.set_keyword("input:touchpad:tap-to-click", enabled)

    async def touchpad_tap_button_map(self, button_map: TapButtonMap | None) -> None:
        if button_map is not None:
            await self.set_keyword("input:touchpad:tap_button_map", TAP_BUTTON_MAPS.get(button_map, DEFAULT_TAP_BUTTON_MAP))

    async def touchpad_tap_drag(self, enabled: bool) -> None:
        await self.set_keyword("input:touchpad:tap-and-drag", enabled)

    async def touchpad_tap_drag_lock(self, enabled: bool) -> None:
        await self.set_keyword("input:touchpad:drag_lock", enabled)

    # }}}

    # Mouse {{{

    async def mouse_acceleration(self, accel: AccelConfig | None) -> None:
        await self._set_acceleration(accel)

    async def mouse_left_handed(self, enabled: bool | None) -> None:
        await self._set_optional("input:left_handed", enabled)

    async def mouse_scroll_method(self, method: ScrollMethod | None) -> None:
        await self._set_scroll_method(method)

    async def mouse_natural_scroll(self, enabled: bool | None) -> None:
        await self._set_optional("input:natural_scroll", enabled)

    async def mouse_scroll_button(self, button: int | None) -> None:
        await self._set_optional("input:scroll_button", button)

    # }}}

    # Keyboard {{{

    async def keyboard_rules(self, rules: str) -> None:
        await self.set_keyword("input:kb_rules", rules)

    async def keyboard_model(self, model: str) -> None:
        await self.set_keyword("input:kb_model", model)

    async def keyboard_layout(self, layout: str) -> None:
        await self.set_keyword("input:kb_layout", layout)

    async def keyboard_variant(self, variant: str) -> None:
        await self.set_keyword("input:kb_variant", variant)

    async def keyboard_options(self, options: str | None) -> None:
        if options is not None:
            await self.set_keyword("input:kb_options", normalize_options(options))

    async def keyboard_repeat_delay(self, delay: int) -> None:
        await self.set_keyword("input:repeat_delay", delay)

    async def keyboard_repeat_rate(self, rate: int) -> None:
        await self.set_keyword("input:repeat_rate", rate)

    async def keyboard_numlock(self, state: NumlockState) -> None:
        # LastBoot: keep whatever is configured
        if state != NumlockState.LAST_BOOT:
            await self.set_keyword("input:numlock_by_default", state == NumlockState.BOOT_ON)

    # }}}
