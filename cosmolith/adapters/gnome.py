"""GNOME adapter: settings are written to the GSettings peripherals schemas."""

import os
from collections.abc import Callable
from logging import Logger
from typing import Any

from ..errors import IpcCommandError, IpcConnectionError
from ..models import AccelConfig, AccelProfile, ClickMethod
from .backend import Compositor, clamp_speed

TOUCHPAD_SCHEMA = "org.gnome.desktop.peripherals.touchpad"
MOUSE_SCHEMA = "org.gnome.desktop.peripherals.mouse"
KEYBOARD_SCHEMA = "org.gnome.desktop.peripherals.keyboard"

CLICK_METHODS: dict[ClickMethod, str] = {
    ClickMethod.BUTTON_AREAS: "areas",
    ClickMethod.CLICKFINGER: "fingers",
}
ACCEL_PROFILES: dict[AccelProfile, str] = {
    AccelProfile.FLAT: "flat",
    AccelProfile.ADAPTIVE: "adaptive",
}
DEFAULT_TOKEN = "default"


def _gio() -> Any:  # noqa: ANN401
    import gi  # pylint: disable=import-outside-toplevel

    gi.require_version("Gio", "2.0")
    from gi.repository import Gio  # pylint: disable=import-outside-toplevel

    return Gio


def _gio_settings(schema: str) -> Any:  # noqa: ANN401
    gio = _gio()
    # Gio.Settings.new() aborts the process on unknown schemas
    if gio.SettingsSchemaSource.get_default().lookup(schema, True) is None:
        raise IpcConnectionError("gnome", schema, "schema not installed")
    return gio.Settings.new(schema)


def _gio_sync() -> None:
    _gio().Settings.sync()


class Gnome(Compositor):
    """GNOME backend implementation."""

    name = "gnome"

    def __init__(
        self,
        settings_factory: Callable[[str], Any] = _gio_settings,
        sync: Callable[[], None] = _gio_sync,
        log: Logger | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            settings_factory: returns a `Gio.Settings` for a schema name
            sync: flushes pending writes, `Gio.Settings.sync` by default
            log: logger to use
        """
        super().__init__(log)
        self._settings_factory = settings_factory
        self._sync = sync
        self._settings: dict[str, Any] = {}

    async def init(self) -> None:
        for schema in (TOUCHPAD_SCHEMA, MOUSE_SCHEMA, KEYBOARD_SCHEMA):
            self._get_settings(schema)

    def is_running(self) -> bool:
        return "GNOME" in os.environ.get("XDG_CURRENT_DESKTOP", "").upper()

    def _get_settings(self, schema: str) -> Any:  # noqa: ANN401
        if schema not in self._settings:
            try:
                self._settings[schema] = self._settings_factory(schema)
            except IpcConnectionError:
                raise
            except Exception as e:  # pylint: disable=broad-except
                raise IpcConnectionError(self.name, schema, str(e)) from e
        return self._settings[schema]

    def write(self, schema: str, key: str, value: bool | float | str) -> None:
        """Write one GSettings key and flush it.

        Raises:
            IpcCommandError: if the key is not writable or the value is rejected
        """
        settings = self._get_settings(schema)
        self.log.debug("%s %s %s", schema, key, value)
        if isinstance(value, bool):
            ok = settings.set_boolean(key, value)
        elif isinstance(value, int):
            ok = settings.set_uint(key, value)
        elif isinstance(value, float):
            ok = settings.set_double(key, value)
        else:
            ok = settings.set_string(key, value)
        if not ok:
            raise IpcCommandError(self.name, f"{schema} {key}", f"value {value!r} rejected")
        self._sync()

    async def _optional(self, schema: str, key: str, value: bool | None) -> None:
        if value is not None:
            self.write(schema, key, value)

    async def _acceleration(self, schema: str, accel: AccelConfig | None) -> None:
        if accel is None:
            return
        self.write(schema, "speed", float(clamp_speed(accel.speed)))
        if accel.profile is not None:
            self.write(schema, "accel-profile", ACCEL_PROFILES.get(accel.profile, DEFAULT_TOKEN))

    # Touchpad {{{

    async def touchpad_acceleration(self, accel: AccelConfig | None) -> None:
        await self._acceleration(TOUCHPAD_SCHEMA, accel)

    async def touchpad_click_method(self, method: ClickMethod | None) -> None:
        # the click method is a global setting in GNOME
        if method is not None:
            self.write(TOUCHPAD_SCHEMA, "click-method", CLICK_METHODS.get(method, DEFAULT_TOKEN))

    async def touchpad_tap_enabled(self, enabled: bool) -> None:
        self.write(TOUCHPAD_SCHEMA, "tap-to-click", enabled)

    async def touchpad_natural_scroll(self, enabled: bool | None) -> None:
        await self._optional(TOUCHPAD_SCHEMA, "natural-scroll", enabled)

    async def touchpad_disable_while_typing(self, enabled: bool | None) -> None:
        await self._optional(TOUCHPAD_SCHEMA, "disable-while-typing", enabled)

    async def touchpad_left_handed(self, enabled: bool | None) -> None:
        # "mouse" follows the mouse setting, which is right handed by default
        if enabled is not None:
            self.write(TOUCHPAD_SCHEMA, "left-handed", "left" if enabled else "mouse")

    # }}}

    # Mouse {{{

    async def mouse_acceleration(self, accel: AccelConfig | None) -> None:
        await self._acceleration(MOUSE_SCHEMA, accel)

    async def mouse_left_handed(self, enabled: bool | None) -> None:
        await self._optional(MOUSE_SCHEMA, "left-handed", enabled)

    async def mouse_natural_scroll(self, enabled: bool | None) -> None:
        await self._optional(MOUSE_SCHEMA, "natural-scroll", enabled)

    # }}}

    # Keyboard {{{

    async def keyboard_repeat_delay(self, delay: int) -> None:
        self.write(KEYBOARD_SCHEMA, "delay", delay)

    async def keyboard_repeat_rate(self, rate: int) -> None:
        # GNOME stores the interval between repeats in ms
        if rate > 0:
            self.write(KEYBOARD_SCHEMA, "repeat-interval", max(1, 1000 // rate))

    # }}}
