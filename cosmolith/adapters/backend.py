"""Compositor capability interface.

Every backend derives from `Compositor` and overrides the capability methods
it can express. The defaults log "<method> not implemented" and succeed, so a
backend only has to know about what it supports.

`apply_event` is the single place where events are turned into capability
calls, using the `EVENT_HANDLERS` table.
"""

from logging import Logger

from .. import events as ev
from ..constants import SPEED_MAX, SPEED_MIN
from ..errors import UnhandledEventError
from ..events import Calibration, Event, InputEvent
from ..logging_setup import get_logger, is_strict
from ..models import (
    AccelConfig,
    ClickMethod,
    DeviceState,
    NumlockState,
    ScrollConfig,
    ScrollMethod,
    TapButtonMap,
    TapConfig,
)

__all__ = ["EVENT_HANDLERS", "Compositor", "clamp_speed", "missing_routes", "normalize_options"]


def normalize_options(options: str) -> str:
    """Clean a comma separated XKB options list.

    Drops empty items and the whitespace around each item, eg: `" ,us, ,de,"` → `"us,de"`.
    """
    return ",".join(part.strip() for part in options.split(",") if part.strip())


def clamp_speed(speed: float) -> float:
    """Clamp an acceleration speed to the libinput range."""
    return max(SPEED_MIN, min(SPEED_MAX, speed))


EVENT_HANDLERS: dict[type[Event], str] = {
    # touchpad
    ev.TouchpadState: "touchpad_state",
    ev.TouchpadAcceleration: "touchpad_acceleration",
    ev.TouchpadCalibration: "touchpad_calibration",
    ev.TouchpadClickMethod: "touchpad_click_method",
    ev.TouchpadDisableWhileTyping: "touchpad_disable_while_typing",
    ev.TouchpadLeftHanded: "touchpad_left_handed",
    ev.TouchpadMiddleButtonEmulation: "touchpad_middle_button_emulation",
    ev.TouchpadRotationAngle: "touchpad_rotation_angle",
    ev.TouchpadScrollConfig: "touchpad_scroll_config",
    ev.TouchpadTapConfig: "touchpad_tap_config",
    ev.TouchpadMapToOutput: "touchpad_map_to_output",
    ev.TouchpadScrollMethod: "touchpad_scroll_method",
    ev.TouchpadNaturalScroll: "touchpad_natural_scroll",
    ev.TouchpadScrollFactor: "touchpad_scroll_factor",
    ev.TouchpadScrollButton: "touchpad_scroll_button",
    ev.TouchpadTapEnabled: "touchpad_tap_enabled",
    ev.TouchpadTapButtonMap: "touchpad_tap_button_map",
    ev.TouchpadTapDrag: "touchpad_tap_drag",
    ev.TouchpadTapDragLock: "touchpad_tap_drag_lock",
    # mouse
    ev.MouseState: "mouse_state",
    ev.MouseAcceleration: "mouse_acceleration",
    ev.MouseCalibration: "mouse_calibration",
    ev.MouseClickMethod: "mouse_click_method",
    ev.MouseDisableWhileTyping: "mouse_disable_while_typing",
    ev.MouseLeftHanded: "mouse_left_handed",
    ev.MouseMiddleButtonEmulation: "mouse_middle_button_emulation",
    ev.MouseRotationAngle: "mouse_rotation_angle",
    ev.MouseScrollConfig: "mouse_scroll_config",
    ev.MouseTapConfig: "mouse_tap_config",
    ev.MouseMapToOutput: "mouse_map_to_output",
    ev.MouseScrollMethod: "mouse_scroll_method",
    ev.MouseNaturalScroll: "mouse_natural_scroll",
    ev.MouseScrollFactor: "mouse_scroll_factor",
    ev.MouseScrollButton: "mouse_scroll_button",
    # keyboard
    ev.KeyboardRules: "keyboard_rules",
    ev.KeyboardModel: "keyboard_model",
    ev.KeyboardLayout: "keyboard_layout",
    ev.KeyboardVariant: "keyboard_variant",
    ev.KeyboardOptions: "keyboard_options",
    ev.KeyboardRepeatDelay: "keyboard_repeat_delay",
    ev.KeyboardRepeatRate: "keyboard_repeat_rate",
    ev.KeyboardNumLock: "keyboard_numlock",
}


def missing_routes() -> list[type[Event]]:
    """Return the event classes without a capability method."""
    return [event_type for event_type in ev.ALL_EVENT_TYPES if event_type not in EVENT_HANDLERS]


class Compositor:  # pylint: disable=too-many-public-methods
    """Base class of every compositor backend."""

    name = "compositor"

    def __init__(self, log: Logger | None = None) -> None:
        """Initialize the backend.

        Args:
            log: logger to use, defaults to one named after the backend
        """
        self.log = log or get_logger(self.name)

    # Lifecycle {{{

    async def init(self) -> None:
        """Check the backend is reachable and set it up.

        Raises:
            CosmolithError: if the backend can't be used
        """

    def is_running(self) -> bool:
        """Fast check that the backend is available."""
        return True

    def supports(self, event: Event) -> bool:
        """Return True if `event` should be given to `apply_event`."""
        return isinstance(event, InputEvent)

    async def reload(self) -> None:
        """Ask the backend to reload its settings."""

    async def shutdown(self) -> None:
        """Release the backend resources."""

    # }}}

    async def apply_event(self, event: Event) -> None:
        """Call the capability method matching `event` with its payload.

        Raises:
            UnhandledEventError: if no method handles the event, in strict mode only
        """
        method_name = EVENT_HANDLERS.get(type(event))
        if method_name is None:
            if is_strict():
                raise UnhandledEventError(self.name, event)
            self.log.error("No handler for %s", event.kind)
            return
        await getattr(self, method_name)(event.value)  # type: ignore[attr-defined]

    def _not_implemented(self, method: str) -> None:
        self.log.debug("%s not implemented", method)

    # Touchpad {{{

    async def touchpad_state(self, state: DeviceState) -> None:
        """Enable or disable the touchpad."""
        self._not_implemented("touchpad_state")

    async def touchpad_acceleration(self, accel: AccelConfig | None) -> None:
        """Set the touchpad pointer speed and acceleration profile."""
        self._not_implemented("touchpad_acceleration")

    async def touchpad_calibration(self, calibration: Calibration | None) -> None:
        self._not_implemented("touchpad_calibration")

    async def touchpad_click_method(self, method: ClickMethod | None) -> None:
        self._not_implemented("touchpad_click_method")

    async def touchpad_disable_while_typing(self, enabled: bool | None) -> None:
        self._not_implemented("touchpad_disable_while_typing")

    async def touchpad_left_handed(self, enabled: bool | None) -> None:
        self._not_implemented("touchpad_left_handed")

    async def touchpad_middle_button_emulation(self, enabled: bool | None) -> None:
        self._not_implemented("touchpad_middle_button_emulation")

    async def touchpad_rotation_angle(self, angle: int | None) -> None:
        self._not_implemented("touchpad_rotation_angle")

    async def touchpad_scroll_config(self, config: ScrollConfig | None) -> None:
        """Apply a whole scroll configuration, for backends having a bulk setter."""
        self._not_implemented("touchpad_scroll_config")

    async def touchpad_tap_config(self, config: TapConfig | None) -> None:
        """Apply a whole tap configuration, for backends having a bulk setter."""
        self._not_implemented("touchpad_tap_config")

    async def touchpad_map_to_output(self, output: str | None) -> None:
        self._not_implemented("touchpad_map_to_output")

    async def touchpad_scroll_method(self, method: ScrollMethod | None) -> None:
        self._not_implemented("touchpad_scroll_method")

    async def touchpad_natural_scroll(self, enabled: bool | None) -> None:
        self._not_implemented("touchpad_natural_scroll")

    async def touchpad_scroll_factor(self, factor: float | None) -> None:
        self._not_implemented("touchpad_scroll_factor")

    async def touchpad_scroll_button(self, button: int | None) -> None:
        self._not_implemented("touchpad_scroll_button")

    async def touchpad_tap_enabled(self, enabled: bool) -> None:
        """Enable or disable tap to click."""
        self._not_implemented("touchpad_tap_enabled")

    async def touchpad_tap_button_map(self, button_map: TapButtonMap | None) -> None:
        self._not_implemented("touchpad_tap_button_map")

    async def touchpad_tap_drag(self, enabled: bool) -> None:
        self._not_implemented("touchpad_tap_drag")

    async def touchpad_tap_drag_lock(self, enabled: bool) -> None:
        self._not_implemented("touchpad_tap_drag_lock")

    # }}}

    # Mouse {{{

    async def mouse_state(self, state: DeviceState) -> None:
        """Enable or disable the mouse."""
        self._not_implemented("mouse_state")

    async def mouse_acceleration(self, accel: AccelConfig | None) -> None:
        """Set the mouse pointer speed and acceleration profile."""
        self._not_implemented("mouse_acceleration")

    async def mouse_calibration(self, calibration: Calibration | None) -> None:
        self._not_implemented("mouse_calibration")

    async def mouse_click_method(self, method: ClickMethod | None) -> None:
        self._not_implemented("mouse_click_method")

    async def mouse_disable_while_typing(self, enabled: bool | None) -> None:
        self._not_implemented("mouse_disable_while_typing")

    async def mouse_left_handed(self, enabled: bool | None) -> None:
        self._not_implemented("mouse_left_handed")

    async def mouse_middle_button_emulation(self, enabled: bool | None) -> None:
        self._not_implemented("mouse_middle_button_emulation")

    async def mouse_rotation_angle(self, angle: int | None) -> None:
        self._not_implemented("mouse_rotation_angle")

    async def mouse_scroll_config(self, config: ScrollConfig | None) -> None:
        """Apply a whole scroll configuration, for backends having a bulk setter."""
        self._not_implemented("mouse_scroll_config")

    async def mouse_tap_config(self, config: TapConfig | None) -> None:
        self._not_implemented("mouse_tap_config")

    async def mouse_map_to_output(self, output: str | None) -> None:
        self._not_implemented("mouse_map_to_output")

    async def mouse_scroll_method(self, method: ScrollMethod | None) -> None:
        self._not_implemented("mouse_scroll_method")

    async def mouse_natural_scroll(self, enabled: bool | None) -> None:
        self._not_implemented("mouse_natural_scroll")

    async def mouse_scroll_factor(self, factor: float | None) -> None:
        self._not_implemented("mouse_scroll_factor")

    async def mouse_scroll_button(self, button: int | None) -> None:
        self._not_implemented("mouse_scroll_button")

    # }}}

    # Keyboard {{{

    async def keyboard_rules(self, rules: str) -> None:
        self._not_implemented("keyboard_rules")

    async def keyboard_model(self, model: str) -> None:
        self._not_implemented("keyboard_model")

    async def keyboard_layout(self, layout: str) -> None:
        """Set the XKB layout list, eg: `us,de`."""
        self._not_implemented("keyboard_layout")

    async def keyboard_variant(self, variant: str) -> None:
        self._not_implemented("keyboard_variant")

    async def keyboard_options(self, options: str | None) -> None:
        """Set the XKB options, see `normalize_options`."""
        self._not_implemented("keyboard_options")

    async def keyboard_repeat_delay(self, delay: int) -> None:
        """Set the key repeat delay, in milliseconds."""
        self._not_implemented("keyboard_repeat_delay")

    async def keyboard_repeat_rate(self, rate: int) -> None:
        """Set the key repeat rate, in repeats per second."""
        self._not_implemented("keyboard_repeat_rate")

    async def keyboard_numlock(self, state: NumlockState) -> None:
        """Set the numlock state applied at startup."""
        self._not_implemented("keyboard_numlock")

    # }}}
