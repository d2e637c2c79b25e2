"""Turn two snapshots of a configuration domain into an ordered list of events.

Fields are compared in their declared order and every difference yields one
event carrying the new value. Composite scroll and tap settings are emitted
twice: first as a whole (coarse event), then field by field.

Optional boolean and numeric fields which are unset in the new snapshot do
not produce events: unset means "leave as is", not "reset".
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from . import events as ev
from .events import Event
from .models import Domain, DomainValue, InputConfig, KeyboardConfig, XkbConfig

__all__ = [
    "diff",
    "keyboard_events",
    "mouse_events",
    "numlock_events",
    "touchpad_events",
]

EventFactory = Callable[[Any], Event]


@dataclass(frozen=True)
class _InputEventTypes:  # pylint: disable=too-many-instance-attributes
    """Event classes produced for one pointer device."""

    state: EventFactory
    acceleration: EventFactory
    calibration: EventFactory
    click_method: EventFactory
    disable_while_typing: EventFactory
    left_handed: EventFactory
    middle_button_emulation: EventFactory
    rotation_angle: EventFactory
    scroll_config: EventFactory
    tap_config: EventFactory
    map_to_output: EventFactory
    scroll_method: EventFactory
    natural_scroll: EventFactory
    scroll_button: EventFactory
    scroll_factor: EventFactory
    # mouse tap settings only exist as a whole
    tap_enabled: EventFactory | None = None
    tap_button_map: EventFactory | None = None
    tap_drag: EventFactory | None = None
    tap_drag_lock: EventFactory | None = None


TOUCHPAD_EVENTS = _InputEventTypes(
    state=ev.TouchpadState,
    acceleration=ev.TouchpadAcceleration,
    calibration=ev.TouchpadCalibration,
    click_method=ev.TouchpadClickMethod,
    disable_while_typing=ev.TouchpadDisableWhileTyping,
    left_handed=ev.TouchpadLeftHanded,
    middle_button_emulation=ev.TouchpadMiddleButtonEmulation,
    rotation_angle=ev.TouchpadRotationAngle,
    scroll_config=ev.TouchpadScrollConfig,
    tap_config=ev.TouchpadTapConfig,
    map_to_output=ev.TouchpadMapToOutput,
    scroll_method=ev.TouchpadScrollMethod,
    natural_scroll=ev.TouchpadNaturalScroll,
    scroll_button=ev.TouchpadScrollButton,
    scroll_factor=ev.TouchpadScrollFactor,
    tap_enabled=ev.TouchpadTapEnabled,
    tap_button_map=ev.TouchpadTapButtonMap,
    tap_drag=ev.TouchpadTapDrag,
    tap_drag_lock=ev.TouchpadTapDragLock,
)

MOUSE_EVENTS = _InputEventTypes(
    state=ev.MouseState,
    acceleration=ev.MouseAcceleration,
    calibration=ev.MouseCalibration,
    click_method=ev.MouseClickMethod,
    disable_while_typing=ev.MouseDisableWhileTyping,
    left_handed=ev.MouseLeftHanded,
    middle_button_emulation=ev.MouseMiddleButtonEmulation,
    rotation_angle=ev.MouseRotationAngle,
    scroll_config=ev.MouseScrollConfig,
    tap_config=ev.MouseTapConfig,
    map_to_output=ev.MouseMapToOutput,
    scroll_method=ev.MouseScrollMethod,
    natural_scroll=ev.MouseNaturalScroll,
    scroll_button=ev.MouseScrollButton,
    scroll_factor=ev.MouseScrollFactor,
)


class _Collector:
    """Accumulate events for changed values."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def changed(self, old: Any, new: Any, factory: EventFactory | None, skip_unset: bool = False) -> bool:  # noqa: ANN401
        """Append `factory(new)` if `old` differs from `new`.

        Args:
            old: previous value
            new: current value
            factory: event class to build, None when the device has no such event
            skip_unset: don't emit anything if `new` is None

        Returns:
            True if the values differ
        """
        if old == new:
            return False
        if factory is not None and not (skip_unset and new is None):
            self.events.append(factory(new))
        return True


def _input_events(old: InputConfig, new: InputConfig, types: _InputEventTypes) -> list[Event]:
    if old == new:
        return []

    out = _Collector()
    out.changed(old.state, new.state, types.state)
    out.changed(old.acceleration, new.acceleration, types.acceleration)
    out.changed(old.calibration, new.calibration, types.calibration)
    out.changed(old.click_method, new.click_method, types.click_method)
    out.changed(old.disable_while_typing, new.disable_while_typing, types.disable_while_typing, skip_unset=True)
    out.changed(old.left_handed, new.left_handed, types.left_handed, skip_unset=True)
    out.changed(old.middle_button_emulation, new.middle_button_emulation, types.middle_button_emulation, skip_unset=True)
    out.changed(old.rotation_angle, new.rotation_angle, types.rotation_angle, skip_unset=True)

    if out.changed(old.scroll_config, new.scroll_config, types.scroll_config):
        old_scroll, new_scroll = old.scroll_config, new.scroll_config
        if old_scroll is not None and new_scroll is not None:
            out.changed(old_scroll.method, new_scroll.method, types.scroll_method)
            out.changed(old_scroll.natural_scroll, new_scroll.natural_scroll, types.natural_scroll, skip_unset=True)
            out.changed(old_scroll.scroll_button, new_scroll.scroll_button, types.scroll_button, skip_unset=True)
            out.changed(old_scroll.scroll_factor, new_scroll.scroll_factor, types.scroll_factor, skip_unset=True)

    if out.changed(old.tap_config, new.tap_config, types.tap_config):
        old_tap, new_tap = old.tap_config, new.tap_config
        if old_tap is not None and new_tap is not None:
            out.changed(old_tap.enabled, new_tap.enabled, types.tap_enabled)
            out.changed(old_tap.button_map, new_tap.button_map, types.tap_button_map)
            out.changed(old_tap.drag, new_tap.drag, types.tap_drag)
            out.changed(old_tap.drag_lock, new_tap.drag_lock, types.tap_drag_lock)

    out.changed(old.map_to_output, new.map_to_output, types.map_to_output)
    return out.events


def touchpad_events(old: InputConfig, new: InputConfig) -> list[Event]:
    """Return the events turning touchpad settings `old` into `new`."""
    return _input_events(old, new, TOUCHPAD_EVENTS)


def mouse_events(old: InputConfig, new: InputConfig) -> list[Event]:
    """Return the events turning mouse settings `old` into `new`."""
    return _input_events(old, new, MOUSE_EVENTS)


def keyboard_events(old: XkbConfig, new: XkbConfig) -> list[Event]:
    """Return the events turning keyboard layout settings `old` into `new`."""
    if old == new:
        return []
    out = _Collector()
    out.changed(old.rules, new.rules, ev.KeyboardRules)
    out.changed(old.model, new.model, ev.KeyboardModel)
    out.changed(old.layout, new.layout, ev.KeyboardLayout)
    out.changed(old.variant, new.variant, ev.KeyboardVariant)
    out.changed(old.options, new.options, ev.KeyboardOptions)
    out.changed(old.repeat_delay, new.repeat_delay, ev.KeyboardRepeatDelay)
    out.changed(old.repeat_rate, new.repeat_rate, ev.KeyboardRepeatRate)
    return out.events


def numlock_events(old: KeyboardConfig, new: KeyboardConfig) -> list[Event]:
    """Return the events turning keyboard boot settings `old` into `new`."""
    if old == new:
        return []
    out = _Collector()
    out.changed(old.numlock_state, new.numlock_state, ev.KeyboardNumLock)
    return out.events


_DIFFERS: dict[Domain, Callable[[Any, Any], list[Event]]] = {
    Domain.TOUCHPAD: touchpad_events,
    Domain.MOUSE: mouse_events,
    Domain.KEYBOARD: keyboard_events,
    Domain.NUMLOCK: numlock_events,
}


def diff(domain: Domain, old: DomainValue, new: DomainValue) -> list[Event]:
    """Return the ordered events turning `old` into `new` for `domain`.

    Args:
        domain: the configuration domain both values belong to
        old: previous snapshot
        new: current snapshot
    """
    return _DIFFERS[domain](old, new)
