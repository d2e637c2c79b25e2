"""Atomic configuration change events.

The taxonomy is closed and has two levels: an event category (currently only
input) and a device (touchpad, mouse, keyboard), then one class per atomic
change. Each event carries the *new* value, so applying it twice has the same
effect as applying it once.

`ScrollConfig` and `TapConfig` events deliberately carry a whole
sub-configuration, for backends which only expose a bulk setter. They are
always followed by the matching fine-grained events.
"""

from dataclasses import dataclass
from typing import ClassVar

from .models import (
    AccelConfig,
    ClickMethod,
    DeviceState,
    NumlockState,
    ScrollConfig,
    ScrollMethod,
    TapButtonMap,
    TapConfig,
)

__all__ = [
    "ALL_EVENT_TYPES",
    "Event",
    "InputEvent",
    "KeyboardEvent",
    "MouseEvent",
    "TouchpadEvent",
]

Calibration = tuple[float, float, float, float, float, float]


@dataclass(frozen=True)
class Event:
    """Base class of every event."""

    category: ClassVar[str] = ""
    device: ClassVar[str] = ""

    @property
    def kind(self) -> str:
        """Short name used in logs, eg: `touchpad.TapEnabled`."""
        name = type(self).__name__
        return f"{self.device}.{name.removeprefix(self.device.capitalize())}"


@dataclass(frozen=True)
class InputEvent(Event):
    """Input device settings change."""

    category: ClassVar[str] = "input"


@dataclass(frozen=True)
class TouchpadEvent(InputEvent):
    """Touchpad settings change."""

    device: ClassVar[str] = "touchpad"


@dataclass(frozen=True)
class MouseEvent(InputEvent):
    """Mouse settings change."""

    device: ClassVar[str] = "mouse"


@dataclass(frozen=True)
class KeyboardEvent(InputEvent):
    """Keyboard settings change."""

    device: ClassVar[str] = "keyboard"


# Touchpad {{{


@dataclass(frozen=True)
class TouchpadState(TouchpadEvent):
    value: DeviceState


@dataclass(frozen=True)
class TouchpadAcceleration(TouchpadEvent):
    value: AccelConfig | None


@dataclass(frozen=True)
class TouchpadCalibration(TouchpadEvent):
    value: Calibration | None


@dataclass(frozen=True)
class TouchpadClickMethod(TouchpadEvent):
    value: ClickMethod | None


@dataclass(frozen=True)
class TouchpadDisableWhileTyping(TouchpadEvent):
    value: bool | None


@dataclass(frozen=True)
class TouchpadLeftHanded(TouchpadEvent):
    value: bool | None


@dataclass(frozen=True)
class TouchpadMiddleButtonEmulation(TouchpadEvent):
    value: bool | None


@dataclass(frozen=True)
class TouchpadRotationAngle(TouchpadEvent):
    value: int | None


@dataclass(frozen=True)
class TouchpadScrollConfig(TouchpadEvent):
    """Whole scroll configuration (coarse)."""

    value: ScrollConfig | None


@dataclass(frozen=True)
class TouchpadTapConfig(TouchpadEvent):
    """Whole tap configuration (coarse)."""

    value: TapConfig | None


@dataclass(frozen=True)
class TouchpadMapToOutput(TouchpadEvent):
    value: str | None


@dataclass(frozen=True)
class TouchpadScrollMethod(TouchpadEvent):
    value: ScrollMethod | None


@dataclass(frozen=True)
class TouchpadNaturalScroll(TouchpadEvent):
    value: bool | None


@dataclass(frozen=True)
class TouchpadScrollFactor(TouchpadEvent):
    value: float | None


@dataclass(frozen=True)
class TouchpadScrollButton(TouchpadEvent):
    value: int | None


@dataclass(frozen=True)
class TouchpadTapEnabled(TouchpadEvent):
    value: bool


@dataclass(frozen=True)
class TouchpadTapButtonMap(TouchpadEvent):
    value: TapButtonMap | None


@dataclass(frozen=True)
class TouchpadTapDrag(TouchpadEvent):
    value: bool


@dataclass(frozen=True)
class TouchpadTapDragLock(TouchpadEvent):
    value: bool


# }}}

# Mouse {{{


@dataclass(frozen=True)
class MouseState(MouseEvent):
    value: DeviceState


@dataclass(frozen=True)
class MouseAcceleration(MouseEvent):
    value: AccelConfig | None


@dataclass(frozen=True)
class MouseCalibration(MouseEvent):
    value: Calibration | None


@dataclass(frozen=True)
class MouseClickMethod(MouseEvent):
    value: ClickMethod | None


@dataclass(frozen=True)
class MouseDisableWhileTyping(MouseEvent):
    value: bool | None


@dataclass(frozen=True)
class MouseLeftHanded(MouseEvent):
    value: bool | None


@dataclass(frozen=True)
class MouseMiddleButtonEmulation(MouseEvent):
    value: bool | None


@dataclass(frozen=True)
class MouseRotationAngle(MouseEvent):
    value: int | None


@dataclass(frozen=True)
class MouseScrollConfig(MouseEvent):
    """Whole scroll configuration (coarse)."""

    value: ScrollConfig | None


@dataclass(frozen=True)
class MouseTapConfig(MouseEvent):
    """Whole tap configuration (coarse, no fine-grained counterpart)."""

    value: TapConfig | None


@dataclass(frozen=True)
class MouseMapToOutput(MouseEvent):
    value: str | None


@dataclass(frozen=True)
class MouseScrollMethod(MouseEvent):
    value: ScrollMethod | None


@dataclass(frozen=True)
class MouseNaturalScroll(MouseEvent):
    value: bool | None


@dataclass(frozen=True)
class MouseScrollFactor(MouseEvent):
    value: float | None


@dataclass(frozen=True)
class MouseScrollButton(MouseEvent):
    value: int | None


# }}}

# Keyboard {{{


@dataclass(frozen=True)
class KeyboardRules(KeyboardEvent):
    value: str


@dataclass(frozen=True)
class KeyboardModel(KeyboardEvent):
    value: str


@dataclass(frozen=True)
class KeyboardLayout(KeyboardEvent):
    value: str


@dataclass(frozen=True)
class KeyboardVariant(KeyboardEvent):
    value: str


@dataclass(frozen=True)
class KeyboardOptions(KeyboardEvent):
    value: str | None


@dataclass(frozen=True)
class KeyboardRepeatDelay(KeyboardEvent):
    """Key repeat delay in ms."""

    value: int


@dataclass(frozen=True)
class KeyboardRepeatRate(KeyboardEvent):
    """Key repeat rate in Hz."""

    value: int


@dataclass(frozen=True)
class KeyboardNumLock(KeyboardEvent):
    value: NumlockState


# }}}

ALL_EVENT_TYPES: tuple[type[Event], ...] = (
    TouchpadState,
    TouchpadAcceleration,
    TouchpadCalibration,
    TouchpadClickMethod,
    TouchpadDisableWhileTyping,
    TouchpadLeftHanded,
    TouchpadMiddleButtonEmulation,
    TouchpadRotationAngle,
    TouchpadScrollConfig,
    TouchpadTapConfig,
    TouchpadMapToOutput,
    TouchpadScrollMethod,
    TouchpadNaturalScroll,
    TouchpadScrollFactor,
    TouchpadScrollButton,
    TouchpadTapEnabled,
    TouchpadTapButtonMap,
    TouchpadTapDrag,
    TouchpadTapDragLock,
    MouseState,
    MouseAcceleration,
    MouseCalibration,
    MouseClickMethod,
    MouseDisableWhileTyping,
    MouseLeftHanded,
    MouseMiddleButtonEmulation,
    MouseRotationAngle,
    MouseScrollConfig,
    MouseTapConfig,
    MouseMapToOutput,
    MouseScrollMethod,
    MouseNaturalScroll,
    MouseScrollFactor,
    MouseScrollButton,
    KeyboardRules,
    KeyboardModel,
    KeyboardLayout,
    KeyboardVariant,
    KeyboardOptions,
    KeyboardRepeatDelay,
    KeyboardRepeatRate,
    KeyboardNumLock,
)
"""Every concrete event class, used to check routing coverage."""
