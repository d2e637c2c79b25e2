"""Configuration domains as stored by the COSMIC compositor.

Every domain value is an immutable dataclass; equality is structural, which
is what the diff engine relies on to filter rewrites with identical content.
Enum values are the identifiers used in the stored files.
"""

from dataclasses import dataclass
from enum import StrEnum

__all__ = [
    "AccelConfig",
    "AccelProfile",
    "ClickMethod",
    "ConfigDomain",
    "DeviceState",
    "Domain",
    "DomainValue",
    "InputConfig",
    "KeyboardConfig",
    "NumlockState",
    "ScrollConfig",
    "ScrollMethod",
    "TapButtonMap",
    "TapConfig",
    "XkbConfig",
]


class DeviceState(StrEnum):
    """Device enable state."""

    ENABLED = "Enabled"
    DISABLED = "Disabled"
    DISABLED_ON_EXTERNAL_MOUSE = "DisabledOnExternalMouse"


class AccelProfile(StrEnum):
    """Pointer acceleration profile."""

    FLAT = "Flat"
    ADAPTIVE = "Adaptive"


class ClickMethod(StrEnum):
    """Touchpad physical click method."""

    BUTTON_AREAS = "ButtonAreas"
    CLICKFINGER = "Clickfinger"


class ScrollMethod(StrEnum):
    """Scroll method."""

    NO_SCROLL = "NoScroll"
    TWO_FINGER = "TwoFinger"
    EDGE = "Edge"
    ON_BUTTON_DOWN = "OnButtonDown"


class TapButtonMap(StrEnum):
    """Buttons generated by one, two and three finger taps."""

    LEFT_RIGHT_MIDDLE = "LeftRightMiddle"
    LEFT_MIDDLE_RIGHT = "LeftMiddleRight"


class NumlockState(StrEnum):
    """Numlock behavior at boot."""

    BOOT_ON = "BootOn"
    BOOT_OFF = "BootOff"
    LAST_BOOT = "LastBoot"


@dataclass(frozen=True)
class AccelConfig:
    """Acceleration settings."""

    speed: float = 0.0
    profile: AccelProfile | None = None


@dataclass(frozen=True)
class ScrollConfig:
    """Scroll settings, bundled as a single stored value."""

    method: ScrollMethod | None = None
    natural_scroll: bool | None = None
    scroll_button: int | None = None
    scroll_factor: float | None = None


@dataclass(frozen=True)
class TapConfig:
    """Tap settings, bundled as a single stored value."""

    enabled: bool = True
    button_map: TapButtonMap | None = None
    drag: bool = True
    drag_lock: bool = False


@dataclass(frozen=True)
class InputConfig:  # pylint: disable=too-many-instance-attributes
    """Pointer device settings (touchpad or mouse)."""

    state: DeviceState = DeviceState.ENABLED
    acceleration: AccelConfig | None = None
    calibration: tuple[float, float, float, float, float, float] | None = None
    click_method: ClickMethod | None = None
    disable_while_typing: bool | None = None
    left_handed: bool | None = None
    middle_button_emulation: bool | None = None
    rotation_angle: int | None = None
    scroll_config: ScrollConfig | None = None
    tap_config: TapConfig | None = None
    map_to_output: str | None = None


@dataclass(frozen=True)
class XkbConfig:
    """Keyboard layout settings."""

    rules: str = ""
    model: str = ""
    layout: str = ""
    variant: str = ""
    options: str | None = None
    repeat_delay: int = 600
    repeat_rate: int = 25


@dataclass(frozen=True)
class KeyboardConfig:
    """Keyboard boot behavior."""

    numlock_state: NumlockState = NumlockState.BOOT_OFF


class Domain(StrEnum):
    """Watched configuration domains."""

    TOUCHPAD = "touchpad"
    MOUSE = "mouse"
    KEYBOARD = "keyboard"
    NUMLOCK = "numlock"


DomainValue = InputConfig | XkbConfig | KeyboardConfig


@dataclass(frozen=True)
class ConfigDomain:
    """Binds a domain to its store key and value type."""

    domain: Domain
    key: str
    value_type: type
