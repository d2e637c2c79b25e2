import pytest

from cosmolith import ron
from cosmolith.errors import EventConversionError
from cosmolith.models import (
    AccelConfig,
    AccelProfile,
    ClickMethod,
    DeviceState,
    InputConfig,
    KeyboardConfig,
    NumlockState,
    ScrollConfig,
    ScrollMethod,
    TapButtonMap,
    TapConfig,
    XkbConfig,
)

TOUCHPAD_RON = """(
    state: Enabled,
    acceleration: Some((
        speed: 0.25,
        profile: Some(Adaptive),
    )),
    calibration: None,
    click_method: Some(Clickfinger),
    disable_while_typing: Some(true),
    left_handed: None,
    middle_button_emulation: None,
    rotation_angle: None,
    scroll_config: Some((
        method: Some(TwoFinger),
        natural_scroll: Some(true),
        scroll_button: None,
        scroll_factor: Some(1.5),
    )),
    tap_config: Some((
        enabled: true,
        button_map: Some(LeftRightMiddle),
        drag: true,
        drag_lock: false,
    )),
    map_to_output: None,
)
"""

XKB_RON = """(
    rules: "",
    model: "pc105",
    layout: "us,de",
    variant: ",nodeadkeys",
    options: Some("compose:ralt"),
    repeat_delay: 600,
    repeat_rate: 25,
)"""


def test_loads_scalars():
    assert ron.loads("true") is True
    assert ron.loads("None") is None
    assert ron.loads("42") == 42
    assert ron.loads("-0.5") == -0.5
    assert ron.loads("1_000") == 1000
    assert ron.loads("0xff") == 255
    assert ron.loads("1e3") == 1000.0
    assert ron.loads('"a \\"b\\"\\n"') == 'a "b"\n'
    assert ron.loads('"\\u{e9}"') == "é"
    assert ron.loads("'x'") == "x"
    assert ron.loads("Some(3)") == 3
    assert ron.loads("Flat") == "Flat"


def test_loads_containers():
    assert ron.loads("[1, 2, 3,]") == [1, 2, 3]
    assert ron.loads("(1.0, 0.0)") == (1.0, 0.0)
    assert ron.loads('{"a": 1, "b": 2}') == {"a": 1, "b": 2}
    assert ron.loads("Config(a: 1, b: [])") == {"a": 1, "b": []}
    assert ron.loads("()") == ()


def test_loads_skips_comments():
    text = """// generated
    (
        /* block */ enabled: true, // trailing
    )"""
    assert ron.loads(text) == {"enabled": True}


@pytest.mark.parametrize("text", ["", "(a: 1", "[1 2]", '"open', "(a: 1))", "Some(1, 2)", "@", r'"\u{zz}"', r'"\u{110000}"'])
def test_loads_errors(text):
    with pytest.raises(ron.RonError):
        ron.loads(text)


def test_decode_touchpad():
    value = ron.decode(InputConfig, ron.loads(TOUCHPAD_RON))

    assert value == InputConfig(
        state=DeviceState.ENABLED,
        acceleration=AccelConfig(speed=0.25, profile=AccelProfile.ADAPTIVE),
        click_method=ClickMethod.CLICKFINGER,
        disable_while_typing=True,
        scroll_config=ScrollConfig(method=ScrollMethod.TWO_FINGER, natural_scroll=True, scroll_factor=1.5),
        tap_config=TapConfig(enabled=True, button_map=TapButtonMap.LEFT_RIGHT_MIDDLE, drag=True, drag_lock=False),
    )


def test_decode_calibration():
    value = ron.decode(InputConfig, ron.loads("(calibration: Some((1, 0, 0, 0, 1, 0)))"))

    assert value.calibration == (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)


def test_decode_xkb():
    assert ron.decode(XkbConfig, ron.loads(XKB_RON)) == XkbConfig(
        model="pc105",
        layout="us,de",
        variant=",nodeadkeys",
        options="compose:ralt",
    )


def test_decode_defaults_and_unknown_fields():
    value = ron.decode(KeyboardConfig, ron.loads("(numlock_state: BootOn, future_field: 3)"))

    assert value == KeyboardConfig(numlock_state=NumlockState.BOOT_ON)
    assert ron.decode(KeyboardConfig, {}) == KeyboardConfig()


@pytest.mark.parametrize(
    "cls, text",
    [
        (KeyboardConfig, "(numlock_state: Sometimes)"),
        (XkbConfig, "(repeat_rate: 2.5)"),
        (XkbConfig, "(repeat_delay: true)"),
        (XkbConfig, "(layout: 3)"),
        (InputConfig, "(disable_while_typing: Some(1))"),
        (InputConfig, "(calibration: Some((1, 0)))"),
        (InputConfig, "[]"),
    ],
)
def test_decode_errors(cls, text):
    with pytest.raises(EventConversionError):
        ron.decode(cls, ron.loads(text))
