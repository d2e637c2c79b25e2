from unittest.mock import Mock

import pytest

from cosmolith import events as ev
from cosmolith.adapters import BACKENDS, create_compositor, init_compositor
from cosmolith.adapters.backend import EVENT_HANDLERS, Compositor, clamp_speed, missing_routes, normalize_options
from cosmolith.adapters.hyprland import Hyprland
from cosmolith.errors import NoCompositorError, UnhandledEventError
from cosmolith.events import ALL_EVENT_TYPES, Event
from cosmolith.identifier import Desktop
from cosmolith.models import AccelConfig, NumlockState, TapConfig

from .testtools import RecordingCompositor


class UnknownEvent(Event):
    "An event type with no route"

    device = "test"


def test_every_event_is_routed():
    assert missing_routes() == []
    assert set(EVENT_HANDLERS) == set(ALL_EVENT_TYPES)


@pytest.mark.parametrize("backend", sorted(set(BACKENDS.values()), key=lambda cls: cls.name))
def test_every_route_exists(backend):
    for method in EVENT_HANDLERS.values():
        assert callable(getattr(backend, method)), f"{backend.name}.{method}"


@pytest.mark.asyncio
@pytest.mark.parametrize("event_type", ALL_EVENT_TYPES)
async def test_default_capabilities_succeed(event_type):
    log = Mock()
    compositor = Compositor(log=log)

    await compositor.apply_event(event_type(None))

    log.debug.assert_called_once_with("%s not implemented", EVENT_HANDLERS[event_type])


@pytest.mark.asyncio
async def test_apply_event_routes_payload():
    compositor = RecordingCompositor()

    await compositor.apply_event(ev.TouchpadTapEnabled(False))
    await compositor.apply_event(ev.MouseAcceleration(AccelConfig(speed=0.2)))
    await compositor.apply_event(ev.TouchpadTapConfig(TapConfig()))
    await compositor.apply_event(ev.KeyboardNumLock(NumlockState.BOOT_ON))

    assert compositor.calls == [
        ("touchpad_tap_enabled", False),
        ("mouse_acceleration", AccelConfig(speed=0.2)),
        ("touchpad_tap_config", TapConfig()),
        ("keyboard_numlock", NumlockState.BOOT_ON),
    ]


@pytest.mark.asyncio
async def test_unrouted_event_is_logged():
    log = Mock()
    compositor = Compositor(log=log)

    await compositor.apply_event(UnknownEvent())

    log.error.assert_called_once()


@pytest.mark.asyncio
async def test_unrouted_event_raises_in_strict_mode(strict_errors):
    compositor = Compositor(log=Mock())

    with pytest.raises(UnhandledEventError):
        await compositor.apply_event(UnknownEvent())


def test_supports_input_events_only():
    compositor = Compositor(log=Mock())

    assert compositor.supports(ev.KeyboardLayout("us"))
    assert not compositor.supports(UnknownEvent())


@pytest.mark.parametrize(
    "options, expected",
    [
        ("compose:ralt,caps:escape", "compose:ralt,caps:escape"),
        (" compose:ralt , caps:escape ", "compose:ralt,caps:escape"),
        (",,compose:ralt,,", "compose:ralt"),
        ("", ""),
        (" , ", ""),
        (" ,us, ,de,", "us,de"),
        ("us,de", "us,de"),
    ],
)
def test_normalize_options(options, expected):
    assert normalize_options(options) == expected


@pytest.mark.parametrize("speed, expected", [(0.5, 0.5), (-1.0, -1.0), (2.0, 1.0), (-5.0, -1.0), (5.0, 1.0)])
def test_clamp_speed(speed, expected):
    assert clamp_speed(speed) == expected


@pytest.mark.asyncio
async def test_init_compositor_unsupported_desktop():
    log = Mock()

    assert await init_compositor(Desktop.XFCE, log) is None
    log.warning.assert_called_once()


@pytest.mark.asyncio
async def test_init_compositor_unreachable(monkeypatch):
    monkeypatch.delenv("HYPRLAND_INSTANCE_SIGNATURE", raising=False)
    log = Mock()

    assert await init_compositor(Desktop.HYPRLAND, log) is None
    log.error.assert_called_once()


@pytest.mark.asyncio
async def test_init_compositor(monkeypatch):
    monkeypatch.setenv("HYPRLAND_INSTANCE_SIGNATURE", "abc")
    log = Mock()

    compositor = await init_compositor(Desktop.HYPRLAND, log)

    assert isinstance(compositor, Hyprland)
    assert BACKENDS[Desktop.PLASMA] is BACKENDS[Desktop.KDE]


def test_create_compositor():
    assert isinstance(create_compositor(Desktop.HYPRLAND), Hyprland)
    with pytest.raises(NoCompositorError):
        create_compositor(Desktop.TTY)


@pytest.mark.parametrize("options", [" ,us, ,de,", "compose:ralt , caps:escape", ",,", "", "us,de"])
def test_normalize_options_is_idempotent(options):
    once = normalize_options(options)
    assert normalize_options(once) == once
