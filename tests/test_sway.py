from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from cosmolith import events as ev
from cosmolith.adapters.connection import ConnectionState
from cosmolith.adapters.sway import Sway, _default_connect
from cosmolith.dispatcher import Dispatcher
from cosmolith.errors import IpcCommandError, IpcConnectionError, IpcDisconnectedError
from cosmolith.models import AccelConfig, AccelProfile, ClickMethod, NumlockState, ScrollConfig, ScrollMethod, TapConfig


def ok():
    return [SimpleNamespace(success=True, error=None)]


def make_conn():
    conn = Mock()
    conn._sub_fd = 7
    conn.command = AsyncMock(side_effect=lambda cmd: ok())
    return conn


@pytest.fixture
def conn():
    return make_conn()


@pytest.fixture
def backend(conn):
    return Sway(connect=AsyncMock(return_value=conn), log=Mock())


def sent(conn):
    return [c.args[0] for c in conn.command.await_args_list]


def assert_released(conn):
    conn._loop.remove_reader.assert_called_once_with(7)
    conn._cmd_socket.close.assert_called_once()
    conn._sub_socket.close.assert_called_once()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "event, commands",
    [
        (ev.TouchpadTapEnabled(True), ["input type:touchpad tap enabled"]),
        (ev.TouchpadTapDrag(False), ["input type:touchpad tap_and_drag disabled"]),
        (ev.TouchpadTapDragLock(True), ["input type:touchpad drag_lock enabled"]),
        (ev.TouchpadNaturalScroll(True), ["input type:touchpad natural_scroll enabled"]),
        (ev.TouchpadDisableWhileTyping(True), ["input type:touchpad dwt enabled"]),
        (ev.TouchpadScrollMethod(ScrollMethod.EDGE), ["input type:touchpad scroll_method edge"]),
        (ev.TouchpadClickMethod(ClickMethod.BUTTON_AREAS), ["input type:touchpad click_method button_areas"]),
        (ev.TouchpadMiddleButtonEmulation(False), ["input type:touchpad middle_emulation disabled"]),
        (ev.MouseLeftHanded(True), ["input type:pointer left_handed enabled"]),
        (ev.MouseScrollFactor(2.0), ["input type:pointer scroll_factor 2.0"]),
        (ev.MouseScrollButton(274), ["input type:pointer scroll_button 274"]),
        (
            ev.MouseAcceleration(AccelConfig(speed=-0.5, profile=AccelProfile.ADAPTIVE)),
            ["input type:pointer pointer_accel -0.5", "input type:pointer accel_profile adaptive"],
        ),
        (
            ev.MouseScrollConfig(ScrollConfig(natural_scroll=False, scroll_factor=1.0)),
            ["input type:pointer scroll_factor 1.0", "input type:pointer natural_scroll disabled"],
        ),
        (
            ev.TouchpadTapConfig(TapConfig(enabled=True, drag=False, drag_lock=False)),
            [
                "input type:touchpad tap enabled",
                "input type:touchpad tap_and_drag disabled",
                "input type:touchpad drag_lock disabled",
            ],
        ),
        (ev.KeyboardLayout("us,de"), ["input type:keyboard xkb_layout us,de"]),
        (ev.KeyboardOptions("caps:escape, compose:ralt"), ["input type:keyboard xkb_options caps:escape,compose:ralt"]),
        (ev.KeyboardRepeatDelay(300), ["input type:keyboard repeat_delay 300"]),
        (ev.KeyboardRepeatRate(30), ["input type:keyboard repeat_rate 30"]),
        (ev.KeyboardNumLock(NumlockState.BOOT_ON), ["input type:keyboard xkb_numlock enabled"]),
    ],
)
async def test_commands(conn, backend, event, commands):
    await backend.apply_event(event)

    assert sent(conn) == commands


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "event",
    [
        ev.TouchpadLeftHanded(None),
        ev.MouseTapConfig(TapConfig()),
        ev.KeyboardNumLock(NumlockState.LAST_BOOT),
        ev.KeyboardOptions(None),
    ],
)
async def test_no_op_events(conn, backend, event):
    await backend.apply_event(event)

    conn.command.assert_not_called()


@pytest.mark.asyncio
async def test_rejected_command(conn, backend):
    conn.command.side_effect = lambda cmd: [SimpleNamespace(success=False, error="Unknown layout")]

    with pytest.raises(IpcCommandError) as excinfo:
        await backend.apply_event(ev.KeyboardLayout("zz"))
    assert excinfo.value.reason == "Unknown layout"
    assert backend.connection.state == ConnectionState.CONNECTED


@pytest.mark.asyncio
async def test_reconnects_after_broken_socket():
    broken = make_conn()
    broken.command.side_effect = ConnectionResetError()
    fresh = make_conn()
    connect = AsyncMock(side_effect=[broken, fresh])
    backend = Sway(connect=connect, log=Mock())

    await backend.init()
    await backend.apply_event(ev.KeyboardRepeatRate(30))

    assert sent(fresh) == ["input type:keyboard repeat_rate 30"]
    assert_released(broken)
    fresh._cmd_socket.close.assert_not_called()
    assert backend.connection.state == ConnectionState.CONNECTED


@pytest.mark.asyncio
async def test_gives_up_after_one_reconnect():
    broken = make_conn()
    broken.command.side_effect = ConnectionResetError()
    backend = Sway(connect=AsyncMock(return_value=broken), log=Mock())

    with pytest.raises(IpcDisconnectedError):
        await backend.apply_event(ev.KeyboardRepeatRate(30))
    assert backend.connection.state == ConnectionState.FAILED


@pytest.mark.asyncio
async def test_shutdown(conn, backend):
    await backend.init()
    await backend.shutdown()

    assert_released(conn)


@pytest.mark.asyncio
async def test_closed_socket_is_reconnected():
    closed = make_conn()
    closed.command.side_effect = lambda cmd: []
    fresh = make_conn()
    backend = Sway(connect=AsyncMock(side_effect=[closed, fresh]), log=Mock())

    await backend.apply_event(ev.TouchpadTapEnabled(True))

    assert sent(fresh) == ["input type:touchpad tap enabled"]
    assert_released(closed)


@pytest.mark.asyncio
async def test_closed_socket_counts_as_a_failure():
    closed = make_conn()
    closed.command.side_effect = lambda cmd: []
    dispatcher = Dispatcher(Sway(connect=AsyncMock(return_value=closed), log=Mock()), log=Mock())

    assert await dispatcher.dispatch([ev.TouchpadTapEnabled(True)]) == 1


@pytest.mark.asyncio
async def test_missing_socket(mocker):
    connection = mocker.patch("cosmolith.adapters.sway.aio.Connection")
    connection.return_value.connect = AsyncMock(side_effect=Exception("Failed to retrieve the i3 or sway IPC socket path"))

    with pytest.raises(IpcConnectionError):
        await _default_connect()
