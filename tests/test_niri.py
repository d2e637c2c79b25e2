import json
from unittest.mock import AsyncMock, Mock

import pytest

from cosmolith import events as ev
from cosmolith.adapters.niri import Niri, find_layout
from cosmolith.dispatcher import Dispatcher
from cosmolith.errors import IpcCommandError
from cosmolith.models import AccelConfig

from .testtools import MockReader, MockWriter

LAYOUTS = {"Ok": {"KeyboardLayouts": {"names": ["Russian", "English (US)", "German", "fr"], "current_idx": 0}}}
HANDLED = {"Ok": "Handled"}


async def make_backend(*replies):
    reader = MockReader()
    writer = MockWriter()
    for reply in replies:
        await reader.q.put(json.dumps(reply).encode() + b"\n")
    backend = Niri(connect=AsyncMock(return_value=(reader, writer)), log=Mock())
    return backend, writer


def requests(writer):
    return [json.loads(c.args[0]) for c in writer.write.call_args_list]


@pytest.mark.asyncio
async def test_switch_layout():
    backend, writer = await make_backend(LAYOUTS, HANDLED)

    await backend.apply_event(ev.KeyboardLayout("us,de"))

    assert requests(writer) == [
        "KeyboardLayouts",
        {"Action": {"SwitchLayout": {"layout": {"Index": 1}}}},
    ]


@pytest.mark.asyncio
async def test_only_the_primary_layout_is_selected():
    backend, writer = await make_backend(LAYOUTS, HANDLED)

    await backend.apply_event(ev.KeyboardLayout("fr, us"))

    assert requests(writer)[-1] == {"Action": {"SwitchLayout": {"layout": {"Index": 3}}}}


@pytest.mark.asyncio
async def test_unknown_layout():
    backend, writer = await make_backend(LAYOUTS)

    await backend.apply_event(ev.KeyboardLayout("Klingon"))

    assert requests(writer) == ["KeyboardLayouts"]
    backend.log.warning.assert_called_once()


@pytest.mark.asyncio
async def test_empty_layout():
    backend, writer = await make_backend()

    await backend.apply_event(ev.KeyboardLayout(""))

    writer.write.assert_not_called()


@pytest.mark.asyncio
async def test_error_reply():
    backend, _ = await make_backend({"Err": "not supported"})

    with pytest.raises(IpcCommandError):
        await backend.apply_event(ev.KeyboardLayout("German"))


@pytest.mark.asyncio
async def test_unexpected_reply():
    backend, _ = await make_backend({"Ok": "Handled"})

    with pytest.raises(IpcCommandError):
        await backend.apply_event(ev.KeyboardLayout("German"))


@pytest.mark.asyncio
async def test_other_settings_are_left_to_niri():
    backend, writer = await make_backend()

    await backend.apply_event(ev.TouchpadTapEnabled(False))
    await backend.apply_event(ev.MouseAcceleration(AccelConfig(speed=0.5)))

    writer.write.assert_not_called()


@pytest.mark.asyncio
async def test_shutdown_closes_the_socket():
    backend, writer = await make_backend()

    await backend.init()
    await backend.shutdown()

    writer.close.assert_called_once()
    writer.wait_closed.assert_awaited_once()


@pytest.mark.parametrize(
    "wanted, expected",
    [
        ("us", 1),
        ("german", 2),
        ("fr", 3),
        ("english", 1),
        ("rus", 0),
        ("de", None),
    ],
)
def test_find_layout(wanted, expected):
    names = ["Russian", "English (US)", "German", "fr"]
    assert find_layout(names, wanted) == expected


@pytest.mark.asyncio
async def test_late_reply_is_not_read_after_a_timeout(mocker):
    mocker.patch("cosmolith.dispatcher.EVENT_TIMEOUT", 0.05)
    stale_reader, stale_writer = MockReader(), MockWriter()
    await stale_reader.q.put(json.dumps(LAYOUTS).encode() + b"\n")
    reader, writer = MockReader(), MockWriter()
    for reply in (LAYOUTS, HANDLED):
        await reader.q.put(json.dumps(reply).encode() + b"\n")
    connect = AsyncMock(side_effect=[(stale_reader, stale_writer), (reader, writer)])
    dispatcher = Dispatcher(Niri(connect=connect, log=Mock()), log=Mock())

    # SwitchLayout is never answered on the first socket
    assert await dispatcher.dispatch([ev.KeyboardLayout("german")]) == 1
    stale_writer.close.assert_called_once()
    await stale_reader.q.put(json.dumps(HANDLED).encode() + b"\n")

    assert await dispatcher.dispatch([ev.KeyboardLayout("us")]) == 0
    assert requests(writer) == [
        "KeyboardLayouts",
        {"Action": {"SwitchLayout": {"layout": {"Index": 1}}}},
    ]
