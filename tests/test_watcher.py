import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from cosmolith import events as ev
from cosmolith.errors import CosmolithError
from cosmolith.models import Domain, KeyboardConfig, NumlockState, TapConfig, XkbConfig
from cosmolith.store import CosmicConfig, Snapshots
from cosmolith.watcher import ConfigWatcher, value_changes

NAMESPACE = "com.system76.CosmicComp"


@pytest.fixture
def user_dir(tmp_path):
    path = tmp_path / "user" / NAMESPACE / "v1"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def store(tmp_path, user_dir):
    return CosmicConfig(config_dir=tmp_path / "user", system_dir=tmp_path / "system")


@pytest.fixture
def dispatcher():
    dispatcher = Mock()
    dispatcher.dispatch = AsyncMock(return_value=0)
    return dispatcher


def make_watcher(store, dispatcher):
    return ConfigWatcher(store, dispatcher, Snapshots(), heartbeat=0.05, log=Mock())


def test_value_changes():
    old = TapConfig(enabled=True, drag=True)
    new = TapConfig(enabled=False, drag=True, drag_lock=True)

    assert list(value_changes(old, new)) == [("enabled", True, False), ("drag_lock", False, True)]
    assert list(value_changes(old, old)) == []
    assert list(value_changes(None, old)) == [("", None, old)]


@pytest.mark.asyncio
async def test_first_value_emits_nothing(store, user_dir, dispatcher):
    watcher = make_watcher(store, dispatcher)
    (user_dir / "xkb_config").write_text('(layout: "us")')

    await watcher.handle_keys(["xkb_config"])

    dispatcher.dispatch.assert_not_called()
    assert watcher.snapshots.get(Domain.KEYBOARD) == XkbConfig(layout="us")


@pytest.mark.asyncio
async def test_change_is_dispatched(store, user_dir, dispatcher):
    watcher = make_watcher(store, dispatcher)
    watcher.snapshots.replace(Domain.KEYBOARD, XkbConfig(layout="us", repeat_rate=25))
    (user_dir / "xkb_config").write_text('(layout: "us,de", repeat_rate: 40)')

    await watcher.handle_keys(["xkb_config"])

    dispatcher.dispatch.assert_awaited_once_with([ev.KeyboardLayout("us,de"), ev.KeyboardRepeatRate(40)])


@pytest.mark.asyncio
async def test_identical_rewrite_is_ignored(store, user_dir, dispatcher):
    watcher = make_watcher(store, dispatcher)
    watcher.snapshots.replace(Domain.NUMLOCK, KeyboardConfig(NumlockState.BOOT_ON))
    (user_dir / "keyboard_config").write_text("(numlock_state: BootOn)")

    await watcher.handle_keys(["keyboard_config", "keyboard_config"])

    dispatcher.dispatch.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_and_unreadable_keys(store, user_dir, dispatcher):
    watcher = make_watcher(store, dispatcher)
    watcher.snapshots.replace(Domain.KEYBOARD, XkbConfig(layout="us"))
    (user_dir / "xkb_config").write_text("(layout: ")
    (user_dir / "keyboard_config").write_text("(numlock_state: 3)")

    assert await watcher.handle_keys(["workspaces", "xkb_config", "keyboard_config"]) == 0

    dispatcher.dispatch.assert_not_called()
    assert watcher.log.error.call_count == 2
    # the last known value is kept
    assert watcher.snapshots.get(Domain.KEYBOARD) == XkbConfig(layout="us")


@pytest.mark.asyncio
async def test_run_until_stopped(store, user_dir, dispatcher):
    (user_dir / "keyboard_config").write_text("(numlock_state: BootOff)")
    watcher = make_watcher(store, dispatcher)
    await watcher.start()
    task = asyncio.create_task(watcher.run())
    try:
        (user_dir / "keyboard_config").write_text("(numlock_state: BootOn)")
        for _ in range(100):
            if dispatcher.dispatch.await_count:
                break
            await asyncio.sleep(0.05)
    finally:
        watcher.stop()
        await asyncio.wait_for(task, 5)

    dispatcher.dispatch.assert_awaited_with([ev.KeyboardNumLock(NumlockState.BOOT_ON)])


@pytest.mark.asyncio
async def test_notify_queues_keys(store, dispatcher):
    watcher = make_watcher(store, dispatcher)
    await watcher.start()
    try:
        watcher.notify(["xkb_config"])
        assert await asyncio.wait_for(watcher.queue.get(), 1) == ["xkb_config"]
    finally:
        watcher.stop()


def test_notify_before_start(store, dispatcher):
    watcher = make_watcher(store, dispatcher)

    with pytest.raises(CosmolithError):
        watcher.notify(["xkb_config"])
