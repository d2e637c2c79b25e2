import threading
from unittest.mock import Mock

import pytest

from cosmolith.errors import ConfigReadError, EventConversionError, WatcherSetupError
from cosmolith.models import Domain, KeyboardConfig, NumlockState, XkbConfig
from cosmolith.store import WATCHED_DOMAINS, CosmicConfig, Snapshots, domain_for_key

NAMESPACE = "com.system76.CosmicComp"


@pytest.fixture
def store(tmp_path):
    return CosmicConfig(config_dir=tmp_path / "user", system_dir=tmp_path / "system")


def write_key(root, key, text):
    path = root / NAMESPACE / "v1"
    path.mkdir(parents=True, exist_ok=True)
    (path / key).write_text(text)


def test_paths(store, tmp_path):
    assert store.user_path == tmp_path / "user" / NAMESPACE / "v1"
    assert store.system_path == tmp_path / "system" / NAMESPACE / "v1"


def test_domain_for_key():
    assert domain_for_key("input_touchpad").domain == Domain.TOUCHPAD
    assert domain_for_key("input_default").domain == Domain.MOUSE
    assert domain_for_key("xkb_config").value_type is XkbConfig
    assert domain_for_key("keyboard_config").domain == Domain.NUMLOCK
    assert domain_for_key("workspaces") is None
    assert {item.domain for item in WATCHED_DOMAINS} == set(Domain)


@pytest.mark.asyncio
async def test_get(store, tmp_path):
    write_key(tmp_path / "user", "keyboard_config", "(numlock_state: BootOn)")

    assert await store.get("keyboard_config", KeyboardConfig) == KeyboardConfig(NumlockState.BOOT_ON)


@pytest.mark.asyncio
async def test_get_falls_back_to_system_defaults(store, tmp_path):
    write_key(tmp_path / "system", "xkb_config", '(layout: "fr")')

    assert (await store.get("xkb_config", XkbConfig)).layout == "fr"

    write_key(tmp_path / "user", "xkb_config", '(layout: "de")')
    assert (await store.get("xkb_config", XkbConfig)).layout == "de"


@pytest.mark.asyncio
async def test_get_missing_key(store):
    with pytest.raises(ConfigReadError):
        await store.get("xkb_config", XkbConfig)


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["(layout: ", r'(layout: "\u{zz}")'])
async def test_get_invalid_ron(store, tmp_path, text):
    write_key(tmp_path / "user", "xkb_config", text)

    with pytest.raises(ConfigReadError):
        await store.get("xkb_config", XkbConfig)


@pytest.mark.asyncio
async def test_get_wrong_shape(store, tmp_path):
    write_key(tmp_path / "user", "xkb_config", "(repeat_rate: \"fast\")")

    with pytest.raises(EventConversionError):
        await store.get("xkb_config", XkbConfig)


@pytest.mark.asyncio
async def test_snapshots_load(store, tmp_path):
    write_key(tmp_path / "user", "keyboard_config", "(numlock_state: LastBoot)")
    write_key(tmp_path / "user", "xkb_config", "not ron")
    log = Mock()
    snapshots = Snapshots()

    await snapshots.load(store, log)

    assert snapshots.get(Domain.NUMLOCK) == KeyboardConfig(NumlockState.LAST_BOOT)
    assert snapshots.get(Domain.KEYBOARD) is None
    assert snapshots.get(Domain.TOUCHPAD) is None
    assert log.info.call_count == 3


def test_snapshots_replace():
    snapshots = Snapshots()

    assert snapshots.replace(Domain.KEYBOARD, XkbConfig(layout="us")) is None
    assert snapshots.replace(Domain.KEYBOARD, XkbConfig(layout="de")) == XkbConfig(layout="us")
    assert snapshots.get(Domain.KEYBOARD) == XkbConfig(layout="de")


def test_watch_reports_changed_keys(store, tmp_path):
    changed = []
    seen = threading.Event()

    def callback(keys):
        changed.extend(keys)
        if "xkb_config" in keys:
            seen.set()

    store.watch(callback)
    try:
        write_key(tmp_path / "user", "xkb_config", '(layout: "us")')
        assert seen.wait(5)
    finally:
        store.stop()

    assert "xkb_config" in changed


def test_watch_setup_failure(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    store = CosmicConfig(config_dir=blocker)

    with pytest.raises(WatcherSetupError):
        store.watch(Mock())
