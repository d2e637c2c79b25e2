"""COSMIC configuration store: read keys, watch for changes, keep snapshots.

cosmic-config keeps one RON file per key, under
`<config_dir>/<namespace>/v<version>/<key>`. Keys missing from the user
directory fall back to the system defaults shipped by COSMIC.
"""

import threading
from collections.abc import Callable
from logging import Logger
from pathlib import Path
from typing import Any, TypeVar

from aiofiles import open as aiopen
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from . import ron
from .constants import (
    COSMIC_COMP_NAMESPACE,
    COSMIC_COMP_VERSION,
    COSMIC_CONFIG_DIR,
    COSMIC_SYSTEM_CONFIG_DIR,
    KEY_KEYBOARD_CONFIG,
    KEY_MOUSE,
    KEY_TOUCHPAD,
    KEY_XKB_CONFIG,
)
from .errors import ConfigReadError, EventConversionError, WatcherSetupError
from .models import ConfigDomain, Domain, DomainValue, InputConfig, KeyboardConfig, XkbConfig

__all__ = ["WATCHED_DOMAINS", "CosmicConfig", "Snapshots", "domain_for_key"]

T = TypeVar("T")

WATCHED_DOMAINS: tuple[ConfigDomain, ...] = (
    ConfigDomain(Domain.TOUCHPAD, KEY_TOUCHPAD, InputConfig),
    ConfigDomain(Domain.MOUSE, KEY_MOUSE, InputConfig),
    ConfigDomain(Domain.KEYBOARD, KEY_XKB_CONFIG, XkbConfig),
    ConfigDomain(Domain.NUMLOCK, KEY_KEYBOARD_CONFIG, KeyboardConfig),
)

_DOMAINS_BY_KEY = {item.key: item for item in WATCHED_DOMAINS}


def domain_for_key(key: str) -> ConfigDomain | None:
    """Return the watched domain stored under `key`, if any."""
    return _DOMAINS_BY_KEY.get(key)


class _KeyChangeHandler(FileSystemEventHandler):
    """Turn file system events in a namespace directory into key names."""

    def __init__(self, directory: Path, callback: Callable[[list[str]], None]) -> None:
        super().__init__()
        self.directory = directory
        self.callback = callback

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in ("created", "modified", "moved"):
            return
        # settings are written atomically: a temporary file is renamed to the key name
        path = Path(event.dest_path if event.event_type == "moved" else event.src_path)  # type: ignore[arg-type]
        if path.parent != self.directory or path.name.startswith("."):
            return
        self.callback([path.name])


class CosmicConfig:
    """Read-only access to one cosmic-config namespace."""

    def __init__(
        self,
        namespace: str = COSMIC_COMP_NAMESPACE,
        version: int = COSMIC_COMP_VERSION,
        config_dir: Path | str = COSMIC_CONFIG_DIR,
        system_dir: Path | str = COSMIC_SYSTEM_CONFIG_DIR,
    ) -> None:
        self.namespace = namespace
        self.version = version
        self.user_path = Path(config_dir) / namespace / f"v{version}"
        self.system_path = Path(system_dir) / namespace / f"v{version}"
        self._observer: Any = None

    async def read_raw(self, key: str) -> str:
        """Return the stored text of `key`.

        Raises:
            ConfigReadError: if the key exists neither in the user nor in the system directory
        """
        for directory in (self.user_path, self.system_path):
            path = directory / key
            try:
                async with aiopen(path, encoding="utf-8") as f:
                    return await f.read()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise ConfigReadError(self.namespace, key, str(e)) from e
        raise ConfigReadError(self.namespace, key, "no such key")

    async def get(self, key: str, value_type: type[T]) -> T:
        """Read `key` and decode it as `value_type`.

        Raises:
            ConfigReadError: if the key can't be read or isn't valid RON
            EventConversionError: if the value doesn't match `value_type`
        """
        text = await self.read_raw(key)
        try:
            data = ron.loads(text)
        except ron.RonError as e:
            raise ConfigReadError(self.namespace, key, str(e)) from e
        return ron.decode(value_type, data, domain=key)

    def watch(self, callback: Callable[[list[str]], None]) -> None:
        """Call `callback(changed_keys)` from a watcher thread on every write.

        The callback may fire for rewrites with identical content.

        Raises:
            WatcherSetupError: if the namespace directory can't be watched
        """
        if self._observer is not None:
            return
        try:
            self.user_path.mkdir(parents=True, exist_ok=True)
            observer = Observer()
            observer.schedule(_KeyChangeHandler(self.user_path, callback), str(self.user_path), recursive=False)
            observer.start()
        except OSError as e:
            raise WatcherSetupError(self.namespace, str(e)) from e
        self._observer = observer

    def stop(self) -> None:
        """Stop watching."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None


class Snapshots:
    """Last known value of every watched domain.

    Values are replaced wholesale, never mutated; `None` means not read yet.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: dict[Domain, DomainValue | None] = {item.domain: None for item in WATCHED_DOMAINS}

    def get(self, domain: Domain) -> DomainValue | None:
        """Return the current snapshot of `domain`."""
        with self._lock:
            return self._values[domain]

    def replace(self, domain: Domain, value: DomainValue) -> DomainValue | None:
        """Store `value` for `domain` and return the previous snapshot."""
        with self._lock:
            old = self._values[domain]
            self._values[domain] = value
            return old

    async def load(self, store: CosmicConfig, log: Logger) -> None:
        """Read the initial value of every watched domain.

        Unreadable keys are logged and left unset.
        """
        for item in WATCHED_DOMAINS:
            try:
                value = await store.get(item.key, item.value_type)
            except (ConfigReadError, EventConversionError) as e:
                log.info("Can't read initial %s settings: %s", item.domain, e)
                continue
            self.replace(item.domain, value)
            log.debug("Initial %s settings: %s", item.domain, value)
