"""Consume store change notifications and dispatch the resulting events.

The store notifies from a watcher thread; notifications are handed over to
the event loop through an `asyncio.Queue` and processed one at a time, in
the order they were received.
"""

import asyncio
import dataclasses
from collections.abc import Iterator
from logging import Logger
from typing import Any

from .constants import DEFAULT_HEARTBEAT_SECONDS
from .diff import diff
from .dispatcher import Dispatcher
from .errors import ConfigReadError, CosmolithError, EventConversionError
from .logging_setup import get_logger
from .store import CosmicConfig, Snapshots, domain_for_key

__all__ = ["ConfigWatcher", "value_changes"]


def value_changes(old: Any, new: Any, path: str = "") -> Iterator[tuple[str, Any, Any]]:  # noqa: ANN401
    """Yield (path, old, new) for every leaf value which differs.

    Dataclasses are walked field by field, other values are compared as a whole.
    """
    if old == new:
        return
    if dataclasses.is_dataclass(old) and type(old) is type(new):
        for field in dataclasses.fields(old):
            sub_path = f"{path}.{field.name}" if path else field.name
            yield from value_changes(getattr(old, field.name), getattr(new, field.name), sub_path)
        return
    yield path, old, new


class ConfigWatcher:
    """Watch the store and turn every change into dispatched events."""

    def __init__(
        self,
        store: CosmicConfig,
        dispatcher: Dispatcher,
        snapshots: Snapshots | None = None,
        heartbeat: float = DEFAULT_HEARTBEAT_SECONDS,
        log: Logger | None = None,
    ) -> None:
        self.store = store
        self.dispatcher = dispatcher
        self.snapshots = snapshots or Snapshots()
        self.heartbeat = heartbeat
        self.log = log or get_logger("watcher")
        self.queue: asyncio.Queue[list[str] | None] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None

    async def start(self) -> None:
        """Read the initial snapshots and start watching.

        Must be called from the event loop.

        Raises:
            WatcherSetupError: if the store can't be watched
        """
        self._loop = asyncio.get_running_loop()
        await self.snapshots.load(self.store, self.log)
        self.store.watch(self.notify)
        self.log.debug("Watching %s", self.store.user_path)

    def notify(self, keys: list[str]) -> None:
        """Queue changed keys, callable from any thread."""
        if self._loop is None:
            msg = "watcher not started"
            raise CosmolithError(msg)
        self._loop.call_soon_threadsafe(self.queue.put_nowait, list(keys))

    def stop(self) -> None:
        """Stop watching and make `run` return."""
        self.store.stop()
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self.queue.put_nowait, None)

    async def run(self) -> None:
        """Process notifications until `stop` is called."""
        while True:
            try:
                keys = await asyncio.wait_for(self.queue.get(), timeout=self.heartbeat)
            except TimeoutError:
                continue
            if keys is None:
                self.log.debug("Notification channel closed")
                break
            await self.handle_keys(keys)

    async def handle_keys(self, keys: list[str]) -> int:
        """Re-read the changed keys, diff them and dispatch the events.

        Returns:
            the number of events which failed
        """
        failures = 0
        for key in keys:
            config_domain = domain_for_key(key)
            if config_domain is None:
                self.log.debug("Ignoring unknown key %s", key)
                continue
            try:
                new = await self.store.get(key, config_domain.value_type)
            except (ConfigReadError, EventConversionError) as e:
                self.log.error("Failed to read %s: %s", key, e)
                continue

            domain = config_domain.domain
            old = self.snapshots.replace(domain, new)
            if old is None:
                self.log.debug("[%s] %s set to %s", self.store.namespace, key, new)
                continue
            if old == new:
                self.log.debug("[%s] %s rewritten with identical data", self.store.namespace, key)
                continue
            for path, old_value, new_value in value_changes(old, new):
                self.log.debug("[%s] %s.%s: %r -> %r", self.store.namespace, key, path, old_value, new_value)

            failures += await self.dispatcher.dispatch(diff(domain, old, new))
        return failures
