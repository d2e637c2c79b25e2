"""Apply batches of events to the active compositor backend."""

import asyncio
from collections.abc import Iterable
from logging import Logger

from .adapters.backend import Compositor
from .constants import EVENT_TIMEOUT
from .errors import CosmolithError, UnhandledEventError
from .events import Event
from .logging_setup import get_logger, is_strict

__all__ = ["Dispatcher"]


class Dispatcher:
    """Own the active backend and feed it events, one at a time, in order."""

    def __init__(self, compositor: Compositor | None, log: Logger | None = None) -> None:
        self.compositor = compositor
        self.log = log or get_logger("dispatcher")
        self._lock = asyncio.Lock()

    async def dispatch(self, events: Iterable[Event]) -> int:
        """Apply `events` in order.

        A failing event is logged and the following ones are still applied.
        Batches never interleave.

        Returns:
            the number of events which failed
        """
        events = list(events)
        if not events:
            return 0
        if self.compositor is None:
            self.log.info("No active backend, discarding %d event(s)", len(events))
            return 0

        failures = 0
        async with self._lock:
            for event in events:
                if not await self._apply(self.compositor, event):
                    failures += 1
        return failures

    async def _apply(self, compositor: Compositor, event: Event) -> bool:
        """Apply one event, returns False if it failed."""
        if not compositor.supports(event):
            self.log.debug("%s: %s not supported", compositor.name, event.kind)
            return True
        try:
            await asyncio.wait_for(compositor.apply_event(event), timeout=EVENT_TIMEOUT)
        except UnhandledEventError:
            raise
        except TimeoutError:
            self.log.error("%s: timeout applying %s", compositor.name, event.kind)
            return False
        except (CosmolithError, OSError) as e:
            self.log.error("%s: failed to apply %s: %s", compositor.name, event.kind, e)
            return False
        except Exception:  # pylint: disable=W0718
            self.log.exception("%s: unhandled error applying %s", compositor.name, event.kind)
            if is_strict():
                raise
            return False
        self.log.debug("%s: applied %s", compositor.name, event.kind)
        return True
