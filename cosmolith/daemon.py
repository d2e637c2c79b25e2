"""Daemon startup functions for cosmolith."""

import asyncio
import signal
from logging import Logger

from .adapters import Compositor, init_compositor
from .config import Configuration
from .dispatcher import Dispatcher
from .errors import DetectionError, WatcherSetupError
from .identifier import Desktop, get_current_session
from .store import CosmicConfig
from .watcher import ConfigWatcher

__all__ = ["pick_desktop", "run_daemon"]


def pick_desktop(config: Configuration, log: Logger) -> Desktop:
    """Return the forced compositor if configured, else the detected session."""
    forced = config.get_str("compositor")
    if forced:
        try:
            desktop = Desktop(forced.lower())
        except ValueError as e:
            log.critical("Unknown compositor: %s", forced)
            msg = f"unknown compositor: {forced}"
            raise DetectionError(msg) from e
        log.info("Using the configured compositor: %s", desktop)
        return desktop
    desktop = get_current_session()
    log.info("Detected session: %s", desktop)
    return desktop


async def run_daemon(config: Configuration, log: Logger) -> None:
    """Run the daemon until interrupted.

    Raises:
        WatcherSetupError: if the COSMIC configuration can't be watched
    """
    store = CosmicConfig(config_dir=config.get_str("config_dir"))
    compositor: Compositor | None = await init_compositor(pick_desktop(config, log), log)
    watcher = ConfigWatcher(
        store,
        Dispatcher(compositor),
        heartbeat=config.get_float("heartbeat"),
    )
    loop = asyncio.get_running_loop()

    try:
        await watcher.start()
        loop.add_signal_handler(signal.SIGTERM, watcher.stop)
        log.debug("[ initialized ]".center(80, "="))
        await watcher.run()
    except WatcherSetupError as e:
        log.critical("Can't watch the COSMIC settings: %s", e)
        raise
    except KeyboardInterrupt:
        print("Interrupted")
    except asyncio.CancelledError:
        log.critical("cancelled")
    finally:
        loop.remove_signal_handler(signal.SIGTERM)
        store.stop()
        if compositor is not None:
            await compositor.shutdown()
