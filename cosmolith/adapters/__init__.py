"""Compositor backends.

This package provides the `Compositor` capability interface and one adapter
per supported desktop (Hyprland, Sway, Niri, KDE Plasma, GNOME).
"""

from logging import Logger

from ..errors import CosmolithError, NoCompositorError
from ..identifier import Desktop
from .backend import Compositor
from .gnome import Gnome
from .hyprland import Hyprland
from .kde import Kde
from .niri import Niri
from .sway import Sway

__all__ = ["BACKENDS", "Compositor", "create_compositor", "init_compositor"]

BACKENDS: dict[Desktop, type[Compositor]] = {
    Desktop.HYPRLAND: Hyprland,
    Desktop.SWAY: Sway,
    Desktop.NIRI: Niri,
    Desktop.KDE: Kde,
    Desktop.PLASMA: Kde,
    Desktop.GNOME: Gnome,
}


def create_compositor(desktop: Desktop) -> Compositor:
    """Return a new, uninitialized, backend for `desktop`.

    Raises:
        NoCompositorError: if the desktop has no backend
    """
    backend_class = BACKENDS.get(desktop)
    if backend_class is None:
        raise NoCompositorError
    return backend_class()


async def init_compositor(desktop: Desktop, log: Logger) -> Compositor | None:
    """Build and initialize the backend for `desktop`.

    Returns:
        The ready backend, or None if the desktop is unsupported or the backend can't be reached
    """
    try:
        compositor = create_compositor(desktop)
    except NoCompositorError:
        log.warning("No backend for %s, settings changes will be ignored", desktop)
        return None
    try:
        await compositor.init()
    except (CosmolithError, OSError) as e:
        log.error("Can't initialize the %s backend: %s", compositor.name, e)
        return None
    log.info("Using the %s backend", compositor.name)
    return compositor
