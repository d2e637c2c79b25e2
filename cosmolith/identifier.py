"""Identify the running desktop session from the environment."""

import os
from collections.abc import Mapping
from enum import StrEnum

__all__ = ["Desktop", "get_current_session"]


class Desktop(StrEnum):
    """Known desktop sessions."""

    HYPRLAND = "hyprland"
    SWAY = "sway"
    GNOME = "gnome"
    KDE = "kde"
    PLASMA = "plasma"
    NIRI = "niri"
    XFCE = "xfce"
    COSMIC = "cosmic"
    WAYLAND = "wayland"
    X11 = "x11"
    TTY = "tty"
    UNKNOWN = "unknown"


# compositor specific sockets, checked first
_SOCKET_VARIABLES = (
    ("HYPRLAND_INSTANCE_SIGNATURE", Desktop.HYPRLAND),
    ("SWAYSOCK", Desktop.SWAY),
    ("NIRI_SOCKET", Desktop.NIRI),
)

_DESKTOP_VARIABLES = ("XDG_CURRENT_DESKTOP", "XDG_SESSION_DESKTOP", "DESKTOP_SESSION")

# order matters: "kde" must win over "plasma" in "KDE-Plasma"
_DESKTOP_NAMES = (
    Desktop.HYPRLAND,
    Desktop.SWAY,
    Desktop.NIRI,
    Desktop.GNOME,
    Desktop.KDE,
    Desktop.PLASMA,
    Desktop.XFCE,
    Desktop.COSMIC,
)


def get_current_session(environ: Mapping[str, str] | None = None) -> Desktop:
    """Return the desktop session the process runs in.

    Args:
        environ: environment to inspect, defaults to `os.environ`
    """
    env = os.environ if environ is None else environ

    if env.get("XDG_SESSION_TYPE", "").lower() == "tty":
        return Desktop.TTY

    for variable, desktop in _SOCKET_VARIABLES:
        if variable in env:
            return desktop

    for variable in _DESKTOP_VARIABLES:
        value = env.get(variable)
        if value is None:
            continue
        lower = value.lower()
        for desktop in _DESKTOP_NAMES:
            if desktop.value in lower:
                return desktop

    if "WAYLAND_DISPLAY" in env:
        return Desktop.WAYLAND
    if "DISPLAY" in env:
        return Desktop.X11
    return Desktop.UNKNOWN
