"""Cosmolith - propagate COSMIC input settings to the running compositor.

Watches the COSMIC configuration store for touchpad, mouse and keyboard
changes, turns each change into atomic events and applies them to Hyprland,
Sway, Niri, KDE Plasma or GNOME. The daemon runs as an asyncio service.
"""

VERSION = "0.3.0"
