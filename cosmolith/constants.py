"""Shared constants for cosmolith."""

import os
from pathlib import Path

__all__ = [
    "CONFIG_FILE",
    "COSMIC_COMP_NAMESPACE",
    "COSMIC_COMP_VERSION",
    "COSMIC_CONFIG_DIR",
    "COSMIC_SYSTEM_CONFIG_DIR",
    "DEFAULT_HEARTBEAT_SECONDS",
    "EVENT_TIMEOUT",
    "KEY_KEYBOARD_CONFIG",
    "KEY_MOUSE",
    "KEY_TOUCHPAD",
    "KEY_XKB_CONFIG",
    "KWRITECONFIG",
    "SPEED_MAX",
    "SPEED_MIN",
    "STRICT_ERRORS_ENV",
]

_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "cosmolith" / "config.toml"

# cosmic-config layout: <root>/<namespace>/v<version>/<key>
COSMIC_CONFIG_DIR = _xdg_config_home / "cosmic"
COSMIC_SYSTEM_CONFIG_DIR = Path("/usr/share/cosmic")
COSMIC_COMP_NAMESPACE = "com.system76.CosmicComp"
COSMIC_COMP_VERSION = 1

KEY_TOUCHPAD = "input_touchpad"
KEY_MOUSE = "input_default"
KEY_XKB_CONFIG = "xkb_config"
KEY_KEYBOARD_CONFIG = "keyboard_config"

# Consumer loop wake-up interval, only used as a liveness heartbeat
DEFAULT_HEARTBEAT_SECONDS = 5.0

# Maximum time spent applying a single event
EVENT_TIMEOUT = 10.0

# libinput acceleration speed range
SPEED_MIN = -1.0
SPEED_MAX = 1.0

KWRITECONFIG = "kwriteconfig6"

STRICT_ERRORS_ENV = "COSMOLITH_STRICT_ERRORS"
