"""cosmolith - apply the COSMIC input settings to other compositors."""

import asyncio
import sys

from . import VERSION
from .config import load_config
from .daemon import run_daemon
from .errors import CosmolithError
from .identifier import get_current_session
from .logging_setup import get_logger, init_logger, set_strict

USAGE = """Syntax: cosmolith [options] [detect]

Without command, runs the daemon until interrupted.

Commands:
  detect              print the detected desktop session and exit

Options:
  --debug             enable debug logs
  --log-file PATH     also log to PATH
  --config PATH       use PATH instead of the default configuration file
  --compositor NAME   force a backend (hyprland, sway, niri, kde, gnome)
  --version           print the version and exit
  --help              print this help and exit
"""

__all__ = ["main"]


def use_param(txt: str) -> str:
    """Check if parameter `txt` is in sys.argv.

    If found, removes it from sys.argv & returns the argument value.

    Args:
        txt: Parameter name to look for
    """
    if txt in sys.argv:
        i = sys.argv.index(txt)
        if i + 1 >= len(sys.argv):
            print(f"Missing value for {txt}")
            sys.exit(1)
        v = sys.argv[i + 1]
        del sys.argv[i : i + 2]
        return v
    return ""


def use_flag(txt: str) -> bool:
    """Check if flag `txt` is in sys.argv, removing it."""
    if txt in sys.argv:
        sys.argv.remove(txt)
        return True
    return False


def main() -> None:
    """Run the command."""
    if use_flag("--help") or use_flag("-h"):
        print(USAGE)
        return
    if use_flag("--version"):
        print(VERSION)
        return

    debug_flag = use_flag("--debug")
    log_file = use_param("--log-file")
    init_logger(filename=log_file or None, force_debug=debug_flag)
    log = get_logger("startup")

    config_file = use_param("--config")
    compositor = use_param("--compositor")
    args = sys.argv[1:]

    if args == ["detect"]:
        print(get_current_session())
        return
    if args:
        print(USAGE)
        sys.exit(1)

    try:
        config = load_config(config_file or None, log)
        if compositor:
            config["compositor"] = compositor
        if config.get_bool("strict"):
            set_strict(True)
        asyncio.run(run_daemon(config, log))
    except KeyboardInterrupt:
        pass
    except CosmolithError:
        log.critical("Command failed.")
    except Exception:  # pylint: disable=W0718
        log.critical("Unhandled exception:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
