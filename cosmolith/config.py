"""Daemon configuration: typed access to the optional TOML file."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .constants import CONFIG_FILE, COSMIC_CONFIG_DIR, DEFAULT_HEARTBEAT_SECONDS
from .errors import CosmolithError

if TYPE_CHECKING:
    import logging

__all__ = ["BOOL_FALSE_STRINGS", "CONFIG_SCHEMA", "ConfigField", "Configuration", "coerce_to_bool", "load_config"]

ConfigValueType = float | bool | str | list | dict

BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})

SECTION = "cosmolith"


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


@dataclass(frozen=True)
class ConfigField:
    """Describes an accepted configuration key.

    Attributes:
        name: The configuration key name
        field_type: Expected type
        default: Default value if not provided
        description: Human-readable description
        choices: List of valid values for enum-like fields
    """

    name: str
    field_type: type = str
    default: Any = None
    description: str = ""
    choices: tuple[str, ...] | None = None


CONFIG_SCHEMA: tuple[ConfigField, ...] = (
    ConfigField(
        "compositor",
        description="Force a backend instead of detecting the running session",
        choices=("hyprland", "sway", "niri", "kde", "gnome"),
    ),
    ConfigField("heartbeat", float, DEFAULT_HEARTBEAT_SECONDS, "Idle wake-up interval of the event loop, in seconds"),
    ConfigField("config_dir", str, str(COSMIC_CONFIG_DIR), "Root of the COSMIC configuration store"),
    ConfigField("strict", bool, False, "Raise on events without a handler"),
)


class Configuration(dict):
    """Configuration wrapper providing typed access with schema defaults."""

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        schema: tuple[ConfigField, ...] = CONFIG_SCHEMA,
        **kwargs: Any,  # noqa: ANN401
    ):
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            schema: Accepted keys, providing default values
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.log = logger
        self._schema = {field.name: field for field in schema}

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        """Get a value, falling back to the schema default then to `default`."""
        if name in self:
            return dict.get(self, name)  # type: ignore[return-value]
        field = self._schema.get(name)
        if field is not None and field.default is not None:
            return field.default  # type: ignore[no-any-return]
        return default

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean value, handling loose typing (see `coerce_to_bool`)."""
        return coerce_to_bool(self.get(name), default)

    def get_int(self, name: str, default: int = 0) -> int:
        """Get an integer value.

        Args:
            name: The key name
            default: Default value if key is missing or invalid
        """
        value = self.get(name)
        if value is None:
            return default
        try:
            return int(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            self.log.warning("Invalid integer value for %s: %s", name, value)
            return default

    def get_float(self, name: str, default: float = 0.0) -> float:
        """Get a float value.

        Args:
            name: The key name
            default: Default value if key is missing or invalid
        """
        value = self.get(name)
        if value is None:
            return default
        try:
            return float(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            self.log.warning("Invalid float value for %s: %s", name, value)
            return default

    def get_str(self, name: str, default: str = "") -> str:
        """Get a string value."""
        value = self.get(name)
        if value is None:
            return default
        return str(value)

    def validate(self) -> list[str]:
        """Return a list of problems found in the configuration."""
        errors = []
        for name, value in self.items():
            field = self._schema.get(name)
            if field is None:
                errors.append(f"Unknown option: {name}")
            elif field.choices and value not in field.choices:
                errors.append(f"Invalid value for {name}: {value!r} (expected one of: {', '.join(field.choices)})")
        return errors


def load_config(filename: str | Path | None, log: logging.Logger) -> Configuration:
    """Load the `[cosmolith]` section of a TOML file.

    A missing default file is not an error: every key has a default.

    Args:
        filename: explicit configuration file, or None for the default location
        log: logger used for status and error messages

    Raises:
        CosmolithError: if an explicit file is missing, or a file can't be parsed
    """
    if filename:
        fname = Path(os.path.expandvars(str(filename))).expanduser()
        if not fname.exists():
            log.critical("Config file not found: %s", fname)
            msg = f"config file not found: {fname}"
            raise CosmolithError(msg)
    else:
        fname = CONFIG_FILE
        if not fname.exists():
            log.debug("No config file at %s, using defaults", fname)
            return Configuration(logger=log)

    log.info("Loading %s", fname)
    with fname.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            log.critical("Problem reading %s: %s", fname, e)
            raise CosmolithError(str(e)) from e

    config = Configuration(data.get(SECTION, {}), logger=log)
    for error in config.validate():
        log.warning(error)
    return config
