"""Logger configuration and environment loading."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, Any

from manifesto.logx.levels import Level, parse_level

RFC3339 = "2006-01-02T15:04:05Z07:00"
RFC3339_NANO = "2006-01-02T15:04:05.999999999Z07:00"
RFC822 = "02 Jan 06 15:04 MST"
TIME_UNIX = "unix"
TIME_UNIX_MILLI = "unixmilli"


class Format(str, Enum):
    """Output format of the logger."""

    CONSOLE = "console"
    JSON = "json"
    CLOUDWATCH = "cloudwatch"


@dataclass
class Config:
    """Logger settings.

    ``time_format`` is one of the named layouts of this module, ``unix``,
    ``unixmilli`` or a ``strftime`` pattern.
    """

    level: Level = Level.INFO
    format: Format = Format.CONSOLE
    enable_colors: bool = True
    enable_caller: bool = False
    enable_timestamp: bool = True
    time_format: str = RFC3339
    output: IO[Any] | None = field(default_factory=lambda: sys.stdout)


def default_config() -> Config:
    """Return the default configuration."""
    return Config()


_TIME_FORMATS = {
    "RFC3339": RFC3339,
    "RFC3339NANO": RFC3339_NANO,
    "RFC822": RFC822,
    "UNIX": TIME_UNIX,
    "UNIXMILLI": TIME_UNIX_MILLI,
}


def _flag(text: str) -> bool:
    return text.lower() == "true" or text == "1"


def load_from_env(environ: Mapping[str, str] | None = None) -> Config:
    """Build a configuration from LOG_* variables in ``environ`` (default: os.environ)."""
    env = os.environ if environ is None else environ
    config = default_config()

    level = env.get("LOG_LEVEL", "")
    if level:
        config.level = parse_level(level)

    fmt = env.get("LOG_FORMAT", "")
    if fmt:
        try:
            config.format = Format(fmt.lower())
        except ValueError:
            pass

    color = env.get("LOG_COLOR", "")
    if color:
        config.enable_colors = _flag(color)

    caller = env.get("LOG_CALLER", "")
    if caller:
        config.enable_caller = _flag(caller)

    time_format = env.get("LOG_TIME_FORMAT", "")
    if time_format:
        config.time_format = _TIME_FORMATS.get(time_format.upper(), time_format)

    return config