"""Logging severity levels."""

from __future__ import annotations

from enum import IntEnum


class Level(IntEnum):
    """Severity of a log message, from most to least verbose."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5
    OFF = 6

    def __str__(self) -> str:
        return self.name

    def enabled(self, target: Level) -> bool:
        """Return True if messages at ``target`` pass a threshold of this level."""
        return self <= target


_NAMES = {
    "TRACE": Level.TRACE,
    "DEBUG": Level.DEBUG,
    "INFO": Level.INFO,
    "WARN": Level.WARN,
    "WARNING": Level.WARN,
    "ERROR": Level.ERROR,
    "FATAL": Level.FATAL,
    "OFF": Level.OFF,
}


def parse_level(level: str) -> Level:
    """Parse a level name case-insensitively; unknown names give INFO."""
    return _NAMES.get(level.upper(), Level.INFO)