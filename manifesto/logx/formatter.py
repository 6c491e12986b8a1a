"""Log entries, the formatter interface and shared formatting helpers."""

from __future__ import annotations

import dataclasses
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any

from manifesto.logx.config import RFC822, RFC3339, RFC3339_NANO, TIME_UNIX, TIME_UNIX_MILLI
from manifesto.logx.levels import Level

Fields = dict[str, Any]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass
class LogEntry:
    """A single log record ready to be formatted."""

    level: Level
    message: str
    fields: Fields = field(default_factory=dict)
    data: Any = None
    error: BaseException | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now().astimezone())
    caller: str = ""


class Formatter(ABC):
    """Turns a log entry into the bytes written to the output."""

    @abstractmethod
    def format(self, entry: LogEntry) -> bytes:
        """Render ``entry`` as bytes, ending with a newline."""


def _aware(t: datetime) -> datetime:
    return t if t.tzinfo is not None else t.astimezone()


def _unix_seconds(t: datetime) -> int:
    return (_aware(t) - _EPOCH) // timedelta(seconds=1)


def _unix_millis(t: datetime) -> int:
    return (_aware(t) - _EPOCH) // timedelta(milliseconds=1)


def _offset(t: datetime, colon: bool) -> str:
    delta = t.utcoffset() or timedelta(0)
    sign = "-" if delta < timedelta(0) else "+"
    minutes = abs(delta) // timedelta(minutes=1)
    hours, minutes = divmod(minutes, 60)
    sep = ":" if colon else ""
    return f"{sign}{hours:02d}{sep}{minutes:02d}"


def _rfc3339(t: datetime, fractional: bool) -> str:
    t = _aware(t)
    text = t.strftime("%Y-%m-%dT%H:%M:%S")
    if fractional and t.microsecond:
        text += "." + f"{t.microsecond:06d}".rstrip("0")
    if (t.utcoffset() or timedelta(0)) == timedelta(0):
        return text + "Z"
    return text + _offset(t, colon=True)


def _rfc822(t: datetime) -> str:
    t = _aware(t)
    zone = t.tzname() or _offset(t, colon=False)
    return f"{t.day:02d} {_MONTHS[t.month - 1]} {t.year % 100:02d} {t.hour:02d}:{t.minute:02d} {zone}"


def format_timestamp(t: datetime, time_format: str) -> str:
    """Format ``t`` with a named layout, as Unix time, or with a strftime pattern."""
    if time_format == TIME_UNIX:
        return str(_unix_seconds(t))
    if time_format == TIME_UNIX_MILLI:
        return str(_unix_millis(t))
    if time_format == RFC3339:
        return _rfc3339(t, fractional=False)
    if time_format == RFC3339_NANO:
        return _rfc3339(t, fractional=True)
    if time_format == RFC822:
        return _rfc822(t)
    return t.strftime(time_format)


def _encode(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return _rfc3339(obj, fractional=True)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


_HTML_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}


def marshal(data: Any, indent: int | None = None) -> str:
    """Serialise ``data`` to JSON with sorted keys and escaped HTML characters.

    Raises TypeError or ValueError when the data cannot be represented.
    """
    text = json.dumps(
        data,
        default=_encode,
        sort_keys=True,
        ensure_ascii=False,
        allow_nan=False,
        indent=indent,
        separators=(",", ": ") if indent is not None else (",", ":"),
    )
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def pretty_json(data: Any) -> str:
    """Render ``data`` as indented JSON, or as plain text if it cannot be serialised."""
    if data is None:
        return ""
    try:
        return marshal(data, indent=2)
    except (TypeError, ValueError):
        return str(data)


def compact_json(data: Any) -> str:
    """Render ``data`` as compact JSON, or as plain text if it cannot be serialised."""
    if data is None:
        return ""
    try:
        return marshal(data)
    except (TypeError, ValueError):
        return str(data)