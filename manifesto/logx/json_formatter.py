"""JSON and CloudWatch log formatters."""

from __future__ import annotations

from typing import Any

from manifesto.logx.config import RFC3339_NANO, TIME_UNIX, TIME_UNIX_MILLI, Config, default_config
from manifesto.logx.formatter import (
    Formatter,
    LogEntry,
    _unix_millis,
    _unix_seconds,
    format_timestamp,
    marshal,
)


class JSONFormatter(Formatter):
    """Formats entries as one JSON object per line.

    Raises TypeError or ValueError when the entry holds values JSON cannot represent.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config if config is not None else default_config()

    def _add_common(self, record: dict[str, Any], entry: LogEntry) -> None:
        if self.config.enable_caller and entry.caller:
            record["caller"] = entry.caller
        record.update(entry.fields or {})

    def format(self, entry: LogEntry) -> bytes:
        """Render ``entry`` as a JSON line."""
        record: dict[str, Any] = {"level": str(entry.level), "message": entry.message}

        if self.config.enable_timestamp:
            if self.config.time_format == TIME_UNIX:
                record["timestamp"] = _unix_seconds(entry.timestamp)
            elif self.config.time_format == TIME_UNIX_MILLI:
                record["timestamp"] = _unix_millis(entry.timestamp)
            else:
                record["timestamp"] = format_timestamp(entry.timestamp, RFC3339_NANO)

        self._add_common(record, entry)
        if entry.error is not None:
            record["error"] = str(entry.error)
        if entry.data is not None:
            record["data"] = entry.data

        return (marshal(record) + "\n").encode("utf-8")


class CloudWatchFormatter(JSONFormatter):
    """Formats entries as JSON lines using CloudWatch's field names."""

    def format(self, entry: LogEntry) -> bytes:
        """Render ``entry`` as a CloudWatch-style JSON line."""
        record: dict[str, Any] = {
            "level": str(entry.level),
            "msg": entry.message,
            "time": format_timestamp(entry.timestamp, RFC3339_NANO),
        }

        self._add_common(record, entry)
        if entry.error is not None:
            record["error"] = str(entry.error)
            record["error_type"] = "error"
        if entry.data is not None:
            record["data"] = entry.data

        return (marshal(record) + "\n").encode("utf-8")