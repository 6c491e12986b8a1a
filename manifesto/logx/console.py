"""Human-readable console formatter with optional ANSI colours."""

from __future__ import annotations

from typing import Any

from manifesto.logx.config import Config, default_config
from manifesto.logx.formatter import Formatter, LogEntry, format_timestamp, pretty_json
from manifesto.logx.levels import Level

COLOR_RESET = "\033[0m"
COLOR_RED = "\033[31m"
COLOR_CYAN = "\033[36m"
COLOR_GRAY = "\033[90m"
COLOR_WHITE = "\033[97m"
COLOR_BOLD_RED = "\033[1;31m"
COLOR_BOLD_YELLOW = "\033[1;33m"
COLOR_BOLD_CYAN = "\033[1;36m"
COLOR_BOLD_GREEN = "\033[1;32m"

_LEVEL_STYLES = {
    Level.TRACE: (COLOR_GRAY, "[TRACE]"),
    Level.DEBUG: (COLOR_BOLD_CYAN, "[DEBUG]"),
    Level.INFO: (COLOR_BOLD_GREEN, "[INFO ]"),
    Level.WARN: (COLOR_BOLD_YELLOW, "[WARN ]"),
    Level.ERROR: (COLOR_BOLD_RED, "[ERROR]"),
    Level.FATAL: (COLOR_BOLD_RED, "[FATAL]"),
}


def _display(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ConsoleFormatter(Formatter):
    """Formats entries as single console lines, optionally coloured."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config if config is not None else default_config()

    def _paint(self, color: str, text: str) -> str:
        return f"{color}{text}{COLOR_RESET}" if self.config.enable_colors else text

    def _format_level(self, level: Level) -> str:
        if not self.config.enable_colors or level not in _LEVEL_STYLES:
            return f"[{level}]"
        color, label = _LEVEL_STYLES[level]
        return f"{color}{label}{COLOR_RESET}"

    def format(self, entry: LogEntry) -> bytes:
        """Render ``entry`` as a console line (plus indented data when present)."""
        config = self.config
        parts: list[str] = []

        if config.enable_timestamp:
            timestamp = format_timestamp(entry.timestamp, config.time_format)
            parts.append(self._paint(COLOR_GRAY, timestamp) + " ")

        parts.append(self._format_level(entry.level) + " ")

        if config.enable_caller and entry.caller:
            parts.append(self._paint(COLOR_GRAY, f"[{entry.caller}]") + " ")

        parts.append(self._paint(COLOR_WHITE, entry.message))

        if entry.fields:
            pairs = " ".join(f"{key}={_display(val)}" for key, val in entry.fields.items())
            parts.append(" " + self._paint(COLOR_CYAN, pairs))

        if entry.error is not None:
            parts.append("\n")
            if config.enable_colors:
                parts.append(f"{COLOR_RED}  ╰─→ error: {entry.error}{COLOR_RESET}")
            else:
                parts.append(f"  error: {entry.error}")

        parts.append("\n")
        if entry.data is not None:
            body = "".join(f"  {line}\n" for line in pretty_json(entry.data).split("\n"))
            parts.append(self._paint(COLOR_GRAY, body))

        return "".join(parts).encode("utf-8")