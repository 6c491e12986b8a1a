"""The logger and the chainable entries it hands out."""

from __future__ import annotations

import inspect
import io
import os
import sys
import threading
from collections.abc import Callable, Mapping
from typing import IO, Any

from manifesto.logx.config import Config, Format, default_config
from manifesto.logx.console import ConsoleFormatter
from manifesto.logx.formatter import Fields, Formatter, LogEntry
from manifesto.logx.json_formatter import CloudWatchFormatter, JSONFormatter
from manifesto.logx.levels import Level

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _render(msg: str, args: tuple[Any, ...]) -> str:
    return msg % args if args else msg


def _caller() -> str:
    """Return ``file:line`` of the first frame outside this package."""
    frame = inspect.currentframe()
    try:
        while frame is not None:
            filename = frame.f_code.co_filename
            if os.path.dirname(os.path.abspath(filename)) != _PACKAGE_DIR:
                return f"{os.path.basename(filename)}:{frame.f_lineno}"
            frame = frame.f_back
        return "???"
    finally:
        del frame


def _make_formatter(config: Config) -> Formatter:
    if config.format == Format.JSON:
        return JSONFormatter(config)
    if config.format == Format.CLOUDWATCH:
        return CloudWatchFormatter(config)
    return ConsoleFormatter(config)


class Logger:
    """Writes formatted log entries at or above a threshold level."""

    def __init__(
        self,
        config: Config | None = None,
        exit_func: Callable[[int], Any] = sys.exit,
    ) -> None:
        self.config = config if config is not None else default_config()
        self.formatter = _make_formatter(self.config)
        self._writer: IO[Any] = self.config.output if self.config.output is not None else sys.stdout
        self.exit_func = exit_func
        self._lock = threading.Lock()

    @property
    def level(self) -> Level:
        """The minimum level that is written."""
        with self._lock:
            return self.config.level

    @level.setter
    def level(self, level: Level) -> None:
        with self._lock:
            self.config.level = level

    @property
    def output(self) -> IO[Any]:
        """The stream log lines are written to."""
        with self._lock:
            return self._writer

    @output.setter
    def output(self, stream: IO[Any]) -> None:
        with self._lock:
            self._writer = stream

    def _log(
        self,
        level: Level,
        msg: str,
        fields: Fields | None = None,
        data: Any = None,
        err: BaseException | None = None,
    ) -> None:
        if not self.config.level.enabled(level):
            return

        entry = LogEntry(level=level, message=msg, fields=fields or {}, data=data, error=err)
        if self.config.enable_caller:
            entry.caller = _caller()

        try:
            formatted = self.formatter.format(entry)
        except (TypeError, ValueError) as exc:
            print(f"Error formatting log: {exc}", file=sys.stderr)
            return

        with self._lock:
            try:
                if isinstance(self._writer, io.TextIOBase):
                    self._writer.write(formatted.decode("utf-8"))
                else:
                    self._writer.write(formatted)
                self._writer.flush()
            except (OSError, ValueError) as exc:
                print(f"Error writing log: {exc}", file=sys.stderr)

    def _exit(self, code: int) -> None:
        self.exit_func(code)

    def with_field(self, key: str, value: Any) -> Entry:
        """Start an entry carrying one field."""
        return Entry(self).with_field(key, value)

    def with_fields(self, fields: Mapping[str, Any]) -> Entry:
        """Start an entry carrying several fields."""
        return Entry(self).with_fields(fields)

    def with_error(self, err: BaseException | None) -> Entry:
        """Start an entry carrying an error."""
        return Entry(self).with_error(err)

    def with_struct(self, data: Any) -> Entry:
        """Start an entry carrying structured data."""
        return Entry(self).with_struct(data)

    def with_context(self, ctx: Any) -> Entry:
        """Start an entry carrying a context object."""
        return Entry(self).with_context(ctx)

    def trace(self, msg: str, *args: Any) -> None:
        """Log at TRACE; ``args`` are %-interpolated into ``msg``."""
        self._log(Level.TRACE, _render(msg, args))

    def debug(self, msg: str, *args: Any) -> None:
        """Log at DEBUG; ``args`` are %-interpolated into ``msg``."""
        self._log(Level.DEBUG, _render(msg, args))

    def info(self, msg: str, *args: Any) -> None:
        """Log at INFO; ``args`` are %-interpolated into ``msg``."""
        self._log(Level.INFO, _render(msg, args))

    def warn(self, msg: str, *args: Any) -> None:
        """Log at WARN; ``args`` are %-interpolated into ``msg``."""
        self._log(Level.WARN, _render(msg, args))

    def error(self, msg: str, *args: Any) -> None:
        """Log at ERROR; ``args`` are %-interpolated into ``msg``."""
        self._log(Level.ERROR, _render(msg, args))

    def fatal(self, msg: str, *args: Any) -> None:
        """Log at FATAL, then exit with status 1."""
        self._log(Level.FATAL, _render(msg, args))
        self._exit(1)


class Entry:
    """A log entry under construction; every ``with_*`` call returns the entry itself."""

    def __init__(self, logger: Logger) -> None:
        self.logger = logger
        self.fields: Fields = {}
        self.data: Any = None
        self.err: BaseException | None = None
        self.ctx: Any = None

    def with_field(self, key: str, value: Any) -> Entry:
        """Add one field."""
        self.fields[key] = value
        return self

    def with_fields(self, fields: Mapping[str, Any]) -> Entry:
        """Add several fields."""
        self.fields.update(fields)
        return self

    def with_error(self, err: BaseException | None) -> Entry:
        """Attach an error; its text is also stored in the ``error`` field."""
        self.err = err
        if err is not None:
            self.fields["error"] = str(err)
        return self

    def with_context(self, ctx: Any) -> Entry:
        """Attach a context object."""
        self.ctx = ctx
        return self

    def with_struct(self, data: Any) -> Entry:
        """Attach structured data."""
        self.data = data
        return self

    def _emit(self, level: Level, msg: str, args: tuple[Any, ...]) -> None:
        self.logger._log(level, _render(msg, args), self.fields, self.data, self.err)

    def trace(self, msg: str, *args: Any) -> None:
        """Log at TRACE."""
        self._emit(Level.TRACE, msg, args)

    def debug(self, msg: str, *args: Any) -> None:
        """Log at DEBUG."""
        self._emit(Level.DEBUG, msg, args)

    def info(self, msg: str, *args: Any) -> None:
        """Log at INFO."""
        self._emit(Level.INFO, msg, args)

    def warn(self, msg: str, *args: Any) -> None:
        """Log at WARN."""
        self._emit(Level.WARN, msg, args)

    def error(self, msg: str, *args: Any) -> None:
        """Log at ERROR."""
        self._emit(Level.ERROR, msg, args)

    def fatal(self, msg: str, *args: Any) -> None:
        """Log at FATAL, then exit with status 1."""
        self._emit(Level.FATAL, msg, args)
        self.logger._exit(1)