"""Module-level logging functions backed by a replaceable default logger."""

from __future__ import annotations

from collections.abc import Mapping
from typing import IO, Any

from manifesto.logx.config import load_from_env
from manifesto.logx.levels import Level
from manifesto.logx.logger import Entry, Logger, _render

_default_logger = Logger(load_from_env())


def set_default_logger(logger: Logger) -> None:
    """Replace the default logger."""
    global _default_logger
    _default_logger = logger


def get_default_logger() -> Logger:
    """Return the default logger."""
    return _default_logger


def set_level(level: Level) -> None:
    """Set the default logger's level."""
    _default_logger.level = level


def set_output(stream: IO[Any]) -> None:
    """Set the default logger's output stream."""
    _default_logger.output = stream


def trace(msg: str, *args: Any) -> None:
    """Log at TRACE on the default logger."""
    _default_logger.trace(msg, *args)


def debug(msg: str, *args: Any) -> None:
    """Log at DEBUG on the default logger."""
    _default_logger.debug(msg, *args)


def info(msg: str, *args: Any) -> None:
    """Log at INFO on the default logger."""
    _default_logger.info(msg, *args)


def warn(msg: str, *args: Any) -> None:
    """Log at WARN on the default logger."""
    _default_logger.warn(msg, *args)


def error(msg: str, *args: Any) -> None:
    """Log at ERROR on the default logger."""
    _default_logger.error(msg, *args)


def fatal(msg: str, *args: Any) -> None:
    """Log at FATAL on the default logger, then exit with status 1."""
    _default_logger.fatal(msg, *args)


def panic(msg: str, *args: Any) -> None:
    """Log at ERROR on the default logger, then raise RuntimeError with the message."""
    text = _render(msg, args)
    _default_logger._log(Level.ERROR, text)
    raise RuntimeError(text)


def with_fields(fields: Mapping[str, Any]) -> Entry:
    """Start an entry on the default logger carrying several fields."""
    return _default_logger.with_fields(fields)


def with_field(key: str, value: Any) -> Entry:
    """Start an entry on the default logger carrying one field."""
    return _default_logger.with_field(key, value)


def with_context(ctx: Any) -> Entry:
    """Start an entry on the default logger carrying a context object."""
    return _default_logger.with_context(ctx)


def with_error(err: BaseException | None) -> Entry:
    """Start an entry on the default logger carrying an error."""
    return _default_logger.with_error(err)


def with_struct(data: Any) -> Entry:
    """Start an entry on the default logger carrying structured data."""
    return _default_logger.with_struct(data)