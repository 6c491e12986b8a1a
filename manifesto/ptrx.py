"""Helpers for optional values: defaults for missing values and None checks."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

T = TypeVar("T")


def value(v: T | None, zero: T) -> T:
    """Return ``v``, or the zero value of its type when ``v`` is None."""
    return zero if v is None else v


def value_or(v: T | None, default: T) -> T:
    """Return ``v``, or ``default`` when ``v`` is None."""
    return default if v is None else v


def is_nil(v: Any) -> bool:
    """Return True if ``v`` is None."""
    return v is None


def is_not_nil(v: Any) -> bool:
    """Return True if ``v`` is not None."""
    return v is not None


def values_or(
    vs: Mapping[Any, T | None] | Iterable[T | None], default: T
) -> dict[Any, T] | list[T]:
    """Replace every None in a mapping's values or a sequence with ``default``.

    A mapping yields a new dict with the same keys; any other iterable yields a list.
    """
    if isinstance(vs, Mapping):
        return {key: value_or(item, default) for key, item in vs.items()}
    return [value_or(item, default) for item in vs]