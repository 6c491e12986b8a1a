"""Identifier and value-object types shared across the domain."""

from __future__ import annotations


class _StringValue(str):
    """A string with a distinct domain type."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str.__repr__(self)})"


class UserID(_StringValue):
    """Identifier of a user."""

    __slots__ = ()

    def is_empty(self) -> bool:
        """Return True when the identifier holds no characters."""
        return self == ""


class TenantID(_StringValue):
    """Identifier of a tenant."""

    __slots__ = ()

    def is_empty(self) -> bool:
        """Return True when the identifier holds no characters."""
        return self == ""


class Email(_StringValue):
    """An e-mail address."""

    __slots__ = ()


class Phone(_StringValue):
    """A phone number."""

    __slots__ = ()


class FirstName(_StringValue):
    """A person's first name."""

    __slots__ = ()


class LastName(_StringValue):
    """A person's last name."""

    __slots__ = ()