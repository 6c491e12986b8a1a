"""Domain errors and per-module error registries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any


class ErrorType(str, Enum):
    """Broad category of a domain error."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    AUTHORIZATION = "AUTHORIZATION"
    BUSINESS = "BUSINESS"
    INTERNAL = "INTERNAL"


class DomainError(Exception):
    """An error raised by the domain, carrying a code, a type, an HTTP status and details."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.INTERNAL,
        code: str = "",
        http_status: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.http_status = int(http_status)
        self.details: dict[str, Any] = dict(details or {})

    def with_detail(self, key: str, value: Any) -> DomainError:
        """Attach a detail and return the error itself."""
        self.details[key] = value
        return self

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}" if self.code else self.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, type={self.error_type.value!r}, "
            f"message={self.message!r})"
        )


@dataclass(frozen=True)
class _Definition:
    error_type: ErrorType
    http_status: int
    message: str


class ErrorRegistry:
    """Holds the error codes of one module, all sharing a prefix."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self._definitions: dict[str, _Definition] = {}

    def register(self, code: str, error_type: ErrorType, http_status: int, message: str) -> str:
        """Register a code and return its full, prefixed form.

        Raises ValueError if the code is already registered.
        """
        full_code = f"{self.prefix}_{code}" if self.prefix else code
        if full_code in self._definitions:
            raise ValueError(f"error code {full_code!r} is already registered")
        self._definitions[full_code] = _Definition(error_type, int(http_status), message)
        return full_code

    def new(self, code: str) -> DomainError:
        """Create a fresh error for a registered code.

        Raises KeyError if the code was never registered.
        """
        try:
            definition = self._definitions[code]
        except KeyError:
            raise KeyError(f"unknown error code {code!r}") from None
        return DomainError(
            definition.message,
            error_type=definition.error_type,
            code=code,
            http_status=definition.http_status,
        )

    def __contains__(self, code: object) -> bool:
        return code in self._definitions