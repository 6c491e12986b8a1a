"""Authentication context carried through each request."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from manifesto.kernel.ids import TenantID, UserID


class ContextKey(str, Enum):
    """Keys under which request-scoped values are stored."""

    AUTH_CONTEXT = "auth_context"
    TENANT = "tenant_id"
    USER = "user_id"
    REQUEST_ID = "request_id"


def scope_matches(granted: str, scope: str) -> bool:
    """Return True if a granted scope covers the requested scope.

    A granted scope matches exactly, as the global wildcard ``*``, or as a
    prefix wildcard such as ``channels:*`` covering ``channels:read``.
    """
    if granted == scope or granted == "*":
        return True
    if len(granted) > 2 and granted.endswith(":*"):
        prefix = granted[:-2]
        return len(scope) > len(prefix) and scope.startswith(prefix + ":")
    return False


@dataclass
class AuthContext:
    """The authenticated principal of a request."""

    user_id: UserID | None = None
    tenant_id: TenantID = field(default_factory=lambda: TenantID(""))
    email: str = ""
    name: str = ""
    scopes: list[str] = field(default_factory=list)
    is_api_key: bool = False

    def is_valid(self) -> bool:
        """Check that the context identifies a tenant, and a user unless it is an API key."""
        tenant_ok = TenantID(self.tenant_id) != ""
        if self.is_api_key:
            return tenant_ok
        return self.user_id is not None and UserID(self.user_id) != "" and tenant_ok

    def has_scope(self, scope: str) -> bool:
        """Return True if any granted scope covers ``scope``."""
        return any(scope_matches(granted, scope) for granted in self.scopes)

    def is_admin(self) -> bool:
        """Return True if the context holds administrator rights."""
        return self.has_scope("*") or self.has_scope("admin:*")

    def has_any_scope(self, *args: str) -> bool:
        """Return True if at least one of the given scopes is covered."""
        return any(self.has_scope(scope) for scope in args)

    def has_all_scopes(self, *args: str) -> bool:
        """Return True if every one of the given scopes is covered."""
        return all(self.has_scope(scope) for scope in args)