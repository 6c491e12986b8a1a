"""The user entity, its DTOs, repository contracts and errors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from http import HTTPStatus

from manifesto.iam.errors import DomainError, ErrorRegistry, ErrorType
from manifesto.kernel.context import scope_matches
from manifesto.kernel.ids import TenantID, UserID

ADMIN_SCOPE = "*"
ADMIN_WILDCARD_SCOPE = "admin:*"


class UserStatus(str, Enum):
    """Lifecycle state of a user."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    PENDING = "PENDING"  # invited but onboarding not completed


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    """A person using the system within one tenant, with scope-based permissions."""

    id: UserID
    tenant_id: TenantID
    email: str
    name: str
    picture: str | None = None
    status: UserStatus = UserStatus.PENDING
    scopes: list[str] = field(default_factory=list)
    oauth_provider: str = ""
    oauth_provider_id: str = ""
    email_verified: bool = False
    last_login_at: datetime | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def is_active(self) -> bool:
        """Return True if the user is active."""
        return self.status == UserStatus.ACTIVE

    def can_login(self) -> bool:
        """Return True if the user is active and has a verified e-mail."""
        return self.is_active() and self.email_verified

    def activate(self) -> None:
        """Activate a pending user; raises DomainError for any other status."""
        if self.status != UserStatus.PENDING:
            raise err_invalid_status().with_detail("current_status", self.status)
        self.status = UserStatus.ACTIVE
        self.updated_at = _now()

    def suspend(self, reason: str) -> None:
        """Suspend an active user; raises DomainError if the user is not active."""
        if not self.is_active():
            raise err_invalid_status().with_detail("current_status", self.status)
        self.status = UserStatus.SUSPENDED
        self.updated_at = _now()

    def update_last_login(self) -> None:
        """Record a login at the current time."""
        now = _now()
        self.last_login_at = now
        self.updated_at = now

    def update_profile(self, name: str, picture: str) -> None:
        """Update name and picture; empty values leave a field unchanged."""
        if name:
            self.name = name
        if picture:
            self.picture = picture
        self.updated_at = _now()

    def has_scope(self, scope: str) -> bool:
        """Return True if any granted scope covers ``scope``."""
        return any(scope_matches(granted, scope) for granted in self.scopes)

    def is_admin(self) -> bool:
        """Return True if the user holds administrator rights."""
        return self.has_scope(ADMIN_SCOPE) or self.has_scope(ADMIN_WILDCARD_SCOPE)

    def has_any_scope(self, *args: str) -> bool:
        """Return True if at least one of the given scopes is covered."""
        return any(self.has_scope(scope) for scope in args)

    def has_all_scopes(self, *args: str) -> bool:
        """Return True if every one of the given scopes is covered."""
        return all(self.has_scope(scope) for scope in args)

    def add_scope(self, scope: str) -> None:
        """Grant a scope unless it is already covered."""
        if not self.has_scope(scope):
            self.scopes.append(scope)
            self.updated_at = _now()

    def remove_scope(self, scope: str) -> None:
        """Remove every exact occurrence of a scope."""
        self.scopes = [granted for granted in self.scopes if granted != scope]
        self.updated_at = _now()

    def set_scopes(self, scopes: list[str]) -> None:
        """Replace all scopes."""
        self.scopes = list(scopes)
        self.updated_at = _now()

    def make_admin(self) -> None:
        """Grant the global wildcard scope."""
        self.add_scope(ADMIN_SCOPE)

    def revoke_admin(self) -> None:
        """Remove the administrator scopes."""
        self.remove_scope(ADMIN_SCOPE)
        self.remove_scope(ADMIN_WILDCARD_SCOPE)

    def to_dto(self) -> UserDetailsDTO:
        """Return the summary other modules see."""
        return UserDetailsDTO(
            id=self.id,
            tenant_id=self.tenant_id,
            name=self.name,
            email=self.email,
            picture=self.picture,
            is_active=self.is_active(),
            scopes=self.scopes,
            oauth_provider=self.oauth_provider,
        )


@dataclass
class UserDetailsDTO:
    """Basic user information shared with other modules."""

    id: UserID
    tenant_id: TenantID
    name: str
    email: str
    picture: str | None
    is_active: bool
    scopes: list[str]
    oauth_provider: str


@dataclass
class CreateUserRequest:
    """Request to create a user with direct scopes or a scope template."""

    tenant_id: TenantID
    email: str
    name: str
    scopes: list[str] = field(default_factory=list)
    scope_template: str | None = None


@dataclass
class UpdateUserRequest:
    """Request to update a user; None leaves a field unchanged."""

    tenant_id: TenantID
    name: str | None = None
    status: UserStatus | None = None
    scopes: list[str] | None = None
    scope_template: str | None = None


@dataclass
class UserResponseDTO:
    """DTO form of a user response."""

    user: UserDetailsDTO


@dataclass
class UserResponse:
    """A full user record."""

    user: User

    def to_dto(self) -> UserResponseDTO:
        """Return the DTO form."""
        return UserResponseDTO(user=self.user.to_dto())


@dataclass
class UserListResponseDTO:
    """DTO form of a user list."""

    users: list[UserResponseDTO] = field(default_factory=list)
    total: int = 0


@dataclass
class UserListResponse:
    """A list of users."""

    users: list[UserResponse] = field(default_factory=list)
    total: int = 0

    def to_dto(self) -> UserListResponseDTO:
        """Return the DTO form."""
        return UserListResponseDTO(
            users=[response.to_dto() for response in self.users], total=self.total
        )


@dataclass
class ScopeDetail:
    """A scope with its description and category."""

    name: str
    description: str
    category: str


class UserRepository(ABC):
    """Persistence of users. Lookups of missing users raise DomainError."""

    @abstractmethod
    def find_by_id(self, user_id: UserID, tenant_id: TenantID) -> User:
        """Return the user with this id in the tenant."""

    @abstractmethod
    def find_by_email(self, email: str, tenant_id: TenantID) -> User:
        """Return the user with this e-mail in the tenant."""

    @abstractmethod
    def find_by_tenant(self, tenant_id: TenantID) -> list[User]:
        """Return every user of a tenant."""

    @abstractmethod
    def save(self, user: User) -> None:
        """Create or update a user."""

    @abstractmethod
    def delete(self, user_id: UserID, tenant_id: TenantID) -> None:
        """Delete a user."""

    @abstractmethod
    def exists_by_email(self, email: str, tenant_id: TenantID) -> bool:
        """Return True if the tenant has a user with this e-mail."""


class PasswordService(ABC):
    """Hashing and verification of passwords."""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """Return a hash of the password."""

    @abstractmethod
    def verify_password(self, hashed_password: str, password: str) -> bool:
        """Return True if the password matches the hash."""


ERROR_REGISTRY = ErrorRegistry("USER")

CODE_USER_NOT_FOUND = ERROR_REGISTRY.register(
    "NOT_FOUND", ErrorType.NOT_FOUND, HTTPStatus.NOT_FOUND, "Usuario no encontrado"
)
CODE_USER_ALREADY_EXISTS = ERROR_REGISTRY.register(
    "ALREADY_EXISTS", ErrorType.CONFLICT, HTTPStatus.CONFLICT, "El usuario ya existe"
)
CODE_USER_NOT_IN_TENANT = ERROR_REGISTRY.register(
    "NOT_IN_TENANT",
    ErrorType.AUTHORIZATION,
    HTTPStatus.FORBIDDEN,
    "Usuario no pertenece a la empresa",
)
CODE_EMAIL_NOT_VERIFIED = ERROR_REGISTRY.register(
    "EMAIL_NOT_VERIFIED", ErrorType.BUSINESS, HTTPStatus.PRECONDITION_FAILED, "Email no verificado"
)
CODE_USER_SUSPENDED = ERROR_REGISTRY.register(
    "SUSPENDED", ErrorType.BUSINESS, HTTPStatus.FORBIDDEN, "Usuario suspendido"
)
CODE_ONBOARDING_REQUIRED = ERROR_REGISTRY.register(
    "ONBOARDING_REQUIRED",
    ErrorType.BUSINESS,
    HTTPStatus.PRECONDITION_REQUIRED,
    "Se requiere completar el onboarding",
)
CODE_INVALID_STATUS = ERROR_REGISTRY.register(
    "INVALID_STATUS",
    ErrorType.BUSINESS,
    HTTPStatus.BAD_REQUEST,
    "Estado de usuario inválido para esta operación",
)
CODE_INVALID_SCOPE_TEMPLATE = ERROR_REGISTRY.register(
    "INVALID_SCOPE_TEMPLATE",
    ErrorType.VALIDATION,
    HTTPStatus.BAD_REQUEST,
    "Plantilla de scopes no encontrada",
)
CODE_INVALID_SCOPES = ERROR_REGISTRY.register(
    "INVALID_SCOPES", ErrorType.VALIDATION, HTTPStatus.BAD_REQUEST, "Scopes inválidos"
)
CODE_SCOPE_NOT_FOUND = ERROR_REGISTRY.register(
    "SCOPE_NOT_FOUND", ErrorType.NOT_FOUND, HTTPStatus.NOT_FOUND, "Scope no encontrado"
)
CODE_INSUFFICIENT_SCOPES = ERROR_REGISTRY.register(
    "INSUFFICIENT_SCOPES", ErrorType.AUTHORIZATION, HTTPStatus.FORBIDDEN, "Scopes insuficientes"
)


def err_user_not_found() -> DomainError:
    """Error for a user that does not exist."""
    return ERROR_REGISTRY.new(CODE_USER_NOT_FOUND)


def err_user_already_exists() -> DomainError:
    """Error for a user that already exists."""
    return ERROR_REGISTRY.new(CODE_USER_ALREADY_EXISTS)


def err_user_not_in_tenant() -> DomainError:
    """Error for a user outside the tenant."""
    return ERROR_REGISTRY.new(CODE_USER_NOT_IN_TENANT)


def err_email_not_verified() -> DomainError:
    """Error for an unverified e-mail."""
    return ERROR_REGISTRY.new(CODE_EMAIL_NOT_VERIFIED)


def err_user_suspended() -> DomainError:
    """Error for a suspended user."""
    return ERROR_REGISTRY.new(CODE_USER_SUSPENDED)


def err_onboarding_required() -> DomainError:
    """Error for a user who has not completed onboarding."""
    return ERROR_REGISTRY.new(CODE_ONBOARDING_REQUIRED)


def err_invalid_status() -> DomainError:
    """Error for an operation not allowed in the user's status."""
    return ERROR_REGISTRY.new(CODE_INVALID_STATUS)


def err_invalid_scope_template() -> DomainError:
    """Error for an unknown scope template."""
    return ERROR_REGISTRY.new(CODE_INVALID_SCOPE_TEMPLATE)


def err_invalid_scopes() -> DomainError:
    """Error for invalid scopes."""
    return ERROR_REGISTRY.new(CODE_INVALID_SCOPES)


def err_scope_not_found() -> DomainError:
    """Error for an unknown scope."""
    return ERROR_REGISTRY.new(CODE_SCOPE_NOT_FOUND)


def err_insufficient_scopes() -> DomainError:
    """Error for a caller lacking the required scopes."""
    return ERROR_REGISTRY.new(CODE_INSUFFICIENT_SCOPES)