"""The tenant entity, its DTOs, repository contracts and errors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from http import HTTPStatus

from manifesto.iam.errors import DomainError, ErrorRegistry, ErrorType
from manifesto.kernel.ids import TenantID


class TenantStatus(str, Enum):
    """Lifecycle state of a tenant."""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    CANCELED = "CANCELED"
    TRIAL = "TRIAL"


class SubscriptionPlan(str, Enum):
    """Subscription plan of a tenant."""

    TRIAL = "TRIAL"
    BASIC = "BASIC"
    PROFESSIONAL = "PROFESSIONAL"
    ENTERPRISE = "ENTERPRISE"


_PLAN_LIMITS = {
    SubscriptionPlan.TRIAL: 5,
    SubscriptionPlan.BASIC: 5,
    SubscriptionPlan.PROFESSIONAL: 50,
    SubscriptionPlan.ENTERPRISE: 500,
}


def max_users_for_plan(plan: SubscriptionPlan | str) -> int:
    """Return the user limit of a plan; unknown plans allow a single user."""
    return _PLAN_LIMITS.get(plan, 1)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _is_past(moment: datetime) -> bool:
    now = datetime.now() if moment.tzinfo is None else _now()
    return now > moment


@dataclass
class Tenant:
    """A company using the system."""

    id: TenantID
    company_name: str
    status: TenantStatus = TenantStatus.TRIAL
    subscription_plan: SubscriptionPlan = SubscriptionPlan.TRIAL
    max_users: int = 0
    current_users: int = 0
    trial_expires_at: datetime | None = None
    subscription_expires_at: datetime | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def is_active(self) -> bool:
        """Return True if the tenant is active."""
        return self.status == TenantStatus.ACTIVE

    def is_trial(self) -> bool:
        """Return True if the tenant is on a trial plan or in trial status."""
        return self.subscription_plan == SubscriptionPlan.TRIAL or self.status == TenantStatus.TRIAL

    def is_trial_expired(self) -> bool:
        """Return True if the tenant is on trial and the trial has ended."""
        if not self.is_trial() or self.trial_expires_at is None:
            return False
        return _is_past(self.trial_expires_at)

    def is_subscription_expired(self) -> bool:
        """Return True if the subscription has an end date that has passed."""
        if self.subscription_expires_at is None:
            return False
        return _is_past(self.subscription_expires_at)

    def can_add_user(self) -> bool:
        """Return True if an active, unexpired tenant still has room for a user."""
        if not self.is_active():
            return False
        if self.is_trial_expired() or self.is_subscription_expired():
            return False
        return self.current_users < self.max_users

    def add_user(self) -> None:
        """Count one more user; raises DomainError when no user can be added."""
        if not self.can_add_user():
            raise (
                err_max_users_reached()
                .with_detail("max_users", self.max_users)
                .with_detail("current_users", self.current_users)
            )
        self.current_users += 1
        self.updated_at = _now()

    def remove_user(self) -> None:
        """Count one user fewer, never going below zero."""
        if self.current_users > 0:
            self.current_users -= 1
            self.updated_at = _now()

    def suspend(self, reason: str) -> None:
        """Suspend the tenant."""
        self.status = TenantStatus.SUSPENDED
        self.updated_at = _now()

    def activate(self) -> None:
        """Activate the tenant."""
        self.status = TenantStatus.ACTIVE
        self.updated_at = _now()

    def upgrade_plan(self, new_plan: SubscriptionPlan) -> None:
        """Switch plan; raises DomainError if current users exceed the new limit."""
        limit = max_users_for_plan(new_plan)
        if self.current_users > limit:
            raise (
                err_too_many_users_for_plan()
                .with_detail("current_users", self.current_users)
                .with_detail("max_allowed", limit)
            )
        self.subscription_plan = new_plan
        self.max_users = limit
        self.updated_at = _now()

    def to_dto(self) -> TenantDetailsDTO:
        """Return the summary other modules see."""
        return TenantDetailsDTO(
            id=self.id,
            company_name=self.company_name,
            status=self.status,
            subscription_plan=self.subscription_plan,
            max_users=self.max_users,
            current_users=self.current_users,
        )


@dataclass
class TenantDetailsDTO:
    """Basic tenant information shared with other modules."""

    id: TenantID
    company_name: str
    status: TenantStatus
    subscription_plan: SubscriptionPlan
    max_users: int
    current_users: int


@dataclass
class CreateTenantRequest:
    """Request to create a tenant; no plan means a trial."""

    company_name: str
    subscription_plan: SubscriptionPlan | None = None


@dataclass
class UpdateTenantRequest:
    """Request to update a tenant; None leaves a field unchanged."""

    company_name: str | None = None
    status: TenantStatus | None = None


@dataclass
class TenantResponseDTO:
    """Tenant summary with its configuration."""

    tenant: TenantDetailsDTO
    config: dict[str, str] = field(default_factory=dict)


@dataclass
class TenantResponse:
    """A tenant together with its configuration."""

    tenant: Tenant
    config: dict[str, str] = field(default_factory=dict)

    def to_dto(self) -> TenantResponseDTO:
        """Return the DTO form."""
        return TenantResponseDTO(tenant=self.tenant.to_dto(), config=self.config)


@dataclass
class TenantListResponseDTO:
    """DTO form of a tenant list."""

    tenants: list[TenantResponseDTO] = field(default_factory=list)
    total: int = 0


@dataclass
class TenantListResponse:
    """A list of tenants with their configurations."""

    tenants: list[TenantResponse] = field(default_factory=list)
    total: int = 0

    def to_dto(self) -> TenantListResponseDTO:
        """Return the DTO form."""
        return TenantListResponseDTO(
            tenants=[response.to_dto() for response in self.tenants], total=self.total
        )


@dataclass
class TenantStatsResponse:
    """Usage and subscription statistics of a tenant."""

    tenant_id: TenantID
    total_users: int = 0
    active_users: int = 0
    max_users: int = 0
    user_utilization: float = 0.0
    subscription_status: str = ""
    days_until_expiration: int | None = None
    is_trial_expired: bool = False
    is_subscription_expired: bool = False


@dataclass
class TenantUsageResponse:
    """Seat usage of a tenant."""

    tenant_id: TenantID
    current_users: int = 0
    max_users: int = 0
    usage_percentage: float = 0.0
    can_add_users: bool = False
    remaining_users: int = 0


@dataclass
class TenantConfigResponse:
    """The configuration settings of a tenant."""

    tenant_id: TenantID
    config: dict[str, str] = field(default_factory=dict)


@dataclass
class BulkTenantOperationResponse:
    """Outcome of an operation applied to many tenants."""

    successful: list[TenantID] = field(default_factory=list)
    failed: dict[TenantID, str] = field(default_factory=dict)
    total: int = 0


class TenantRepository(ABC):
    """Persistence of tenants. Lookups of missing tenants raise DomainError."""

    @abstractmethod
    def find_by_id(self, tenant_id: TenantID) -> Tenant:
        """Return the tenant with this id."""

    @abstractmethod
    def find_all(self) -> list[Tenant]:
        """Return every tenant."""

    @abstractmethod
    def find_active(self) -> list[Tenant]:
        """Return the active tenants."""

    @abstractmethod
    def save(self, tenant: Tenant) -> None:
        """Create or update a tenant."""

    @abstractmethod
    def delete(self, tenant_id: TenantID) -> None:
        """Delete a tenant."""


class TenantConfigRepository(ABC):
    """Persistence of per-tenant key/value settings."""

    @abstractmethod
    def find_by_tenant(self, tenant_id: TenantID) -> dict[str, str]:
        """Return all settings of a tenant."""

    @abstractmethod
    def save_setting(self, tenant_id: TenantID, key: str, value: str) -> None:
        """Create or replace one setting."""

    @abstractmethod
    def delete_setting(self, tenant_id: TenantID, key: str) -> None:
        """Delete one setting."""


ERROR_REGISTRY = ErrorRegistry("TENANT")

CODE_TENANT_NOT_FOUND = ERROR_REGISTRY.register(
    "NOT_FOUND", ErrorType.NOT_FOUND, HTTPStatus.NOT_FOUND, "Empresa no encontrada"
)
CODE_TENANT_ALREADY_EXISTS = ERROR_REGISTRY.register(
    "ALREADY_EXISTS", ErrorType.CONFLICT, HTTPStatus.CONFLICT, "La empresa ya existe"
)
CODE_TENANT_SUSPENDED = ERROR_REGISTRY.register(
    "SUSPENDED", ErrorType.BUSINESS, HTTPStatus.FORBIDDEN, "Empresa suspendida"
)
CODE_TRIAL_EXPIRED = ERROR_REGISTRY.register(
    "TRIAL_EXPIRED", ErrorType.BUSINESS, HTTPStatus.PAYMENT_REQUIRED, "Período de prueba expirado"
)
CODE_SUBSCRIPTION_EXPIRED = ERROR_REGISTRY.register(
    "SUBSCRIPTION_EXPIRED", ErrorType.BUSINESS, HTTPStatus.PAYMENT_REQUIRED, "Suscripción expirada"
)
CODE_MAX_USERS_REACHED = ERROR_REGISTRY.register(
    "MAX_USERS_REACHED", ErrorType.BUSINESS, HTTPStatus.FORBIDDEN, "Máximo de usuarios alcanzado"
)
CODE_TOO_MANY_USERS_FOR_PLAN = ERROR_REGISTRY.register(
    "TOO_MANY_USERS_FOR_PLAN",
    ErrorType.BUSINESS,
    HTTPStatus.BAD_REQUEST,
    "El nuevo plan no permite tantos usuarios",
)
CODE_TENANT_HAS_USERS = ERROR_REGISTRY.register(
    "TENANT_HAS_USERS",
    ErrorType.BUSINESS,
    HTTPStatus.CONFLICT,
    "No se puede eliminar tenant con usuarios activos",
)
CODE_INVALID_PLAN_UPGRADE = ERROR_REGISTRY.register(
    "INVALID_PLAN_UPGRADE", ErrorType.BUSINESS, HTTPStatus.BAD_REQUEST, "Actualización de plan inválida"
)


def err_tenant_not_found() -> DomainError:
    """Error for a tenant that does not exist."""
    return ERROR_REGISTRY.new(CODE_TENANT_NOT_FOUND)


def err_tenant_already_exists() -> DomainError:
    """Error for a tenant that already exists."""
    return ERROR_REGISTRY.new(CODE_TENANT_ALREADY_EXISTS)


def err_tenant_suspended() -> DomainError:
    """Error for a suspended tenant."""
    return ERROR_REGISTRY.new(CODE_TENANT_SUSPENDED)


def err_trial_expired() -> DomainError:
    """Error for an expired trial."""
    return ERROR_REGISTRY.new(CODE_TRIAL_EXPIRED)


def err_subscription_expired() -> DomainError:
    """Error for an expired subscription."""
    return ERROR_REGISTRY.new(CODE_SUBSCRIPTION_EXPIRED)


def err_max_users_reached() -> DomainError:
    """Error for a tenant with no room for more users."""
    return ERROR_REGISTRY.new(CODE_MAX_USERS_REACHED)


def err_too_many_users_for_plan() -> DomainError:
    """Error for a plan whose limit is below the current user count."""
    return ERROR_REGISTRY.new(CODE_TOO_MANY_USERS_FOR_PLAN)


def err_tenant_has_users() -> DomainError:
    """Error for deleting a tenant that still has users."""
    return ERROR_REGISTRY.new(CODE_TENANT_HAS_USERS)


def err_invalid_plan_upgrade() -> DomainError:
    """Error for an invalid plan change."""
    return ERROR_REGISTRY.new(CODE_INVALID_PLAN_UPGRADE)