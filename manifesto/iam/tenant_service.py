"""Business operations on tenants."""

from __future__ import annotations

import math
import uuid
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from manifesto.iam.errors import DomainError, ErrorType
from manifesto.iam.tenant import (
    BulkTenantOperationResponse,
    CreateTenantRequest,
    SubscriptionPlan,
    Tenant,
    TenantConfigRepository,
    TenantConfigResponse,
    TenantListResponse,
    TenantRepository,
    TenantResponse,
    TenantStatsResponse,
    TenantStatus,
    TenantUsageResponse,
    UpdateTenantRequest,
    err_tenant_has_users,
    err_tenant_not_found,
    max_users_for_plan,
)
from manifesto.iam.user import User, UserRepository
from manifesto.kernel.ids import TenantID

TRIAL_DAYS = 30


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _now_like(moment: datetime) -> datetime:
    return datetime.now() if moment.tzinfo is None else _now()


def _add_year(moment: datetime) -> datetime:
    """Add one calendar year; 29 February rolls over to 1 March."""
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        return moment.replace(year=moment.year + 1, month=3, day=1)


def _percentage(part: int, whole: int) -> float:
    if whole == 0:
        if part == 0:
            return math.nan
        return math.inf if part > 0 else -math.inf
    return part / whole * 100


def _internal(message: str) -> DomainError:
    return DomainError(message, error_type=ErrorType.INTERNAL)


class TenantService:
    """Creates, inspects and manages tenants and their settings."""

    def __init__(
        self,
        tenant_repo: TenantRepository,
        tenant_config_repo: TenantConfigRepository,
        user_repo: UserRepository,
    ) -> None:
        self.tenant_repo = tenant_repo
        self.tenant_config_repo = tenant_config_repo
        self.user_repo = user_repo

    def _find(self, tenant_id: TenantID) -> Tenant:
        try:
            return self.tenant_repo.find_by_id(tenant_id)
        except Exception as exc:
            raise err_tenant_not_found() from exc

    def _config_or_empty(self, tenant_id: TenantID) -> dict[str, str]:
        try:
            config = self.tenant_config_repo.find_by_tenant(tenant_id)
        except Exception:
            return {}
        return config if config is not None else {}

    def create_tenant(self, req: CreateTenantRequest) -> Tenant:
        """Create a tenant: a 30-day trial, or an active one-year subscription for another plan."""
        now = _now()
        tenant = Tenant(
            id=TenantID(str(uuid.uuid4())),
            company_name=req.company_name,
            status=TenantStatus.TRIAL,
            subscription_plan=SubscriptionPlan.TRIAL,
            max_users=max_users_for_plan(SubscriptionPlan.TRIAL),
            current_users=0,
            trial_expires_at=now + timedelta(days=TRIAL_DAYS),
            subscription_expires_at=None,
            created_at=now,
            updated_at=now,
        )

        if req.subscription_plan:
            tenant.subscription_plan = req.subscription_plan
            tenant.max_users = max_users_for_plan(req.subscription_plan)
            if req.subscription_plan != SubscriptionPlan.TRIAL:
                tenant.status = TenantStatus.ACTIVE
                tenant.subscription_expires_at = _add_year(_now())

        try:
            self.tenant_repo.save(tenant)
        except Exception as exc:
            raise _internal("failed to save tenant") from exc
        return tenant

    def get_tenant_by_id(self, tenant_id: TenantID) -> TenantResponse:
        """Return a tenant with its configuration (empty if it cannot be read)."""
        tenant = self._find(tenant_id)
        return TenantResponse(tenant=tenant, config=self._config_or_empty(tenant_id))

    def _list(self, tenants: Iterable[Tenant]) -> TenantListResponse:
        responses = [
            TenantResponse(tenant=tenant, config=self._config_or_empty(tenant.id))
            for tenant in tenants
        ]
        return TenantListResponse(tenants=responses, total=len(responses))

    def get_all_tenants(self) -> TenantListResponse:
        """Return every tenant with its configuration."""
        try:
            tenants = self.tenant_repo.find_all()
        except Exception as exc:
            raise _internal("failed to get all tenants") from exc
        return self._list(tenants)

    def get_active_tenants(self) -> TenantListResponse:
        """Return the active tenants with their configurations."""
        try:
            tenants = self.tenant_repo.find_active()
        except Exception as exc:
            raise _internal("failed to get active tenants") from exc
        return self._list(tenants)

    def update_tenant(self, tenant_id: TenantID, req: UpdateTenantRequest) -> Tenant:
        """Apply the given changes; only ACTIVE and SUSPENDED statuses take effect."""
        tenant = self._find(tenant_id)

        if req.company_name is not None:
            tenant.company_name = req.company_name
        if req.status == TenantStatus.ACTIVE:
            tenant.activate()
        elif req.status == TenantStatus.SUSPENDED:
            tenant.suspend("Updated by admin")

        tenant.updated_at = _now()

        try:
            self.tenant_repo.save(tenant)
        except Exception as exc:
            raise _internal("failed to update tenant") from exc
        return tenant

    def suspend_tenant(self, tenant_id: TenantID, reason: str) -> None:
        """Suspend a tenant."""
        tenant = self._find(tenant_id)
        tenant.suspend(reason)
        self.tenant_repo.save(tenant)

    def activate_tenant(self, tenant_id: TenantID) -> None:
        """Activate a tenant."""
        tenant = self._find(tenant_id)
        tenant.activate()
        self.tenant_repo.save(tenant)

    def upgrade_tenant_plan(self, tenant_id: TenantID, new_plan: SubscriptionPlan) -> None:
        """Change a tenant's plan; paid plans get a fresh one-year subscription."""
        tenant = self._find(tenant_id)
        tenant.upgrade_plan(new_plan)
        if new_plan != SubscriptionPlan.TRIAL:
            tenant.subscription_expires_at = _add_year(_now())
        self.tenant_repo.save(tenant)

    def get_tenant_users(self, tenant_id: TenantID) -> list[User]:
        """Return the users of an existing tenant."""
        self._find(tenant_id)
        try:
            return self.user_repo.find_by_tenant(tenant_id)
        except Exception as exc:
            raise _internal("failed to get tenant users") from exc

    def set_tenant_config(self, tenant_id: TenantID, key: str, value: str) -> None:
        """Store one setting of an existing tenant."""
        self._find(tenant_id)
        self.tenant_config_repo.save_setting(tenant_id, key, value)

    def get_tenant_config(self, tenant_id: TenantID) -> TenantConfigResponse:
        """Return all settings of an existing tenant."""
        self._find(tenant_id)
        try:
            config = self.tenant_config_repo.find_by_tenant(tenant_id)
        except Exception as exc:
            raise _internal("failed to get tenant config") from exc
        return TenantConfigResponse(tenant_id=tenant_id, config=config)

    def delete_tenant_config(self, tenant_id: TenantID, key: str) -> None:
        """Delete one setting of an existing tenant."""
        self._find(tenant_id)
        self.tenant_config_repo.delete_setting(tenant_id, key)

    def get_tenant_stats(self, tenant_id: TenantID) -> TenantStatsResponse:
        """Return user counts, utilisation and subscription state of a tenant."""
        tenant = self._find(tenant_id)
        try:
            users = self.user_repo.find_by_tenant(tenant_id)
        except Exception as exc:
            raise _internal("failed to get users for stats") from exc

        trial_expired = tenant.is_trial_expired()
        subscription_expired = tenant.is_subscription_expired()
        stats = TenantStatsResponse(
            tenant_id=tenant.id,
            total_users=tenant.current_users,
            active_users=sum(1 for user in users if user.is_active()),
            max_users=tenant.max_users,
            user_utilization=_percentage(tenant.current_users, tenant.max_users),
            is_trial_expired=trial_expired,
            is_subscription_expired=subscription_expired,
        )

        expires = tenant.subscription_expires_at
        if expires is not None and not subscription_expired:
            remaining = expires - _now_like(expires)
            stats.days_until_expiration = int(remaining / timedelta(hours=1) / 24)

        if trial_expired:
            stats.subscription_status = "Trial Expired"
        elif subscription_expired:
            stats.subscription_status = "Subscription Expired"
        elif tenant.is_trial():
            stats.subscription_status = "Trial Active"
        else:
            stats.subscription_status = "Subscription Active"
        return stats

    def get_tenant_usage(self, tenant_id: TenantID) -> TenantUsageResponse:
        """Return seat usage of a tenant."""
        tenant = self._find(tenant_id)
        return TenantUsageResponse(
            tenant_id=tenant.id,
            current_users=tenant.current_users,
            max_users=tenant.max_users,
            usage_percentage=_percentage(tenant.current_users, tenant.max_users),
            can_add_users=tenant.can_add_user(),
            remaining_users=tenant.max_users - tenant.current_users,
        )

    def delete_tenant(self, tenant_id: TenantID) -> None:
        """Soft-delete a tenant by suspending it; refused while it has users."""
        tenant = self._find(tenant_id)
        try:
            users = self.user_repo.find_by_tenant(tenant_id)
        except Exception:
            users = []
        if users:
            raise err_tenant_has_users()
        tenant.suspend("Tenant deleted")
        self.tenant_repo.save(tenant)

    def _bulk(self, tenant_ids: list[TenantID], operation) -> BulkTenantOperationResponse:
        result = BulkTenantOperationResponse(total=len(tenant_ids))
        for tenant_id in tenant_ids:
            try:
                operation(tenant_id)
            except Exception as exc:
                result.failed[tenant_id] = str(exc)
            else:
                result.successful.append(tenant_id)
        return result

    def bulk_suspend_tenants(
        self, tenant_ids: list[TenantID], reason: str
    ) -> BulkTenantOperationResponse:
        """Suspend many tenants, recording each success or failure."""
        return self._bulk(tenant_ids, lambda tenant_id: self.suspend_tenant(tenant_id, reason))

    def bulk_activate_tenants(self, tenant_ids: list[TenantID]) -> BulkTenantOperationResponse:
        """Activate many tenants, recording each success or failure."""
        return self._bulk(tenant_ids, self.activate_tenant)