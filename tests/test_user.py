from datetime import datetime, timezone
from http import HTTPStatus

import pytest

from manifesto.iam import user as user_mod
from manifesto.iam.errors import DomainError, ErrorType
from manifesto.iam.user import (
    PasswordService,
    User,
    UserListResponse,
    UserRepository,
    UserResponse,
    UserStatus,
)
from manifesto.kernel.ids import TenantID, UserID

OLD = datetime(2000, 1, 1, tzinfo=timezone.utc)


def make_user(**overrides):
    values = dict(
        id=UserID("u-1"),
        tenant_id=TenantID("t-1"),
        email="someone@example.com",
        name="Someone",
        created_at=OLD,
        updated_at=OLD,
    )
    values.update(overrides)
    return User(**values)


def test_status_values_match_source():
    assert UserStatus.PENDING.value == "PENDING"
    assert UserStatus("SUSPENDED") is UserStatus.SUSPENDED


def test_is_active_and_can_login():
    u = make_user(status=UserStatus.ACTIVE)
    assert u.is_active()
    assert not u.can_login()
    u.email_verified = True
    assert u.can_login()
    assert not make_user(status=UserStatus.PENDING, email_verified=True).can_login()


def test_activate_pending_user():
    u = make_user(status=UserStatus.PENDING)
    u.activate()
    assert u.status is UserStatus.ACTIVE
    assert u.updated_at > OLD


@pytest.mark.parametrize("status", [UserStatus.ACTIVE, UserStatus.SUSPENDED, UserStatus.INACTIVE])
def test_activate_non_pending_raises(status):
    u = make_user(status=status)
    with pytest.raises(DomainError) as info:
        u.activate()
    assert info.value.code == user_mod.CODE_INVALID_STATUS
    assert info.value.details["current_status"] == status
    assert u.status is status


def test_suspend_active_user():
    u = make_user(status=UserStatus.ACTIVE)
    u.suspend("abuse")
    assert u.status is UserStatus.SUSPENDED
    assert u.updated_at > OLD


def test_suspend_inactive_user_raises():
    u = make_user(status=UserStatus.PENDING)
    with pytest.raises(DomainError) as info:
        u.suspend("abuse")
    assert info.value.http_status == HTTPStatus.BAD_REQUEST
    assert u.status is UserStatus.PENDING


def test_update_last_login_sets_both_timestamps():
    u = make_user()
    u.update_last_login()
    assert u.last_login_at is not None
    assert u.last_login_at == u.updated_at
    assert u.last_login_at > OLD


def test_update_profile_ignores_empty_values():
    u = make_user(picture="pic.png")
    u.update_profile("", "")
    assert (u.name, u.picture) == ("Someone", "pic.png")
    u.update_profile("Other", "new.png")
    assert (u.name, u.picture) == ("Other", "new.png")


@pytest.mark.parametrize(
    "granted, scope, expected",
    [
        (["channels:read"], "channels:read", True),
        (["*"], "anything:goes", True),
        (["channels:*"], "channels:read", True),
        (["channels:*"], "channels", False),
        (["channels:*"], "channelsx:read", False),
        (["channels:read"], "channels:write", False),
        ([], "channels:read", False),
    ],
)
def test_has_scope(granted, scope, expected):
    assert make_user(scopes=list(granted)).has_scope(scope) is expected


def test_is_admin():
    assert make_user(scopes=["*"]).is_admin()
    assert make_user(scopes=["admin:*"]).is_admin()
    assert not make_user(scopes=["users:read"]).is_admin()


def test_any_and_all_scopes():
    u = make_user(scopes=["users:read", "jobs:*"])
    assert u.has_any_scope("x:y", "jobs:write")
    assert not u.has_any_scope("x:y", "users:write")
    assert u.has_all_scopes("users:read", "jobs:delete")
    assert not u.has_all_scopes("users:read", "users:write")
    assert u.has_all_scopes()
    assert not u.has_any_scope()


def test_add_scope_skips_covered_scope():
    u = make_user(scopes=["jobs:*"])
    u.add_scope("jobs:read")
    assert u.scopes == ["jobs:*"]
    assert u.updated_at == OLD
    u.add_scope("users:read")
    assert u.scopes == ["jobs:*", "users:read"]
    assert u.updated_at > OLD


def test_remove_scope_removes_all_occurrences():
    u = make_user(scopes=["a:b", "c:d", "a:b"])
    u.remove_scope("a:b")
    assert u.scopes == ["c:d"]
    u.remove_scope("c:d")
    assert u.scopes == []


def test_set_scopes_replaces():
    u = make_user(scopes=["a:b"])
    u.set_scopes(["c:d", "e:f"])
    assert u.scopes == ["c:d", "e:f"]


def test_make_and_revoke_admin_round_trip():
    u = make_user(scopes=["users:read", "admin:*"])
    u.make_admin()
    assert "*" in u.scopes
    u.revoke_admin()
    assert u.scopes == ["users:read"]
    assert not u.is_admin()


def test_to_dto_carries_fields():
    u = make_user(status=UserStatus.ACTIVE, scopes=["users:read"], oauth_provider="google")
    dto = u.to_dto()
    assert dto.id == u.id
    assert dto.tenant_id == u.tenant_id
    assert dto.email == u.email
    assert dto.is_active is True
    assert dto.scopes == ["users:read"]
    assert dto.oauth_provider == "google"


def test_list_response_to_dto():
    users = [make_user(id=UserID("u-1")), make_user(id=UserID("u-2"))]
    response = UserListResponse(users=[UserResponse(user=u) for u in users], total=2)
    dto = response.to_dto()
    assert [item.user.id for item in dto.users] == ["u-1", "u-2"]
    assert dto.total == 2
    assert UserListResponse().to_dto().users == []


@pytest.mark.parametrize(
    "factory, code, error_type, status",
    [
        (user_mod.err_user_not_found, user_mod.CODE_USER_NOT_FOUND, ErrorType.NOT_FOUND, HTTPStatus.NOT_FOUND),
        (user_mod.err_user_already_exists, user_mod.CODE_USER_ALREADY_EXISTS, ErrorType.CONFLICT, HTTPStatus.CONFLICT),
        (user_mod.err_user_not_in_tenant, user_mod.CODE_USER_NOT_IN_TENANT, ErrorType.AUTHORIZATION, HTTPStatus.FORBIDDEN),
        (user_mod.err_email_not_verified, user_mod.CODE_EMAIL_NOT_VERIFIED, ErrorType.BUSINESS, HTTPStatus.PRECONDITION_FAILED),
        (user_mod.err_user_suspended, user_mod.CODE_USER_SUSPENDED, ErrorType.BUSINESS, HTTPStatus.FORBIDDEN),
        (user_mod.err_onboarding_required, user_mod.CODE_ONBOARDING_REQUIRED, ErrorType.BUSINESS, HTTPStatus.PRECONDITION_REQUIRED),
        (user_mod.err_invalid_status, user_mod.CODE_INVALID_STATUS, ErrorType.BUSINESS, HTTPStatus.BAD_REQUEST),
        (user_mod.err_invalid_scope_template, user_mod.CODE_INVALID_SCOPE_TEMPLATE, ErrorType.VALIDATION, HTTPStatus.BAD_REQUEST),
        (user_mod.err_invalid_scopes, user_mod.CODE_INVALID_SCOPES, ErrorType.VALIDATION, HTTPStatus.BAD_REQUEST),
        (user_mod.err_scope_not_found, user_mod.CODE_SCOPE_NOT_FOUND, ErrorType.NOT_FOUND, HTTPStatus.NOT_FOUND),
        (user_mod.err_insufficient_scopes, user_mod.CODE_INSUFFICIENT_SCOPES, ErrorType.AUTHORIZATION, HTTPStatus.FORBIDDEN),
    ],
)
def test_error_factories(factory, code, error_type, status):
    err = factory()
    assert err.code == code
    assert code.startswith("USER_")
    assert err.error_type is error_type
    assert err.http_status == status


def test_error_factories_return_fresh_instances():
    first = user_mod.err_user_not_found().with_detail("user_id", "u-1")
    second = user_mod.err_user_not_found()
    assert first is not second
    assert second.details == {}
    assert first.message == "Usuario no encontrado"


def test_abstract_contracts_cannot_be_instantiated():
    with pytest.raises(TypeError):
        UserRepository()
    with pytest.raises(TypeError):
        PasswordService()