"""Unit tests for scope constraint evaluation."""

from accessguard.domain.entities import PermissionScope
from accessguard.domain.value_objects import EvaluationContext, TenantMatch
from accessguard.infrastructure.permission.scope_constraints import record_owner, scope_satisfied
from accessguard.infrastructure.persistence.postgres.role_repository import scope_from_row


def test_no_scope_is_satisfied() -> None:
    assert scope_satisfied(None, EvaluationContext(actor_id="u1")) is True


def test_any_tenant_ignores_context_tenant() -> None:
    scope = PermissionScope(tenant_match=TenantMatch.ANY, tenant_id="t1")
    assert scope_satisfied(scope, EvaluationContext(actor_id="u1", tenant_id="t9")) is True


def test_current_tenant_requires_context_tenant() -> None:
    scope = PermissionScope(tenant_match=TenantMatch.CURRENT, tenant_id="t1")
    assert scope_satisfied(scope, EvaluationContext(actor_id="u1")) is False


def test_department_list() -> None:
    scope = PermissionScope(departments=("sales", "support"))
    assert scope_satisfied(scope, EvaluationContext(actor_id="u1", department="sales")) is True
    assert scope_satisfied(scope, EvaluationContext(actor_id="u1", department="hr")) is False
    assert scope_satisfied(scope, EvaluationContext(actor_id="u1")) is False


def test_role_list() -> None:
    scope = PermissionScope(roles=("manager",))
    assert scope_satisfied(scope, EvaluationContext(actor_id="u1", role="manager")) is True
    assert scope_satisfied(scope, EvaluationContext(actor_id="u1", role="agent")) is False


def test_unknown_condition_fails_closed() -> None:
    scope = PermissionScope(conditions=("business_hours",))
    assert scope_satisfied(scope, EvaluationContext(actor_id="u1")) is False


def test_record_owner_without_record_passes() -> None:
    assert record_owner(EvaluationContext(actor_id="u1")) is True


def test_record_owner_requires_matching_owner() -> None:
    assert record_owner(EvaluationContext(actor_id="u1", record_id="r1", record_owner_id="u1")) is True
    assert record_owner(EvaluationContext(actor_id="u1", record_id="r1", record_owner_id="u2")) is False
    assert record_owner(EvaluationContext(actor_id="u1", record_id="r1")) is False


def test_seeded_current_scope_binds_to_grant_tenant() -> None:
    scope = scope_from_row({"tenant_match": "current"})
    ctx = EvaluationContext(actor_id="u1", tenant_id="t1")
    assert scope_satisfied(scope, ctx, grant_tenant_id="t1") is True
    assert scope_satisfied(scope, ctx, grant_tenant_id="t2") is False


def test_seeded_current_scope_from_global_grant() -> None:
    scope = scope_from_row({"tenant_match": "current"})
    assert scope_satisfied(scope, EvaluationContext(actor_id="u1", tenant_id="t1")) is True
    assert scope_satisfied(scope, EvaluationContext(actor_id="u1")) is False


def test_fixed_scope_tenant_wins_over_grant_tenant() -> None:
    scope = PermissionScope(tenant_match=TenantMatch.CURRENT, tenant_id="t1")
    ctx = EvaluationContext(actor_id="u1", tenant_id="t2")
    assert scope_satisfied(scope, ctx, grant_tenant_id="t2") is False


def test_role_list_matches_any_actor_role() -> None:
    scope = PermissionScope(roles=("manager",))
    ctx = EvaluationContext(actor_id="u1")
    roles = ("default-roles-crm", "offline_access", "manager")
    assert scope_satisfied(scope, ctx, actor_roles=roles) is True
    assert scope_satisfied(scope, ctx, actor_roles=("default-roles-crm",)) is False
