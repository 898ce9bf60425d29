"""Scope constraint evaluation for matched permissions."""

from collections.abc import Callable, Collection, Mapping

import structlog

from accessguard.domain.entities import PermissionScope
from accessguard.domain.value_objects import EvaluationContext, TenantMatch

logger = structlog.get_logger(__name__)

ScopePredicate = Callable[[EvaluationContext], bool]

OWNERSHIP_CONDITION = "record_owner"


def record_owner(context: EvaluationContext) -> bool:
    """Only the owner of the record in context; passes when no record is in play."""
    if context.record_id is None:
        return True
    return context.record_owner_id is not None and context.record_owner_id == context.actor_id


DEFAULT_PREDICATES: Mapping[str, ScopePredicate] = {
    OWNERSHIP_CONDITION: record_owner,
}


def scope_satisfied(
    scope: PermissionScope | None,
    context: EvaluationContext,
    predicates: Mapping[str, ScopePredicate] = DEFAULT_PREDICATES,
    *,
    grant_tenant_id: str | None = None,
    actor_roles: Collection[str] = (),
) -> bool:
    """True if every constraint in scope holds for context.

    A current-tenant scope without its own tenant id is bound to
    grant_tenant_id, the tenant of the role assignment that carried the
    permission. A global assignment leaves it unbound, and then any context
    tenant will do. Role lists match context.role or any of actor_roles.
    Unknown condition names fail closed.
    """
    if scope is None:
        return True

    if scope.tenant_match == TenantMatch.CURRENT:
        if not context.tenant_id:
            return False
        bound = scope.tenant_id or grant_tenant_id
        if bound is not None and bound != context.tenant_id:
            return False

    if scope.departments and context.department not in scope.departments:
        return False

    if scope.roles:
        held = {r for r in (context.role, *actor_roles) if r}
        if held.isdisjoint(scope.roles):
            return False

    for name in scope.conditions:
        predicate = predicates.get(name)
        if predicate is None:
            logger.warning("unknown_scope_condition", condition=name)
            return False
        if not predicate(context):
            return False

    return True
