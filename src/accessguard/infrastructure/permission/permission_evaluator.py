"""Element permission evaluator - hierarchical pattern matching over role permissions."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

import structlog

from accessguard.application.ports import RecordOwnershipStore, RoleStore
from accessguard.domain.entities import Permission
from accessguard.domain.value_objects import (
    DEFAULT_NAMESPACE,
    WILDCARD,
    ElementAction,
    EvaluationContext,
    OverrideType,
    candidate_patterns,
    normalize_element_path,
    pattern_matches,
)
from accessguard.infrastructure.permission.fault_policy import on_resolution_fault
from accessguard.infrastructure.permission.override_resolver import OverrideResolver
from accessguard.infrastructure.permission.permission_cache import CacheKey, PermissionCache
from accessguard.infrastructure.permission.scope_constraints import (
    DEFAULT_PREDICATES,
    OWNERSHIP_CONDITION,
    ScopePredicate,
    scope_satisfied,
)

logger = structlog.get_logger(__name__)


def _specificity(permission: Permission) -> tuple[int, int]:
    name = str(permission.name)
    return (name.count(WILDCARD), -len(name))


@dataclass(frozen=True)
class Grant:
    """Permission reachable through a role assignment held in tenant_id (None: global)."""

    permission: Permission
    tenant_id: str | None = None


@dataclass(frozen=True)
class _Resolved:
    grants: list[Grant] = field(default_factory=list)
    role_names: frozenset[str] = frozenset()


class ElementPermissionEvaluator:
    """Evaluates element-level permissions for an actor.

    Candidates are tried from most to least specific against every permission
    reachable through the actor's roles; the first one whose scope holds
    grants. Record ownership comes from the ownership store when one is
    wired, never from the caller. Overrides are consulted only when nothing
    matched. Every verdict, including denials, is written through the cache.
    """

    def __init__(
        self,
        role_store: RoleStore,
        override_resolver: OverrideResolver,
        cache: PermissionCache,
        namespace: str = DEFAULT_NAMESPACE,
        predicates: Mapping[str, ScopePredicate] | None = None,
        ownership: RecordOwnershipStore | None = None,
    ) -> None:
        self._roles = role_store
        self._overrides = override_resolver
        self._cache = cache
        self._namespace = namespace
        self._predicates = dict(DEFAULT_PREDICATES if predicates is None else predicates)
        self._ownership = ownership

    async def evaluate(
        self,
        element_path: str,
        action: ElementAction | str,
        context: EvaluationContext,
    ) -> bool:
        """Whether context.actor may perform action on element_path. Never raises."""
        try:
            return await self._evaluate(element_path, ElementAction(action), context)
        except Exception as exc:
            return on_resolution_fault(
                "evaluate",
                exc,
                actor_id=getattr(context, "actor_id", None),
                element_path=element_path,
                action=str(action),
            )

    def invalidate_actor(self, actor_id: str) -> int:
        """Forget cached verdicts for actor, e.g. after a role change."""
        removed = self._cache.invalidate_actor(actor_id)
        logger.info("permission_cache_invalidated", actor_id=actor_id, entries=removed)
        return removed

    async def _evaluate(
        self, element_path: str, action: ElementAction, context: EvaluationContext
    ) -> bool:
        path = normalize_element_path(element_path, self._namespace)
        key = CacheKey.for_check(context, path, action.value)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        resolved = await self._resolve_permissions(context)
        context = await self._with_record_owner(context, resolved.grants)
        verdict = self._match(path, action, resolved, context)

        if not verdict:
            override = await self._overrides.resolve(context.actor_id, path)
            verdict = override is OverrideType.GRANT

        self._cache.put(key, verdict)
        return verdict

    async def _resolve_permissions(self, context: EvaluationContext) -> _Resolved:
        try:
            assignments = await self._roles.resolve_roles(context.actor_id, context.tenant_id)
        except Exception as exc:
            on_resolution_fault(
                "resolve_roles", exc, actor_id=context.actor_id, tenant_id=context.tenant_id
            )
            return _Resolved()

        # role ids grouped by the tenant each assignment lives in
        by_tenant: dict[str | None, list[str]] = {}
        for a in assignments:
            role_ids = by_tenant.setdefault(a.tenant_id, [])
            if a.role_id not in role_ids:
                role_ids.append(a.role_id)
        role_names = frozenset(a.role_name or a.role_id for a in assignments)

        grants: list[Grant] = []
        for tenant_id, role_ids in by_tenant.items():
            try:
                permissions = await self._roles.resolve_permissions(role_ids)
            except Exception as exc:
                on_resolution_fault(
                    "resolve_permissions", exc, actor_id=context.actor_id, role_ids=role_ids
                )
                return _Resolved(role_names=role_names)
            grants.extend(Grant(p, tenant_id) for p in permissions)
        return _Resolved(grants=grants, role_names=role_names)

    async def _with_record_owner(
        self, context: EvaluationContext, grants: list[Grant]
    ) -> EvaluationContext:
        """Replace record_owner_id with the owner on record when ownership is checked."""
        if self._ownership is None or context.record_id is None:
            return context
        if not any(
            g.permission.scope and OWNERSHIP_CONDITION in g.permission.scope.conditions
            for g in grants
        ):
            return context
        try:
            owner = await self._ownership.owner_of(context.record_id)
        except Exception as exc:
            on_resolution_fault(
                "owner_of", exc, actor_id=context.actor_id, record_id=context.record_id
            )
            owner = None
        return replace(context, record_owner_id=owner)

    def _match(
        self,
        path: str,
        action: ElementAction,
        resolved: _Resolved,
        context: EvaluationContext,
    ) -> bool:
        # concrete names before wildcards so the most specific rule decides
        ordered = sorted(resolved.grants, key=lambda g: _specificity(g.permission))
        for candidate in candidate_patterns(path, action.value, self._namespace):
            for grant in ordered:
                permission = grant.permission
                try:
                    if not pattern_matches(permission.name, candidate):
                        continue
                    if not scope_satisfied(
                        permission.scope,
                        context,
                        self._predicates,
                        grant_tenant_id=grant.tenant_id,
                        actor_roles=resolved.role_names,
                    ):
                        continue
                except Exception as exc:
                    on_resolution_fault(
                        "match_permission",
                        exc,
                        actor_id=context.actor_id,
                        permission=permission.name,
                        candidate=candidate,
                    )
                    continue
                logger.debug(
                    "permission_matched",
                    actor_id=context.actor_id,
                    element_path=path,
                    action=action.value,
                    candidate=candidate,
                    permission=permission.name,
                )
                return True
        return False
