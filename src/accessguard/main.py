"""Application entry point and composition root."""

from datetime import timedelta

import falcon
import falcon.asgi
import structlog

from accessguard import __version__
from accessguard.application.use_cases.impersonation.end_impersonation import (
    EndImpersonationUseCase,
)
from accessguard.application.use_cases.impersonation.start_impersonation import (
    StartImpersonationUseCase,
)
from accessguard.application.use_cases.impersonation.track_action import (
    TrackImpersonationActionUseCase,
)
from accessguard.application.use_cases.permission.evaluate_elements import (
    EvaluateElementsUseCase,
)
from accessguard.application.use_cases.permission.invalidate_permissions import (
    InvalidatePermissionsUseCase,
)
from accessguard.config import Settings, get_settings
from accessguard.infrastructure.auth.keycloak_provider import KeycloakProvider
from accessguard.infrastructure.clock import SystemClock
from accessguard.infrastructure.impersonation import (
    ActionTracker,
    ImpersonationRateLimiter,
    RateLimitConfig,
    SessionManagerRegistry,
)
from accessguard.infrastructure.permission.override_resolver import OverrideResolver
from accessguard.infrastructure.permission.permission_cache import PermissionCache
from accessguard.infrastructure.permission.permission_evaluator import (
    ElementPermissionEvaluator,
)
from accessguard.infrastructure.persistence.postgres import (
    PostgresAuditSink,
    PostgresOverrideStore,
    PostgresRecordOwnershipStore,
    PostgresRoleStore,
    create_pool,
    create_uow_factory,
)
from accessguard.infrastructure.persistence.session import (
    FileSessionStore,
    InMemorySessionStore,
)
from accessguard.interfaces.api.middleware.auth import AuthMiddleware
from accessguard.interfaces.api.middleware.cors import CORSMiddleware
from accessguard.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from accessguard.interfaces.api.resources.health import HealthResource
from accessguard.interfaces.api.resources.impersonation import (
    ImpersonationActionsResource,
    ImpersonationResource,
)
from accessguard.interfaces.api.resources.permissions import (
    PermissionCacheResource,
    PermissionsEvaluateResource,
)
from accessguard.logging_config import configure_logging

logger = structlog.get_logger(__name__)


def main() -> None:
    """CLI entry point."""
    print(f"accessguard v{__version__}")


def session_store_factory(settings: Settings):
    """Per-operator session store: files under session_store_dir, else memory."""
    if settings.session_store_dir:
        return lambda operator_id: FileSessionStore(settings.session_store_dir, operator_id)
    return lambda operator_id: InMemorySessionStore()


def create_accessguard_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings.log_level, json_output=settings.environment != "development")

    pool = create_pool(settings.database_url)
    uow_factory = create_uow_factory(pool)
    clock = SystemClock()

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("keycloak_disabled", reason="no client secret configured")

    evaluator = ElementPermissionEvaluator(
        role_store=PostgresRoleStore(uow_factory),
        override_resolver=OverrideResolver(PostgresOverrideStore(uow_factory), clock),
        cache=PermissionCache(clock, ttl=timedelta(seconds=settings.permission_cache_ttl_seconds)),
        namespace=settings.element_namespace,
        ownership=PostgresRecordOwnershipStore(uow_factory),
    )
    registry = SessionManagerRegistry(
        session_store_factory(settings),
        clock,
        timeout=timedelta(hours=settings.impersonation_timeout_hours),
    )
    tracker = ActionTracker(clock, limit=settings.action_log_limit)
    limiter = ImpersonationRateLimiter(
        clock,
        RateLimitConfig(
            max_per_hour=settings.impersonation_max_per_hour,
            max_concurrent=settings.impersonation_max_concurrent,
            max_session_duration=timedelta(minutes=settings.impersonation_max_duration_minutes),
            enabled=settings.impersonation_rate_limit_enabled,
        ),
    )

    end_impersonation = EndImpersonationUseCase(
        registry=registry,
        tracker=tracker,
        limiter=limiter,
        audit_sink=PostgresAuditSink(uow_factory),
        clock=clock,
    )
    start_impersonation = StartImpersonationUseCase(
        registry=registry,
        limiter=limiter,
        end_impersonation=end_impersonation,
        evaluator=evaluator,
    )
    track_action = TrackImpersonationActionUseCase(registry, tracker)
    evaluate_elements = EvaluateElementsUseCase(evaluator)
    invalidate_permissions = InvalidatePermissionsUseCase(evaluator)

    health_resource = HealthResource(pool)
    evaluate_resource = PermissionsEvaluateResource(evaluate_elements, registry)
    cache_resource = PermissionCacheResource(invalidate_permissions)
    impersonation_resource = ImpersonationResource(
        start_impersonation, end_impersonation, registry
    )
    actions_resource = ImpersonationActionsResource(track_action, registry, tracker)

    cors_origins = [
        o.strip() for o in settings.cors_origins.split(",") if o.strip()
    ]
    app = falcon.asgi.App(
        middleware=[
            CORSMiddleware(cors_origins),
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak),
        ],
    )

    async def log_exception(req, resp, ex, params):
        logger.exception("unhandled_request_error", method=req.method, path=req.path)
        resp.status = falcon.HTTP_500
        resp.media = {"title": "500 Internal Server Error"}

    app.add_error_handler(Exception, log_exception)
    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/permissions/evaluate", evaluate_resource)
    app.add_route("/v1/permissions/cache/{actor_id}", cache_resource)
    app.add_route("/v1/impersonation", impersonation_resource)
    app.add_route("/v1/impersonation/actions", actions_resource)

    return app


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    app = create_accessguard_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
