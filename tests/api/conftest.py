"""Fixtures for API tests."""

import falcon.asgi
import pytest

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
from accessguard.domain.entities import Permission
from accessguard.interfaces.api.middleware.auth import RequestUser
from accessguard.interfaces.api.resources.health import HealthResource
from accessguard.interfaces.api.resources.impersonation import (
    ImpersonationActionsResource,
    ImpersonationResource,
)
from accessguard.interfaces.api.resources.permissions import (
    PermissionCacheResource,
    PermissionsEvaluateResource,
)

from tests.conftest import FakeRoleStore


class AuthBypassMiddleware:
    """Sets context.user from the X-Test-User header; no header means anonymous."""

    async def process_request(self, req, resp):
        user_id = req.get_header("X-Test-User")
        req.context.user = (
            RequestUser(user_id=user_id, tenant_id=req.get_header("X-Test-Tenant"))
            if user_id
            else None
        )


@pytest.fixture
def app(evaluator, registry, tracker, limiter, audit_sink, clock, role_store: FakeRoleStore):
    """Falcon ASGI app wired with in-memory fakes."""
    role_store.grant("admin1", "super-admin", Permission(name="crm:admin:*"))
    role_store.grant("u1", "viewer", Permission(name="crm:*:visible"))

    end_impersonation = EndImpersonationUseCase(registry, tracker, limiter, audit_sink, clock)
    start_impersonation = StartImpersonationUseCase(
        registry, limiter, end_impersonation, evaluator
    )

    app = falcon.asgi.App(middleware=[AuthBypassMiddleware()])
    app.add_route("/v1/health", HealthResource())
    app.add_route(
        "/v1/permissions/evaluate",
        PermissionsEvaluateResource(EvaluateElementsUseCase(evaluator), registry),
    )
    app.add_route(
        "/v1/permissions/cache/{actor_id}",
        PermissionCacheResource(InvalidatePermissionsUseCase(evaluator)),
    )
    app.add_route(
        "/v1/impersonation",
        ImpersonationResource(start_impersonation, end_impersonation, registry),
    )
    app.add_route(
        "/v1/impersonation/actions",
        ImpersonationActionsResource(
            TrackImpersonationActionUseCase(registry, tracker), registry, tracker
        ),
    )
    return app


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    from falcon.testing import TestClient
    return TestClient(app)
