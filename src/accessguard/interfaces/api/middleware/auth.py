"""Auth middleware - resolves the operator from a bearer token."""

from dataclasses import dataclass

import falcon.asgi

from accessguard.domain.value_objects import EvaluationContext


@dataclass
class RequestUser:
    """User from request context."""

    user_id: str
    email: str | None = None
    username: str | None = None
    tenant_id: str | None = None
    department: str | None = None

    def evaluation_context(self, record_id: str | None = None) -> EvaluationContext:
        """Context for evaluating this user's own permissions.

        Realm roles from the token are not copied in: role scopes are checked
        against the roles the store assigns, and the owner of record_id is
        looked up by the evaluator.
        """
        return EvaluationContext(
            actor_id=self.user_id,
            tenant_id=self.tenant_id,
            department=self.department,
            record_id=record_id,
        )


class AuthMiddleware:
    """Middleware that validates bearer tokens and sets req.context.user.

    req.context.user is None when the token is missing or rejected;
    resources answer 401 in that case. Health endpoints stay open.
    """

    def __init__(self, keycloak_provider=None) -> None:
        self._keycloak = keycloak_provider

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Extract user from Authorization header."""
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer ") or not self._keycloak:
            return
        user = self._keycloak.decode_token(auth[7:])
        if user:
            req.context.user = RequestUser(
                user_id=user.user_id,
                email=user.email,
                username=user.username,
                tenant_id=user.tenant_id,
                department=user.department,
            )
