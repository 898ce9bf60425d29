"""Keycloak OIDC provider for bearer token introspection."""

from dataclasses import dataclass, field

import structlog
from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

logger = structlog.get_logger(__name__)


@dataclass
class OIDCUser:
    """Authenticated operator from an OIDC token."""

    user_id: str
    email: str | None = None
    username: str | None = None
    tenant_id: str | None = None
    department: str | None = None
    realm_roles: list[str] = field(default_factory=list)


class KeycloakProvider:
    """Keycloak OIDC - introspects tokens and extracts operator identity."""

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
        tenant_claim: str = "tenant_id",
        department_claim: str = "department",
    ) -> None:
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )
        self._tenant_claim = tenant_claim
        self._department_claim = department_claim

    def decode_token(self, token: str) -> OIDCUser | None:
        """Introspect token, return user info or None when inactive or unverifiable."""
        try:
            token_info = self._keycloak.introspect(token)
        except KeycloakError as exc:
            logger.warning("token_introspection_failed", error=str(exc))
            return None
        return user_from_token_info(token_info, self._tenant_claim, self._department_claim)


def user_from_token_info(
    token_info: dict,
    tenant_claim: str = "tenant_id",
    department_claim: str = "department",
) -> OIDCUser | None:
    """Map an introspection response to OIDCUser; None if inactive or without subject."""
    if not token_info.get("active") or not token_info.get("sub"):
        return None
    return OIDCUser(
        user_id=token_info["sub"],
        email=token_info.get("email"),
        username=token_info.get("preferred_username"),
        tenant_id=token_info.get(tenant_claim),
        department=token_info.get(department_claim),
        realm_roles=list(token_info.get("realm_access", {}).get("roles", [])),
    )
