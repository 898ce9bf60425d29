"""Domain exceptions."""


class AccessGuardError(Exception):
    """Base exception for accessguard."""

    pass


class ValidationError(AccessGuardError):
    """Caller input failed validation; the operation was rejected."""

    pass


class PermissionDenied(AccessGuardError):
    """Actor does not have permission for the requested action."""

    pass


class NotFound(AccessGuardError):
    """Requested resource was not found."""

    pass


class RateLimitExceeded(ValidationError):
    """Operator exceeded an impersonation rate limit."""

    pass


class StorageUnavailable(AccessGuardError):
    """Backing store rejected a write; state was left unchanged."""

    pass
