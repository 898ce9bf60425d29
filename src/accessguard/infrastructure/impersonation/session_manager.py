"""Impersonation session manager - lifecycle of a super admin acting as another user.

States: no session -> active -> (ended | expired). Expiry is never timer
driven; it is a predicate over the injected clock, checked whenever the
session is read or restored.

The persisted record is ``{"session": {...}, "startedAt": <epoch ms>}`` stored
under a single key. Encoding and decoding are pure functions so the store can
be swapped without touching state transitions.
"""

import json
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

import structlog

from accessguard.application.ports import Clock, SessionStore
from accessguard.domain.entities import ActiveSession, ImpersonationSession
from accessguard.domain.exceptions import ValidationError

logger = structlog.get_logger(__name__)

STORAGE_KEY = "impersonation_session"
DEFAULT_TIMEOUT = timedelta(hours=8)
NO_TIME_REMAINING = -1

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MILLISECOND = timedelta(milliseconds=1)

_FIELD_NAMES = {
    "id": "id",
    "super_user_id": "superUserId",
    "impersonated_user_id": "impersonatedUserId",
    "tenant_id": "tenantId",
    "reason": "reason",
    "ip_address": "ipAddress",
    "user_agent": "userAgent",
}
_REQUIRED = ("id", "super_user_id", "impersonated_user_id", "tenant_id")


class SessionState(StrEnum):
    """Observable state of the manager."""

    NO_SESSION = "no_session"
    ACTIVE = "active"
    EXPIRED = "expired"


class SessionRecordError(ValueError):
    """Stored session record could not be parsed or is structurally invalid."""


def to_epoch_ms(moment: datetime) -> int:
    return (moment - _EPOCH) // _MILLISECOND


def from_epoch_ms(value: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=value)


def encode_session_record(active: ActiveSession) -> str:
    """Serialize to the persisted ``{session, startedAt}`` record."""
    session: dict[str, Any] = {}
    for attr, key in _FIELD_NAMES.items():
        value = getattr(active.session, attr)
        if attr in _REQUIRED or value is not None:
            session[key] = value
    return json.dumps({"session": session, "startedAt": to_epoch_ms(active.started_at)})


def decode_session_record(raw: str) -> ActiveSession:
    """Parse a persisted record. Raises SessionRecordError on any defect."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise SessionRecordError(f"Unparsable session record: {exc}") from exc

    if not isinstance(data, dict):
        raise SessionRecordError("Session record is not an object")

    payload = data.get("session")
    started_ms = data.get("startedAt")
    if not isinstance(payload, dict):
        raise SessionRecordError("Session record has no session object")
    if isinstance(started_ms, bool) or not isinstance(started_ms, (int, float)):
        raise SessionRecordError("Session record has no numeric startedAt")

    fields: dict[str, Any] = {}
    for attr, key in _FIELD_NAMES.items():
        value = payload.get(key)
        if value is not None and not isinstance(value, str):
            raise SessionRecordError(f"Session field {key} is not a string")
        fields[attr] = value

    session = ImpersonationSession(**fields)
    missing = session.missing_identity_fields()
    if missing:
        raise SessionRecordError(f"Session record missing fields: {', '.join(missing)}")

    return ActiveSession(session=session, started_at=from_epoch_ms(int(started_ms)))


class ImpersonationSessionManager:
    """Owns the single impersonation session of one operator context."""

    def __init__(
        self,
        store: SessionStore,
        clock: Clock,
        timeout: timedelta = DEFAULT_TIMEOUT,
        storage_key: str = STORAGE_KEY,
    ) -> None:
        self._store = store
        self._clock = clock
        self._timeout = timeout
        self._key = storage_key
        self._active: ActiveSession | None = None

    @property
    def timeout(self) -> timedelta:
        return self._timeout

    @property
    def current(self) -> ActiveSession | None:
        """Held session regardless of validity; None when no session."""
        return self._active

    @property
    def state(self) -> SessionState:
        if self._active is None:
            return SessionState.NO_SESSION
        if self.is_valid():
            return SessionState.ACTIVE
        return SessionState.EXPIRED

    def start(self, session: ImpersonationSession) -> bool:
        """Validate, persist and activate session.

        Raises ValidationError if any identity field is empty. Returns False,
        leaving the previous state untouched, when the record cannot be
        persisted.
        """
        missing = session.missing_identity_fields()
        if missing:
            raise ValidationError(
                f"Invalid impersonation session: missing required fields: {', '.join(missing)}"
            )

        started = self._clock.now()
        started = started.replace(microsecond=started.microsecond // 1000 * 1000)
        active = ActiveSession(session=session, started_at=started)

        try:
            self._store.set(self._key, encode_session_record(active))
        except Exception as exc:
            logger.error(
                "impersonation_session_persist_failed",
                session_id=session.id,
                error=str(exc),
            )
            return False

        if self._active is not None:
            logger.warning(
                "impersonation_session_replaced",
                previous_session_id=self._active.session.id,
                session_id=session.id,
            )
        self._active = active
        logger.info(
            "impersonation_session_started",
            session_id=session.id,
            super_user_id=session.super_user_id,
            impersonated_user_id=session.impersonated_user_id,
            tenant_id=session.tenant_id,
        )
        return True

    def restore(self) -> ImpersonationSession | None:
        """Reload the persisted session, purging it if expired or malformed."""
        try:
            raw = self._store.get(self._key)
        except Exception as exc:
            logger.error("impersonation_session_read_failed", error=str(exc))
            self._active = None
            return None

        if raw is None:
            self._active = None
            return None

        try:
            active = decode_session_record(raw)
        except SessionRecordError as exc:
            logger.warning("impersonation_session_corrupt", error=str(exc))
            self._purge()
            self._active = None
            return None

        elapsed = self._clock.now() - active.started_at
        if elapsed < timedelta(0):
            logger.warning(
                "impersonation_session_corrupt",
                error="startedAt is in the future",
                session_id=active.session.id,
            )
            self._purge()
            self._active = None
            return None

        if elapsed >= self._timeout:
            logger.warning(
                "impersonation_session_expired",
                session_id=active.session.id,
                elapsed_seconds=int(elapsed.total_seconds()),
                timeout_seconds=int(self._timeout.total_seconds()),
            )
            self._purge()
            self._active = None
            return None

        self._active = active
        logger.info(
            "impersonation_session_restored",
            session_id=active.session.id,
            impersonated_user_id=active.session.impersonated_user_id,
            elapsed_seconds=int(elapsed.total_seconds()),
        )
        return active.session

    def is_valid(self) -> bool:
        if self._active is None:
            return False
        return self._clock.now() - self._active.started_at < self._timeout

    def remaining_time(self) -> int:
        """Milliseconds left in the session, or NO_TIME_REMAINING (-1)."""
        if not self.is_valid():
            return NO_TIME_REMAINING
        remaining = self._timeout - (self._clock.now() - self._active.started_at)
        return -(-remaining // _MILLISECOND)

    def get_session_details(self) -> ImpersonationSession | None:
        if not self.is_valid():
            return None
        return self._active.session

    def end(self) -> ActiveSession | None:
        """Clear the session. Idempotent; returns what was held, if anything."""
        ending = self._active
        self._purge()
        self._active = None
        if ending is not None:
            logger.info(
                "impersonation_session_ended",
                session_id=ending.session.id,
                impersonated_user_id=ending.session.impersonated_user_id,
                duration_seconds=int((self._clock.now() - ending.started_at).total_seconds()),
            )
        return ending

    def _purge(self) -> None:
        try:
            self._store.remove(self._key)
        except Exception as exc:
            logger.error("impersonation_session_purge_failed", error=str(exc))
