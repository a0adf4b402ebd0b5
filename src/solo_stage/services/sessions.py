"""Admin sessions stored in the key-value store, and the access gate."""

from __future__ import annotations

import json
import logging

import redis
from pydantic import ValidationError

from solo_stage.core.security import generate_session_token
from solo_stage.core.settings import settings
from solo_stage.schemas.session import SessionIdentity
from solo_stage.services.kv import get_kv_client

logger = logging.getLogger(__name__)

_KEY_PREFIX = "session"


class SessionStoreUnavailableError(RuntimeError):
    """Raised when the session store is missing or fails a round trip."""


class SessionStore:
    """Opaque-token sessions with a fixed lifetime counted from creation.

    Reads do not refresh the expiry; the store drops the record after
    `ttl_seconds` regardless of activity.
    """

    def __init__(self, client: redis.Redis | None, *, ttl_seconds: int = 86_400 * 7) -> None:
        self._client = client
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _key(token: str) -> str:
        return f"{_KEY_PREFIX}:{token}"

    def _require_client(self) -> redis.Redis:
        if self._client is None:
            raise SessionStoreUnavailableError("Session store is not configured")
        return self._client

    def create(self, identity: SessionIdentity) -> str:
        """Persist a new session for `identity` and return its token."""
        client = self._require_client()
        token = generate_session_token()
        try:
            client.set(self._key(token), identity.model_dump_json(), ex=self.ttl_seconds)
        except redis.RedisError as exc:
            raise SessionStoreUnavailableError(str(exc)) from exc
        logger.info("Created session for %s", identity.email)
        return token

    def lookup(self, token: str | None) -> SessionIdentity | None:
        """Return the identity behind `token`, or None if absent or expired."""
        if not token:
            return None
        client = self._require_client()
        try:
            raw = client.get(self._key(token))
        except redis.RedisError as exc:
            raise SessionStoreUnavailableError(str(exc)) from exc
        if raw is None:
            return None
        try:
            return SessionIdentity.model_validate(json.loads(raw))
        except (ValueError, ValidationError):
            logger.warning("Discarding malformed session record")
            return None

    def destroy(self, token: str | None) -> None:
        """Delete the session; unknown tokens are ignored."""
        if not token:
            return
        client = self._require_client()
        try:
            client.delete(self._key(token))
        except redis.RedisError as exc:
            raise SessionStoreUnavailableError(str(exc)) from exc
        logger.info("Destroyed session")


class AccessGate:
    """Authorize admin routes: a live session whose email is allow-listed.

    With no allow-listed address configured every session is refused.
    """

    def __init__(self, store: SessionStore, allowed_email: str | None) -> None:
        self._store = store
        self._allowed_email = allowed_email or None

    def is_allowed_email(self, email: str | None) -> bool:
        return self._allowed_email is not None and email == self._allowed_email

    def authorize(self, token: str | None) -> SessionIdentity | None:
        """Return the session identity when authorized, else None."""
        identity = self._store.lookup(token)
        if identity is None:
            return None
        if not self.is_allowed_email(identity.email):
            logger.warning("Session for %s is not allow-listed", identity.email)
            return None
        return identity

    def is_authorized(self, token: str | None) -> bool:
        return self.authorize(token) is not None


def get_session_store() -> SessionStore:
    """Return a session store bound to the shared key-value client."""
    return SessionStore(get_kv_client(), ttl_seconds=settings.session_ttl_seconds)


def get_access_gate() -> AccessGate:
    """Return an access gate using the configured allow-listed email."""
    return AccessGate(get_session_store(), settings.allowed_email)
