"""Shared API dependencies for client identity and admin authorization."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from solo_stage.core.security import hash_client_identity
from solo_stage.core.settings import settings
from solo_stage.db.session import get_db
from solo_stage.schemas.session import SessionIdentity
from solo_stage.services.sessions import (
    AccessGate,
    SessionStore,
    SessionStoreUnavailableError,
    get_access_gate,
    get_session_store,
)

UNKNOWN_CLIENT = "unknown"

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def client_ip(request: Request) -> str:
    """Return the caller's network identity.

    Prefers the edge-provided header, then the socket peer.
    """
    forwarded = request.headers.get(settings.client_ip_header)
    if forwarded:
        return forwarded.strip()
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def get_client_token(request: Request) -> str:
    """Return the hashed client token for the current caller."""
    return hash_client_identity(client_ip(request))


def session_token(request: Request) -> str | None:
    """Return the raw session token from the session cookie, if any."""
    return request.cookies.get(settings.session_cookie_name) or None


def get_session_store_dep() -> SessionStore:
    return get_session_store()


def get_access_gate_dep() -> AccessGate:
    return get_access_gate()


ClientTokenDep = Annotated[str, Depends(get_client_token)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store_dep)]
AccessGateDep = Annotated[AccessGate, Depends(get_access_gate_dep)]


def require_admin(request: Request, gate: AccessGateDep) -> SessionIdentity:
    """Resolve the session cookie and require an allow-listed identity.

    Raises:
        HTTPException: 401 if unauthorized, 503 if the session store is down.
    """
    try:
        identity = gate.authorize(session_token(request))
    except SessionStoreUnavailableError as err:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session store unavailable",
        ) from err
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return identity


# Type alias for the authorized admin dependency
AdminDep = Annotated[SessionIdentity, Depends(require_admin)]
