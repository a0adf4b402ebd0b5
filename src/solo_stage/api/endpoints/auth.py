# src/solo_stage/api/endpoints/auth.py
"""Admin login, logout and session introspection."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse, Response

from solo_stage.api.dependencies import (
    AccessGateDep,
    AdminDep,
    SessionStoreDep,
    session_token,
)
from solo_stage.core.settings import settings
from solo_stage.schemas.session import SessionIdentity
from solo_stage.services.oauth import GoogleOAuthClient, OAuthError, get_oauth_client
from solo_stage.services.sessions import SessionStoreUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])

OAuthClientDep = Annotated[GoogleOAuthClient, Depends(get_oauth_client)]


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_ttl_seconds,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.get("/login")
async def login(oauth: OAuthClientDep) -> RedirectResponse:
    """Send the browser to the identity provider."""
    return RedirectResponse(oauth.authorization_url(), status_code=status.HTTP_302_FOUND)


@router.get("/auth/callback")
async def auth_callback(
    oauth: OAuthClientDep,
    gate: AccessGateDep,
    store: SessionStoreDep,
    code: str | None = Query(None),
) -> RedirectResponse:
    """Finish the login: verify the email, open a session, set the cookie."""
    if not code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing authorization code",
        )
    try:
        identity = await oauth.fetch_identity(code)
    except OAuthError as err:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(err)) from err

    if not gate.is_allowed_email(identity.email):
        logger.warning("Rejected login for %s", identity.email)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Email not allowed")

    try:
        token = store.create(identity)
    except SessionStoreUnavailableError as err:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session store unavailable",
        ) from err

    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    _set_session_cookie(response, token)
    return response


@router.get("/logout")
async def logout(request: Request, store: SessionStoreDep) -> RedirectResponse:
    """Destroy the current session and clear the cookie."""
    try:
        store.destroy(session_token(request))
    except SessionStoreUnavailableError:
        logger.warning("Session store unavailable during logout; clearing cookie only")
    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    _clear_session_cookie(response)
    return response


@router.get("/api/session", response_model=SessionIdentity)
async def current_session(admin: AdminDep) -> SessionIdentity:
    """Return the identity behind the current admin session."""
    return admin
