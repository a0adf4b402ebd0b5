"""Google OAuth client used to establish admin sessions.

Only the pieces needed to turn an authorization code into a verified email
address are implemented.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import httpx

from solo_stage.core.settings import settings
from solo_stage.schemas.session import SessionIdentity

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


class OAuthError(RuntimeError):
    """Raised when the identity provider rejects or fails a request."""


class GoogleOAuthClient:
    """Minimal authorization-code flow against Google."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def authorization_url(self) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_seconds),
            transport=self._transport,
        )

    async def fetch_identity(self, code: str) -> SessionIdentity:
        """Exchange `code` for a token and return the user's identity.

        Raises:
            OAuthError: If either call fails or returns no usable data.
        """
        try:
            async with self._client() as client:
                token_response = await client.post(
                    GOOGLE_TOKEN_URL,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": self.redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
                access_token = token_response.json().get("access_token")
                if not access_token:
                    raise OAuthError("Failed to obtain an access token")

                info_response = await client.get(
                    GOOGLE_USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                info = info_response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("OAuth exchange failed: %s", exc)
            raise OAuthError("Identity provider request failed") from exc

        email = info.get("email")
        if not email:
            raise OAuthError("Identity provider returned no email")
        return SessionIdentity(email=email, name=info.get("name"), picture=info.get("picture"))


def get_oauth_client() -> GoogleOAuthClient:
    """Return an OAuth client configured from settings."""
    return GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_uri=settings.google_redirect_uri,
        timeout_seconds=settings.oauth_http_timeout_seconds,
    )
