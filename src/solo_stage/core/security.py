"""Identity hashing and session token primitives."""
from __future__ import annotations

import hashlib
import secrets

SESSION_TOKEN_BYTES = 32


def hash_client_identity(raw_identity: str) -> str:
    """Return the client token for a raw network identity.

    The token is the hex SHA-256 digest of the UTF-8 encoded identity. No salt
    is applied, so the same address always maps to the same token; likes and
    rate-limit windows depend on that stability.
    """
    return hashlib.sha256(raw_identity.encode("utf-8")).hexdigest()


def generate_session_token() -> str:
    """Return a 256-bit random session token as 64 hex characters."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)
