"""Session-related Pydantic schemas."""

from pydantic import BaseModel


class SessionIdentity(BaseModel):
    """Identity stored behind a session token."""

    email: str
    name: str | None = None
    picture: str | None = None
