"""User model for application-level profiles linked to identity accounts."""

from __future__ import annotations

from pydantic import BaseModel


class User(BaseModel):
    """Application user profile.

    The id is the identity provider's account id (Firebase `localId` / `sub`
    claim), assigned externally and shared one-to-one with the account.
    Master users can read every report and administer other users.
    """

    id: str
    username: str
    email: str
    name: str
    is_active: bool = True
    is_master: bool = False


class UserUpdate(BaseModel):
    """Partial profile update. Only fields explicitly set are written."""

    name: str | None = None
    email: str | None = None
    is_active: bool | None = None


class AuthorizedGoogleEmail(BaseModel):
    """An allow-list entry for Google sign-in, keyed by lowercase email."""

    email: str
    authorized_at: str | None = None
