from __future__ import annotations
from typing import Any

from pydantic import BaseModel


class IdentitySession(BaseModel):
    """A signed-in identity as reported by the identity provider."""

    user_id: str
    email: str | None = None
    display_name: str | None = None
    id_token: str | None = None
    refresh_token: str | None = None
    provider_id: str = "password"

    @classmethod
    def from_response(
        cls, data: dict[str, Any], provider_id: str = "password"
    ) -> IdentitySession:
        """Build a session from an Identity Toolkit sign-in/sign-up response."""
        return cls(
            user_id=data["localId"],
            email=data.get("email"),
            display_name=data.get("displayName") or None,
            id_token=data.get("idToken"),
            refresh_token=data.get("refreshToken"),
            provider_id=provider_id,
        )

    @classmethod
    def from_claims(
        cls, claims: dict[str, Any], id_token: str | None = None
    ) -> IdentitySession:
        """Build a session from verified ID token claims."""
        firebase_claims = claims.get("firebase") or {}
        return cls(
            user_id=claims["sub"],
            email=claims.get("email"),
            display_name=claims.get("name"),
            id_token=id_token,
            provider_id=firebase_claims.get("sign_in_provider", "password"),
        )


class IdentityError(Exception):
    """An identity provider failure with a normalized provider code.

    Codes follow the provider's client conventions, e.g. `wrong-password`,
    `user-not-found`, `email-already-in-use`, `invalid-email`,
    `popup-closed-by-user`.
    """

    def __init__(self, code: str, message: str | None = None):
        super().__init__(message or code)
        self.code = code
