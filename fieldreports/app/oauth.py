"""Firebase ID token validation and role-based authorization."""

import os
import time
import logging
from typing import AsyncIterator, Optional, Dict, Any

import jwt
from jwt import PyJWKClient
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from fieldreports.db.users import UserDirectory
from fieldreports.integrations.firebase import IdentityStore, IdentitySession
from fieldreports.models.user import User
from fieldreports.session.manager import SessionManager
from .dependencies import get_identity_store, get_user_directory

logger = logging.getLogger(__name__)
oauth_scheme = HTTPBearer(auto_error=False)

# Google publishes the keys that sign Firebase ID tokens here.
FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/"
    "securetoken@system.gserviceaccount.com"
)
JWKS_REFRESH_SECONDS = 3600

_jwks: tuple[PyJWKClient, float] | None = None


def get_firebase_project_id() -> str:
    """Get the Firebase project id, which is also the ID token audience."""
    return os.environ["FIREBASE_PROJECT_ID"]


def get_token_issuer() -> str:
    return f"https://securetoken.google.com/{get_firebase_project_id()}"


def get_jwks_client() -> PyJWKClient:
    """Get the signing-key client, rebuilt hourly so rotated keys are picked up."""
    global _jwks

    now = time.time()
    if _jwks is None or now - _jwks[1] > JWKS_REFRESH_SECONDS:
        client = PyJWKClient(
            FIREBASE_JWKS_URL, cache_keys=True, lifespan=JWKS_REFRESH_SECONDS
        )
        _jwks = (client, now)
        logger.info("Created Firebase signing-key client")
    return _jwks[0]


def validate_id_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a Firebase ID token's signature, issuer, audience and expiry.

    Returns the claims, or None if the token is not acceptable.
    """
    try:
        signing_key = get_jwks_client().get_signing_key_from_jwt(token)
        claims = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            issuer=get_token_issuer(),
            audience=get_firebase_project_id(),
            options={"require": ["exp", "iat", "iss", "aud", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired ID token")
        return None
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected ID token: {e}")
        return None

    # Firebase requires a non-empty subject: the account's uid.
    if not claims.get("sub"):
        logger.warning("Rejected ID token with empty subject")
        return None
    return claims


async def get_session_manager(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth_scheme),
    identity: IdentityStore = Depends(get_identity_store),
    directory: UserDirectory = Depends(get_user_directory),
) -> AsyncIterator[SessionManager]:
    """FastAPI dependency yielding a started SessionManager for this request.

    A valid bearer token restores that identity's session before the manager
    resolves it; without one (or with an invalid one) the manager starts
    logged out. The subscription is torn down when the request ends.
    """
    if credentials:
        claims = validate_id_token(credentials.credentials)
        if claims:
            identity.restore_session(
                IdentitySession.from_claims(claims, id_token=credentials.credentials)
            )

    async with SessionManager(identity, directory) as manager:
        yield manager


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth_scheme),
    manager: SessionManager = Depends(get_session_manager),
) -> User:
    """FastAPI dependency to get the current authenticated user.

    Raises:
        HTTPException 401 if the token is missing or invalid, or if it does
        not belong to an existing, active profile.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if manager.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return manager.user


async def require_user(user: User = Depends(get_current_user)) -> User:
    """FastAPI dependency for any signed-in, active user."""
    return user


async def require_master(user: User = Depends(get_current_user)) -> User:
    """FastAPI dependency requiring the master role.

    Raises:
        HTTPException 403 if the user is not a master.
    """
    if not user.is_master:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Master access required",
        )
    return user
