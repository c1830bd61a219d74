"""Firebase Authentication integration (identity store)."""

from .client import (
    FirebaseIdentityClient,
    IdentityStore,
    SessionListener,
    SessionNotifier,
)
from .models import IdentitySession, IdentityError

__all__ = [
    "FirebaseIdentityClient",
    "IdentityStore",
    "SessionListener",
    "SessionNotifier",
    "IdentitySession",
    "IdentityError",
]
