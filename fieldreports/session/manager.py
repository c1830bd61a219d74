"""Session-derived access control.

`SessionManager` subscribes to the identity store's session stream and keeps
the resolved application profile for the current session. A session is only
considered logged in when it maps to an existing, active profile; any other
session is signed out on the spot.
"""

from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from pydantic import BaseModel

from fieldreports.db.users import UserDirectory
from fieldreports.integrations.firebase import (
    IdentityStore,
    IdentitySession,
    IdentityError,
)
from fieldreports.models.user import User
from fieldreports.models import results
from fieldreports.models.results import AuthResult

logger = logging.getLogger(__name__)

SessionObserver = Callable[["SessionState"], None]

# Provider codes that mean "these credentials are wrong". All of them, and an
# unknown username, produce the same reason so usernames cannot be probed.
CREDENTIAL_ERROR_CODES = {
    "wrong-password",
    "user-not-found",
    "invalid-credential",
    "invalid-login-credentials",
}


class SessionState(BaseModel):
    """Observable access-control state."""

    user: User | None = None
    is_auth_loading: bool = True

    @property
    def is_logged_in(self) -> bool:
        return self.user is not None

    @property
    def is_master_user(self) -> bool:
        return self.user is not None and self.user.is_master


class SessionManager:
    """Resolves identity sessions to profiles and runs the sign-in flows.

    Use as an async context manager: entering subscribes to the identity
    store and resolves the current session, exiting unsubscribes.
    """

    def __init__(self, identity: IdentityStore, directory: UserDirectory):
        self.identity = identity
        self.directory = directory
        self.state = SessionState()
        self._observers: list[SessionObserver] = []
        self._unsubscribe: Callable[[], None] | None = None
        self._suspended = False

    async def __aenter__(self) -> SessionManager:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    async def start(self) -> None:
        """Subscribe to session changes and resolve the current session."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.identity.subscribe(self._on_session_change)
        await self._on_session_change(self.identity.current_session)

    def close(self) -> None:
        """Tear down the session subscription."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def add_observer(self, observer: SessionObserver) -> Callable[[], None]:
        """Register a state observer; returns a callable that removes it."""
        self._observers.append(observer)

        def remove() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return remove

    @property
    def user(self) -> User | None:
        return self.state.user

    @property
    def is_logged_in(self) -> bool:
        return self.state.is_logged_in

    @property
    def is_master_user(self) -> bool:
        return self.state.is_master_user

    @property
    def is_auth_loading(self) -> bool:
        return self.state.is_auth_loading

    async def _on_session_change(self, session: IdentitySession | None) -> None:
        if self._suspended:
            return
        await self._resolve(session)

    async def _resolve(self, session: IdentitySession | None) -> None:
        if session is None:
            self._set_user(None)
            return

        profile = self.directory.get_user_by_id(session.user_id)
        if profile is None or not profile.is_active:
            logger.warning(
                f"Signing out identity {session.user_id}: "
                f"{'no profile' if profile is None else 'account inactive'}"
            )
            self._set_user(None)
            await self.identity.sign_out()
            return

        self._set_user(profile)

    def _set_user(self, user: User | None) -> None:
        self.state = SessionState(user=user, is_auth_loading=False)
        for observer in list(self._observers):
            observer(self.state)

    @asynccontextmanager
    async def _resolution_suspended(self) -> AsyncIterator[None]:
        """Hold back session resolution while a sign-in flow runs, then resolve once."""
        self._suspended = True
        try:
            yield
        finally:
            self._suspended = False
            await self._resolve(self.identity.current_session)

    async def login(self, username: str, password: str | None) -> AuthResult:
        """Sign in with a username and password."""
        if not password:
            return AuthResult.fail("invalid-input", results.MISSING_PASSWORD)

        user = self.directory.find_user_by_username(username)
        if user is None:
            logger.warning("Login rejected: unknown username")
            return AuthResult.fail("invalid-credentials", results.INVALID_CREDENTIALS)
        if not user.is_active:
            logger.warning(f"Login rejected: user {user.id} is inactive")
            return AuthResult.fail("account-disabled", results.ACCOUNT_DISABLED)

        try:
            await self.identity.sign_in_with_password(user.email, password)
        except IdentityError as e:
            logger.error(f"Login failed: {e.code}")
            if e.code == "user-disabled":
                return AuthResult.fail("account-disabled", results.ACCOUNT_DISABLED)
            return AuthResult.fail("invalid-credentials", results.INVALID_CREDENTIALS)

        if not self.state.is_logged_in:
            return AuthResult.fail("account-disabled", results.ACCOUNT_DISABLED)
        return AuthResult.ok()

    async def login_with_google(self, credential: str | None) -> AuthResult:
        """Sign in with a Google ID token, provisioning a profile on first use.

        Only emails on the allow-list may sign in; anyone else is signed out
        again and no profile is written.
        """
        try:
            async with self._resolution_suspended():
                session = await self.identity.sign_in_with_federated_credential(
                    credential
                )

                if not session.email:
                    await self.identity.sign_out()
                    return AuthResult.fail("invalid-input", results.GOOGLE_NO_EMAIL)

                if not self.directory.is_google_email_authorized(session.email):
                    logger.warning("Google sign-in rejected: email not authorized")
                    await self.identity.sign_out()
                    return AuthResult.fail(
                        "not-authorized", results.GOOGLE_NOT_AUTHORIZED
                    )

                self.directory.find_or_create_user_for_google_sign_in(session)
        except IdentityError as e:
            logger.error(f"Google login failed: {e.code}")
            if e.code == "popup-closed-by-user":
                return AuthResult.fail("invalid-input", results.GOOGLE_POPUP_CLOSED)
            return AuthResult.fail("invalid-credentials", results.GOOGLE_LOGIN_FAILED)
        except Exception as e:
            logger.error(f"Google login failed: {e}")
            return AuthResult.fail("write-failure", results.GOOGLE_LOGIN_FAILED)

        if not self.state.is_logged_in:
            return AuthResult.fail("account-disabled", results.ACCOUNT_DISABLED)
        return AuthResult.ok()

    async def logout(self) -> None:
        """End the session. Local profile state is cleared even if sign-out fails."""
        try:
            await self.identity.sign_out()
        finally:
            self._set_user(None)
