"""Firebase Authentication client over the Identity Toolkit REST API."""

import logging
from typing import Any, Awaitable, Callable, Protocol

import httpx

from .models import IdentitySession, IdentityError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://identitytoolkit.googleapis.com/v1"
GOOGLE_PROVIDER_ID = "google.com"

SessionListener = Callable[[IdentitySession | None], Awaitable[None]]

# Identity Toolkit error messages mapped to client-style provider codes.
REST_ERROR_CODES: dict[str, str] = {
    "INVALID_PASSWORD": "wrong-password",
    "EMAIL_NOT_FOUND": "user-not-found",
    "INVALID_LOGIN_CREDENTIALS": "invalid-credential",
    "USER_DISABLED": "user-disabled",
    "EMAIL_EXISTS": "email-already-in-use",
    "INVALID_EMAIL": "invalid-email",
    "MISSING_EMAIL": "invalid-email",
    "WEAK_PASSWORD": "weak-password",
    "MISSING_PASSWORD": "missing-password",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "too-many-requests",
    "INVALID_IDP_RESPONSE": "invalid-credential",
    "OPERATION_NOT_ALLOWED": "operation-not-allowed",
}


class IdentityStore(Protocol):
    """Account/credential service with a session-change stream."""

    @property
    def current_session(self) -> IdentitySession | None: ...

    def subscribe(self, listener: SessionListener) -> Callable[[], None]: ...

    def restore_session(self, session: IdentitySession) -> None: ...

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> IdentitySession: ...

    async def sign_in_with_federated_credential(
        self, id_token: str | None
    ) -> IdentitySession: ...

    async def sign_out(self) -> None: ...

    async def create_account(self, email: str, password: str) -> IdentitySession: ...


class SessionNotifier:
    """Holds the current session and notifies listeners when it changes.

    Listeners are awaited in subscription order, so once a sign-in call
    returns, every subscriber has already seen the new session.
    """

    def __init__(self) -> None:
        self._session: IdentitySession | None = None
        self._listeners: list[SessionListener] = []

    @property
    def current_session(self) -> IdentitySession | None:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def restore_session(self, session: IdentitySession) -> None:
        """Adopt a previously established session without notifying."""
        self._session = session

    async def sign_out(self) -> None:
        if self._session is not None:
            logger.debug(f"Signing out identity {self._session.user_id}")
        await self._set_session(None)

    async def _set_session(self, session: IdentitySession | None) -> None:
        self._session = session
        for listener in list(self._listeners):
            await listener(session)


class FirebaseIdentityClient(SessionNotifier):
    """Identity store backed by Firebase Authentication.

    Sign-in calls establish the returned session and notify subscribers.
    Account creation does not: the caller (an administrator) keeps their
    own session.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        request_uri: str = "http://localhost",
    ):
        super().__init__()
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.request_uri = request_uri

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Call an `accounts:<endpoint>` method and return the JSON body.

        Raises:
            IdentityError: With a normalized provider code on any failure.
        """
        url = f"{self.base_url}/accounts:{endpoint}"
        try:
            async with httpx.AsyncClient(timeout=10) as client:
                response = await client.post(
                    url, params={"key": self.api_key}, json=payload
                )
        except httpx.HTTPError as e:
            logger.error(f"Identity Toolkit request to {endpoint} failed: {e}")
            raise IdentityError("network-request-failed", str(e)) from e

        if response.status_code != 200:
            code = _error_code_from_response(response)
            logger.warning(
                f"Identity Toolkit {endpoint} returned {response.status_code}: {code}"
            )
            raise IdentityError(code, response.text)

        return response.json()

    async def sign_in_with_password(self, email: str, password: str) -> IdentitySession:
        data = await self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        session = IdentitySession.from_response(data, provider_id="password")
        await self._set_session(session)
        return session

    async def sign_in_with_federated_credential(
        self, id_token: str | None
    ) -> IdentitySession:
        """Sign in with a Google ID token obtained by the frontend.

        A missing token means the user dismissed the provider's popup.
        """
        if not id_token:
            raise IdentityError("popup-closed-by-user")
        data = await self._post(
            "signInWithIdp",
            {
                "postBody": f"id_token={id_token}&providerId={GOOGLE_PROVIDER_ID}",
                "requestUri": self.request_uri,
                "returnIdpCredential": True,
                "returnSecureToken": True,
            },
        )
        session = IdentitySession.from_response(data, provider_id=GOOGLE_PROVIDER_ID)
        await self._set_session(session)
        return session

    async def create_account(self, email: str, password: str) -> IdentitySession:
        data = await self._post(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        session = IdentitySession.from_response(data)
        logger.info(f"Created identity account {session.user_id}")
        return session


def _error_code_from_response(response: httpx.Response) -> str:
    """Extract a provider code from an Identity Toolkit error body.

    Messages look like `EMAIL_EXISTS` or `WEAK_PASSWORD : Password should be
    at least 6 characters`.
    """
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return "internal-error"
    key = message.split(" : ", 1)[0].strip()
    return REST_ERROR_CODES.get(key, "internal-error")
