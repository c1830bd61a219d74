from datetime import datetime, timezone
from typing import Any
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from fieldreports.app.app import app
from fieldreports.app.dependencies import get_document_store, get_identity_store
from fieldreports.db.users import USERS_COLLECTION, AUTHORIZED_EMAILS_COLLECTION
from tests._fakes import FakeIdentityStore, FakeAccount
from tests._fakes.identity import token_for

TOKEN_PREFIX = "token-"


def fake_validate_id_token(token: str) -> dict[str, Any] | None:
    """Accept the fake identity store's `token-<uid>` tokens."""
    if token.startswith(TOKEN_PREFIX):
        return {"sub": token[len(TOKEN_PREFIX) :]}
    return None


class Backend:
    """Shared state behind the request-scoped stores the app builds."""

    def __init__(self, store):
        self.store = store
        self.accounts: dict[str, FakeAccount] = {}
        self.google_accounts: dict[str, FakeAccount] = {}

    def identity(self) -> FakeIdentityStore:
        return FakeIdentityStore(self.accounts, self.google_accounts)

    def add_user(
        self,
        user_id: str,
        username: str,
        password: str = "segreto",
        is_master: bool = False,
        is_active: bool = True,
    ) -> dict[str, str]:
        """Create an account and profile; returns the user's auth headers."""
        email = f"{username}@example.com"
        self.accounts[email] = FakeAccount(
            user_id=user_id, email=email, password=password
        )
        self.store.set(
            USERS_COLLECTION,
            user_id,
            {
                "username": username,
                "email": email,
                "name": username.title(),
                "isActive": is_active,
                "isMaster": is_master,
            },
        )
        return {"Authorization": f"Bearer {token_for(user_id)}"}

    def authorize_email(self, email: str) -> None:
        self.store.set(
            AUTHORIZED_EMAILS_COLLECTION,
            email.lower(),
            {"authorizedAt": datetime.now(timezone.utc).isoformat()},
        )


@pytest.fixture
def backend(store) -> Backend:
    return Backend(store)


@pytest.fixture
def client(backend):
    """Test client over in-memory stores, with fake token validation."""
    app.dependency_overrides[get_document_store] = lambda: backend.store
    app.dependency_overrides[get_identity_store] = backend.identity
    try:
        with patch(
            "fieldreports.app.oauth.validate_id_token", fake_validate_id_token
        ):
            yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def user_client(client, backend) -> TestClient:
    """Client signed in as the standard user `mario` (id u1)."""
    client.headers.update(backend.add_user("u1", "mario"))
    return client


@pytest.fixture
def master_client(client, backend) -> TestClient:
    """Client signed in as the master user `admin` (id m1)."""
    client.headers.update(backend.add_user("m1", "admin", is_master=True))
    return client
