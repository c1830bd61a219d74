import pytest

from fieldreports.db.users import UserDirectory, USERS_COLLECTION
from fieldreports.session.manager import SessionManager
from tests._fakes import FakeAccount


def seed_profile(store, user_id: str, username: str, **fields) -> None:
    data = {
        "username": username,
        "email": f"{username}@example.com",
        "name": username.title(),
        "isActive": True,
        "isMaster": False,
    }
    data.update(fields)
    store.set(USERS_COLLECTION, user_id, data)


@pytest.fixture
def directory(store, identity) -> UserDirectory:
    return UserDirectory(store, identity)


@pytest.fixture
def manager(identity, directory) -> SessionManager:
    return SessionManager(identity, directory)


@pytest.fixture
def mario(store, identity) -> FakeAccount:
    """An active standard user with a password account."""
    account = FakeAccount(user_id="u1", email="mario@example.com", password="segreto")
    identity.accounts[account.email] = account
    seed_profile(store, "u1", "mario")
    return account


@pytest.fixture
def google_anna(identity) -> FakeAccount:
    """A Google identity with no profile yet, posted as credential `anna-jwt`."""
    account = FakeAccount(
        user_id="g1", email="Anna@Example.com", display_name="Anna Verdi"
    )
    identity.google_accounts["anna-jwt"] = account
    return account
