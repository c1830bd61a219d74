"""User directory: profiles, account creation, and the Google allow-list."""

import logging
import re
from datetime import datetime, timezone
from typing import Any

from fieldreports.integrations.firebase import (
    IdentityStore,
    IdentitySession,
    IdentityError,
)
from fieldreports.models.user import User, UserUpdate, AuthorizedGoogleEmail
from fieldreports.models import results
from fieldreports.models.results import OperationResult
from .documents import DocumentStore, Document
from .reports import REPORTS_COLLECTION

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
AUTHORIZED_EMAILS_COLLECTION = "authorizedEmails"

EMAIL_SHAPE = re.compile(r"\S+@\S+\.\S+")


class UserDirectory:
    """Maps identity accounts to application profiles.

    Read failures are logged and degrade to an empty result; write failures
    are returned as an `OperationResult`.
    """

    def __init__(self, store: DocumentStore, identity: IdentityStore):
        self.store = store
        self.identity = identity

    def get_users(self) -> list[User]:
        """Get every user profile."""
        try:
            docs = self.store.query(USERS_COLLECTION)
        except Exception as e:
            logger.error(f"Error getting users: {e}")
            return []
        return [_doc_to_user(doc) for doc in docs]

    def get_user_by_id(self, user_id: str) -> User | None:
        try:
            doc = self.store.get(USERS_COLLECTION, user_id)
        except Exception as e:
            logger.error(f"Error fetching user by ID {user_id}: {e}")
            return None
        return _doc_to_user(doc) if doc else None

    def find_user_by_username(self, username: str) -> User | None:
        """Find a profile by username, case-insensitively."""
        try:
            docs = self.store.query(
                USERS_COLLECTION, filters={"username": username.lower()}
            )
        except Exception as e:
            logger.error(f"Error finding user by username: {e}")
            return None
        return _doc_to_user(docs[0]) if docs else None

    async def add_user(
        self, username: str, email: str, name: str, password: str | None
    ) -> OperationResult:
        """Create an identity account and its profile.

        Input is validated before any remote call. The profile is keyed by
        the new account's id and starts active and non-master.
        """
        if not username:
            return OperationResult.fail("invalid-input", results.USERNAME_REQUIRED)
        if not email:
            return OperationResult.fail("invalid-input", results.EMAIL_REQUIRED)
        if not password or len(password) < results.MIN_PASSWORD_LENGTH:
            return OperationResult.fail("invalid-input", results.PASSWORD_TOO_SHORT)

        try:
            existing = self.store.query(
                USERS_COLLECTION, filters={"username": username.lower()}
            )
            if existing:
                return OperationResult.fail("conflict", results.USERNAME_TAKEN)

            account = await self.identity.create_account(email, password)

            new_user = User(
                id=account.user_id,
                username=username.lower(),
                email=email.lower(),
                name=name.strip() or username,
                is_active=True,
                is_master=False,
            )
            self.store.set(USERS_COLLECTION, new_user.id, _user_to_doc(new_user))
        except IdentityError as e:
            logger.error(f"Error adding user {username}: {e.code}")
            if e.code == "email-already-in-use":
                return OperationResult.fail("conflict", results.EMAIL_TAKEN)
            if e.code == "invalid-email":
                return OperationResult.fail("invalid-input", results.EMAIL_MALFORMED)
            return OperationResult.fail("write-failure", results.USER_CREATE_FAILED)
        except Exception as e:
            logger.error(f"Error adding user {username}: {e}")
            return OperationResult.fail("write-failure", results.USER_CREATE_FAILED)

        logger.info(f"Created user {new_user.username} with id={new_user.id}")
        return OperationResult.ok(id=new_user.id)

    def update_user(self, user_id: str, updates: UserUpdate) -> OperationResult:
        """Patch the given profile fields as supplied."""
        patch = _update_to_doc(updates)
        if not patch:
            return OperationResult.ok(id=user_id)
        try:
            self.store.update(USERS_COLLECTION, user_id, patch)
        except Exception as e:
            logger.error(f"Error updating user {user_id}: {e}")
            return OperationResult.fail("write-failure", results.USER_UPDATE_FAILED)
        return OperationResult.ok(id=user_id)

    async def update_user_password(
        self, user_id: str, new_password: str
    ) -> OperationResult:
        """Change another user's password.

        This requires admin privileges on the identity provider, which only a
        trusted server context (e.g. a Cloud Function using the Admin SDK)
        may hold. It always fails here.
        """
        logger.warning(
            f"Password change requested for {user_id} but is not available "
            "without a server-side admin context"
        )
        return OperationResult.fail(
            "not-implemented", results.PASSWORD_CHANGE_NOT_IMPLEMENTED
        )

    def delete_user(self, user_id: str) -> OperationResult:
        """Delete a profile and all of its reports in one atomic batch.

        The identity account itself is left in place and must be removed
        from the provider's console.
        """
        try:
            batch = self.store.batch()
            batch.delete(USERS_COLLECTION, user_id)
            reports = self.store.query(REPORTS_COLLECTION, filters={"userId": user_id})
            for report in reports:
                batch.delete(REPORTS_COLLECTION, report.id)
            batch.commit()
        except Exception as e:
            logger.error(f"Error deleting user {user_id} and their reports: {e}")
            return OperationResult.fail("write-failure", results.USER_DELETE_FAILED)

        logger.info(f"Deleted user {user_id} and {len(reports)} reports")
        return OperationResult.ok(id=user_id)

    # Google allow-list

    def is_google_email_authorized(self, email: str) -> bool:
        try:
            doc = self.store.get(AUTHORIZED_EMAILS_COLLECTION, email.lower())
        except Exception as e:
            logger.error(f"Error checking email authorization: {e}")
            return False
        return doc is not None

    def authorize_google_email(self, email: str) -> OperationResult:
        if not email or not EMAIL_SHAPE.search(email):
            return OperationResult.fail("invalid-input", results.EMAIL_INVALID)
        key = email.lower()
        try:
            self.store.set(
                AUTHORIZED_EMAILS_COLLECTION,
                key,
                {"authorizedAt": datetime.now(timezone.utc).isoformat()},
            )
        except Exception as e:
            logger.error(f"Error authorizing email: {e}")
            return OperationResult.fail("write-failure", results.AUTHORIZE_FAILED)
        return OperationResult.ok(id=key)

    def get_authorized_google_emails(self) -> list[AuthorizedGoogleEmail]:
        try:
            docs = self.store.query(AUTHORIZED_EMAILS_COLLECTION)
        except Exception as e:
            logger.error(f"Error fetching authorized emails: {e}")
            return []
        return [
            AuthorizedGoogleEmail(
                email=doc.id, authorized_at=doc.data.get("authorizedAt")
            )
            for doc in docs
        ]

    def revoke_google_email(self, email: str) -> OperationResult:
        key = email.lower()
        try:
            self.store.delete(AUTHORIZED_EMAILS_COLLECTION, key)
        except Exception as e:
            logger.error(f"Error revoking email authorization: {e}")
            return OperationResult.fail("write-failure", results.REVOKE_FAILED)
        return OperationResult.ok(id=key)

    def find_or_create_user_for_google_sign_in(
        self, session: IdentitySession
    ) -> User | None:
        """Return the profile for a Google identity, creating it on first sign-in.

        Raises:
            Exception: Store write failures propagate to the sign-in flow.
        """
        existing = self.get_user_by_id(session.user_id)
        if existing is not None:
            return existing
        if not session.email:
            return None

        username = self._free_username(session.email.split("@")[0].lower())
        new_user = User(
            id=session.user_id,
            username=username,
            email=session.email.lower(),
            name=session.display_name or username,
            is_active=True,
            is_master=False,
        )
        self.store.set(USERS_COLLECTION, new_user.id, _user_to_doc(new_user))
        logger.info(f"Provisioned profile for Google user {new_user.username}")
        return new_user

    def _free_username(self, base: str) -> str:
        """Return `base`, or `base` with the lowest numeric suffix not yet taken."""
        username = base
        suffix = 1
        while self.store.query(USERS_COLLECTION, filters={"username": username}):
            suffix += 1
            username = f"{base}{suffix}"
        if username != base:
            logger.info(f"Username {base} taken, provisioning as {username}")
        return username


def _doc_to_user(doc: Document) -> User:
    """Convert a stored profile document to a User."""
    data = doc.data
    return User(
        id=doc.id,
        username=data.get("username", ""),
        email=data.get("email", ""),
        name=data.get("name", ""),
        is_active=bool(data.get("isActive", False)),
        is_master=bool(data.get("isMaster", False)),
    )


def _user_to_doc(user: User) -> dict[str, Any]:
    return {
        "username": user.username,
        "email": user.email,
        "name": user.name,
        "isActive": user.is_active,
        "isMaster": user.is_master,
    }


def _update_to_doc(updates: UserUpdate) -> dict[str, Any]:
    fields = updates.model_dump(exclude_unset=True)
    names = {"name": "name", "email": "email", "is_active": "isActive"}
    return {names[key]: value for key, value in fields.items() if key in names}
