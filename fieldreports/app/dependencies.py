import os
import logging

from fastapi import Depends

from fieldreports.db.documents import DocumentStore, PostgresDocumentStore
from fieldreports.db.reports import ReportRepository
from fieldreports.db.users import UserDirectory
from fieldreports.integrations.firebase import FirebaseIdentityClient, IdentityStore
from fieldreports.integrations.firebase.client import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)


def get_document_store() -> DocumentStore:
    """Get the document store backing all collections."""
    return PostgresDocumentStore()


def get_identity_store() -> IdentityStore:
    """Get a request-scoped identity client with no session yet."""
    return FirebaseIdentityClient(
        api_key=os.environ["FIREBASE_API_KEY"],
        base_url=os.getenv("IDENTITY_TOOLKIT_URL") or DEFAULT_BASE_URL,
    )


def get_user_directory(
    store: DocumentStore = Depends(get_document_store),
    identity: IdentityStore = Depends(get_identity_store),
) -> UserDirectory:
    return UserDirectory(store, identity)


def get_report_repository(
    store: DocumentStore = Depends(get_document_store),
) -> ReportRepository:
    return ReportRepository(store)
