"""PostgreSQL connections for the document store."""

import os
from contextlib import contextmanager
from typing import Iterator

import psycopg

APPLICATION_NAME = "fieldreports"


def get_database_url() -> str:
    return os.environ["DATABASE_URL"]


def get_sqlalchemy_database_url() -> str:
    """Alembic goes through SQLAlchemy; point it at the psycopg 3 driver."""
    url = get_database_url()
    scheme, separator, rest = url.partition("://")
    if scheme in ("postgres", "postgresql"):
        return f"postgresql+psycopg{separator}{rest}"
    return url


@contextmanager
def get_db_connection() -> Iterator[psycopg.Connection]:
    conn = psycopg.connect(get_database_url(), application_name=APPLICATION_NAME)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def get_db_cursor() -> Iterator[psycopg.Cursor]:
    """Get a cursor whose statements form one transaction.

    Everything executed inside the block commits together when it exits, or
    rolls back if it raises.
    """
    with get_db_connection() as conn:
        with conn.transaction():
            with conn.cursor() as cursor:
                yield cursor
