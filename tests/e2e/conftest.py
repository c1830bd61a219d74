import os
from pathlib import Path
from typing import Iterator

import pytest
from testcontainers.postgres import PostgresContainer
from alembic.config import Config
from alembic import command

# Ensure allowed environment for env_loader
os.environ.setdefault("ENV", "dev")


@pytest.fixture(scope="session")
def db_url() -> Iterator[str]:
    """Start a Postgres container, run migrations, and return the DB URL."""
    with PostgresContainer("postgres:16") as pg:
        raw_url = pg.get_connection_url()
        # Normalize to psycopg3-compatible URL if needed
        url = raw_url.replace("postgresql+psycopg2://", "postgresql://")
        os.environ["DATABASE_URL"] = url

        # Run Alembic migrations against this database
        repo_dir = Path(__file__).resolve().parents[2]
        alembic_cfg = Config(str(repo_dir / "alembic.ini"))
        alembic_cfg.set_main_option("script_location", str(repo_dir / "alembic"))
        command.upgrade(alembic_cfg, "head")

        yield url


@pytest.fixture
def clean_documents(db_url: str) -> Iterator[None]:
    """Empty the documents table after each test."""
    yield
    from fieldreports.db.connection import get_db_cursor

    with get_db_cursor() as cursor:
        cursor.execute("DELETE FROM documents")
