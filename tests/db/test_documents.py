"""Tests for the PostgreSQL document store."""

from unittest.mock import patch, MagicMock

import pytest

from fieldreports.db.documents import (
    PostgresDocumentStore,
    DocumentNotFoundError,
    Document,
    generate_document_id,
)


@pytest.fixture
def mock_cursor():
    with patch("fieldreports.db.documents.get_db_cursor") as mock_get_cursor:
        cursor = MagicMock()
        mock_get_cursor.return_value.__enter__.return_value = cursor
        yield cursor


class TestQuery:
    def test_returns_documents(self, mock_cursor):
        mock_cursor.fetchall.return_value = [
            ("a", {"username": "mario"}),
            ("b", {"username": "luigi"}),
        ]

        docs = PostgresDocumentStore().query("users")

        assert docs == [
            Document(id="a", data={"username": "mario"}),
            Document(id="b", data={"username": "luigi"}),
        ]
        params = mock_cursor.execute.call_args[0][1]
        assert params == ["users"]

    def test_filters_passed_as_jsonb(self, mock_cursor):
        mock_cursor.fetchall.return_value = []

        PostgresDocumentStore().query(
            "reports", filters={"userId": "user-1"}, order_by=("date", "desc")
        )

        params = mock_cursor.execute.call_args[0][1]
        assert params[0] == "reports"
        assert params[1].obj == {"userId": "user-1"}


class TestGet:
    def test_returns_document(self, mock_cursor):
        mock_cursor.fetchone.return_value = ("r1", {"text": "hello"})

        doc = PostgresDocumentStore().get("reports", "r1")

        assert doc == Document(id="r1", data={"text": "hello"})
        assert mock_cursor.execute.call_args[0][1] == ("reports", "r1")

    def test_returns_none_when_missing(self, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert PostgresDocumentStore().get("reports", "missing") is None


class TestWrites:
    def test_add_generates_id(self, mock_cursor):
        document_id = PostgresDocumentStore().add("reports", {"text": "x"})

        assert len(document_id) == 32
        sql_text, params = mock_cursor.execute.call_args[0]
        assert "INSERT INTO documents" in sql_text
        assert params[0] == "reports"
        assert params[1] == document_id
        assert params[2].obj == {"text": "x"}

    def test_set_upserts(self, mock_cursor):
        PostgresDocumentStore().set("users", "u1", {"username": "mario"})

        sql_text, params = mock_cursor.execute.call_args[0]
        assert "ON CONFLICT (collection, id)" in sql_text
        assert params[:2] == ("users", "u1")

    def test_update_merges_fields(self, mock_cursor):
        mock_cursor.rowcount = 1

        PostgresDocumentStore().update("users", "u1", {"isActive": False})

        sql_text, params = mock_cursor.execute.call_args[0]
        assert "data = data || %s" in sql_text
        assert params[0].obj == {"isActive": False}
        assert params[1:] == ("users", "u1")

    def test_update_missing_document_raises(self, mock_cursor):
        mock_cursor.rowcount = 0

        with pytest.raises(DocumentNotFoundError) as exc_info:
            PostgresDocumentStore().update("users", "ghost", {"name": "x"})

        assert exc_info.value.document_id == "ghost"

    def test_delete(self, mock_cursor):
        PostgresDocumentStore().delete("reports", "r1")

        sql_text, params = mock_cursor.execute.call_args[0]
        assert "DELETE FROM documents" in sql_text
        assert params == ("reports", "r1")


class TestBatch:
    def test_commit_runs_all_ops_on_one_cursor(self, mock_cursor):
        batch = PostgresDocumentStore().batch()
        batch.delete("users", "u1")
        batch.delete("reports", "r1")
        batch.set("reports", "r2", {"text": "kept"})
        batch.commit()

        assert mock_cursor.execute.call_count == 3
        assert mock_cursor.execute.call_args_list[0][0][1] == ("users", "u1")
        assert batch.ops == []

    @patch("fieldreports.db.documents.get_db_cursor")
    def test_empty_batch_does_not_connect(self, mock_get_cursor):
        PostgresDocumentStore().batch().commit()

        mock_get_cursor.assert_not_called()


def test_generated_ids_are_unique():
    assert len({generate_document_id() for _ in range(100)}) == 100
