"""Schemaless document collections stored in PostgreSQL.

Documents live in a single `documents` table keyed by (collection, id) with
their body in a `jsonb` column. Queries support equality filters on top-level
fields and ordering by one field; writes can be grouped into an atomic batch.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Mapping, Protocol

from psycopg import sql
from psycopg.types.json import Jsonb

from .connection import get_db_cursor

logger = logging.getLogger(__name__)

Direction = Literal["asc", "desc"]
OrderBy = tuple[str, Direction]


class DocumentNotFoundError(Exception):
    """Raised when updating a document that does not exist."""

    def __init__(self, collection: str, document_id: str):
        super().__init__(f"No document '{document_id}' in collection '{collection}'")
        self.collection = collection
        self.document_id = document_id


@dataclass
class Document:
    """A stored document: its id within the collection and its body."""

    id: str
    data: dict[str, Any]


@dataclass
class WriteOp:
    kind: Literal["set", "delete"]
    collection: str
    document_id: str
    data: dict[str, Any] | None = None


@dataclass
class WriteBatch:
    """Collects set/delete operations and applies them all-or-nothing."""

    committer: Callable[[list[WriteOp]], None]
    ops: list[WriteOp] = field(default_factory=list)

    def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> "WriteBatch":
        self.ops.append(WriteOp("set", collection, document_id, dict(data)))
        return self

    def delete(self, collection: str, document_id: str) -> "WriteBatch":
        self.ops.append(WriteOp("delete", collection, document_id))
        return self

    def commit(self) -> None:
        self.committer(self.ops)
        self.ops = []


class DocumentStore(Protocol):
    """Collection-scoped document persistence."""

    def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        order_by: OrderBy | None = None,
    ) -> list[Document]: ...

    def get(self, collection: str, document_id: str) -> Document | None: ...

    def add(self, collection: str, data: Mapping[str, Any]) -> str: ...

    def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> None: ...

    def update(
        self, collection: str, document_id: str, partial: Mapping[str, Any]
    ) -> None: ...

    def delete(self, collection: str, document_id: str) -> None: ...

    def batch(self) -> WriteBatch: ...


def generate_document_id() -> str:
    """Generate a fresh, random document id."""
    return uuid.uuid4().hex


class PostgresDocumentStore:
    """DocumentStore backed by the `documents` table."""

    def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        order_by: OrderBy | None = None,
    ) -> list[Document]:
        """Get all documents of a collection matching every equality filter.

        Filters use jsonb containment, so values are compared with their JSON
        types (a boolean filter never matches the string "true").
        """
        conditions = [sql.SQL("collection = %s")]
        params: list[Any] = [collection]
        if filters:
            conditions.append(sql.SQL("data @> %s"))
            params.append(Jsonb(dict(filters)))

        order_clause = sql.SQL("ORDER BY id")
        if order_by is not None:
            field_name, direction = order_by
            order_clause = sql.SQL("ORDER BY data ->> {field} {direction}, id").format(
                field=sql.Literal(field_name),
                direction=sql.SQL("DESC" if direction == "desc" else "ASC"),
            )

        query = sql.SQL("""
            SELECT id, data
            FROM documents
            WHERE {where_clause}
            {order_clause}
        """).format(
            where_clause=sql.SQL(" AND ").join(conditions),
            order_clause=order_clause,
        )
        with get_db_cursor() as cursor:
            cursor.execute(query, params)
            rows = cursor.fetchall()
            return [_row_to_document(row) for row in rows]

    def get(self, collection: str, document_id: str) -> Document | None:
        with get_db_cursor() as cursor:
            cursor.execute(
                """
                SELECT id, data
                FROM documents
                WHERE collection = %s AND id = %s
                """,
                (collection, document_id),
            )
            row = cursor.fetchone()
            return _row_to_document(row) if row else None

    def add(self, collection: str, data: Mapping[str, Any]) -> str:
        """Insert a new document and return its generated id."""
        document_id = generate_document_id()
        with get_db_cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO documents (collection, id, data)
                VALUES (%s, %s, %s)
                """,
                (collection, document_id, Jsonb(dict(data))),
            )
        logger.debug(f"Added document {collection}/{document_id}")
        return document_id

    def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> None:
        """Create or fully replace a document."""
        with get_db_cursor() as cursor:
            _execute_set(cursor, collection, document_id, data)

    def update(
        self, collection: str, document_id: str, partial: Mapping[str, Any]
    ) -> None:
        """Merge top-level fields into an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        with get_db_cursor() as cursor:
            cursor.execute(
                """
                UPDATE documents
                SET data = data || %s, updated_at = NOW()
                WHERE collection = %s AND id = %s
                """,
                (Jsonb(dict(partial)), collection, document_id),
            )
            if cursor.rowcount == 0:
                raise DocumentNotFoundError(collection, document_id)

    def delete(self, collection: str, document_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        with get_db_cursor() as cursor:
            _execute_delete(cursor, collection, document_id)

    def batch(self) -> WriteBatch:
        return WriteBatch(committer=self._commit)

    def _commit(self, ops: list[WriteOp]) -> None:
        if not ops:
            return
        with get_db_cursor() as cursor:
            for op in ops:
                if op.kind == "set":
                    _execute_set(cursor, op.collection, op.document_id, op.data or {})
                else:
                    _execute_delete(cursor, op.collection, op.document_id)
        logger.info(f"Committed batch of {len(ops)} document writes")


def _execute_set(cursor, collection: str, document_id: str, data: Mapping[str, Any]) -> None:
    cursor.execute(
        """
        INSERT INTO documents (collection, id, data)
        VALUES (%s, %s, %s)
        ON CONFLICT (collection, id)
        DO UPDATE SET data = EXCLUDED.data, updated_at = NOW()
        """,
        (collection, document_id, Jsonb(dict(data))),
    )


def _execute_delete(cursor, collection: str, document_id: str) -> None:
    cursor.execute(
        "DELETE FROM documents WHERE collection = %s AND id = %s",
        (collection, document_id),
    )


def _row_to_document(row) -> Document:
    """Convert a database row to a Document."""
    id, data = row
    return Document(id=id, data=dict(data))
