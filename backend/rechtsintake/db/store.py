"""
PostgreSQL-backed persistence for conversations, documents, persons and cases.

Every public method opens its own connection, commits on success and
raises ``StoreError`` on any database failure. Callers decide how to
surface it; nothing here retries.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Iterator

import psycopg2
import psycopg2.extras

from ..config import settings
from ..engine.models import ConversationTurn, UploadedDocument

logger = logging.getLogger(__name__)

PERSON_COLUMNS = (
    "full_name", "email", "phone_number", "client_type", "company_name",
    "location", "preferred_contact_method", "consent_to_contact",
    "consent_share_with_lawyer", "consent_timestamp",
)

CASE_COLUMNS = (
    "conversation_id", "person_id", "case_type_id", "title", "description_raw",
    "description_structured", "desired_outcome", "estimated_value",
    "deadline_date", "urgency_level", "ready_for_bidding", "status",
)


class StoreError(Exception):
    """Raised when the database rejects or fails an operation."""


class IntakeStore:
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    @contextmanager
    def _cursor(self) -> Iterator[psycopg2.extras.RealDictCursor]:
        try:
            conn = psycopg2.connect(self.database_url)
        except psycopg2.Error as e:
            logger.error("Database connect failed | error=%s", e)
            raise StoreError("Database unavailable") from e
        try:
            with conn:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                    yield cur
        except psycopg2.Error as e:
            logger.error("Database operation failed | error=%s", e)
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    def create_conversation(self, conversation_id: str | None = None) -> dict:
        conversation_id = conversation_id or str(uuid.uuid4())
        with self._cursor() as cur:
            cur.execute(
                "INSERT INTO conversations (id, status) VALUES (%s, 'open') RETURNING *",
                (conversation_id,),
            )
            row = cur.fetchone()
        logger.info("Conversation created | conversation_id=%s", conversation_id)
        return dict(row)

    def get_conversation(self, conversation_id: str) -> dict | None:
        with self._cursor() as cur:
            cur.execute("SELECT * FROM conversations WHERE id = %s", (conversation_id,))
            row = cur.fetchone()
        return dict(row) if row else None

    def update_conversation_status(self, conversation_id: str, status: str) -> None:
        with self._cursor() as cur:
            cur.execute(
                "UPDATE conversations SET status = %s, updated_at = now() WHERE id = %s",
                (status, conversation_id),
            )

    def save_intake_state(self, conversation_id: str, state: dict[str, Any]) -> None:
        with self._cursor() as cur:
            cur.execute(
                "UPDATE conversations SET intake_state = %s, updated_at = now() WHERE id = %s",
                (psycopg2.extras.Json(state), conversation_id),
            )

    def link_person_to_conversation(self, conversation_id: str, person_id: str) -> None:
        with self._cursor() as cur:
            cur.execute(
                "UPDATE conversations SET person_id = %s, updated_at = now() WHERE id = %s",
                (person_id, conversation_id),
            )

    # ------------------------------------------------------------------
    # Messages and documents
    # ------------------------------------------------------------------

    def get_messages(self, conversation_id: str) -> list[ConversationTurn]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT role, content, created_at FROM messages
                WHERE conversation_id = %s
                ORDER BY created_at, id
                """,
                (conversation_id,),
            )
            rows = cur.fetchall()
        return [
            ConversationTurn(role=r["role"], text=r["content"], timestamp=r["created_at"])
            for r in rows
        ]

    def save_message(self, conversation_id: str, role: str, text: str) -> ConversationTurn:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO messages (conversation_id, role, content)
                VALUES (%s, %s, %s) RETURNING role, content, created_at
                """,
                (conversation_id, role, text),
            )
            row = cur.fetchone()
        return ConversationTurn(role=row["role"], text=row["content"], timestamp=row["created_at"])

    def get_documents(self, conversation_id: str) -> list[UploadedDocument]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT id, file_name, extracted_text, mime_type FROM documents
                WHERE conversation_id = %s
                ORDER BY created_at
                """,
                (conversation_id,),
            )
            rows = cur.fetchall()
        return [_document(r) for r in rows]

    def save_document(
        self,
        conversation_id: str,
        file_name: str,
        file_url: str | None = None,
        mime_type: str | None = None,
        size_bytes: int | None = None,
        extracted_text: str | None = None,
    ) -> UploadedDocument:
        meta = {"status": "done" if extracted_text else "pending"}
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO documents
                    (conversation_id, uploaded_by, file_name, file_url, mime_type,
                     size_bytes, extracted_text, text_extraction_meta)
                VALUES (%s, 'user', %s, %s, %s, %s, %s, %s)
                RETURNING id, file_name, extracted_text, mime_type
                """,
                (conversation_id, file_name, file_url, mime_type, size_bytes,
                 extracted_text, psycopg2.extras.Json(meta)),
            )
            row = cur.fetchone()
        return _document(row)

    def link_documents_to_case(self, conversation_id: str, case_id: str) -> None:
        with self._cursor() as cur:
            cur.execute(
                "UPDATE documents SET linked_case_id = %s WHERE conversation_id = %s",
                (case_id, conversation_id),
            )

    # ------------------------------------------------------------------
    # Persons and cases
    # ------------------------------------------------------------------

    def get_case_type_id_by_name(self, name: str | None) -> int | None:
        if not name:
            return None
        with self._cursor() as cur:
            cur.execute(
                "SELECT id FROM case_types WHERE name ILIKE %s ORDER BY id LIMIT 1",
                (f"%{name}%",),
            )
            row = cur.fetchone()
        return row["id"] if row else None

    def save_person(self, person: dict[str, Any]) -> dict:
        row = self._insert("persons", PERSON_COLUMNS, person)
        logger.info("Person saved | person_id=%s", row["id"])
        return row

    def save_case(self, case: dict[str, Any]) -> dict:
        case = dict(case)
        if case.get("description_structured") is not None:
            case["description_structured"] = psycopg2.extras.Json(case["description_structured"])
        row = self._insert("cases", CASE_COLUMNS, case)
        logger.info(
            "Case saved | case_id=%s | conversation_id=%s",
            row["id"], row.get("conversation_id"),
        )
        return row

    def get_case(self, case_id: str) -> dict | None:
        with self._cursor() as cur:
            cur.execute("SELECT * FROM cases WHERE id::text = %s", (case_id,))
            row = cur.fetchone()
        return dict(row) if row else None

    def get_case_by_conversation(self, conversation_id: str) -> dict | None:
        with self._cursor() as cur:
            cur.execute(
                "SELECT * FROM cases WHERE conversation_id = %s ORDER BY created_at LIMIT 1",
                (conversation_id,),
            )
            row = cur.fetchone()
        return dict(row) if row else None

    def _insert(self, table: str, allowed: tuple[str, ...], values: dict[str, Any]) -> dict:
        columns = [c for c in allowed if c in values]
        placeholders = ", ".join(f"%({c})s" for c in columns)
        with self._cursor() as cur:
            cur.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders}) RETURNING *",
                {c: values[c] for c in columns},
            )
            row = cur.fetchone()
        return dict(row)


def _document(row: dict) -> UploadedDocument:
    return UploadedDocument(
        id=str(row["id"]),
        file_name=row["file_name"],
        extracted_text=row["extracted_text"],
        mime_type=row["mime_type"],
    )


@lru_cache
def get_store() -> IntakeStore:
    return IntakeStore(settings.database_url)
