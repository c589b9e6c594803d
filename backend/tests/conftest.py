import uuid
from typing import Any

import pytest

from rechtsintake.engine.models import ConversationTurn, UploadedDocument
from rechtsintake.knowledge import LEGAL_AREA_NAMES

TENANCY_MESSAGE = (
    "Mein Vermieter hat mir gekündigt, die Kündigung kam am 01.03.2024, "
    "Frist bis 15.03.2024"
)


def user(text: str) -> ConversationTurn:
    return ConversationTurn(role="user", text=text)


def assistant(text: str) -> ConversationTurn:
    return ConversationTurn(role="assistant", text=text)


class FakeStore:
    """In-memory stand-in for IntakeStore with the same method surface."""

    def __init__(self) -> None:
        self.conversations: dict[str, dict] = {}
        self.messages: dict[str, list[ConversationTurn]] = {}
        self.documents: dict[str, list[dict]] = {}
        self.persons: list[dict] = []
        self.cases: list[dict] = []

    def create_conversation(self, conversation_id: str | None = None) -> dict:
        conversation_id = conversation_id or str(uuid.uuid4())
        row = {"id": conversation_id, "status": "open", "person_id": None, "intake_state": None}
        self.conversations[conversation_id] = row
        self.messages[conversation_id] = []
        self.documents[conversation_id] = []
        return dict(row)

    def get_conversation(self, conversation_id: str) -> dict | None:
        row = self.conversations.get(conversation_id)
        return dict(row) if row else None

    def update_conversation_status(self, conversation_id: str, status: str) -> None:
        self.conversations[conversation_id]["status"] = status

    def save_intake_state(self, conversation_id: str, state: dict[str, Any]) -> None:
        self.conversations[conversation_id]["intake_state"] = state

    def link_person_to_conversation(self, conversation_id: str, person_id: str) -> None:
        self.conversations[conversation_id]["person_id"] = person_id

    def get_messages(self, conversation_id: str) -> list[ConversationTurn]:
        return list(self.messages.get(conversation_id, []))

    def save_message(self, conversation_id: str, role: str, text: str) -> ConversationTurn:
        turn = ConversationTurn(role=role, text=text)
        self.messages[conversation_id].append(turn)
        return turn

    def get_documents(self, conversation_id: str) -> list[UploadedDocument]:
        return [
            UploadedDocument(
                id=d["id"],
                file_name=d["file_name"],
                extracted_text=d["extracted_text"],
                mime_type=d["mime_type"],
            )
            for d in self.documents.get(conversation_id, [])
        ]

    def save_document(
        self,
        conversation_id: str,
        file_name: str,
        file_url: str | None = None,
        mime_type: str | None = None,
        size_bytes: int | None = None,
        extracted_text: str | None = None,
    ) -> UploadedDocument:
        row = {
            "id": str(uuid.uuid4()),
            "file_name": file_name,
            "file_url": file_url,
            "mime_type": mime_type,
            "size_bytes": size_bytes,
            "extracted_text": extracted_text,
            "linked_case_id": None,
        }
        self.documents[conversation_id].append(row)
        return self.get_documents(conversation_id)[-1]

    def link_documents_to_case(self, conversation_id: str, case_id: str) -> None:
        for row in self.documents.get(conversation_id, []):
            row["linked_case_id"] = case_id

    def get_case_type_id_by_name(self, name: str | None) -> int | None:
        if not name:
            return None
        for index, area in enumerate(LEGAL_AREA_NAMES, start=1):
            if name.lower() in area.lower():
                return index
        return None

    def save_person(self, person: dict[str, Any]) -> dict:
        row = {"id": str(uuid.uuid4()), **person}
        self.persons.append(row)
        return dict(row)

    def save_case(self, case: dict[str, Any]) -> dict:
        row = {"id": str(uuid.uuid4()), **case}
        self.cases.append(row)
        return dict(row)

    def get_case(self, case_id: str) -> dict | None:
        return next((dict(c) for c in self.cases if c["id"] == case_id), None)

    def get_case_by_conversation(self, conversation_id: str) -> dict | None:
        return next(
            (dict(c) for c in self.cases if c["conversation_id"] == conversation_id), None
        )


async def fake_complete(system_prompt: str, messages: list[dict]) -> str:
    return "Vielen Dank für Ihre Nachricht."


async def fake_stream(system_prompt: str, messages: list[dict]):
    for chunk in ("Vielen ", "Dank ", "für Ihre Nachricht."):
        yield chunk


@pytest.fixture
def store():
    return FakeStore()
