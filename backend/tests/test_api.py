import pytest
from fastapi.testclient import TestClient

from rechtsintake.api.chat import get_chat_handler
from rechtsintake.db.store import StoreError, get_store
from rechtsintake.engine import prompts
from rechtsintake.engine.chat_handler import ChatHandler
from rechtsintake.main import app

from .conftest import TENANCY_MESSAGE, FakeStore, fake_complete, fake_stream


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_chat_handler] = lambda: ChatHandler(
        store, complete=fake_complete, stream=fake_stream
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def conversation_id(store):
    conversation_id = store.create_conversation()["id"]
    store.save_message(conversation_id, "user", TENANCY_MESSAGE)
    return conversation_id


def person_payload(conversation_id, **overrides):
    payload = {
        "conversationId": conversation_id,
        "full_name": "Anna Schmidt",
        "email": "anna@example.de",
        "client_type": "private",
        "consent_share_with_lawyer": True,
    }
    payload.update(overrides)
    return payload


# ----------------------------------------------------------------------
# Chat
# ----------------------------------------------------------------------

def test_start_returns_greeting(client):
    response = client.post("/api/chat/start")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == prompts.GREETING
    assert body["conversation_id"]


def test_message_round_trip(client, store):
    conversation_id = client.post("/api/chat/start").json()["conversation_id"]
    response = client.post(
        "/api/chat/message",
        json={"conversationId": conversation_id, "message": TENANCY_MESSAGE},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["conversation_id"] == conversation_id
    assert body["message"] == "Vielen Dank für Ihre Nachricht."
    assert body["phase"] == 1
    assert body["case_id"] is None
    assert [t.role for t in store.get_messages(conversation_id)] == [
        "assistant", "user", "assistant"
    ]


def test_empty_message_is_rejected(client):
    response = client.post("/api/chat/message", json={"message": ""})
    assert response.status_code == 400


def test_stream_returns_text_and_conversation_header(client, store):
    response = client.post("/api/chat/stream", json={"message": "Hallo"})

    assert response.status_code == 200
    assert response.text == "Vielen Dank für Ihre Nachricht."
    conversation_id = response.headers["x-conversation-id"]
    assert store.get_messages(conversation_id)[-1].role == "assistant"


def test_state_endpoint(client):
    conversation_id = client.post("/api/chat/message", json={"message": "Hallo"}).json()[
        "conversation_id"
    ]
    response = client.get(f"/api/chat/{conversation_id}/state")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "open"
    assert body["phase"] == 1
    assert body["consent_given"] is False


def test_state_of_unknown_conversation(client):
    response = client.get("/api/chat/unbekannt/state")
    assert response.status_code == 404
    assert response.json()["detail"] == "Conversation nicht gefunden"


# ----------------------------------------------------------------------
# Person
# ----------------------------------------------------------------------

def test_person_requires_conversation_id(client):
    response = client.post("/api/person", json=person_payload(None))
    assert response.status_code == 400
    assert response.json()["detail"] == "Conversation ID erforderlich"


def test_person_validation_errors(client, conversation_id):
    response = client.post(
        "/api/person", json=person_payload(conversation_id, email="kaputt", full_name="A")
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "Validierungsfehler"
    assert detail["details"] == [
        "Name muss mindestens 2 Zeichen haben",
        "Gültige E-Mail-Adresse erforderlich",
    ]


def test_person_requires_consent(client, conversation_id):
    response = client.post(
        "/api/person", json=person_payload(conversation_id, consent_share_with_lawyer=False)
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Einwilligung zur Weitergabe an Anwalt erforderlich"


def test_person_unknown_conversation(client):
    response = client.post("/api/person", json=person_payload("unbekannt"))
    assert response.status_code == 404


def test_person_created_and_linked(client, store, conversation_id):
    response = client.post("/api/person", json=person_payload(conversation_id))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Personendaten erfolgreich gespeichert"
    assert body["person"]["full_name"] == "Anna Schmidt"
    assert store.get_conversation(conversation_id)["person_id"] == body["person"]["id"]
    assert store.persons[0]["preferred_contact_method"] == "email"
    assert store.persons[0]["consent_to_contact"] is True


# ----------------------------------------------------------------------
# Case
# ----------------------------------------------------------------------

def test_case_validation_errors(client):
    response = client.post("/api/case", json={"urgencyLevel": "sofort"})

    assert response.status_code == 400
    assert response.json()["detail"]["details"] == [
        "Conversation ID erforderlich",
        'Dringlichkeit muss "low", "medium" oder "high" sein',
    ]


def test_case_unknown_conversation(client):
    response = client.post("/api/case", json={"conversationId": "unbekannt"})
    assert response.status_code == 404


def test_case_created_from_transcript(client, store, conversation_id):
    store.save_document(conversation_id, "brief.pdf", extracted_text="Kündigung")
    response = client.post("/api/case", json={
        "conversationId": conversation_id,
        "caseTypeKey": "Mietrecht",
        "deadlineDate": "15.03.2024",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Fall erfolgreich erstellt"
    assert body["case"]["title"] == "Neuer Fall"
    assert body["case"]["case_type_id"] == 1
    assert body["case"]["urgency_level"] == "medium"
    assert body["case"]["status"] == "intake"

    [case] = store.cases
    assert case["deadline_date"] == "2024-03-15"
    assert case["description_structured"]["rechtsgebiet"] == "Mietrecht"
    assert case["description_raw"].startswith("**Rechtsgebiet:** Mietrecht")
    assert store.get_conversation(conversation_id)["status"] == "case_created"
    assert store.documents[conversation_id][0]["linked_case_id"] == case["id"]


def test_case_keeps_zero_estimated_value(client, store, conversation_id):
    response = client.post(
        "/api/case", json={"conversationId": conversation_id, "estimatedValue": 0}
    )

    assert response.status_code == 200
    assert store.cases[0]["estimated_value"] == 0


def test_get_case_requires_an_identifier(client):
    assert client.get("/api/case").status_code == 400


def test_get_case_not_found(client):
    response = client.get("/api/case", params={"id": "unbekannt"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Fall nicht gefunden"


def test_get_case_by_conversation(client, conversation_id):
    created = client.post("/api/case", json={"conversationId": conversation_id}).json()
    response = client.get("/api/case", params={"conversationId": conversation_id})

    assert response.status_code == 200
    assert response.json()["case"]["id"] == created["case"]["id"]


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

class BrokenStore(FakeStore):
    def get_conversation(self, conversation_id):
        raise StoreError("connection refused")


def test_store_errors_map_to_500(client):
    app.dependency_overrides[get_store] = BrokenStore
    response = client.post("/api/case", json={"conversationId": "c1"})

    assert response.status_code == 500
    assert response.json() == {"error": "Interner Serverfehler"}
