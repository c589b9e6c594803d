from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from .case_extractor import (
    CaseExtractionResult,
    create_case_summary,
    create_structured_description,
    extract_case_data,
)
from .models import ConversationTurn, UploadedDocument
from .person_extractor import ExtractedPersonData
from .validators import parse_german_date

if TYPE_CHECKING:
    from ..db.store import IntakeStore

logger = logging.getLogger(__name__)

DEFAULT_CASE_TITLE = "Neuer Fall"


def file_case(
    store: "IntakeStore",
    conversation_id: str,
    turns: list[ConversationTurn],
    documents: list[UploadedDocument],
    person: ExtractedPersonData,
) -> dict:
    """Write the person and the case for a consented, completed intake."""
    person_row = store.save_person(build_person_record(person))
    store.link_person_to_conversation(conversation_id, person_row["id"])

    extraction = extract_case_data(turns, documents)
    case_type_id = store.get_case_type_id_by_name(extraction.data.legal_area)

    case_row = store.save_case(
        build_case_record(conversation_id, person_row["id"], extraction, case_type_id)
    )
    store.update_conversation_status(conversation_id, "case_created")
    if documents:
        store.link_documents_to_case(conversation_id, case_row["id"])

    logger.info(
        "Case filed | conversation_id=%s | person_id=%s | case_id=%s | legal_area=%s",
        conversation_id, person_row["id"], case_row["id"], extraction.data.legal_area,
    )
    return case_row


def build_person_record(person: ExtractedPersonData) -> dict[str, Any]:
    return {
        "full_name": person.full_name,
        "email": person.email,
        "phone_number": person.phone_number,
        "client_type": person.client_type or "private",
        "company_name": person.company_name,
        "location": person.location,
        "preferred_contact_method": person.preferred_contact_method or "email",
        "consent_to_contact": True,
        "consent_share_with_lawyer": True,
        "consent_timestamp": datetime.now(timezone.utc),
    }


def build_case_record(
    conversation_id: str,
    person_id: str | None,
    extraction: CaseExtractionResult,
    case_type_id: int | None,
) -> dict[str, Any]:
    data = extraction.data
    return {
        "conversation_id": conversation_id,
        "person_id": person_id,
        "case_type_id": case_type_id,
        "title": data.legal_area or DEFAULT_CASE_TITLE,
        "description_raw": create_case_summary(data),
        "description_structured": create_structured_description(extraction),
        "desired_outcome": data.goals,
        "urgency_level": data.urgency_level or "medium",
        "deadline_date": first_deadline(extraction),
        "status": "intake",
        "ready_for_bidding": False,
    }


def first_deadline(extraction: CaseExtractionResult) -> str | None:
    """ISO date of the first extracted deadline, if it is a valid DD.MM.YYYY."""
    if not extraction.data.deadlines:
        return None
    return parse_german_date(extraction.data.deadlines[0].date)
