import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder

from ..db.store import IntakeStore, get_store
from ..engine.case_extractor import (
    create_case_summary,
    create_structured_description,
    extract_case_data,
)
from ..engine.case_filing import DEFAULT_CASE_TITLE
from ..engine.validators import parse_german_date, validate_case_data
from ..schemas import CaseRequest, CaseResponse, CaseSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/case", tags=["case"])


@router.post("", response_model=CaseResponse)
def create_case(req: CaseRequest, store: IntakeStore = Depends(get_store)):
    validation = validate_case_data(req.model_dump())
    if not validation.valid:
        raise HTTPException(
            status_code=400,
            detail={"error": "Validierungsfehler", "details": validation.errors},
        )

    conversation = store.get_conversation(req.conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation nicht gefunden")

    turns = store.get_messages(req.conversation_id)
    documents = store.get_documents(req.conversation_id)

    structured = req.description_structured
    raw = req.description_raw
    if not structured and turns:
        extraction = extract_case_data(turns, documents)
        structured = create_structured_description(extraction)
        if not raw:
            raw = create_case_summary(extraction.data)

    case = store.save_case({
        "conversation_id": req.conversation_id,
        "person_id": conversation.get("person_id"),
        "case_type_id": store.get_case_type_id_by_name(req.case_type_key),
        "title": req.title or DEFAULT_CASE_TITLE,
        "description_raw": raw or None,
        "description_structured": structured or None,
        "desired_outcome": req.desired_outcome or None,
        "estimated_value": req.estimated_value,
        "deadline_date": parse_german_date(req.deadline_date),
        "urgency_level": req.urgency_level or "medium",
        "ready_for_bidding": bool(req.ready_for_bidding),
        "status": "intake",
    })

    store.update_conversation_status(req.conversation_id, "case_created")
    if documents:
        store.link_documents_to_case(req.conversation_id, case["id"])
    logger.info(
        "Case created via API | conversation_id=%s | case_id=%s",
        req.conversation_id, case["id"],
    )

    return CaseResponse(
        case=CaseSummary(
            id=str(case["id"]),
            title=case["title"],
            case_type_id=case["case_type_id"],
            urgency_level=case["urgency_level"],
            status=case["status"],
        )
    )


@router.get("")
def get_case(
    id: Optional[str] = None,
    conversationId: Optional[str] = None,
    store: IntakeStore = Depends(get_store),
):
    if not id and not conversationId:
        raise HTTPException(status_code=400, detail="Case ID oder Conversation ID erforderlich")

    case = store.get_case(id) if id else store.get_case_by_conversation(conversationId)
    if case is None:
        raise HTTPException(status_code=404, detail="Fall nicht gefunden")
    return {"case": jsonable_encoder(case)}
