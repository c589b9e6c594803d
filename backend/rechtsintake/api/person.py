import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from ..db.store import IntakeStore, get_store
from ..engine.validators import validate_person_data
from ..schemas import PersonRequest, PersonResponse, PersonSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/person", tags=["person"])


@router.post("", response_model=PersonResponse)
def create_person(req: PersonRequest, store: IntakeStore = Depends(get_store)):
    if not req.conversation_id:
        raise HTTPException(status_code=400, detail="Conversation ID erforderlich")

    data = req.model_dump(exclude={"conversation_id"})
    validation = validate_person_data(data)
    if not validation.valid:
        raise HTTPException(
            status_code=400,
            detail={"error": "Validierungsfehler", "details": validation.errors},
        )
    if data["consent_share_with_lawyer"] is not True:
        raise HTTPException(
            status_code=400, detail="Einwilligung zur Weitergabe an Anwalt erforderlich"
        )

    if store.get_conversation(req.conversation_id) is None:
        raise HTTPException(status_code=404, detail="Conversation nicht gefunden")

    consent_to_contact = data["consent_to_contact"]
    person = store.save_person({
        "full_name": data["full_name"],
        "email": data["email"],
        "phone_number": data["phone_number"] or None,
        "client_type": data["client_type"],
        "company_name": data["company_name"] or None,
        "location": data["location"] or None,
        "preferred_contact_method": data["preferred_contact_method"] or "email",
        "consent_to_contact": True if consent_to_contact is None else bool(consent_to_contact),
        "consent_share_with_lawyer": True,
        "consent_timestamp": datetime.now(timezone.utc),
    })
    store.link_person_to_conversation(req.conversation_id, person["id"])
    logger.info(
        "Person created via API | conversation_id=%s | person_id=%s",
        req.conversation_id, person["id"],
    )

    return PersonResponse(
        person=PersonSummary(
            id=str(person["id"]),
            full_name=person["full_name"],
            email=person["email"],
            client_type=person["client_type"],
        )
    )
