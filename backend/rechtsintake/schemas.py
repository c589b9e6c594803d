from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class StartConversationResponse(BaseModel):
    conversation_id: str
    message: str


class FileUpload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    file_url: Optional[str] = Field(default=None, alias="fileUrl")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    size_bytes: Optional[int] = Field(default=None, alias="sizeBytes")
    extracted_text: Optional[str] = Field(default=None, alias="extractedText")


class ChatMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: Optional[str] = Field(default=None, alias="conversationId")
    message: str = ""
    files: list[FileUpload] = []


class ChatMessageResponse(BaseModel):
    conversation_id: str
    message: str
    phase: int
    intake_complete: bool = False
    case_summary: Optional[str] = None
    case_id: Optional[str] = None


class IntakeStateResponse(BaseModel):
    conversation_id: str
    status: str
    phase: int
    confidence: float
    intake_complete: bool
    person_data_requested: bool
    consent_given: bool
    deadlines_asked: bool
    questions_asked: list[str]


# Loosely typed so the validators can report every broken rule in German.
class PersonRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: Optional[str] = Field(default=None, alias="conversationId")
    full_name: Any = None
    email: Any = None
    phone_number: Any = None
    client_type: Any = None
    company_name: Any = None
    location: Any = None
    preferred_contact_method: Any = None
    consent_to_contact: Any = None
    consent_share_with_lawyer: Any = None


class PersonSummary(BaseModel):
    id: str
    full_name: str
    email: str
    client_type: str


class PersonResponse(BaseModel):
    success: bool = True
    person: PersonSummary
    message: str = "Personendaten erfolgreich gespeichert"


class CaseRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: Optional[str] = Field(default=None, alias="conversationId")
    case_type_key: Optional[str] = Field(default=None, alias="caseTypeKey")
    title: Optional[str] = None
    description_raw: Optional[str] = Field(default=None, alias="descriptionRaw")
    description_structured: Optional[dict[str, Any]] = Field(
        default=None, alias="descriptionStructured"
    )
    desired_outcome: Optional[str] = Field(default=None, alias="desiredOutcome")
    estimated_value: Any = Field(default=None, alias="estimatedValue")
    deadline_date: Any = Field(default=None, alias="deadlineDate")
    urgency_level: Any = Field(default=None, alias="urgencyLevel")
    ready_for_bidding: Optional[bool] = Field(default=None, alias="readyForBidding")


class CaseSummary(BaseModel):
    id: str
    title: Optional[str] = None
    case_type_id: Optional[int] = None
    urgency_level: Optional[str] = None
    status: str


class CaseResponse(BaseModel):
    success: bool = True
    case: CaseSummary
    message: str = "Fall erfolgreich erstellt"
