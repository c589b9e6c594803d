from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable

from ..config import settings
from ..knowledge.intents import (
    CONSENT_DENIED,
    CONSENT_GIVEN,
    CONSENT_INTENT,
    FORWARD_REQUEST,
    PERSON_DATA_EMAIL,
    PERSON_DATA_NAME,
    RECENT_CONSENT,
    RECENT_CONSENT_WINDOW,
)
from . import prompts
from .case_extractor import CaseExtractionResult, ExtractedCaseData, create_case_summary, extract_case_data
from .models import ConversationTurn, UploadedDocument, assistant_turns, user_turns

logger = logging.getLogger(__name__)


class IntakePhase(IntEnum):
    FREE_TEXT = 1
    AUTOMATIC_EXTRACTION = 2
    TARGETED_QUESTIONS = 3
    DEADLINES_URGENCY = 4
    CASE_FILE_GENERATION = 5
    PERSON_DATA = 6
    CONSENT = 7


@dataclass
class IntakeState:
    phase: IntakePhase = IntakePhase.FREE_TEXT
    extracted_data: ExtractedCaseData = field(default_factory=ExtractedCaseData)
    confidence: float = 0.0
    intake_complete: bool = False
    person_data_requested: bool = False
    consent_given: bool = False
    deadlines_asked: bool = False
    questions_asked: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": int(self.phase),
            "extracted_data": self.extracted_data.to_dict(),
            "confidence": self.confidence,
            "intake_complete": self.intake_complete,
            "person_data_requested": self.person_data_requested,
            "consent_given": self.consent_given,
            "deadlines_asked": self.deadlines_asked,
            "questions_asked": list(self.questions_asked),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> "IntakeState":
        """Restore the persisted flags; extracted data is recomputed every turn."""
        if not raw:
            return cls()
        return cls(
            phase=IntakePhase(raw.get("phase", IntakePhase.FREE_TEXT)),
            confidence=raw.get("confidence", 0.0),
            intake_complete=raw.get("intake_complete", False),
            person_data_requested=raw.get("person_data_requested", False),
            consent_given=raw.get("consent_given", False),
            deadlines_asked=raw.get("deadlines_asked", False),
            questions_asked=list(raw.get("questions_asked", [])),
        )


@dataclass
class IntakeUpdate:
    state: IntakeState
    instruction: str | None = None
    suggested_response: str | None = None
    should_create_case: bool = False
    should_ask_for_person_data: bool = False
    should_ask_for_consent: bool = False


@dataclass
class _Turn:
    """Everything a transition may look at for one update."""
    extraction: CaseExtractionResult
    user_count: int
    assistant_count: int
    last_message: str  # as typed
    last_message_lower: str


# ----------------------------------------------------------------------
# Intent detection
# ----------------------------------------------------------------------

def detect_forward_request(text: str) -> bool:
    return FORWARD_REQUEST.matches(text)


def detect_consent_intent(text: str) -> bool:
    return CONSENT_INTENT.matches(text)


def detect_person_data_provided(text: str) -> bool:
    """Email-shaped or two capitalised words; expects the message as typed."""
    return bool(PERSON_DATA_EMAIL.search(text) or PERSON_DATA_NAME.search(text))


def detect_consent_given(text: str) -> bool:
    return CONSENT_GIVEN.matches(text) and not CONSENT_GIVEN.vetoed(text)


def detect_consent_denied(text: str) -> bool:
    return CONSENT_DENIED.matches(text)


def detect_recent_consent(turns: list[ConversationTurn]) -> bool:
    """Consent phrase in one of the last few user turns, negatives override."""
    for turn in user_turns(turns)[-RECENT_CONSENT_WINDOW:]:
        text = turn.text.lower()
        if RECENT_CONSENT.vetoed(text):
            continue
        if RECENT_CONSENT.matches(text):
            return True
    return False


# ----------------------------------------------------------------------
# State machine
# ----------------------------------------------------------------------

class IntakeEngine:
    """Advances an ``IntakeState`` by one phase step per conversation turn."""

    def __init__(
        self,
        confidence_threshold: float | None = None,
        min_messages_for_extraction: int | None = None,
        case_file_assistant_turns: int | None = None,
    ) -> None:
        self.confidence_threshold = (
            settings.confidence_threshold if confidence_threshold is None else confidence_threshold
        )
        self.min_messages_for_extraction = (
            settings.min_messages_for_extraction
            if min_messages_for_extraction is None else min_messages_for_extraction
        )
        self.case_file_assistant_turns = (
            settings.case_file_assistant_turns
            if case_file_assistant_turns is None else case_file_assistant_turns
        )
        self.transitions: dict[IntakePhase, Callable[[IntakeState, _Turn], IntakeUpdate]] = {
            IntakePhase.FREE_TEXT: self._free_text,
            IntakePhase.AUTOMATIC_EXTRACTION: self._automatic_extraction,
            IntakePhase.TARGETED_QUESTIONS: self._targeted_questions,
            IntakePhase.DEADLINES_URGENCY: self._deadlines_urgency,
            IntakePhase.CASE_FILE_GENERATION: self._case_file_generation,
            IntakePhase.PERSON_DATA: self._person_data,
            IntakePhase.CONSENT: self._consent,
        }

    def update(
        self,
        turns: list[ConversationTurn],
        documents: list[UploadedDocument],
        state: IntakeState | None = None,
    ) -> IntakeUpdate:
        state = state or IntakeState()
        users = user_turns(turns)
        last = users[-1].text if users else ""

        extraction = extract_case_data(turns, documents)
        state.extracted_data = extraction.data
        state.confidence = extraction.confidence.overall

        turn = _Turn(
            extraction=extraction,
            user_count=len(users),
            assistant_count=len(assistant_turns(turns)),
            last_message=last,
            last_message_lower=last.lower(),
        )

        previous = state.phase
        result = self.transitions[state.phase](state, turn)
        result.should_create_case = result.should_create_case or (
            state.intake_complete and state.consent_given
        )

        logger.info(
            "Intake update | phase=%s->%s | confidence=%.2f | complete=%s | consent=%s | create_case=%s",
            previous.name, state.phase.name, state.confidence,
            state.intake_complete, state.consent_given, result.should_create_case,
        )
        return result

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _free_text(self, state: IntakeState, turn: _Turn) -> IntakeUpdate:
        if turn.user_count >= self.min_messages_for_extraction:
            state.phase = IntakePhase.AUTOMATIC_EXTRACTION
        return IntakeUpdate(state=state, instruction=prompts.FREE_TEXT)

    def _automatic_extraction(self, state: IntakeState, turn: _Turn) -> IntakeUpdate:
        if turn.extraction.missing_fields:
            state.phase = IntakePhase.TARGETED_QUESTIONS
        else:
            state.phase = self._after_questions(state)
        return IntakeUpdate(state=state, instruction=prompts.extraction_prompt(turn.extraction))

    def _targeted_questions(self, state: IntakeState, turn: _Turn) -> IntakeUpdate:
        unseen = [
            q for q in turn.extraction.suggested_questions
            if q not in state.questions_asked
        ][:2]
        if unseen and turn.extraction.confidence.overall < self.confidence_threshold:
            state.questions_asked.extend(unseen)
            return IntakeUpdate(state=state, instruction=prompts.targeted_questions_prompt(unseen))

        state.phase = self._after_questions(state)
        return IntakeUpdate(state=state)

    def _deadlines_urgency(self, state: IntakeState, turn: _Turn) -> IntakeUpdate:
        if not state.deadlines_asked:
            state.deadlines_asked = True
            return IntakeUpdate(state=state, instruction=prompts.DEADLINES)

        state.phase = IntakePhase.CASE_FILE_GENERATION
        return IntakeUpdate(state=state)

    def _case_file_generation(self, state: IntakeState, turn: _Turn) -> IntakeUpdate:
        enough = (
            turn.extraction.confidence.overall >= self.confidence_threshold
            or turn.assistant_count >= self.case_file_assistant_turns
        )
        if not enough:
            state.phase = IntakePhase.TARGETED_QUESTIONS
            return IntakeUpdate(state=state)

        summary = create_case_summary(turn.extraction.data)
        state.intake_complete = True
        result = IntakeUpdate(
            state=state,
            instruction=prompts.case_file_prompt(summary),
            suggested_response=summary,
        )
        if detect_forward_request(turn.last_message_lower):
            state.phase = IntakePhase.PERSON_DATA
            result.should_ask_for_person_data = True
        else:
            result.instruction += prompts.forward_question_addendum()
        return result

    def _person_data(self, state: IntakeState, turn: _Turn) -> IntakeUpdate:
        state.person_data_requested = True

        if detect_consent_intent(turn.last_message_lower):
            state.phase = IntakePhase.CONSENT
            return IntakeUpdate(state=state, should_ask_for_consent=True)

        if detect_person_data_provided(turn.last_message):
            state.phase = IntakePhase.CONSENT
            return IntakeUpdate(state=state, instruction=prompts.CONSENT)

        return IntakeUpdate(state=state, instruction=prompts.PERSON_DATA)

    def _consent(self, state: IntakeState, turn: _Turn) -> IntakeUpdate:
        text = turn.last_message_lower
        if detect_consent_given(text):
            state.consent_given = True
            return IntakeUpdate(
                state=state,
                instruction=prompts.CONSENT_CONFIRMED,
                should_create_case=True,
            )
        if detect_consent_denied(text):
            state.consent_given = False
            return IntakeUpdate(state=state, instruction=prompts.CONSENT_DECLINED)

        return IntakeUpdate(state=state, instruction=prompts.CONSENT, should_ask_for_consent=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _after_questions(state: IntakeState) -> IntakePhase:
        if not state.deadlines_asked:
            return IntakePhase.DEADLINES_URGENCY
        return IntakePhase.CASE_FILE_GENERATION


engine = IntakeEngine()
