"""
Per-turn orchestration of the intake chat.

A turn is split in two halves around the completion call:

* ``prepare_turn`` records the user message and any uploads, advances the
  intake state machine by one step and composes the system instruction.
* ``finish_turn`` runs once the assistant reply is complete. It stores the
  reply, persists the intake state and, when the user has consented and
  left a name and an email, files the person and the case.

Nothing is committed for the assistant side until the reply is complete, so
a failed completion or an aborted stream leaves no partial records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncIterator, Awaitable, Callable

from starlette.concurrency import run_in_threadpool

from . import llm, prompts
from .case_filing import file_case
from .intake_engine import (
    IntakeEngine,
    IntakePhase,
    IntakeState,
    IntakeUpdate,
    detect_recent_consent,
    engine,
)
from .models import ConversationTurn, UploadedDocument
from .person_extractor import extract_person_data, is_person_data_complete

if TYPE_CHECKING:
    from ..db.store import IntakeStore
    from ..schemas import FileUpload

logger = logging.getLogger(__name__)

Completion = Callable[[str, list[dict]], Awaitable[str]]
StreamCompletion = Callable[[str, list[dict]], AsyncIterator[str]]


@dataclass
class PreparedTurn:
    conversation_id: str
    system_prompt: str
    history: list[dict]
    update: IntakeUpdate
    documents: list[UploadedDocument]
    previous_phase: IntakePhase


@dataclass
class TurnResult:
    conversation_id: str
    message: str
    state: IntakeState
    case_summary: str | None = None
    case_id: str | None = None


class ChatHandler:
    def __init__(
        self,
        store: "IntakeStore",
        intake: IntakeEngine | None = None,
        complete: Completion = llm.chat_text,
        stream: StreamCompletion = llm.stream_text,
    ) -> None:
        self.store = store
        self.intake = intake or engine
        self.complete = complete
        self.stream = stream

    def start_conversation(self) -> tuple[str, str]:
        conversation = self.store.create_conversation()
        self.store.save_message(conversation["id"], "assistant", prompts.GREETING)
        return conversation["id"], prompts.GREETING

    def get_state(self, conversation_id: str) -> tuple[dict, IntakeState] | None:
        conversation = self.store.get_conversation(conversation_id)
        if conversation is None:
            return None
        return conversation, IntakeState.from_dict(conversation.get("intake_state"))

    # ------------------------------------------------------------------
    # Turn halves
    # ------------------------------------------------------------------

    def prepare_turn(
        self,
        conversation_id: str | None,
        message: str,
        files: list["FileUpload"] | None = None,
    ) -> PreparedTurn:
        conversation = self.store.get_conversation(conversation_id) if conversation_id else None
        if conversation is None:
            conversation = self.store.create_conversation(conversation_id)
        conversation_id = conversation["id"]

        if message:
            self.store.save_message(conversation_id, "user", message)
        for upload in files or []:
            self.store.save_document(
                conversation_id,
                file_name=upload.file_name,
                file_url=upload.file_url,
                mime_type=upload.mime_type,
                size_bytes=upload.size_bytes,
                extracted_text=upload.extracted_text,
            )
            self.store.save_message(
                conversation_id, "user", f"[Dokument hochgeladen: {upload.file_name}]"
            )

        turns = self.store.get_messages(conversation_id)
        documents = self.store.get_documents(conversation_id)
        state = IntakeState.from_dict(conversation.get("intake_state"))
        previous_phase = state.phase
        update = self.intake.update(turns, documents, state)

        system_prompt = (
            prompts.SYSTEM_PROMPT
            + "\n\n"
            + prompts.intake_status_prompt(update.state)
            + prompts.document_context(documents)
        )
        if update.instruction:
            system_prompt += "\n\n" + update.instruction

        logger.info(
            "Turn prepared | conversation_id=%s | phase=%s | confidence=%.2f | documents=%d",
            conversation_id, update.state.phase.name, update.state.confidence, len(documents),
        )
        return PreparedTurn(
            conversation_id=conversation_id,
            system_prompt=system_prompt,
            history=_history(turns),
            update=update,
            documents=documents,
            previous_phase=previous_phase,
        )

    def finish_turn(self, prepared: PreparedTurn, text: str) -> TurnResult:
        conversation_id = prepared.conversation_id
        state = prepared.update.state

        self.store.save_message(conversation_id, "assistant", text)
        self.store.save_intake_state(conversation_id, state.to_dict())

        turns = self.store.get_messages(conversation_id)
        result = TurnResult(
            conversation_id=conversation_id,
            message=text,
            state=state,
            case_summary=prepared.update.suggested_response,
        )

        conversation = self.store.get_conversation(conversation_id) or {}
        if conversation.get("status") == "case_created":
            logger.info("Case already filed | conversation_id=%s", conversation_id)
            return result

        # only once the consent question has been put to the user
        consent = (
            detect_recent_consent(turns)
            if prepared.previous_phase == IntakePhase.CONSENT
            else False
        )
        wants_case = consent or prepared.update.should_create_case
        person = extract_person_data(turns)
        complete = is_person_data_complete(person)
        logger.info(
            "Filing check | conversation_id=%s | recent_consent=%s | create_case=%s | person_complete=%s",
            conversation_id, consent, prepared.update.should_create_case, complete,
        )

        if wants_case and complete:
            state.consent_given = True
            self.store.save_intake_state(conversation_id, state.to_dict())
            case_row = file_case(self.store, conversation_id, turns, prepared.documents, person)
            result.case_id = str(case_row["id"])
        elif state.intake_complete and conversation.get("status") == "open":
            self.store.update_conversation_status(conversation_id, "intake_complete")
            logger.info("Intake complete | conversation_id=%s", conversation_id)

        return result

    # ------------------------------------------------------------------
    # Full turns
    # ------------------------------------------------------------------

    async def reply(
        self,
        conversation_id: str | None,
        message: str,
        files: list["FileUpload"] | None = None,
    ) -> TurnResult:
        prepared = await run_in_threadpool(self.prepare_turn, conversation_id, message, files)
        text = await self.complete(prepared.system_prompt, prepared.history)
        return await run_in_threadpool(self.finish_turn, prepared, text)

    async def stream_reply(self, prepared: PreparedTurn) -> AsyncIterator[str]:
        """Yield the reply chunk by chunk; the turn is finished after the last one."""
        chunks: list[str] = []
        async for chunk in self.stream(prepared.system_prompt, prepared.history):
            chunks.append(chunk)
            yield chunk
        await run_in_threadpool(self.finish_turn, prepared, "".join(chunks))


def _history(turns: list[ConversationTurn]) -> list[dict]:
    return [{"role": t.role, "content": t.text} for t in turns]
