from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from ..db.store import IntakeStore, get_store
from ..engine.chat_handler import ChatHandler
from ..schemas import (
    ChatMessageRequest,
    ChatMessageResponse,
    IntakeStateResponse,
    StartConversationResponse,
)

router = APIRouter(prefix="/api/chat", tags=["chat"])


def get_chat_handler(store: IntakeStore = Depends(get_store)) -> ChatHandler:
    return ChatHandler(store)


@router.post("/start", response_model=StartConversationResponse)
async def start_conversation(handler: ChatHandler = Depends(get_chat_handler)):
    conversation_id, greeting = await run_in_threadpool(handler.start_conversation)
    return StartConversationResponse(conversation_id=conversation_id, message=greeting)


@router.post("/message", response_model=ChatMessageResponse)
async def send_message(
    req: ChatMessageRequest,
    handler: ChatHandler = Depends(get_chat_handler),
):
    if not req.message and not req.files:
        raise HTTPException(status_code=400, detail="Nachricht oder Dokument erforderlich")

    result = await handler.reply(req.conversation_id, req.message, req.files)
    return ChatMessageResponse(
        conversation_id=result.conversation_id,
        message=result.message,
        phase=int(result.state.phase),
        intake_complete=result.state.intake_complete,
        case_summary=result.case_summary,
        case_id=result.case_id,
    )


@router.post("/stream")
async def stream_message(
    req: ChatMessageRequest,
    handler: ChatHandler = Depends(get_chat_handler),
):
    if not req.message and not req.files:
        raise HTTPException(status_code=400, detail="Nachricht oder Dokument erforderlich")

    prepared = await run_in_threadpool(
        handler.prepare_turn, req.conversation_id, req.message, req.files
    )
    return StreamingResponse(
        handler.stream_reply(prepared),
        media_type="text/plain; charset=utf-8",
        headers={"X-Conversation-Id": prepared.conversation_id},
    )


@router.get("/{conversation_id}/state", response_model=IntakeStateResponse)
async def get_intake_state(
    conversation_id: str,
    handler: ChatHandler = Depends(get_chat_handler),
):
    found = await run_in_threadpool(handler.get_state, conversation_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Conversation nicht gefunden")

    conversation, state = found
    return IntakeStateResponse(
        conversation_id=conversation_id,
        status=conversation["status"],
        phase=int(state.phase),
        confidence=state.confidence,
        intake_complete=state.intake_complete,
        person_data_requested=state.person_data_requested,
        consent_given=state.consent_given,
        deadlines_asked=state.deadlines_asked,
        questions_asked=state.questions_asked,
    )
