from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ConversationTurn:
    role: str  # "user" or "assistant"
    text: str
    timestamp: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class UploadedDocument:
    id: str
    file_name: str | None = None
    extracted_text: str | None = None
    mime_type: str | None = None


def user_turns(turns: list[ConversationTurn]) -> list[ConversationTurn]:
    return [t for t in turns if t.role == "user"]


def assistant_turns(turns: list[ConversationTurn]) -> list[ConversationTurn]:
    return [t for t in turns if t.role == "assistant"]
