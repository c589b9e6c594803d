from __future__ import annotations

import logging
from dataclasses import dataclass

from ..knowledge.person import (
    COMPANY_INDICATORS,
    COMPANY_PATTERNS,
    EMAIL_PATTERN,
    EMAIL_PREFERENCE,
    LOCATION_PATTERNS,
    NAME_MAX_WORDS,
    NAME_PATTERNS,
    NAME_WORD,
    NON_LOCATIONS,
    NON_NAME_WORDS,
    PHONE_PATTERNS,
    PHONE_PREFERENCE,
    PHONE_SEPARATORS,
    POSTAL_CODE_PATTERN,
    PRIVATE_INDICATORS,
)
from .models import ConversationTurn, user_turns

logger = logging.getLogger(__name__)


@dataclass
class ExtractedPersonData:
    full_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    client_type: str | None = None
    company_name: str | None = None
    location: str | None = None
    preferred_contact_method: str | None = None


def extract_person_data(turns: list[ConversationTurn]) -> ExtractedPersonData:
    """Best-effort contact details from the user's own messages (documents excluded)."""
    text = "\n".join(t.text for t in user_turns(turns))

    data = ExtractedPersonData(
        email=_extract_email(text),
        phone_number=_extract_phone_number(text),
        full_name=_extract_name(text),
        client_type=_detect_client_type(text),
        location=_extract_location(text),
    )
    if data.client_type == "company":
        data.company_name = _extract_company_name(text)
    data.preferred_contact_method = _detect_contact_method(text, data)
    return data


def is_person_data_complete(data: ExtractedPersonData) -> bool:
    return bool(data.full_name and data.email)


def _extract_email(text: str) -> str | None:
    match = EMAIL_PATTERN.search(text)
    return match.group(0) if match else None


def _extract_phone_number(text: str) -> str | None:
    for pattern in PHONE_PATTERNS:
        match = pattern.search(text)
        if match:
            return PHONE_SEPARATORS.sub("", match.group(0))
    return None


def _capitalize_words(value: str) -> str:
    return " ".join(w[:1].upper() + w[1:].lower() for w in value.split())


def _extract_name(text: str) -> str | None:
    for pattern in NAME_PATTERNS:
        match = pattern.search(text)
        if match:
            return _capitalize_words(match.group(1).strip())

    # Fall back to the first short, purely alphabetic line.
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped or "@" in stripped or any(c.isdigit() for c in stripped):
            continue
        lowered = stripped.lower()
        if any(w == lowered or w in lowered for w in NON_NAME_WORDS):
            continue
        words = stripped.split()
        if 1 <= len(words) <= NAME_MAX_WORDS and all(NAME_WORD.match(w) for w in words):
            logger.debug("Name guess from free line: %s", stripped)
            return _capitalize_words(stripped)
    return None


def _detect_client_type(text: str) -> str:
    lowered = text.lower()
    if any(i in lowered for i in PRIVATE_INDICATORS):
        return "private"
    if any(i in lowered for i in COMPANY_INDICATORS):
        return "company"
    return "private"


def _extract_company_name(text: str) -> str | None:
    for pattern in COMPANY_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def _extract_location(text: str) -> str | None:
    for pattern in LOCATION_PATTERNS:
        match = pattern.search(text)
        if match and match.group(1).lower() not in NON_LOCATIONS:
            return match.group(1).strip()

    match = POSTAL_CODE_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return None


def _detect_contact_method(text: str, data: ExtractedPersonData) -> str | None:
    lowered = text.lower()
    if any(p in lowered for p in PHONE_PREFERENCE):
        return "phone"
    if any(p in lowered for p in EMAIL_PREFERENCE):
        return "email"
    if data.email and not data.phone_number:
        return "email"
    return None
