"""Field checks shared by the extractors and the record-creation endpoints."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping

URGENCY_LEVELS = ("low", "medium", "high")
CLIENT_TYPES = ("private", "company")
CONTACT_METHODS = ("email", "phone")

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_GERMAN_DATE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def is_valid_email(value: str | None) -> bool:
    return isinstance(value, str) and _EMAIL_RE.match(value) is not None


def _german_date(value: str) -> date | None:
    match = _GERMAN_DATE_RE.match(value)
    if not match:
        return None
    day, month, year = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _iso_date(value: str) -> date | None:
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def is_valid_date(value: str | None) -> bool:
    """ISO-8601 or a calendar-valid DD.MM.YYYY."""
    if not isinstance(value, str) or not value:
        return False
    return _iso_date(value) is not None or _german_date(value) is not None


def parse_german_date(value: str | None) -> str | None:
    """Return ``YYYY-MM-DD`` for a DD.MM.YYYY or ISO string, else None."""
    if not isinstance(value, str) or not value:
        return None
    if _GERMAN_DATE_RE.match(value):
        parsed = _german_date(value)
        return parsed.isoformat() if parsed else None
    parsed = _iso_date(value)
    return parsed.isoformat() if parsed else None


def is_valid_urgency_level(value: Any) -> bool:
    return value in URGENCY_LEVELS


def is_valid_client_type(value: Any) -> bool:
    return value in CLIENT_TYPES


def is_valid_contact_method(value: Any) -> bool:
    return value in CONTACT_METHODS


def _blank(value: Any, min_length: int = 2) -> bool:
    return not isinstance(value, str) or len(value.strip()) < min_length


def validate_person_data(data: Mapping[str, Any]) -> ValidationResult:
    """Collect every broken rule for a person payload."""
    result = ValidationResult()

    if _blank(data.get("full_name")):
        result.errors.append("Name muss mindestens 2 Zeichen haben")

    if not is_valid_email(data.get("email")):
        result.errors.append("Gültige E-Mail-Adresse erforderlich")

    client_type = data.get("client_type")
    if not is_valid_client_type(client_type):
        result.errors.append('Mandantentyp muss "private" oder "company" sein')

    if client_type == "company" and _blank(data.get("company_name")):
        result.errors.append("Firmenname erforderlich für Firmenmandanten")

    contact_method = data.get("preferred_contact_method")
    if contact_method and not is_valid_contact_method(contact_method):
        result.errors.append('Kontaktmethode muss "email" oder "phone" sein')

    if not isinstance(data.get("consent_share_with_lawyer"), bool):
        result.errors.append("Zustimmung zur Weitergabe an Anwalt erforderlich")

    return result


def validate_case_data(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()

    if not data.get("conversation_id"):
        result.errors.append("Conversation ID erforderlich")

    urgency = data.get("urgency_level")
    if urgency and not is_valid_urgency_level(urgency):
        result.errors.append('Dringlichkeit muss "low", "medium" oder "high" sein')

    deadline = data.get("deadline_date")
    if deadline and not is_valid_date(deadline):
        result.errors.append("Ungültiges Datumsformat")

    value = data.get("estimated_value")
    if value is not None:
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
        if not is_number or value < 0:
            result.errors.append("Streitwert muss eine positive Zahl sein")

    return result
