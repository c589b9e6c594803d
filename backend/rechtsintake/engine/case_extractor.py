"""
Heuristic case-data extraction.

Turns the user side of a transcript plus the extracted text of uploaded
documents into an ``ExtractedCaseData`` record, per-field confidence and
the clarifying questions that would fill the gaps. Every call recomputes
the whole record from scratch; nothing here keeps state between turns.

Usage::

    result = extract_case_data(turns, documents)
    summary = create_case_summary(result.data)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..config import settings
from ..knowledge.legal_areas import (
    CLAIMANT_LABEL,
    CLAIMANT_MARKERS,
    CRITICAL_DEADLINE_MARKERS,
    DATE_PATTERN,
    DEADLINE_PATTERNS,
    DEFAULT_URGENCY,
    LEGAL_AREAS,
    OPPONENT_PATTERNS,
    URGENCY_TIERS,
)
from .models import ConversationTurn, UploadedDocument, user_turns

logger = logging.getLogger(__name__)

MIN_LEGAL_AREA_HITS = 2
PROBLEM_STATEMENT_MIN_CHARS = 50
PROBLEM_STATEMENT_MAX_CHARS = 500
DOCUMENT_PREVIEW_CHARS = 200
MAX_SUGGESTED_QUESTIONS = 2

CONFIDENCE_LEGAL_AREA = 0.8
CONFIDENCE_PARTIES_BOTH = 0.7
CONFIDENCE_PARTIES_PARTIAL = 0.3
CONFIDENCE_TIMELINE = 0.6
CONFIDENCE_PROBLEM_STATEMENT = 0.7
CONFIDENCE_DEADLINES = 0.8

QUESTION_LEGAL_AREA = "Um welche Art von Rechtsproblem handelt es sich?"
QUESTION_PARTIES = "Wer sind die beteiligten Parteien (Sie und die Gegenseite)?"
QUESTION_TIMELINE = "Können Sie den zeitlichen Ablauf der Ereignisse beschreiben?"
QUESTION_DEADLINES = "Gibt es eine Frist oder ein wichtiges Datum?"

URGENCY_LABELS = {"low": "Niedrig", "medium": "Mittel", "high": "Hoch"}

LEGAL_ADVICE_DISCLAIMER = (
    "Hinweis: Dies ist keine Rechtsberatung. Für rechtliche Schritte wenden "
    "Sie sich bitte an einen zugelassenen Anwalt."
)


@dataclass
class Parties:
    claimant: str | None = None
    defendant: str | None = None
    others: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return bool(self.claimant and self.defendant)


@dataclass
class TimelineEntry:
    event: str
    date: str | None = None
    document_ref: str | None = None


@dataclass
class DocumentSummary:
    id: str
    name: str
    description: str | None = None


@dataclass
class DisputeValue:
    amount: float | None = None
    currency: str | None = None
    estimated: bool | None = None


@dataclass
class Deadline:
    date: str
    description: str
    critical: bool = False


@dataclass
class ExtractedCaseData:
    legal_area: str | None = None
    parties: Parties = field(default_factory=Parties)
    contract_type: str | None = None
    timeline: list[TimelineEntry] = field(default_factory=list)
    problem_statement: str | None = None
    documents: list[DocumentSummary] = field(default_factory=list)
    dispute_value: DisputeValue | None = None
    goals: str | None = None
    urgency_level: str = DEFAULT_URGENCY
    deadlines: list[Deadline] = field(default_factory=list)
    summary: str | None = None

    def present_fields(self) -> list[str]:
        names = []
        for name in ("legal_area", "contract_type", "problem_statement", "goals",
                     "dispute_value", "summary", "urgency_level"):
            if getattr(self, name) is not None:
                names.append(name)
        if self.parties.claimant or self.parties.defendant:
            names.append("parties")
        for name in ("timeline", "documents", "deadlines"):
            if getattr(self, name):
                names.append(name)
        return names

    def to_dict(self) -> dict[str, Any]:
        """Stored form, keyed the way the case records have always been keyed."""
        out: dict[str, Any] = {}
        if self.legal_area:
            out["rechtsgebiet"] = self.legal_area
        parteien: dict[str, Any] = {}
        if self.parties.claimant:
            parteien["klaeger"] = self.parties.claimant
        if self.parties.defendant:
            parteien["beklagter"] = self.parties.defendant
        if self.parties.others:
            parteien["weitere"] = list(self.parties.others)
        out["parteien"] = parteien
        if self.contract_type:
            out["vertragsart"] = self.contract_type
        out["timeline"] = [
            _compact({"datum": t.date, "ereignis": t.event, "dokumentId": t.document_ref})
            for t in self.timeline
        ]
        if self.problem_statement:
            out["problemdefinition"] = self.problem_statement
        if self.documents:
            out["dokumente"] = [
                _compact({"id": d.id, "name": d.name, "beschreibung": d.description})
                for d in self.documents
            ]
        if self.dispute_value:
            out["streitwert"] = _compact({
                "betrag": self.dispute_value.amount,
                "waehrung": self.dispute_value.currency,
                "schaetzung": self.dispute_value.estimated,
            })
        if self.goals:
            out["ziele"] = self.goals
        out["dringlichkeit"] = self.urgency_level
        out["deadlines"] = [
            {"datum": d.date, "beschreibung": d.description, "kritisch": d.critical}
            for d in self.deadlines
        ]
        if self.summary:
            out["zusammenfassung"] = self.summary
        return out


@dataclass
class ExtractionConfidence:
    legal_area: float = 0.0
    parties: float = 0.0
    timeline: float = 0.0
    problem_statement: float = 0.0
    deadlines: float = 0.0

    @property
    def overall(self) -> float:
        values = [self.legal_area, self.parties, self.timeline,
                  self.problem_statement, self.deadlines]
        return sum(values) / len(values)

    def to_dict(self) -> dict[str, float]:
        return {
            "overall": self.overall,
            "rechtsgebiet": self.legal_area,
            "parteien": self.parties,
            "timeline": self.timeline,
            "problemdefinition": self.problem_statement,
            "deadlines": self.deadlines,
        }


@dataclass
class CaseExtractionResult:
    data: ExtractedCaseData
    confidence: ExtractionConfidence
    missing_fields: list[str] = field(default_factory=list)
    suggested_questions: list[str] = field(default_factory=list)


def _compact(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


# ---------------------------------------------------------------------------
# Public interface
# ---------------------------------------------------------------------------

def extract_case_data(
    turns: list[ConversationTurn],
    documents: list[UploadedDocument],
    max_document_chars: int | None = None,
) -> CaseExtractionResult:
    if max_document_chars is None:
        max_document_chars = settings.max_document_chars

    users = user_turns(turns)
    corpus = "\n".join(
        [t.text for t in users]
        + [(d.extracted_text or "")[:max_document_chars] for d in documents]
    ).lower()

    data = ExtractedCaseData()
    confidence = ExtractionConfidence()
    missing: list[str] = []
    questions: list[str] = []

    data.legal_area = _detect_legal_area(corpus)
    if data.legal_area:
        confidence.legal_area = CONFIDENCE_LEGAL_AREA
    else:
        missing.append("Rechtsgebiet")
        questions.append(QUESTION_LEGAL_AREA)

    data.parties = _extract_parties(corpus)
    if data.parties.complete:
        confidence.parties = CONFIDENCE_PARTIES_BOTH
    else:
        confidence.parties = CONFIDENCE_PARTIES_PARTIAL
        missing.append("Parteien")
        questions.append(QUESTION_PARTIES)

    data.timeline = _extract_timeline(users, documents)
    if data.timeline:
        confidence.timeline = CONFIDENCE_TIMELINE
    else:
        missing.append("Timeline")
        questions.append(QUESTION_TIMELINE)

    data.problem_statement = _extract_problem_statement(users)
    if data.problem_statement:
        confidence.problem_statement = CONFIDENCE_PROBLEM_STATEMENT
    else:
        missing.append("Problemdefinition")

    data.urgency_level = _detect_urgency(corpus)

    data.deadlines = _extract_deadlines(corpus)
    if data.deadlines:
        confidence.deadlines = CONFIDENCE_DEADLINES
    else:
        missing.append("Fristen")
        questions.append(QUESTION_DEADLINES)

    data.documents = [
        DocumentSummary(
            id=d.id,
            name=d.file_name or "Unbekanntes Dokument",
            description=d.extracted_text[:DOCUMENT_PREVIEW_CHARS] if d.extracted_text else None,
        )
        for d in documents
    ]

    logger.debug(
        "Case extraction | legal_area=%s | overall=%.2f | missing=%s",
        data.legal_area, confidence.overall, missing,
    )

    return CaseExtractionResult(
        data=data,
        confidence=confidence,
        missing_fields=missing,
        suggested_questions=questions[:MAX_SUGGESTED_QUESTIONS],
    )


def create_structured_description(result: CaseExtractionResult) -> dict[str, Any]:
    return {
        **result.data.to_dict(),
        "extractionConfidence": result.confidence.to_dict(),
        "extractedAt": datetime.now(timezone.utc).isoformat(),
    }


def create_case_summary(data: ExtractedCaseData) -> str:
    """Markdown summary in German, fixed section order, disclaimer last."""
    parts: list[str] = []

    if data.legal_area:
        parts.append(f"**Rechtsgebiet:** {data.legal_area}")

    parties = []
    if data.parties.claimant:
        parties.append(f"Mandant: {data.parties.claimant}")
    if data.parties.defendant:
        parties.append(f"Gegenseite: {data.parties.defendant}")
    if parties:
        parts.append(f"**Parteien:** {', '.join(parties)}")

    if data.problem_statement:
        parts.append(f"**Sachverhalt:** {data.problem_statement}")

    if data.timeline:
        lines = "\n".join(
            f"- {t.date or 'Ohne Datum'}: {t.event}" for t in data.timeline
        )
        parts.append(f"**Chronologie:**\n{lines}")

    if data.deadlines:
        lines = "\n".join(
            f"- {d.date}: {d.description}{' ⚠️' if d.critical else ''}"
            for d in data.deadlines
        )
        parts.append(f"**Fristen:**\n{lines}")

    if data.documents:
        lines = "\n".join(f"- {d.name}" for d in data.documents)
        parts.append(f"**Dokumente:**\n{lines}")

    if data.urgency_level:
        parts.append(f"**Dringlichkeit:** {URGENCY_LABELS[data.urgency_level]}")

    parts.append(LEGAL_ADVICE_DISCLAIMER)
    return "\n\n".join(parts)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _detect_legal_area(corpus: str) -> str | None:
    best_score = 0
    best_area = None
    for area in LEGAL_AREAS:
        score = sum(1 for kw in area.keywords if kw in corpus)
        # strict ">" keeps the first area that reached the maximum
        if score > best_score:
            best_score = score
            best_area = area.name
    return best_area if best_score >= MIN_LEGAL_AREA_HITS else None


def _extract_parties(corpus: str) -> Parties:
    parties = Parties()
    if any(marker in corpus for marker in CLAIMANT_MARKERS):
        parties.claimant = CLAIMANT_LABEL

    for pattern in OPPONENT_PATTERNS:
        match = pattern.search(corpus)
        if match:
            token = match.group(1)
            parties.defendant = token[:1].upper() + token[1:]
            break
    return parties


def _extract_timeline(
    users: list[ConversationTurn], documents: list[UploadedDocument]
) -> list[TimelineEntry]:
    timeline: list[TimelineEntry] = []

    for turn in users:
        text = turn.text
        for match in DATE_PATTERN.finditer(text):
            start = match.start()
            context = text[max(0, start - 50):start + 100]
            timeline.append(TimelineEntry(date=match.group(0), event=context.strip()))

    for doc in documents:
        if not doc.extracted_text:
            continue
        match = DATE_PATTERN.search(doc.extracted_text)
        if match:
            timeline.append(TimelineEntry(
                date=match.group(0),
                event=f'Datum aus Dokument "{doc.file_name}"',
                document_ref=doc.id,
            ))

    return timeline


def _extract_problem_statement(users: list[ConversationTurn]) -> str | None:
    if not users:
        return None
    first = users[0].text
    if len(first) > PROBLEM_STATEMENT_MIN_CHARS:
        return first[:PROBLEM_STATEMENT_MAX_CHARS]
    combined = " ".join(t.text for t in users[:3])[:PROBLEM_STATEMENT_MAX_CHARS]
    return combined or None


def _detect_urgency(corpus: str) -> str:
    for tier in URGENCY_TIERS:
        if any(kw in corpus for kw in tier.keywords):
            return tier.level
    return DEFAULT_URGENCY


def _extract_deadlines(corpus: str) -> list[Deadline]:
    # corpus-wide flag, not scoped to the individual match
    critical = any(marker in corpus for marker in CRITICAL_DEADLINE_MARKERS)
    deadlines: list[Deadline] = []
    for pattern in DEADLINE_PATTERNS:
        for match in pattern.finditer(corpus):
            context = corpus[max(0, match.start() - 30):match.end() + 30]
            deadlines.append(Deadline(
                date=match.group(1),
                description=context.strip(),
                critical=critical,
            ))
    return deadlines
