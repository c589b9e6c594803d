import re

from .base import LegalArea, UrgencyTier

# Iteration order is the tie-break order for classification.
LEGAL_AREAS = [
    LegalArea(
        name="Mietrecht",
        keywords=["miete", "vermieter", "mieter", "wohnung", "mieterhöhung",
                  "kündigung", "mietvertrag", "kaution", "nebenkosten"],
    ),
    LegalArea(
        name="Arbeitsrecht",
        keywords=["arbeit", "chef", "kündigung", "arbeitsvertrag", "gehalt",
                  "lohn", "abmahnung", "arbeitgeber", "arbeitnehmer"],
    ),
    LegalArea(
        name="Familienrecht",
        keywords=["scheidung", "ehe", "unterhalt", "sorgerecht", "kind",
                  "trennung", "ehepartner"],
    ),
    LegalArea(
        name="Verkehrsrecht",
        keywords=["unfall", "auto", "fahrzeug", "verkehr", "schaden",
                  "versicherung", "polizei", "fahrrad"],
    ),
    LegalArea(
        name="Vertragsrecht",
        keywords=["vertrag", "vereinbarung", "kaufvertrag", "lieferung",
                  "zahlung", "forderung", "mahnung"],
    ),
    LegalArea(
        name="Strafrecht",
        keywords=["anzeige", "polizei", "straftat", "diebstahl", "betrug",
                  "staatsanwalt", "gericht"],
    ),
    LegalArea(
        name="Erbrecht",
        keywords=["erbe", "testament", "erbschaft", "nachlass", "pflichtteil",
                  "verstorben"],
    ),
    LegalArea(
        name="Sozialrecht",
        keywords=["rente", "krankenkasse", "arbeitslosengeld",
                  "sozialleistung", "behinderung"],
    ),
]

LEGAL_AREA_NAMES = [area.name for area in LEGAL_AREAS]

# Checked in this order; the first tier with a hit wins.
URGENCY_TIERS = [
    UrgencyTier(
        level="high",
        keywords=["dringend", "sofort", "eilig", "frist morgen", "übermorgen",
                  "diese woche", "heute"],
    ),
    UrgencyTier(
        level="medium",
        keywords=["bald", "zeitnah", "nächste woche", "nächsten monat"],
    ),
    UrgencyTier(
        level="low",
        keywords=["irgendwann", "keine eile", "wenn zeit ist"],
    ),
]

DEFAULT_URGENCY = "low"

# Matched against the lower-cased corpus; group 1 is the relationship noun or name.
OPPONENT_PATTERNS = [
    re.compile(r"mein(?:e)?\s+(vermieter|arbeitgeber|chef|bank|versicherung|nachbar)"),
    re.compile(r"die\s+(firma|gesellschaft|behörde|stadt|gemeinde)"),
    re.compile(r"gegen\s+(\w+)"),
]

CLAIMANT_MARKERS = ["ich", "mein", "mir"]
CLAIMANT_LABEL = "Mandant"

DATE_PATTERN = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{2,4})")

# Group 1 is the deadline date.
DEADLINE_PATTERNS = [
    re.compile(r"frist\s+(?:bis\s+)?(?:zum\s+)?(\d{1,2}\.\d{1,2}\.\d{2,4})"),
    re.compile(r"bis\s+(?:zum\s+)?(\d{1,2}\.\d{1,2}\.\d{2,4})\s+(?:muss|müssen)"),
    re.compile(r"(?:einspruch|widerspruch|antwort)\s+bis\s+(\d{1,2}\.\d{1,2}\.\d{2,4})"),
]

CRITICAL_DEADLINE_MARKERS = ["frist", "einspruch"]
