import re

_LETTERS = "A-Za-zÄÖÜäöüß"

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

# +49 / 0049 first, then national numbers with a leading 0.
PHONE_PATTERNS = [
    re.compile(r"(?:\+49|0049)[\s.-]?\d{2,4}[\s.-]?\d{3,8}[\s.-]?\d{0,6}"),
    re.compile(r"0\d{2,4}[\s./-]?\d{3,8}[\s./-]?\d{0,6}"),
]
PHONE_SEPARATORS = re.compile(r"[\s./-]")

# Explicit self-identification, then a signature line.
NAME_PATTERNS = [
    re.compile(
        rf"(?:mein name ist|ich heiße|name:|name\s+ist)\s*([{_LETTERS}]+(?:[ \t]+[{_LETTERS}]+)*)",
        re.IGNORECASE,
    ),
    re.compile(
        rf"(?:mit freundlichen grüßen|grüße|viele grüße)[,\s]*([{_LETTERS}]+(?:[ \t]+[{_LETTERS}]+)+)",
        re.IGNORECASE,
    ),
]
NAME_WORD = re.compile(rf"^[{_LETTERS}]+$")
NAME_MAX_WORDS = 4

NON_NAME_WORDS = [
    "yes", "no", "ja", "nein", "ok", "okay", "private", "privat", "company",
    "firma", "email", "phone", "telefon", "hallo", "hello", "hi", "danke",
    "thanks", "bitte", "mit freundlichen", "viele grüße", "beste grüße",
    "mfg", "lg",
]

PRIVATE_INDICATORS = ["privat", "privatperson", "persönlich", "als privatperson"]

COMPANY_INDICATORS = [
    "firma", "unternehmen", "gmbh", "ag", "ohg", "kg", "ug", "geschäftsführer",
    "geschäftlich", "betrieb", "gesellschaft", "konzern", "holding", "gbr",
    "e.v.", "verein",
]

COMPANY_PATTERNS = [
    re.compile(
        r"(?:firma|unternehmen|company)[\s:]+([A-ZÄÖÜ][^\n,]+(?:gmbh|ag|ohg|kg|ug|gbr|e\.v\.)?)",
        re.IGNORECASE,
    ),
    re.compile(r"([A-ZÄÖÜ][^\n,]+(?:GmbH|AG|OHG|KG|UG|GbR|e\.V\.))"),
]

# The keyword is case-insensitive, the place name must be capitalised.
LOCATION_PATTERNS = [
    re.compile(
        r"\b(?i:aus|in|wohne in|komme aus|standort:?)\s+([A-ZÄÖÜ][a-zäöüß]+(?:\s+[a-zäöüß]+)?)"
    ),
    re.compile(r"\b(?i:stadt|ort)[:\s]+([A-ZÄÖÜ][a-zäöüß]+)"),
]
NON_LOCATIONS = ["deutschland", "österreich", "schweiz", "europa"]
POSTAL_CODE_PATTERN = re.compile(r"\b\d{5}\s+([A-ZÄÖÜ][a-zäöüß]+(?:\s+[a-zäöüß]+)?)")

EMAIL_PREFERENCE = [
    "per email", "per e-mail", "via email", "email bevorzugt",
    "schreiben sie mir", "mail",
]

PHONE_PREFERENCE = [
    "per telefon", "telefonisch", "anrufen", "rufen sie mich an",
    "telefon bevorzugt", "anruf",
]
