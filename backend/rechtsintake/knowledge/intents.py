import re

from .base import PhraseLexicon

# "Yes, forward my case to a lawyer."
FORWARD_REQUEST = PhraseLexicon(
    positive=["ja", "anwalt", "anwältin", "weiterleiten", "weitergeben", "gerne"],
)

# User signals willingness to move on to the consent step.
CONSENT_INTENT = PhraseLexicon(
    positive=["zustimm", "einverstanden", "ok", "ja", "genehmig"],
)

CONSENT_GIVEN = PhraseLexicon(
    positive=["ja", "stimme zu", "einverstanden", "genehmigt", "speichern ja",
              "zustimmung"],
    negative=["nein", "nicht", "ablehne", "keine zustimmung"],
)

CONSENT_DENIED = PhraseLexicon(
    positive=["nein", "nicht speichern", "ablehne", "keine zustimmung",
              "nicht einverstanden"],
)

# Checked over the most recent user turns once the assistant has replied.
RECENT_CONSENT = PhraseLexicon(
    positive=[
        "ja, ich stimme zu", "ja ich stimme zu", "stimme zu", "einverstanden",
        "ja, dürfen sie", "ja dürfen sie", "ja, speichern", "ja speichern",
        "ja, weiterleiten", "ja weiterleiten", "ja, weitergeben",
        "ja weitergeben", "ich bin einverstanden", "ich stimme zu",
        "genehmigt", "zustimmung erteilt", "yes", "i agree", "i consent",
    ],
    negative=["nein", "nicht einverstanden", "keine zustimmung", "ablehne",
              "nicht speichern"],
)

RECENT_CONSENT_WINDOW = 3

PERSON_DATA_EMAIL = re.compile(r"@")
PERSON_DATA_NAME = re.compile(r"[A-ZÄÖÜ][a-zäöüß]+\s+[A-ZÄÖÜ][a-zäöüß]+")
