from dataclasses import dataclass, field


@dataclass
class LegalArea:
    name: str  # closed label set, e.g. "Mietrecht"
    keywords: list[str]  # lower-cased, matched by substring containment


@dataclass
class UrgencyTier:
    level: str  # "high", "medium", "low"
    keywords: list[str]


@dataclass
class PhraseLexicon:
    positive: list[str]
    negative: list[str] = field(default_factory=list)

    def matches(self, text: str) -> bool:
        return any(p in text for p in self.positive)

    def vetoed(self, text: str) -> bool:
        return any(p in text for p in self.negative)
