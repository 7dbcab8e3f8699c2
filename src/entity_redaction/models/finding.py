"""
Finding — one row of the review list shown next to redacted markup.
"""
from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class Finding:
    """An entity joined with the redaction service's item for the same span."""

    id: str
    entity_type: str            # display value, e.g. "PERSOON" for nl
    text: str                   # original text of the span
    start: int
    end: int
    confidence: Optional[float]
    anonymizer: str = ""        # operator applied by the redaction service
    replacement: str = ""       # replacement text produced by that operator
    recognizer: str = ""
    pattern_name: str = ""
    pattern: str = ""

    def to_dict(self) -> dict:
        return asdict(self)
