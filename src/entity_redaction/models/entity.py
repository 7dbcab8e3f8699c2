"""
Entity model for detected and synthesized findings (analyzer / denylist).

Records arriving from the detection service are untrusted: they are coerced
once at the boundary by ``Entity.from_raw`` and every later stage works on
validated, immutable records.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Optional

import numpy as np
from jsonschema import Draft7Validator

from entity_redaction.config.constants import DEFAULT_ENTITY_SOURCE, DENYLIST_SOURCE
from entity_redaction.config.schemas import RAW_ENTITY_SCHEMA

_RAW_ENTITY_VALIDATOR = Draft7Validator(RAW_ENTITY_SCHEMA)

# Keys modelled as fields; everything else is carried in Entity.extra.
_MODELLED_KEYS = frozenset(
    {"entity_type", "start", "end", "score", "recognizer_result", "text", "found_text"}
)


def parse_score(value: Any) -> Optional[float]:
    """
    Parse a confidence score from a number or numeric string.

    Returns None when the value is absent, non-numeric or non-finite.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        score = float(value)
    elif isinstance(value, str):
        try:
            score = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return score if np.isfinite(score) else None


@dataclass(frozen=True)
class Entity:
    """A single finding with provenance."""

    entity_type: str
    start: int
    end: int
    score: Optional[float] = None
    source: str = DEFAULT_ENTITY_SOURCE     # "analyzer" | "denylist" | recognizer name
    text: Optional[str] = None              # literal span, set on synthetic records
    found_text: Optional[str] = None        # source_text[start:end], attached lazily
    extra: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_raw(cls, record: Any) -> Optional["Entity"]:
        """
        Coerce an analyzer result record into an Entity.

        Malformed records (not an object, missing integral offsets, a
        non-string entity_type, or ``start >= end``) return None so callers
        can drop them without failing the whole request.
        """
        if isinstance(record, Entity):
            return record
        if not _RAW_ENTITY_VALIDATOR.is_valid(record):
            return None

        start = int(record["start"])
        end = int(record["end"])
        if start >= end:
            return None

        source = record.get("recognizer_result")
        text = record.get("text")
        return cls(
            entity_type=record.get("entity_type", ""),
            start=start,
            end=end,
            score=parse_score(record.get("score")),
            source=source if isinstance(source, str) and source else DEFAULT_ENTITY_SOURCE,
            text=text if isinstance(text, str) else None,
            extra={k: v for k, v in record.items() if k not in _MODELLED_KEYS},
        )

    @property
    def dedup_key(self) -> str:
        """Identity of a finding across sources: offsets plus type."""
        return f"{self.start}-{self.end}-{self.entity_type}"

    @property
    def is_synthetic(self) -> bool:
        return self.source == DENYLIST_SOURCE

    def with_found_text(self, source_text: str) -> "Entity":
        """Return a copy carrying ``found_text = source_text[start:end]``."""
        return replace(self, found_text=source_text[self.start : self.end])

    def to_dict(self) -> dict:
        """Presidio-shaped record, as forwarded to the redaction service."""
        data = dict(self.extra)
        data.update(
            {
                "entity_type": self.entity_type,
                "start": self.start,
                "end": self.end,
                "score": self.score,
            }
        )
        if self.source != DEFAULT_ENTITY_SOURCE:
            data["recognizer_result"] = self.source
        if self.text is not None:
            data["text"] = self.text
        return data

    def __repr__(self) -> str:
        return f"Entity({self.entity_type}, [{self.start},{self.end}], score={self.score}, {self.source})"
