"""
Term & Policy Normalization — turns loosely-typed request fields into a
PolicySettings.

Two parsing modes:
    - list-term mode   (allow/deny lists): split on newline/comma, NFC,
      trim, lowercase
    - entity-type mode (type selection):   split on whitespace/comma,
      trim, uppercase, dedup
"""
import logging
import unicodedata
from typing import Any, FrozenSet, List, Optional

import numpy as np

from entity_redaction.config.constants import ENTITY_TYPE_SPLIT_PATTERN, TERM_SPLIT_PATTERN
from entity_redaction.config.settings import DEFAULT_ACCEPTANCE_THRESHOLD
from entity_redaction.models.entity import parse_score
from entity_redaction.models.policy import PolicySettings, TermSet

logger = logging.getLogger(__name__)


def normalize_term(value: Any) -> str:
    """NFC-normalize, trim and lowercase a term. Non-strings normalize to ''."""
    if not isinstance(value, str):
        return ""
    return unicodedata.normalize("NFC", value).strip().lower()


def parse_list_input(value: Any) -> List[str]:
    """
    Split free-form allow/deny input into normalized terms.

    Accepts a single string or a list of strings; non-string list entries
    are ignored and blank terms dropped. Anything else yields [].
    """
    if not value:
        return []

    if isinstance(value, str):
        pieces = TERM_SPLIT_PATTERN.split(value)
    elif isinstance(value, (list, tuple)):
        pieces = [
            piece
            for entry in value
            if isinstance(entry, str)
            for piece in TERM_SPLIT_PATTERN.split(entry)
        ]
    else:
        return []

    return [term for term in (normalize_term(p) for p in pieces) if term]


def build_term_set(value: Any) -> TermSet:
    return TermSet.of(parse_list_input(value))


def parse_entity_types(value: Any) -> List[str]:
    """
    Parse requested entity-type codes.

    Returns uppercase codes in first-seen order without duplicates.
    """
    values = value if isinstance(value, (list, tuple)) else [value]

    collected: List[str] = []
    for entry in values:
        if not isinstance(entry, str):
            continue
        for part in ENTITY_TYPE_SPLIT_PATTERN.split(entry):
            code = part.strip().upper()
            if code:
                collected.append(code)

    return list(dict.fromkeys(collected))


def build_entity_type_filter(value: Any) -> Optional[FrozenSet[str]]:
    """Requested types as a set, or None when nothing was requested."""
    requested = parse_entity_types(value)
    return frozenset(requested) if requested else None


def normalize_threshold(value: Any, default: float = DEFAULT_ACCEPTANCE_THRESHOLD) -> float:
    """
    Parse a threshold from a number or numeric string.

    Non-numeric values fall back to *default*; out-of-range values are
    clamped to [0.0, 1.0].
    """
    parsed = parse_score(value)
    if parsed is None:
        if value is not None:
            logger.debug("Non-numeric threshold %r, using default %.2f", value, default)
        return float(default)
    return float(np.clip(parsed, 0.0, 1.0))


def build_policy_settings(
    entity_types: Any = None,
    threshold: Any = None,
    allowlist: Any = None,
    denylist: Any = None,
) -> PolicySettings:
    """
    Normalize raw request fields into a PolicySettings.

    Args:
        entity_types: List or whitespace/comma separated string of type codes.
        threshold: Number or numeric string; defaulted and clamped.
        allowlist: String or list of strings (newline/comma separated).
        denylist: String or list of strings (newline/comma separated).

    Returns:
        Immutable PolicySettings.
    """
    return PolicySettings(
        entity_types=build_entity_type_filter(entity_types),
        threshold=normalize_threshold(threshold),
        allow_terms=build_term_set(allowlist),
        deny_terms=build_term_set(denylist),
    )
