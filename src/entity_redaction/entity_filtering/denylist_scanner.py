"""
Denylist Scanner — literal deny-term matching over the source text.

Produces synthetic entities independently of the detection service, so a
deny term is redacted even when the model missed it entirely.
"""
from typing import List, Tuple

from entity_redaction.config.constants import (
    DENYLIST_ENTITY_TYPE,
    DENYLIST_SCORE,
    DENYLIST_SOURCE,
)
from entity_redaction.models.entity import Entity
from entity_redaction.models.policy import TermSet


def _lowered_with_origins(source_text: str) -> Tuple[str, List[int]]:
    """
    Lowercase *source_text* and map each lowered index to its source index.

    ``str.lower()`` is not length-preserving ("İ" lowers to two code
    points), so offsets found in the lowered text are translated back
    through this map.
    """
    origins: List[int] = []
    for index, char in enumerate(source_text):
        origins.extend([index] * len(char.lower()))
    return source_text.lower(), origins


def find_denylist_entities(source_text: str, deny_terms: TermSet) -> List[Entity]:
    """
    Scan *source_text* case-insensitively for every deny term.

    Matches of the same term do not overlap (the cursor jumps to the end of
    each match); matches of different terms may overlap and are all kept.

    Args:
        source_text: Plain text submitted for redaction.
        deny_terms: Normalized (lowercase) deny terms.

    Returns:
        DENYLIST_TERM entities with offsets into *source_text*, grouped by
        term in TermSet order and by position within each term.
    """
    if not deny_terms or not isinstance(source_text, str):
        return []

    lower_text, origins = _lowered_with_origins(source_text)
    results: List[Entity] = []

    for term in deny_terms:
        if not term:
            continue

        pos = 0
        while pos <= len(lower_text):
            pos = lower_text.find(term, pos)
            if pos == -1:
                break

            end = pos + len(term)
            start = origins[pos]
            source_end = origins[end - 1] + 1
            results.append(
                Entity(
                    entity_type=DENYLIST_ENTITY_TYPE,
                    start=start,
                    end=source_end,
                    score=DENYLIST_SCORE,
                    source=DENYLIST_SOURCE,
                    text=source_text[start:source_end],
                )
            )

            pos = end

    return results
