"""
Entity Merger — combines analyzer findings with denylist findings.

Deduplication rule: one entity per ``start-end-entity_type`` key, first seen
wins. Primary (analyzer) entities are inserted before supplemental
(denylist) ones, so on an exact key collision the analyzer record is kept.
"""
from typing import Any, Iterable, List, Set

from entity_redaction.models.entity import Entity


def merge_entities(
    primary: Iterable[Any],
    supplemental: Iterable[Any],
) -> List[Entity]:
    """
    Concatenate two entity streams without duplicates.

    Args:
        primary: Filtered analyzer entities.
        supplemental: Synthetic entities (e.g. denylist hits).
            Raw dict records are coerced; malformed ones are dropped.

    Returns:
        Primary entities in their original order, followed by supplemental
        entities whose key was not already seen.
    """
    seen: Set[str] = set()
    merged: List[Entity] = []

    for stream in (primary, supplemental):
        for candidate in stream:
            entity = Entity.from_raw(candidate)
            if entity is None or entity.start >= entity.end:
                continue

            key = entity.dedup_key
            if key in seen:
                continue

            seen.add(key)
            merged.append(entity)

    return merged
