"""
Entity Filters — type, threshold and allow/deny term policy.

Each filter takes validated Entity records and returns a new list; input
records are never mutated. Order of application is fixed by the pipeline:
    1. Entity type
    2. Confidence threshold
    3. Term policy (deny > allow > default include)
"""
from typing import FrozenSet, List, Optional

from entity_redaction.entity_filtering.terms import normalize_term
from entity_redaction.models.entity import Entity
from entity_redaction.models.policy import TermSet


def filter_by_entity_type(
    entities: List[Entity],
    requested_types: Optional[FrozenSet[str]],
) -> List[Entity]:
    """
    Keep entities whose type is in *requested_types*.

    None or an empty set means no restriction.
    """
    if not requested_types:
        return list(entities)

    return [
        e for e in entities
        if isinstance(e.entity_type, str)
        and e.entity_type.strip().upper() in requested_types
    ]


def filter_by_threshold(entities: List[Entity], threshold: float) -> List[Entity]:
    """
    Keep entities scoring at or above *threshold*.

    Entities without a usable score always pass: a missing confidence
    signal is never grounds for dropping a finding.
    """
    return [e for e in entities if e.score is None or e.score >= threshold]


def should_include_entity(
    entity: Entity,
    source_text: str,
    allow_terms: TermSet,
    deny_terms: TermSet,
) -> bool:
    """
    Decide inclusion of one entity from its literal text.

    Whitespace-only spans are dropped. A term present in both lists
    resolves to deny.
    """
    candidate = normalize_term(source_text[entity.start : entity.end])

    if not candidate:
        return False

    if candidate in deny_terms:
        return True

    if candidate in allow_terms:
        return False

    return True


def filter_by_term_policy(
    entities: List[Entity],
    source_text: str,
    allow_terms: TermSet,
    deny_terms: TermSet,
) -> List[Entity]:
    """
    Apply allow/deny term policy.

    Returns:
        Surviving entities, each carrying ``found_text``.
    """
    return [
        e.with_found_text(source_text)
        for e in entities
        if should_include_entity(e, source_text, allow_terms, deny_terms)
    ]
