"""
Findings & Toggles — the review list and per-finding on/off re-rendering.

Toggling a finding off never touches the redaction service: the original
markup is re-annotated with the remaining active entities.
"""
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

import numpy as np

from entity_redaction.models.entity import Entity
from entity_redaction.models.finding import Finding
from entity_redaction.postprocessing.annotator import (
    DisplayNames,
    apply_anonymization_to_markup,
    resolve_display_entity_type,
)


def format_confidence(value: Any) -> str:
    """Render a [0, 1] score as a percentage with one decimal, e.g. '93.5%'."""
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        return "--"
    if not np.isfinite(value):  # NaN / inf
        return "--"
    percent = math.floor(value * 1000 + 0.5) / 10
    return f"{percent:g}%"


def build_entity_id(entity: Any, index: int) -> str:
    """Stable id of the entity at *index* in a result's entity list."""
    if isinstance(entity, Entity):
        entity_type, start = entity.entity_type, entity.start
    elif isinstance(entity, Mapping):
        entity_type = entity.get("entity_type") or ""
        start = entity.get("start")
        if isinstance(start, bool) or not isinstance(start, int):
            start = None
    else:
        entity_type, start = "", None
    return f"{entity_type}-{start if start is not None else index}-{index}"


def _items_by_key(items: Any) -> Dict[str, dict]:
    indexed: Dict[str, dict] = {}
    if not isinstance(items, list):
        return indexed
    for item in items:
        if not isinstance(item, Mapping):
            continue
        start, end = item.get("start"), item.get("end")
        if isinstance(start, int) and isinstance(end, int):
            indexed[f"{start}-{end}-{item.get('entity_type') or ''}"] = dict(item)
    return indexed


def _explanation(entity: Entity) -> dict:
    explanation = entity.extra.get("analysis_explanation")
    if isinstance(explanation, Mapping):
        return dict(explanation)
    explanation = entity.extra.get("explanation")
    return dict(explanation) if isinstance(explanation, Mapping) else {}


def build_findings(
    entities: Iterable[Any],
    items: Any,
    source_text: str,
    display_names: DisplayNames = None,
) -> List[Finding]:
    """
    Join entities with the redaction service's items.

    Args:
        entities: Final entity list sent to the redaction service.
        items: ``items`` from the service response (operator per span).
        source_text: Text the entity offsets refer to.
        display_names: Mapping or callable from entity type to label.

    Returns:
        One Finding per well-formed entity, ids matching build_entity_id.
    """
    item_map = _items_by_key(items)
    findings: List[Finding] = []

    for index, candidate in enumerate(entities):
        entity = Entity.from_raw(candidate)
        if entity is None:
            continue

        explanation = _explanation(entity)
        recognizer = (
            explanation.get("recognizer")
            or explanation.get("recognizer_name")
            or entity.extra.get("recognizer")
            or entity.extra.get("recognizer_name")
            or (entity.source if entity.is_synthetic else "")
        )
        item = item_map.get(entity.dedup_key, {})

        findings.append(
            Finding(
                id=build_entity_id(entity, index),
                entity_type=resolve_display_entity_type(entity.entity_type, display_names),
                text=source_text[entity.start : entity.end] if isinstance(source_text, str) else "",
                start=entity.start,
                end=entity.end,
                confidence=entity.score,
                anonymizer=item.get("operator") or item.get("anonymizer") or "",
                replacement=item.get("text") or "",
                recognizer=recognizer,
                pattern_name=explanation.get("pattern_name") or "",
                pattern=explanation.get("pattern") or "",
            )
        )

    return findings


def select_active_entities(
    entities: Iterable[Any],
    toggles: Optional[Mapping[str, bool]],
) -> List[Any]:
    """Entities not explicitly toggled off (``toggles[id] is False``)."""
    toggles = toggles or {}
    return [
        entity
        for index, entity in enumerate(entities)
        if toggles.get(build_entity_id(entity, index)) is not False
    ]


def rerender_markup(
    original_markup: str,
    plain_text: str,
    entities: List[Any],
    toggles: Optional[Mapping[str, bool]] = None,
    display_names: DisplayNames = None,
) -> str:
    """
    Annotate *original_markup* with only the active entities.

    Always pass the original, unredacted markup; feeding back annotated
    markup would let placeholders be matched as text.
    """
    active = select_active_entities(entities, toggles)
    return apply_anonymization_to_markup(original_markup, plain_text, active, display_names)
