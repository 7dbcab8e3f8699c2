"""
Entity Filtering Pipeline — orchestrates Coerce + Type + Threshold + Term
policy + Denylist + Merge.

Pipeline:
    1. Boundary coercion (malformed analyzer records dropped)
    2. Entity-type filter
    3. Threshold filter (missing scores pass)
    4. Term policy filter (deny > allow > include)
    5. Denylist scan over the source text (independent stream)
    6. Merge (analyzer first, first-seen-wins per start-end-type key)

The pipeline is a pure function of its inputs: it performs no I/O and keeps
no state between calls.
"""
import logging
from typing import Any, List

from entity_redaction.entity_filtering.denylist_scanner import find_denylist_entities
from entity_redaction.entity_filtering.filters import (
    filter_by_entity_type,
    filter_by_term_policy,
    filter_by_threshold,
)
from entity_redaction.entity_filtering.merger import merge_entities
from entity_redaction.models.entity import Entity
from entity_redaction.models.errors import InvalidInputError
from entity_redaction.models.policy import PolicySettings
from entity_redaction.postprocessing.metrics import (
    record_denylist_matches,
    record_malformed_records,
    record_stage_drop,
    timed_stage,
)

logger = logging.getLogger(__name__)


def coerce_entities(raw_entities: Any) -> List[Entity]:
    """
    Coerce analyzer output into Entity records.

    A non-list payload (e.g. an error object returned by the service) is
    treated as an empty detection result.
    """
    if not isinstance(raw_entities, (list, tuple)):
        if raw_entities is not None:
            logger.warning(
                "Analyzer output is %s, not a list; treating as no detections",
                type(raw_entities).__name__,
            )
        return []

    entities: List[Entity] = []
    for record in raw_entities:
        entity = Entity.from_raw(record)
        if entity is not None:
            entities.append(entity)

    malformed = len(raw_entities) - len(entities)
    if malformed:
        logger.debug("Dropped %d malformed analyzer record(s)", malformed)
        record_malformed_records(malformed)

    return entities


def run_filter_pipeline(
    raw_entities: Any,
    source_text: str,
    settings: PolicySettings,
) -> List[Entity]:
    """
    Reduce raw analyzer results to the entities that should be redacted.

    Args:
        raw_entities: Analyzer result records (dicts or Entity objects).
        source_text: The exact text the analyzer ran on.
        settings: Normalized policy (types, threshold, allow/deny terms).

    Returns:
        Deduplicated entity list: filtered analyzer entities in their
        original order, then denylist entities not already present.

    Raises:
        InvalidInputError: If *source_text* is not a string.
    """
    if not isinstance(source_text, str):
        logger.error("Filter pipeline called with non-string source text")
        raise InvalidInputError("source_text", source_text)

    with timed_stage("filter_pipeline"):
        entities = coerce_entities(raw_entities)

        # 1. Entity type
        by_type = filter_by_entity_type(entities, settings.entity_types)
        record_stage_drop("entity_type", len(entities) - len(by_type))

        # 2. Threshold
        by_threshold = filter_by_threshold(by_type, settings.threshold)
        record_stage_drop("threshold", len(by_type) - len(by_threshold))

        # 3. Allow/deny term policy
        primary = filter_by_term_policy(
            by_threshold,
            source_text,
            settings.allow_terms,
            settings.deny_terms,
        )
        record_stage_drop("term_policy", len(by_threshold) - len(primary))

        # 4. Denylist floor
        supplemental = find_denylist_entities(source_text, settings.deny_terms)
        record_denylist_matches(len(supplemental))

        # 5. Merge
        merged = merge_entities(primary, supplemental)

    logger.debug(
        "Filter pipeline: %d raw → %d type → %d threshold → %d policy, "
        "+%d denylist → %d merged",
        len(entities),
        len(by_type),
        len(by_threshold),
        len(primary),
        len(supplemental),
        len(merged),
    )
    return merged
