"""
Prometheus Metrics — filtering and annotation observability.

Exposes counters and a histogram for:
- Entities dropped per filtering stage
- Malformed analyzer records discarded at the boundary
- Denylist hits synthesized by the scanner
- Markup placeholder substitutions
- Stage processing latency

Metrics are registered on the default prometheus_client registry; exposing
them (HTTP endpoint, push gateway) is the embedding service's concern.
Recording can be switched off with METRICS_ENABLED=false.

Usage
-----
    from entity_redaction.postprocessing.metrics import record_stage_drop, timed_stage

    with timed_stage("term_policy"):
        kept = filter_by_term_policy(...)
    record_stage_drop("term_policy", before - len(kept))
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram

from entity_redaction.config.settings import METRICS_ENABLED

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# Entities removed by each filtering stage.
ENTITIES_DROPPED: Counter = Counter(
    "redaction_entities_dropped_total",
    "Entities removed by a filtering stage",
    ["stage"],
)

# Analyzer records rejected by boundary coercion.
MALFORMED_RECORDS: Counter = Counter(
    "redaction_malformed_records_total",
    "Analyzer result records dropped as malformed",
)

# Synthetic entities emitted by the denylist scanner.
DENYLIST_MATCHES: Counter = Counter(
    "redaction_denylist_matches_total",
    "Denylist term occurrences found in source text",
)

# Distinct literal texts substituted by the markup annotator.
MARKUP_SUBSTITUTIONS: Counter = Counter(
    "redaction_markup_substitutions_total",
    "Literal texts replaced with placeholders in markup",
)

# Processing latency per stage (seconds).
STAGE_LATENCY: Histogram = Histogram(
    "redaction_stage_processing_seconds",
    "Processing time per redaction stage in seconds",
    ["stage"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
)


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------

def record_stage_drop(stage: str, count: int) -> None:
    """Add *count* dropped entities to the counter for *stage*."""
    if METRICS_ENABLED and count > 0:
        ENTITIES_DROPPED.labels(stage=stage).inc(count)


def record_malformed_records(count: int) -> None:
    if METRICS_ENABLED and count > 0:
        MALFORMED_RECORDS.inc(count)


def record_denylist_matches(count: int) -> None:
    if METRICS_ENABLED and count > 0:
        DENYLIST_MATCHES.inc(count)


def record_markup_substitutions(count: int) -> None:
    if METRICS_ENABLED and count > 0:
        MARKUP_SUBSTITUTIONS.inc(count)


@contextmanager
def timed_stage(stage: str) -> Generator[None, None, None]:
    """
    Context manager that records stage processing latency.

    Usage::

        with timed_stage("filter_pipeline"):
            entities = run_filter_pipeline(...)
    """
    if not METRICS_ENABLED:
        yield
        return
    with STAGE_LATENCY.labels(stage=stage).time():
        yield
