"""
Constants used across the filtering and markup stages.
Versioned and pinned for determinism.
"""
import re
from types import MappingProxyType
from typing import Mapping

# =============================================================================
# Term parsing
# =============================================================================
# Allow/deny lists are split on newlines and commas only, so multi-word
# terms ("Code Alpha") survive as one entry.
TERM_SPLIT_PATTERN: re.Pattern = re.compile(r"[\n,]+")
ENTITY_TYPE_SPLIT_PATTERN: re.Pattern = re.compile(r"[\s,]+")

# =============================================================================
# Synthetic denylist entities
# =============================================================================
DENYLIST_ENTITY_TYPE: str = "DENYLIST_TERM"
DENYLIST_SOURCE: str = "denylist"
DENYLIST_SCORE: float = 1.0

DEFAULT_ENTITY_SOURCE: str = "analyzer"

# =============================================================================
# Markup placeholders
# =============================================================================
REDACTED_LABEL: str = "REDACTED"

# =============================================================================
# Signature canonicalization
# =============================================================================
SIGNATURE_DECIMALS: int = 6

SIGNATURE_FIELDS: tuple = (
    "source_text",
    "source_html",
    "result_text",
    "result_html",
    "ner_model",
    "language",
    "threshold",
    "allowlist",
    "denylist",
    "entity_types",
    "entities",
    "items",
)

# =============================================================================
# Detector model → language code (read-only; inject a different map if needed)
# =============================================================================
NER_MODEL_LANGUAGES: Mapping[str, str] = MappingProxyType({
    "en_core_web_lg": "en",
    "nl_core_news_lg": "nl",
    "de_core_news_lg": "de",
    "fr_core_news_lg": "fr",
})
