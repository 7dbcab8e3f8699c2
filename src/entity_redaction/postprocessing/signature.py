"""
Result Signature — canonical change-detection digest of a result bundle.

Used by the persistence layer to decide whether the current result differs
from the last saved one. Not a cryptographic hash: the canonical text itself
is the signature.

Canonical form:
    - object keys sorted at every nesting level
    - arrays kept in order
    - numbers rounded to SIGNATURE_DECIMALS places (integral values
      rendered as integers, so 1 and 1.0 agree)
    - NaN / infinity / None / unsupported values → null
"""
import json
import logging
from typing import Any, Mapping, Optional

import numpy as np

from entity_redaction.config.constants import SIGNATURE_DECIMALS, SIGNATURE_FIELDS
from entity_redaction.config.settings import DEFAULT_ACCEPTANCE_THRESHOLD
from entity_redaction.models.entity import parse_score

logger = logging.getLogger(__name__)


def _canonical_number(value: float) -> str:
    if not np.isfinite(value):
        return "null"
    rounded = round(float(value), SIGNATURE_DECIMALS)
    if rounded.is_integer():
        return str(int(rounded))
    return json.dumps(rounded)


def stable_stringify(value: Any) -> str:
    """Serialize *value* deterministically (see module docstring)."""
    if value is None:
        return "null"

    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, (int, np.integer)):
        return str(int(value))

    if isinstance(value, (float, np.floating)):
        return _canonical_number(value)

    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)

    if isinstance(value, (list, tuple)):
        return "[" + ",".join(stable_stringify(v) for v in value) + "]"

    if isinstance(value, Mapping):
        parts = [
            f"{json.dumps(str(k), ensure_ascii=False)}:{stable_stringify(value[k])}"
            for k in sorted(value, key=str)
        ]
        return "{" + ",".join(parts) + "}"

    if hasattr(value, "to_dict"):
        return stable_stringify(value.to_dict())

    return "null"


def _normalize_entity_types(value: Any) -> list:
    if not isinstance(value, (list, tuple)):
        return []
    codes = {v.strip().upper() for v in value if isinstance(v, str)}
    return sorted(c for c in codes if c)


def _normalize_threshold(value: Any) -> float:
    parsed = parse_score(value)
    return parsed if parsed is not None else DEFAULT_ACCEPTANCE_THRESHOLD


def build_result_signature(payload: Any) -> str:
    """
    Signature of a settings + result bundle.

    Args:
        payload: Mapping with any of SIGNATURE_FIELDS; missing fields take
                 defaults, other keys are ignored.

    Returns:
        Canonical string, or "" when *payload* is not a mapping.
    """
    if not isinstance(payload, Mapping):
        return ""

    entities = payload.get("entities")
    items = payload.get("items")

    bundle = {name: payload.get(name, "") for name in SIGNATURE_FIELDS}
    bundle.update(
        {
            "threshold": _normalize_threshold(payload.get("threshold")),
            "entity_types": _normalize_entity_types(payload.get("entity_types")),
            "entities": list(entities) if isinstance(entities, (list, tuple)) else [],
            "items": list(items) if isinstance(items, (list, tuple)) else [],
        }
    )
    return stable_stringify(bundle)


def is_unsaved_result(payload: Any, last_saved_signature: Optional[str]) -> bool:
    """True when *payload* has a signature that differs from the last save."""
    signature = build_result_signature(payload)
    if not signature:
        return False
    changed = signature != (last_saved_signature or "")
    if not changed:
        logger.debug("Result unchanged since last save")
    return changed
