"""
Markup Annotator — maps filtered entities back onto rich-text markup.

Offsets are computed against the plain-text projection of a document while
substitution happens on its markup serialization, where those offsets do
not line up. Each entity therefore only selects *which* literal text is
redacted; every occurrence of that text in the markup is replaced with an
escaped ``&lt;LABEL&gt;`` placeholder.

Annotation must always start from the original, unredacted markup: toggling
findings off is done by re-annotating the original with the reduced set.
"""
import html
import logging
import re
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from entity_redaction.config.constants import REDACTED_LABEL
from entity_redaction.models.entity import Entity
from entity_redaction.models.errors import InvalidInputError
from entity_redaction.postprocessing.metrics import record_markup_substitutions, timed_stage

logger = logging.getLogger(__name__)

DisplayNames = Union[Mapping[str, str], Callable[[str], Optional[str]], None]


def resolve_display_entity_type(entity_type: Any, display_names: DisplayNames) -> Any:
    """
    Human-readable label for *entity_type*.

    *display_names* may be a mapping or a callable; unknown types and
    missing resolvers fall back to the raw type.
    """
    if not isinstance(entity_type, str) or not entity_type:
        return entity_type

    if display_names is None:
        return entity_type

    if isinstance(display_names, Mapping):
        label = display_names.get(entity_type)
    elif callable(display_names):
        label = display_names(entity_type)
    else:
        return entity_type

    return label if label is not None else entity_type


def _placeholder(entity_type: str, display_names: DisplayNames) -> str:
    label = resolve_display_entity_type(entity_type, display_names)
    if not isinstance(label, str) or not label:
        label = REDACTED_LABEL
    return f"&lt;{html.escape(label, quote=False)}&gt;"


def _with_plain_text(entities: Iterable[Any], plain_text: str) -> List[Entity]:
    """Coerce entities and (re)compute their found_text from *plain_text*."""
    prepared: List[Entity] = []
    for candidate in entities:
        entity = Entity.from_raw(candidate)
        if entity is None:
            continue
        sliced = plain_text[entity.start : entity.end]
        if sliced:
            entity = entity.with_found_text(plain_text)
        elif entity.found_text is None and entity.text:
            # Offsets past the end of plain_text: fall back to the literal.
            entity = replace(entity, found_text=entity.text)
        prepared.append(entity)
    return prepared


def apply_anonymization_to_markup(
    markup: str,
    plain_text: str,
    entities: Iterable[Any],
    display_names: DisplayNames = None,
) -> str:
    """
    Redact every literal occurrence of each entity's text in *markup*.

    All texts are replaced in a single left-to-right pass, longest
    alternative first, so a finding whose text contains another's
    ("Jan Jansen" vs "Jan") is replaced as one unit and a short text never
    matches inside an inserted placeholder ("ON" in "&lt;PERSON&gt;").

    Args:
        markup: Original, unredacted rich-text markup (HTML).
        plain_text: Plain-text projection the entity offsets refer to.
        entities: Entity records or raw analyzer dicts.
        display_names: Mapping or callable from entity type to label.

    Returns:
        Markup with ``&lt;LABEL&gt;`` placeholders. The inputs are not
        modified, so repeated calls with the same arguments agree.

    Raises:
        InvalidInputError: If *markup* or *plain_text* is not a string.
    """
    if not isinstance(markup, str):
        logger.error("Annotator called with non-string markup")
        raise InvalidInputError("markup", markup)
    if not isinstance(plain_text, str):
        logger.error("Annotator called with non-string plain text")
        raise InvalidInputError("plain_text", plain_text)

    with timed_stage("markup_annotation"):
        prepared = _with_plain_text(entities, plain_text)
        ordered = sorted(prepared, key=lambda e: -len(e.found_text or ""))

        # Literal text → placeholder; the longest entity claims a text first.
        placeholder_for: Dict[str, str] = {}
        for entity in ordered:
            found = entity.found_text
            if not found:
                continue
            replacement = _placeholder(entity.entity_type, display_names)
            # Text containing &, < or > is serialized escaped in markup.
            for variant in (html.escape(found, quote=False), found):
                placeholder_for.setdefault(variant, replacement)

        result = markup
        substitutions = 0
        if placeholder_for:
            # One pass: inserted placeholders are never rescanned.
            variants = sorted(placeholder_for, key=len, reverse=True)
            pattern = re.compile("|".join(re.escape(v) for v in variants))
            result, substitutions = pattern.subn(
                lambda m: placeholder_for[m.group(0)], markup
            )

    record_markup_substitutions(substitutions)
    logger.debug(
        "Annotated markup: %d entities, %d substitutions", len(ordered), substitutions
    )
    return result


def localize_entity_placeholders(text: str, display_names: Mapping[str, str]) -> str:
    """
    Rewrite ``<TYPE>`` and ``&lt;TYPE&gt;`` placeholders to display values.

    Used on the redaction service's anonymized text so it matches the
    labels shown in annotated markup.
    """
    if not isinstance(text, str) or not text:
        return text if isinstance(text, str) else ""

    output = text
    for original, display in display_names.items():
        if not display or display == original:
            continue
        output = output.replace(f"<{original}>", f"<{display}>")
        output = output.replace(f"&lt;{original}&gt;", f"&lt;{display}&gt;")
    return output
