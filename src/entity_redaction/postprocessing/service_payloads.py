"""
Service Payloads — request bodies for, and response normalization from, the
remote analyzer and anonymizer services.

Only the shapes live here; the HTTP calls belong to the embedding service.
"""
import logging
from typing import Any, Iterable, List, Mapping, Optional

from jsonschema import ValidationError, validate

from entity_redaction.config.constants import NER_MODEL_LANGUAGES
from entity_redaction.config.schemas import ANONYMIZER_RESPONSE_SCHEMA
from entity_redaction.config.settings import DEFAULT_LANGUAGE
from entity_redaction.models.entity import Entity

logger = logging.getLogger(__name__)


def service_endpoint(base_url: str, path: str) -> str:
    """Join a service base URL and a path, tolerating a trailing slash."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def resolve_ner_model(
    value: Any,
    model_languages: Mapping[str, str] = NER_MODEL_LANGUAGES,
) -> Optional[str]:
    """The requested detector model, or None when it is not a known model."""
    if isinstance(value, str) and value in model_languages:
        return value
    return None


def resolve_language(
    requested: Any,
    ner_model: Optional[str],
    model_languages: Mapping[str, str] = NER_MODEL_LANGUAGES,
) -> str:
    """
    Language code for an analyzer request.

    Priority: explicit non-empty language > language of the known model >
    DEFAULT_LANGUAGE.
    """
    if isinstance(requested, str) and requested:
        return requested
    if ner_model is not None and ner_model in model_languages:
        return model_languages[ner_model]
    return DEFAULT_LANGUAGE


def build_analyzer_payload(
    text: str,
    language: str,
    ner_model: Optional[str] = None,
    entity_types: Optional[Iterable[str]] = None,
) -> dict:
    """Body of the analyzer ``/analyze`` request."""
    payload = {
        "text": text,
        "language": language,
        "return_decision_process": True,
    }
    if ner_model:
        payload["ner_model"] = ner_model
    if entity_types:
        payload["entities"] = sorted(entity_types)
    return payload


def build_anonymizer_payload(text: str, entities: List[Entity]) -> dict:
    """Body of the anonymizer ``/anonymize`` request."""
    return {
        "text": text,
        "analyzer_results": [e.to_dict() for e in entities],
    }


def normalize_anonymizer_response(response: Any) -> dict:
    """
    Extract anonymized text and items from an anonymizer response.

    The text is read from ``text`` or, for older releases,
    ``anonymized_text``. A response that does not match
    ANONYMIZER_RESPONSE_SCHEMA degrades to empty values.

    Returns:
        {"anonymized_text": str, "items": list}
    """
    try:
        validate(instance=response, schema=ANONYMIZER_RESPONSE_SCHEMA)
    except ValidationError as e:
        logger.warning("Anonymizer response rejected: %s", e.message)
        return {"anonymized_text": "", "items": []}

    text = response.get("text")
    if text is None:
        text = response.get("anonymized_text", "")

    return {
        "anonymized_text": text,
        "items": list(response.get("items", [])),
    }
