"""
Redaction Orchestrator — main entry point around the remote services.

A redaction round trip touches this module three times:
    1. build_analyzer_request   — body for the analyzer call
    2. prepare_redaction        — FilterPipeline over the analyzer results,
                                  body for the anonymizer call
    3. postprocess_redaction    — normalize the anonymizer response, annotate
                                  markup, build findings and the signature

Every step is a pure function of its arguments; the remote calls happen in
between, in the caller.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from entity_redaction.config.constants import NER_MODEL_LANGUAGES
from entity_redaction.config.settings import DEFAULT_NER_MODEL
from entity_redaction.entity_filtering.pipeline import run_filter_pipeline
from entity_redaction.models.anonymize_io import AnonymizeRequest, AnonymizeResult
from entity_redaction.models.entity import Entity
from entity_redaction.models.policy import PolicySettings
from entity_redaction.postprocessing.annotator import (
    DisplayNames,
    apply_anonymization_to_markup,
    localize_entity_placeholders,
)
from entity_redaction.postprocessing.findings import build_findings
from entity_redaction.postprocessing.service_payloads import (
    build_analyzer_payload,
    build_anonymizer_payload,
    normalize_anonymizer_response,
    resolve_language,
    resolve_ner_model,
)
from entity_redaction.postprocessing.signature import build_result_signature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedRedaction:
    """Filtered request state carried from step 2 to step 3."""

    request: AnonymizeRequest
    settings: PolicySettings
    language: str
    ner_model: Optional[str]
    entities: List[Entity] = field(default_factory=list)
    anonymizer_payload: dict = field(default_factory=dict)


def _list_text(value: Any) -> str:
    """Allow/deny input as stored text (lists joined one term per line)."""
    if isinstance(value, (list, tuple)):
        return "\n".join(value)
    return value if isinstance(value, str) else ""


class RedactionOrchestrator:
    """
    Request/response orchestration with injected, read-only configuration.

    Args:
        model_languages: Detector model → language code map.
        display_names: Entity type → display label (mapping or callable).
    """

    def __init__(
        self,
        model_languages: Mapping[str, str] = NER_MODEL_LANGUAGES,
        display_names: DisplayNames = None,
    ):
        self.model_languages = model_languages
        self.display_names = display_names

    def build_analyzer_request(self, request: AnonymizeRequest) -> dict:
        """Body for the analyzer call."""
        ner_model = resolve_ner_model(request.ner_model, self.model_languages)
        language = resolve_language(request.language, ner_model, self.model_languages)
        return build_analyzer_payload(
            request.text,
            language,
            ner_model=ner_model,
            entity_types=request.policy().entity_types,
        )

    def prepare_redaction(
        self,
        request: AnonymizeRequest,
        analyzer_results: Any,
    ) -> PreparedRedaction:
        """
        Filter analyzer results and build the anonymizer request.

        Args:
            request: Validated client request.
            analyzer_results: Raw analyzer response (list of records).

        Returns:
            PreparedRedaction whose ``anonymizer_payload`` is ready to send.
        """
        settings = request.policy()
        ner_model = resolve_ner_model(request.ner_model, self.model_languages)
        language = resolve_language(request.language, ner_model, self.model_languages)

        entities = run_filter_pipeline(analyzer_results, request.text, settings)
        logger.info(
            "Prepared redaction: language=%s, threshold=%.2f, %d entities",
            language,
            settings.threshold,
            len(entities),
        )

        return PreparedRedaction(
            request=request,
            settings=settings,
            language=language,
            ner_model=ner_model,
            entities=entities,
            anonymizer_payload=build_anonymizer_payload(request.text, entities),
        )

    def postprocess_redaction(
        self,
        prepared: PreparedRedaction,
        anonymizer_response: Any,
    ) -> AnonymizeResult:
        """
        Turn the anonymizer response into the displayable result.

        Args:
            prepared: Output of prepare_redaction for the same request.
            anonymizer_response: Raw anonymizer response body.

        Returns:
            AnonymizeResult with annotated markup, findings and signature.
        """
        start_time = time.monotonic()
        request = prepared.request
        response = normalize_anonymizer_response(anonymizer_response)

        anonymized_text = response["anonymized_text"]
        if isinstance(self.display_names, Mapping):
            anonymized_text = localize_entity_placeholders(anonymized_text, self.display_names)

        anonymized_html: Optional[str] = None
        if request.html is not None:
            anonymized_html = apply_anonymization_to_markup(
                request.html,
                request.text,
                prepared.entities,
                self.display_names,
            )

        entity_dicts = [e.to_dict() for e in prepared.entities]
        findings = build_findings(
            prepared.entities,
            response["items"],
            request.text,
            self.display_names,
        )

        signature = build_result_signature(
            {
                "source_text": request.text,
                "source_html": request.html or "",
                "result_text": anonymized_text,
                "result_html": anonymized_html or "",
                "ner_model": prepared.ner_model or DEFAULT_NER_MODEL,
                "language": prepared.language,
                "threshold": prepared.settings.threshold,
                "allowlist": _list_text(request.allowlist),
                "denylist": _list_text(request.denylist),
                "entity_types": request.entity_types,
                "entities": entity_dicts,
                "items": response["items"],
            }
        )

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            "Post-processed redaction in %d ms: %d findings", elapsed_ms, len(findings)
        )

        return AnonymizeResult(
            anonymized_text=anonymized_text,
            anonymized_html=anonymized_html,
            items=response["items"],
            entities=entity_dicts,
            findings=[f.to_dict() for f in findings],
            signature=signature,
        )


# Module-level orchestrator with default configuration
redaction_orchestrator = RedactionOrchestrator()
