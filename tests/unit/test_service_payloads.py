"""
Unit tests for analyzer/anonymizer payload shapes.
"""
from types import MappingProxyType

import pytest

from entity_redaction.models.entity import Entity
from entity_redaction.postprocessing.service_payloads import (
    build_analyzer_payload,
    build_anonymizer_payload,
    normalize_anonymizer_response,
    resolve_language,
    resolve_ner_model,
    service_endpoint,
)


class TestServiceEndpoint:
    @pytest.mark.parametrize(
        "base,path",
        [("http://localhost:5002", "analyze"), ("http://localhost:5002/", "/analyze")],
    )
    def test_join(self, base, path):
        assert service_endpoint(base, path) == "http://localhost:5002/analyze"


class TestModelAndLanguage:
    def test_known_model(self):
        assert resolve_ner_model("nl_core_news_lg") == "nl_core_news_lg"

    @pytest.mark.parametrize("value", ["xx_unknown", "", None, 3])
    def test_unknown_model(self, value):
        assert resolve_ner_model(value) is None

    def test_explicit_language_wins(self):
        assert resolve_language("de", "nl_core_news_lg") == "de"

    def test_language_from_model(self):
        assert resolve_language(None, "nl_core_news_lg") == "nl"
        assert resolve_language("", "fr_core_news_lg") == "fr"

    def test_default_language(self):
        assert resolve_language(None, None) == "en"

    def test_injected_model_map(self):
        models = MappingProxyType({"it_core_news_lg": "it"})
        assert resolve_ner_model("it_core_news_lg", models) == "it_core_news_lg"
        assert resolve_ner_model("nl_core_news_lg", models) is None
        assert resolve_language(None, "it_core_news_lg", models) == "it"


class TestBuildAnalyzerPayload:
    def test_minimal(self):
        assert build_analyzer_payload("hello", "en") == {
            "text": "hello",
            "language": "en",
            "return_decision_process": True,
        }

    def test_model_and_sorted_entities(self):
        payload = build_analyzer_payload(
            "hello", "nl", ner_model="nl_core_news_lg", entity_types={"PERSON", "EMAIL_ADDRESS"}
        )
        assert payload["ner_model"] == "nl_core_news_lg"
        assert payload["entities"] == ["EMAIL_ADDRESS", "PERSON"]


class TestBuildAnonymizerPayload:
    def test_entities_serialized(self, call_text, person_entity):
        deny = Entity("DENYLIST_TERM", 0, 4, 1.0, source="denylist", text="Call")
        payload = build_anonymizer_payload(call_text, [person_entity, deny])
        assert payload["text"] == call_text
        assert payload["analyzer_results"] == [person_entity.to_dict(), deny.to_dict()]
        assert payload["analyzer_results"][1]["recognizer_result"] == "denylist"


class TestNormalizeAnonymizerResponse:
    def test_text_and_items(self):
        items = [{"start": 5, "end": 13, "entity_type": "PERSON", "text": "<PERSON>", "operator": "replace"}]
        response = normalize_anonymizer_response({"text": "Call <PERSON>", "items": items})
        assert response == {"anonymized_text": "Call <PERSON>", "items": items}

    def test_legacy_text_key(self):
        response = normalize_anonymizer_response({"anonymized_text": "Call <PERSON>"})
        assert response == {"anonymized_text": "Call <PERSON>", "items": []}

    def test_text_preferred_over_legacy_key(self):
        response = normalize_anonymizer_response({"text": "a", "anonymized_text": "b"})
        assert response["anonymized_text"] == "a"

    @pytest.mark.parametrize(
        "response",
        [None, "error", {"text": 42}, {"text": "x", "items": "nope"}, {"items": [1]}],
    )
    def test_malformed_degrades_to_empty(self, response):
        assert normalize_anonymizer_response(response) == {"anonymized_text": "", "items": []}

    def test_missing_text_is_empty(self):
        assert normalize_anonymizer_response({})["anonymized_text"] == ""
