"""
Unit tests for term and policy normalization.
"""
import pytest

from entity_redaction.entity_filtering.terms import (
    build_entity_type_filter,
    build_policy_settings,
    build_term_set,
    normalize_term,
    normalize_threshold,
    parse_entity_types,
    parse_list_input,
)
from entity_redaction.models.policy import PolicySettings, TermSet


class TestNormalizeTerm:
    def test_trims_and_lowercases(self):
        assert normalize_term("  Jan Jansen ") == "jan jansen"

    def test_nfc_composes(self):
        # "e" + COMBINING ACUTE ACCENT → "é"
        assert normalize_term("Cafe\u0301") == "caf\u00e9"

    @pytest.mark.parametrize("value", [None, 42, ["a"], {"a": 1}])
    def test_non_string_is_empty(self, value):
        assert normalize_term(value) == ""


class TestParseListInput:
    def test_newline_and_comma_separated(self):
        assert parse_list_input("Alpha, Beta\ngamma") == ["alpha", "beta", "gamma"]

    def test_multi_word_terms_survive(self):
        assert parse_list_input("Code Alpha,Jan Jansen") == ["code alpha", "jan jansen"]

    def test_blank_terms_dropped(self):
        assert parse_list_input(",, \n ,alpha,,") == ["alpha"]

    def test_list_input(self):
        assert parse_list_input(["Alpha", "Beta,Gamma", 7, None]) == ["alpha", "beta", "gamma"]

    @pytest.mark.parametrize("value", [None, "", [], 42, {"alpha": True}])
    def test_empty_or_unsupported(self, value):
        assert parse_list_input(value) == []


class TestTermSet:
    def test_membership_and_order(self):
        terms = build_term_set("beta, alpha, Beta")
        assert list(terms) == ["beta", "alpha"]
        assert "alpha" in terms
        assert "gamma" not in terms
        assert len(terms) == 2

    def test_empty_is_falsy(self):
        assert not TermSet()
        assert not build_term_set(None)


class TestParseEntityTypes:
    def test_whitespace_and_comma_separated(self):
        assert parse_entity_types("person, email_address  LOCATION") == [
            "PERSON",
            "EMAIL_ADDRESS",
            "LOCATION",
        ]

    def test_list_dedup_keeps_first_seen_order(self):
        assert parse_entity_types(["person", "EMAIL_ADDRESS", " Person "]) == [
            "PERSON",
            "EMAIL_ADDRESS",
        ]

    def test_non_string_entries_ignored(self):
        assert parse_entity_types(["PERSON", 3, None]) == ["PERSON"]

    @pytest.mark.parametrize("value", [None, "", "  ", [], 12])
    def test_nothing_requested(self, value):
        assert parse_entity_types(value) == []
        assert build_entity_type_filter(value) is None

    def test_filter_is_frozenset(self):
        assert build_entity_type_filter("PERSON") == frozenset({"PERSON"})


class TestNormalizeThreshold:
    @pytest.mark.parametrize(
        "value,expected",
        [(0.7, 0.7), ("0.35", 0.35), (0, 0.0), (1, 1.0), (1.5, 1.0), (-0.2, 0.0), ("2", 1.0)],
    )
    def test_parsed_and_clamped(self, value, expected):
        assert normalize_threshold(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [None, "", "high", float("nan"), True])
    def test_unusable_uses_default(self, value):
        assert normalize_threshold(value) == 0.5

    def test_custom_default(self):
        assert normalize_threshold("n/a", default=0.8) == 0.8


class TestBuildPolicySettings:
    def test_defaults(self, default_policy):
        assert default_policy == PolicySettings()
        assert default_policy.entity_types is None
        assert default_policy.threshold == 0.5
        assert not default_policy.allow_terms
        assert not default_policy.deny_terms

    def test_full_request(self):
        settings = build_policy_settings(
            entity_types="person,EMAIL_ADDRESS",
            threshold="0.8",
            allowlist="Example\nACME",
            denylist=["CodeAlpha"],
        )
        assert settings.entity_types == frozenset({"PERSON", "EMAIL_ADDRESS"})
        assert settings.threshold == pytest.approx(0.8)
        assert list(settings.allow_terms) == ["example", "acme"]
        assert list(settings.deny_terms) == ["codealpha"]

    def test_to_dict(self):
        settings = build_policy_settings(entity_types="PERSON LOCATION", denylist="x")
        assert settings.to_dict() == {
            "entity_types": ["LOCATION", "PERSON"],
            "threshold": 0.5,
            "allow_terms": [],
            "deny_terms": ["x"],
        }
