"""
Unit tests for the denylist scanner and the entity merger.
"""
from entity_redaction.entity_filtering.denylist_scanner import find_denylist_entities
from entity_redaction.entity_filtering.merger import merge_entities
from entity_redaction.entity_filtering.terms import build_term_set
from entity_redaction.models.entity import Entity
from entity_redaction.models.policy import TermSet


class TestDenylistScanner:
    """Tests for find_denylist_entities."""

    def test_single_match(self):
        results = find_denylist_entities(
            "Secret project CodeAlpha is active", build_term_set("codealpha")
        )
        assert len(results) == 1
        hit = results[0]
        assert (hit.start, hit.end) == (15, 24)
        assert hit.entity_type == "DENYLIST_TERM"
        assert hit.score == 1.0
        assert hit.source == "denylist"
        assert hit.text == "CodeAlpha"

    def test_case_insensitive_keeps_original_casing(self):
        results = find_denylist_entities("ACME and acme and Acme", build_term_set("Acme"))
        assert [(e.start, e.end, e.text) for e in results] == [
            (0, 4, "ACME"),
            (9, 13, "acme"),
            (18, 22, "Acme"),
        ]

    def test_same_term_matches_do_not_overlap(self):
        results = find_denylist_entities("aaaa", build_term_set("aa"))
        assert [(e.start, e.end) for e in results] == [(0, 2), (2, 4)]

    def test_different_terms_may_overlap(self):
        results = find_denylist_entities("Code Alpha", build_term_set("code alpha, alpha"))
        assert [(e.start, e.end) for e in results] == [(0, 10), (5, 10)]

    def test_grouped_by_term_order(self):
        results = find_denylist_entities("beta alpha beta", build_term_set("beta, alpha"))
        assert [(e.text, e.start) for e in results] == [("beta", 0), ("beta", 11), ("alpha", 5)]

    def test_offsets_after_length_changing_lowercase(self):
        # "İ".lower() is two code points
        text = "İstanbul secret plan"
        results = find_denylist_entities(text, build_term_set("secret"))
        assert [(e.start, e.end, e.text) for e in results] == [(9, 15, "secret")]

    def test_term_containing_length_changing_character(self):
        text = "Visit İstanbul today"
        results = find_denylist_entities(text, build_term_set("İstanbul"))
        assert [(e.start, e.end, e.text) for e in results] == [(6, 14, "İstanbul")]

    def test_no_terms(self):
        assert find_denylist_entities("anything", TermSet()) == []

    def test_no_match(self):
        assert find_denylist_entities("nothing here", build_term_set("secret")) == []

    def test_non_string_text(self):
        assert find_denylist_entities(None, build_term_set("secret")) == []

    def test_deterministic_output(self):
        terms = build_term_set("gamma, alpha, beta")
        text = "alpha beta gamma alpha"
        assert find_denylist_entities(text, terms) == find_denylist_entities(text, terms)


class TestMergeEntities:
    """Tests for merge_entities."""

    def test_primary_then_supplemental(self, person_entity):
        deny = Entity("DENYLIST_TERM", 0, 4, 1.0, source="denylist", text="Call")
        merged = merge_entities([person_entity], [deny])
        assert merged == [person_entity, deny]

    def test_first_seen_wins_on_key_collision(self):
        analyzer = Entity("DENYLIST_TERM", 0, 4, 0.6)
        deny = Entity("DENYLIST_TERM", 0, 4, 1.0, source="denylist", text="Call")
        merged = merge_entities([analyzer], [deny])
        assert len(merged) == 1
        assert merged[0].source == "analyzer"

    def test_different_types_same_span_both_kept(self, person_entity):
        other = Entity("ORGANIZATION", 5, 15, 0.7)
        assert len(merge_entities([person_entity], [other])) == 2

    def test_duplicates_within_one_stream_removed(self, person_entity):
        assert merge_entities([person_entity, person_entity], []) == [person_entity]

    def test_raw_records_coerced_and_malformed_dropped(self):
        merged = merge_entities(
            [{"entity_type": "PERSON", "start": 5, "end": 15, "score": 0.9}],
            [
                {"entity_type": "DENYLIST_TERM", "start": 0, "end": 4, "recognizer_result": "denylist"},
                {"entity_type": "DENYLIST_TERM", "start": 4, "end": 4},
                "garbage",
            ],
        )
        assert [e.dedup_key for e in merged] == ["5-15-PERSON", "0-4-DENYLIST_TERM"]
        assert merged[1].is_synthetic

    def test_idempotent(self, person_entity, email_entity):
        deny = Entity("DENYLIST_TERM", 0, 4, 1.0, source="denylist", text="Call")
        once = merge_entities([person_entity, email_entity], [deny])
        assert merge_entities(once, once) == once
        assert merge_entities(once, []) == once

    def test_empty_streams(self):
        assert merge_entities([], []) == []
