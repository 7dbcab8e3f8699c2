"""
Shared test fixtures for the redaction core test suite.
"""
import pytest

from entity_redaction.entity_filtering.terms import build_policy_settings
from entity_redaction.models.entity import Entity


# ==========================================================================
# Source text & markup
# ==========================================================================

@pytest.fixture
def call_text():
    # offsets: "Jan Jansen" = [5, 15), "jan@example.com" = [19, 34)
    return "Call Jan Jansen at jan@example.com"


@pytest.fixture
def call_markup():
    return "<p>Call Jan Jansen at jan@example.com</p>"


# ==========================================================================
# Analyzer output
# ==========================================================================

@pytest.fixture
def call_analyzer_results():
    return [
        {"entity_type": "PERSON", "start": 5, "end": 15, "score": 0.9},
        {"entity_type": "EMAIL_ADDRESS", "start": 19, "end": 34, "score": 0.95},
    ]


@pytest.fixture
def mixed_analyzer_results():
    """Well-formed, low-score, scoreless and malformed records together."""
    return [
        {"entity_type": "PERSON", "start": 5, "end": 15, "score": 0.9},
        {"entity_type": "EMAIL_ADDRESS", "start": 19, "end": 34, "score": "0.95"},
        {"entity_type": "LOCATION", "start": 0, "end": 4, "score": 0.2},
        {"entity_type": "DATE_TIME", "start": 16, "end": 18},
        {"entity_type": "PERSON", "start": 15, "end": 5, "score": 0.9},
        {"entity_type": "PERSON", "start": "5", "end": 15, "score": 0.9},
        "not-an-entity",
        None,
    ]


# ==========================================================================
# Entities & policy
# ==========================================================================

@pytest.fixture
def person_entity():
    return Entity(entity_type="PERSON", start=5, end=15, score=0.9)


@pytest.fixture
def email_entity():
    return Entity(entity_type="EMAIL_ADDRESS", start=19, end=34, score=0.95)


@pytest.fixture
def default_policy():
    return build_policy_settings()


@pytest.fixture
def dutch_display_names():
    return {"PERSON": "PERSOON", "EMAIL_ADDRESS": "E-MAILADRES"}
