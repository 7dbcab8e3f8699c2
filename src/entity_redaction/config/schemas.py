"""
JSON Schemas for payloads received from the remote detection and
redaction services.

Two schemas:
1. RAW_ENTITY_SCHEMA         — a single analyzer result record
2. ANONYMIZER_RESPONSE_SCHEMA — the anonymizer's response body

Both are deliberately permissive about extra keys: upstream services add
fields between releases and those are carried through untouched.
"""

# =============================================================================
# 1. Analyzer result record
# =============================================================================
RAW_ENTITY_SCHEMA: dict = {
    "type": "object",
    "required": ["start", "end"],
    "properties": {
        "entity_type": {"type": "string"},
        "start": {"type": "integer", "minimum": 0},
        "end": {"type": "integer", "minimum": 0},
        "score": {"type": ["number", "string", "null"]},
        "recognizer_result": {"type": ["string", "null"]},
        "text": {"type": ["string", "null"]},
    },
}

# =============================================================================
# 2. Anonymizer response
# =============================================================================
ANONYMIZER_RESPONSE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "text": {"type": "string"},
        "anonymized_text": {"type": "string"},
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "start": {"type": "integer"},
                    "end": {"type": "integer"},
                    "entity_type": {"type": "string"},
                    "text": {"type": "string"},
                    "operator": {"type": "string"},
                },
            },
        },
    },
}
