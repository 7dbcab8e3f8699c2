"""
Typed Pydantic models for the anonymize request/response contract.

Request fields arrive loosely typed from a web form (numbers as strings,
lists as comma-separated text); they are normalized here, at the boundary,
so the filtering pipeline only ever sees a PolicySettings.
"""
from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from entity_redaction.config.settings import DEFAULT_ACCEPTANCE_THRESHOLD
from entity_redaction.entity_filtering.terms import (
    build_policy_settings,
    normalize_threshold,
    parse_entity_types,
)
from entity_redaction.models.policy import PolicySettings


# =============================================================================
# Request
# =============================================================================


class AnonymizeRequest(BaseModel):
    """
    A redaction request as submitted by a client.

    Accepts both snake_case and the camelCase keys used by browser clients
    (``nerModel``, ``entityTypes``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    text: str = Field(..., description="Plain text submitted for redaction.")
    html: Optional[str] = Field(None, description="Rich-text markup the text was projected from.")
    language: Optional[str] = Field(None, description="Explicit analyzer language; overrides the model's.")
    ner_model: Optional[str] = Field(None, description="Detector model identifier, e.g. 'nl_core_news_lg'.")
    threshold: float = Field(DEFAULT_ACCEPTANCE_THRESHOLD, ge=0.0, le=1.0)
    allowlist: Union[str, List[str]] = Field("", description="Terms never redacted unless also denied.")
    denylist: Union[str, List[str]] = Field("", description="Terms always redacted.")
    entity_types: List[str] = Field(default_factory=list, description="Requested entity types; empty = all.")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("text must be a non-empty string")
        return v

    @field_validator("threshold", mode="before")
    @classmethod
    def coerce_threshold(cls, v: Any) -> float:
        return normalize_threshold(v)

    @field_validator("entity_types", mode="before")
    @classmethod
    def coerce_entity_types(cls, v: Any) -> List[str]:
        return parse_entity_types(v)

    @field_validator("allowlist", "denylist", mode="before")
    @classmethod
    def coerce_term_list(cls, v: Any) -> Union[str, List[str]]:
        if isinstance(v, str):
            return v
        if isinstance(v, (list, tuple)):
            return [entry for entry in v if isinstance(entry, str)]
        return ""

    def policy(self) -> PolicySettings:
        """PolicySettings for the filtering pipeline."""
        return build_policy_settings(
            entity_types=self.entity_types,
            threshold=self.threshold,
            allowlist=self.allowlist,
            denylist=self.denylist,
        )


# =============================================================================
# Response
# =============================================================================


class AnonymizeResult(BaseModel):
    """Post-processed outcome of one redaction round trip."""

    anonymized_text: str = Field("", description="Text returned by the redaction service, labels localized.")
    anonymized_html: Optional[str] = Field(None, description="Annotated markup; None when no markup was given.")
    items: List[dict] = Field(default_factory=list, description="Per-span operator items from the service.")
    entities: List[dict] = Field(default_factory=list, description="Final entities sent to the service.")
    findings: List[dict] = Field(default_factory=list, description="Review list rows, one per entity.")
    signature: str = Field("", description="Change-detection signature of the settings + result bundle.")
