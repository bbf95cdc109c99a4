"""
Structured Output Contracts for LLM Calls

Each call has two halves that must agree:
- a JSON Schema dict sent to the provider (``*_SCHEMA``), which asks for
  exactly the listed keys and nothing else;
- a Pydantic model that re-checks the parsed reply before it leaves the
  orchestrator, since provider-side enforcement is not guaranteed.
"""

from pydantic import BaseModel, Field
from typing import Union


# =============================================================================
# JSON SCHEMAS (sent to the provider)
# =============================================================================

OVERVIEW_SCHEMA_NAME = "overview"
OVERVIEW_SCHEMA = {
    "type": "object",
    "properties": {
        "functional_findings": {"type": "string"},
        "performance_factors": {"type": "string"},
        "functional_impact": {"type": "string"},
        "clinical_justification": {"type": "string"},
    },
    "required": [
        "functional_findings",
        "performance_factors",
        "functional_impact",
        "clinical_justification",
    ],
    "additionalProperties": False,
}

PILLAR_INSIGHTS_SCHEMA_NAME = "pillar_insights"
PILLAR_INSIGHTS_SCHEMA = {
    "type": "object",
    "properties": {
        "insights": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "pillar_name": {"type": "string"},
                    "pillar_score": {"type": "number"},
                    "trend_statement": {"type": "string"},
                    "consider_statement": {"type": "string"},
                },
                "required": ["pillar_name", "pillar_score", "trend_statement", "consider_statement"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["insights"],
    "additionalProperties": False,
}

PLAN_SCHEMA_NAME = "plan"
PLAN_SCHEMA = {
    "type": "object",
    "properties": {
        "ai_suggested_focus_area": {"type": "string"},
        "evidence_quotes": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 2,
            "maxItems": 3,
        },
    },
    "required": ["ai_suggested_focus_area", "evidence_quotes"],
    "additionalProperties": False,
}

SOAP_NOTE_SCHEMA_NAME = "clinical_note"
SOAP_NOTE_SCHEMA = {
    "type": "object",
    "properties": {
        "bullets": {"type": "array", "items": {"type": "string"}},
        "missing_info": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["bullets", "missing_info"],
    "additionalProperties": False,
}


# =============================================================================
# VALIDATION MODELS (checked after parsing, strict: no type coercion)
# =============================================================================

class OverviewResult(BaseModel):
    """OTPF-4 overview, four sections in fixed order."""

    functional_findings: str
    performance_factors: str
    functional_impact: str
    clinical_justification: str

    class Config:
        extra = "forbid"
        strict = True


class PillarInsight(BaseModel):
    """Insight for one selected priority pillar."""

    pillar_name: str
    pillar_score: Union[int, float] = Field(description="Client rating for the pillar (0-10)")
    trend_statement: str
    consider_statement: str

    class Config:
        extra = "forbid"
        strict = True


class InsightsResult(BaseModel):
    """Insights for the selected pillars, in selection order."""

    insights: list[PillarInsight]

    class Config:
        extra = "forbid"
        strict = True


class PlanResult(BaseModel):
    """Intervention-plan focus area with verbatim supporting quotes."""

    ai_suggested_focus_area: str
    evidence_quotes: list[str] = Field(min_length=2, max_length=3)

    class Config:
        extra = "forbid"
        strict = True


class SoapResult(BaseModel):
    """Note bullets from shorthand; 4-6 requested, 3-7 tolerated."""

    bullets: list[str] = Field(min_length=3, max_length=7)
    missing_info: list[str]

    class Config:
        extra = "forbid"
        strict = True
