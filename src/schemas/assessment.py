"""
Assessment Schemas

Pydantic schemas for the pillar self-assessment and the analysis endpoint.
Field names follow the web client's camelCase JSON; Python code uses the
snake_case attribute names.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Any, Optional, Union

from src.schemas.llm_outputs import InsightsResult, OverviewResult, PlanResult

PillarId = Union[int, str]
Rating = Union[int, float]


def _check_rating(value: Rating) -> Rating:
    if not 0 <= value <= 10:
        raise ValueError(f"rating must be between 0 and 10, got {value}")
    return value


class PillarResponse(BaseModel):
    """One pillar's answers as the web client stores them."""

    rating: Rating
    answers: dict[str, str] = Field(default_factory=dict)

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v):
        return _check_rating(v)

    class Config:
        extra = "allow"


class Assessment(BaseModel):
    """
    A client's completed pillar assessment.

    Accepts either ``responses`` (pillar id -> rating + answers) or the
    already-projected ``scores`` / ``reflections`` pair. When ``responses``
    is present it wins. Unknown fields are kept so the overview call sees
    the assessment exactly as submitted.
    """

    selected_top3: list[PillarId] = Field(default_factory=list, alias="selectedTop3", max_length=3)
    responses: Optional[dict[PillarId, PillarResponse]] = None
    scores: Optional[dict[PillarId, Rating]] = None
    reflections: Optional[dict[PillarId, dict[str, str]]] = None
    pillar_name_map: Optional[dict[PillarId, str]] = Field(None, alias="pillarNameMap")

    @field_validator("scores")
    @classmethod
    def validate_scores(cls, v):
        if v is not None:
            for rating in v.values():
                _check_rating(rating)
        return v

    @model_validator(mode="after")
    def validate_selected_pillars(self):
        """Every selected priority must be a pillar the client answered."""
        known = {
            str(pid)
            for source in (self.responses, self.scores, self.reflections)
            for pid in (source or {})
        }
        unknown = [pid for pid in self.selected_top3 if str(pid) not in known]
        if unknown:
            raise ValueError(f"selectedTop3 references pillars with no responses: {unknown}")
        if len({str(pid) for pid in self.selected_top3}) != len(self.selected_top3):
            raise ValueError("selectedTop3 must not repeat a pillar")
        return self

    def as_submitted(self) -> dict[str, Any]:
        """The assessment as the client sent it (camelCase, unset fields omitted)."""
        return self.model_dump(by_alias=True, exclude_unset=True)

    class Config:
        populate_by_name = True
        extra = "allow"


# =============================================================================
# Analysis endpoint
# =============================================================================

class AnalyzeRequest(BaseModel):
    """Body of POST /api/ot/analyze."""

    assessment: Assessment
    pillar_name_map: Optional[dict[PillarId, str]] = Field(None, alias="pillarNameMap")

    def resolved_name_map(self) -> Optional[dict[PillarId, str]]:
        """Request-level map first, then one embedded in the assessment."""
        return self.pillar_name_map or self.assessment.pillar_name_map

    class Config:
        populate_by_name = True


class AnalysisEnvelope(BaseModel):
    """All three analysis sections; never partially populated."""

    overview: OverviewResult
    insights: InsightsResult
    plan: PlanResult


class AnalyzeResponse(BaseModel):
    ok: bool = True
    result: AnalysisEnvelope


# =============================================================================
# Pillar reference
# =============================================================================

class PillarInfo(BaseModel):
    id: int
    key: str
    name: str
    question: str
    reflection_questions: dict[str, str]


class PillarListResponse(BaseModel):
    ok: bool = True
    pillars: list[PillarInfo]
    default_pillar_name_map: dict[str, str]
