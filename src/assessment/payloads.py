"""
Prompt payload shaping for the analysis calls.

Pure functions: same assessment in, same payload out. Nothing here talks to
the LLM.
"""

from typing import Any, Mapping

from src.schemas.assessment import Assessment, PillarId, Rating


def project_scores(assessment: Assessment) -> dict[PillarId, Rating]:
    """Pillar id -> rating, taken from ``responses`` when present."""
    if assessment.responses is not None:
        return {pid: response.rating for pid, response in assessment.responses.items()}
    return dict(assessment.scores or {})


def project_reflections(assessment: Assessment) -> dict[PillarId, dict[str, str]]:
    """Pillar id -> (question key -> answer), taken from ``responses`` when present."""
    if assessment.responses is not None:
        return {pid: dict(response.answers) for pid, response in assessment.responses.items()}
    return {pid: dict(answers) for pid, answers in (assessment.reflections or {}).items()}


def stitch_reflections(reflections: Mapping[Any, Mapping[str, str]]) -> str:
    """Space-join every answer, pillar order first, then question order.

    Answers are joined verbatim: no trimming, no skipping of empty strings.
    """
    return " ".join(
        answer
        for answers in reflections.values()
        for answer in answers.values()
    )


def build_overview_payload(assessment: Assessment) -> dict[str, Any]:
    """The overview call reads the whole assessment as submitted."""
    return assessment.as_submitted()


def build_insights_payload(
    assessment: Assessment,
    pillar_name_map: Mapping[Any, str],
) -> dict[str, Any]:
    return {
        "selected_top3": list(assessment.selected_top3),
        "scores": project_scores(assessment),
        "reflections": project_reflections(assessment),
        "pillar_name_map": dict(pillar_name_map),
    }


def build_plan_payload(assessment: Assessment) -> dict[str, str]:
    return {"text": stitch_reflections(project_reflections(assessment))}
