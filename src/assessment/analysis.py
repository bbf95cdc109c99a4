"""
Assessment Analysis Orchestrator

Turns one pillar assessment into three LLM outputs:
- OTPF-4 overview (reads the whole assessment)
- Pillar insights (reads scores/reflections for the selected priorities)
- Intervention-plan focus area (reads the stitched free text)

The three calls run concurrently and are joined all-or-nothing: the caller
gets every section or an error, never a partial envelope.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from src.config import Settings
from src.exceptions import SchemaMismatchError
from src.llm.base import SchemaCompletionClient
from src.llm.prompts import INTERVENTION_PLAN_SYSTEM, OVERVIEW_SYSTEM, PILLAR_INSIGHT_SYSTEM
from src.llm.structured import complete_validated
from src.schemas.assessment import Assessment
from src.schemas.llm_outputs import (
    OVERVIEW_SCHEMA,
    OVERVIEW_SCHEMA_NAME,
    PILLAR_INSIGHTS_SCHEMA,
    PILLAR_INSIGHTS_SCHEMA_NAME,
    PLAN_SCHEMA,
    PLAN_SCHEMA_NAME,
    InsightsResult,
    OverviewResult,
    PlanResult,
)
from src.assessment.payloads import (
    build_insights_payload,
    build_overview_payload,
    build_plan_payload,
)

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """Explicit configuration for the analysis fan-out."""
    default_pillar_name_map: dict[str, str] = field(default_factory=dict)
    model: Optional[str] = None  # None = client default
    call_timeout_seconds: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisConfig":
        return cls(
            default_pillar_name_map=dict(settings.default_pillar_name_map),
            model=settings.openrouter_model,
            call_timeout_seconds=settings.llm_call_timeout_seconds,
        )


class AnalysisOrchestrator:
    """Fans one assessment out to the overview, insights and plan calls."""

    def __init__(self, llm: SchemaCompletionClient, config: AnalysisConfig):
        self.llm = llm
        self.config = config

    async def analyze(
        self,
        assessment: Assessment,
        pillar_name_map: Optional[Mapping[Any, str]] = None,
    ) -> dict[str, Any]:
        """
        Run the three analysis calls and merge their results.

        Args:
            assessment: The client's assessment
            pillar_name_map: Pillar id -> name; the configured default when omitted

        Returns:
            ``{"overview": ..., "insights": ..., "plan": ...}``, each section
            exactly as the LLM returned it

        Raises:
            LLMError: If any of the three calls fails (the first failure, in
                overview/insights/plan order)
        """
        name_map = pillar_name_map or self.config.default_pillar_name_map

        calls = {
            "overview": (
                OVERVIEW_SYSTEM,
                build_overview_payload(assessment),
                OVERVIEW_SCHEMA_NAME,
                OVERVIEW_SCHEMA,
                OverviewResult,
            ),
            "insights": (
                PILLAR_INSIGHT_SYSTEM,
                build_insights_payload(assessment, name_map),
                PILLAR_INSIGHTS_SCHEMA_NAME,
                PILLAR_INSIGHTS_SCHEMA,
                InsightsResult,
            ),
            "plan": (
                INTERVENTION_PLAN_SYSTEM,
                build_plan_payload(assessment),
                PLAN_SCHEMA_NAME,
                PLAN_SCHEMA,
                PlanResult,
            ),
        }

        logger.info(
            f"Analysis: running {len(calls)} calls in parallel "
            f"({len(assessment.selected_top3)} selected pillars)"
        )
        results = await asyncio.gather(
            *(
                complete_validated(
                    self.llm,
                    system_prompt=system_prompt,
                    user_payload=payload,
                    schema_name=schema_name,
                    schema=schema,
                    response_model=response_model,
                    model=self.config.model,
                    timeout=self.config.call_timeout_seconds,
                )
                for system_prompt, payload, schema_name, schema, response_model in calls.values()
            ),
            return_exceptions=True,
        )

        outcome = dict(zip(calls, results))
        failures = [(name, r) for name, r in outcome.items() if isinstance(r, BaseException)]
        for name, error in failures:
            logger.error(f"Analysis call '{name}' failed: {error}")
        if failures:
            raise failures[0][1]

        insights = outcome["insights"]["insights"]
        expected = len(assessment.selected_top3)
        if len(insights) != expected:
            raise SchemaMismatchError(
                PILLAR_INSIGHTS_SCHEMA_NAME,
                f"expected {expected} insights (one per selected pillar), got {len(insights)}",
            )

        logger.info("Analysis complete")
        return outcome
