"""
Tests for the Assessment Analysis Orchestrator

Covers the three-way fan-out: payload routing, ordering of insights,
all-or-nothing failure, schema checks and per-call timeouts.
"""

import pytest

from src.assessment.analysis import AnalysisConfig, AnalysisOrchestrator
from src.config import DEFAULT_PILLAR_NAME_MAP, Settings
from src.exceptions import (
    LLMProviderError,
    LLMResponseParseError,
    LLMTimeoutError,
    SchemaMismatchError,
)
from src.llm.prompts import INTERVENTION_PLAN_SYSTEM, OVERVIEW_SYSTEM, PILLAR_INSIGHT_SYSTEM
from src.schemas.assessment import Assessment


SCHEMA_NAMES = ["overview", "pillar_insights", "plan"]


def _assessment(selected: list[int]) -> Assessment:
    return Assessment.model_validate({
        "selectedTop3": selected,
        "responses": {
            str(pid): {
                "rating": pid + 1,
                "answers": {"working": f"working {pid}", "challenging": f"challenging {pid}"},
            }
            for pid in range(1, 7)
        },
    })


@pytest.fixture
def config() -> AnalysisConfig:
    return AnalysisConfig(default_pillar_name_map=dict(DEFAULT_PILLAR_NAME_MAP))


# =============================================================================
# Happy path
# =============================================================================

class TestAnalysisFanOut:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("selected", [[1], [4, 2], [6, 1, 3]])
    async def test_insights_follow_selection(self, make_stub, fixtures, config, selected):
        """One insight per selected pillar, in selection order."""
        llm = make_stub(responses=fixtures)
        orchestrator = AnalysisOrchestrator(llm, config)

        result = await orchestrator.analyze(_assessment(selected))

        names = [i["pillar_name"] for i in result["insights"]["insights"]]
        assert len(names) == len(selected)
        assert names == [DEFAULT_PILLAR_NAME_MAP[str(pid)] for pid in selected]

    @pytest.mark.asyncio
    async def test_issues_three_calls(self, make_stub, fixtures, config):
        llm = make_stub(responses=fixtures)

        await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))

        assert sorted(c["schema_name"] for c in llm.calls) == sorted(SCHEMA_NAMES)
        prompts = {c["schema_name"]: c["system_prompt"] for c in llm.calls}
        assert prompts == {
            "overview": OVERVIEW_SYSTEM,
            "pillar_insights": PILLAR_INSIGHT_SYSTEM,
            "plan": INTERVENTION_PLAN_SYSTEM,
        }

    @pytest.mark.asyncio
    async def test_results_returned_unmodified(self, make_stub, fixtures, config):
        llm = make_stub(responses=fixtures)
        assessment = _assessment([2])

        result = await AnalysisOrchestrator(llm, config).analyze(assessment)

        assert set(result) == {"overview", "insights", "plan"}
        assert result["overview"] == fixtures["overview"]
        assert result["plan"] == fixtures["plan"]
        assert result["insights"] == {
            "insights": [{
                "pillar_name": "cognitive",
                "pillar_score": 3,
                "trend_statement": "Pattern for pillar 2.",
                "consider_statement": "Angle for pillar 2.",
            }]
        }

    @pytest.mark.asyncio
    async def test_payload_routing(self, make_stub, fixtures, config, minimal_assessment):
        llm = make_stub(responses=fixtures)
        assessment = Assessment.model_validate(minimal_assessment)

        await AnalysisOrchestrator(llm, config).analyze(assessment)

        assert llm.calls_for("overview")[0]["user_payload"] == minimal_assessment
        assert llm.calls_for("pillar_insights")[0]["user_payload"] == {
            "selected_top3": [1],
            "scores": {"1": 7},
            "reflections": {"1": {"q1": "felt good"}},
            "pillar_name_map": DEFAULT_PILLAR_NAME_MAP,
        }
        assert llm.calls_for("plan")[0]["user_payload"] == {"text": "felt good"}

    @pytest.mark.asyncio
    async def test_custom_name_map_overrides_default(self, make_stub, fixtures, config):
        llm = make_stub(responses=fixtures)
        name_map = {"1": "body", "2": "mind"}

        result = await AnalysisOrchestrator(llm, config).analyze(_assessment([2, 1]), name_map)

        assert llm.calls_for("pillar_insights")[0]["user_payload"]["pillar_name_map"] == name_map
        assert [i["pillar_name"] for i in result["insights"]["insights"]] == ["mind", "body"]

    @pytest.mark.asyncio
    async def test_configured_default_map_is_used(self, make_stub, fixtures):
        llm = make_stub(responses=fixtures)
        config = AnalysisConfig(default_pillar_name_map={str(i): f"p{i}" for i in range(1, 7)})

        await AnalysisOrchestrator(llm, config).analyze(_assessment([5]))

        sent = llm.calls_for("pillar_insights")[0]["user_payload"]["pillar_name_map"]
        assert sent["5"] == "p5"

    @pytest.mark.asyncio
    async def test_model_override_reaches_client(self, make_stub, fixtures):
        llm = make_stub(responses=fixtures)
        config = AnalysisConfig(default_pillar_name_map=dict(DEFAULT_PILLAR_NAME_MAP), model="openai/gpt-4o")

        await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))

        assert {c["model"] for c in llm.calls} == {"openai/gpt-4o"}

    @pytest.mark.asyncio
    async def test_empty_reflections_pass_through(self, make_stub, fixtures, config):
        llm = make_stub(responses=fixtures)
        assessment = Assessment.model_validate({"selectedTop3": [], "scores": {}, "reflections": {}})

        result = await AnalysisOrchestrator(llm, config).analyze(assessment)

        assert llm.calls_for("plan")[0]["user_payload"] == {"text": ""}
        assert result["insights"] == {"insights": []}

    def test_config_from_settings(self):
        settings = Settings(openrouter_model="openai/gpt-4o", llm_call_timeout_seconds=12)
        config = AnalysisConfig.from_settings(settings)

        assert config.model == "openai/gpt-4o"
        assert config.call_timeout_seconds == 12
        assert config.default_pillar_name_map == DEFAULT_PILLAR_NAME_MAP

    def test_settings_fields(self):
        """Every setting is read by the client, the app or the orchestrators."""
        assert set(Settings.model_fields) == {
            "app_name",
            "cors_allowed_origins",
            "openrouter_api_key",
            "openrouter_base_url",
            "openrouter_model",
            "llm_temperature",
            "llm_max_tokens",
            "llm_timeout_seconds",
            "llm_call_timeout_seconds",
            "default_pillar_name_map",
        }


# =============================================================================
# Failures
# =============================================================================

class TestAnalysisFailures:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", SCHEMA_NAMES)
    async def test_any_failure_fails_whole_analysis(self, make_stub, fixtures, config, failing):
        error = LLMProviderError(f"{failing} unavailable")
        llm = make_stub(responses=fixtures, errors={failing: error})

        with pytest.raises(LLMProviderError) as exc_info:
            await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))

        assert exc_info.value is error
        # every call still ran to completion before the failure surfaced
        assert len(llm.calls) == 3

    @pytest.mark.asyncio
    async def test_first_failure_in_call_order_wins(self, make_stub, fixtures, config):
        llm = make_stub(
            responses=fixtures,
            errors={
                "plan": LLMResponseParseError("plan garbled"),
                "pillar_insights": LLMProviderError("insights down"),
            },
        )

        with pytest.raises(LLMProviderError, match="insights down"):
            await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))

    @pytest.mark.asyncio
    async def test_overview_missing_field_is_schema_mismatch(self, make_stub, fixtures, config):
        fixtures["overview"].pop("clinical_justification")
        llm = make_stub(responses=fixtures)

        with pytest.raises(SchemaMismatchError) as exc_info:
            await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))

        assert exc_info.value.schema_name == "overview"
        assert "clinical_justification" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_extra_field_is_schema_mismatch(self, make_stub, fixtures, config):
        fixtures["plan"]["rationale"] = "not in the contract"
        llm = make_stub(responses=fixtures)

        with pytest.raises(SchemaMismatchError, match="plan"):
            await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quotes", [["only one"], ["a", "b", "c", "d"]])
    async def test_quote_count_outside_bounds_is_schema_mismatch(self, make_stub, fixtures, config, quotes):
        fixtures["plan"]["evidence_quotes"] = quotes
        llm = make_stub(responses=fixtures)

        with pytest.raises(SchemaMismatchError):
            await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))

    @pytest.mark.asyncio
    async def test_empty_reply_is_schema_mismatch(self, make_stub, fixtures, config):
        fixtures["overview"] = {}
        llm = make_stub(responses=fixtures)

        with pytest.raises(SchemaMismatchError):
            await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))

    @pytest.mark.asyncio
    async def test_insight_count_must_match_selection(self, make_stub, fixtures, config):
        def one_short(payload):
            full = fixtures_echo(payload)
            full["insights"] = full["insights"][:-1]
            return full

        fixtures_echo = fixtures["pillar_insights"]
        fixtures["pillar_insights"] = one_short
        llm = make_stub(responses=fixtures)

        with pytest.raises(SchemaMismatchError, match="expected 3 insights"):
            await AnalysisOrchestrator(llm, config).analyze(_assessment([1, 2, 3]))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", ["7", True, None])
    async def test_non_number_score_is_schema_mismatch(self, make_stub, fixtures, config, score):
        """A score the schema types as a number is not coerced from other types."""
        echo = fixtures["pillar_insights"]

        def wrong_score(payload):
            reply = echo(payload)
            reply["insights"][0]["pillar_score"] = score
            return reply

        fixtures["pillar_insights"] = wrong_score
        llm = make_stub(responses=fixtures)

        with pytest.raises(SchemaMismatchError, match="pillar_insights"):
            await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))

    @pytest.mark.asyncio
    async def test_float_score_returned_as_float(self, make_stub, fixtures, config):
        echo = fixtures["pillar_insights"]

        def float_score(payload):
            reply = echo(payload)
            reply["insights"][0]["pillar_score"] = 6.5
            return reply

        fixtures["pillar_insights"] = float_score
        llm = make_stub(responses=fixtures)

        result = await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))

        assert result["insights"]["insights"][0]["pillar_score"] == 6.5

    @pytest.mark.asyncio
    async def test_hung_call_times_out(self, make_stub, fixtures):
        llm = make_stub(responses=fixtures, delay=1.0)
        config = AnalysisConfig(
            default_pillar_name_map=dict(DEFAULT_PILLAR_NAME_MAP),
            call_timeout_seconds=0.01,
        )

        with pytest.raises(LLMTimeoutError, match="timed out"):
            await AnalysisOrchestrator(llm, config).analyze(_assessment([1]))
