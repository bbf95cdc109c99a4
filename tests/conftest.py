import copy
import asyncio
from typing import Any, AsyncGenerator, Callable, Optional, Union

import pytest
from httpx import AsyncClient, ASGITransport

from src.main import app
from src.api.deps import get_llm_client


OVERVIEW_FIXTURE = {
    "functional_findings": "Client reports reduced activity tolerance during morning routines.",
    "performance_factors": "Fatigue and limited pacing strategies influence performance.",
    "functional_impact": "Participation in self-care and work tasks is reduced.",
    "clinical_justification": "Self-report indicates good potential for OT intervention.",
}

INSIGHTS_FIXTURE = {
    "insights": [
        {
            "pillar_name": "physical",
            "pillar_score": 7,
            "trend_statement": "Client describes steady energy with good days reported.",
            "consider_statement": "Consider graded activity to sustain current tolerance.",
        }
    ]
}

PLAN_FIXTURE = {
    "ai_suggested_focus_area": "Build pacing routines that protect energy across work and home tasks.",
    "evidence_quotes": ["felt good", "tired by noon"],
}

SOAP_FIXTURE = {
    "bullets": ["a", "b", "c", "d"],
    "missing_info": ["pain scale"],
}

Responder = Union[dict, Callable[[Any], dict]]


def echo_insights(payload: dict) -> dict:
    """Schema-conformant insights built from the insights payload itself."""
    return {
        "insights": [
            {
                "pillar_name": payload["pillar_name_map"][str(pid)],
                "pillar_score": payload["scores"][str(pid)],
                "trend_statement": f"Pattern for pillar {pid}.",
                "consider_statement": f"Angle for pillar {pid}.",
            }
            for pid in payload["selected_top3"]
        ]
    }


class StubCompletionClient:
    """Completion client double that records every call.

    ``responses`` maps schema name to a fixture dict or to a callable that
    receives the user payload. ``errors`` maps schema name to an exception
    to raise instead.
    """

    def __init__(
        self,
        responses: Optional[dict[str, Responder]] = None,
        errors: Optional[dict[str, Exception]] = None,
        delay: float = 0.0,
    ):
        self.responses = dict(responses or {})
        self.errors = dict(errors or {})
        self.delay = delay
        self.calls: list[dict[str, Any]] = []
        self.healthy = True

    async def complete_json_schema(
        self,
        system_prompt: str,
        user_payload: Any,
        schema_name: str,
        schema: dict[str, Any],
        model: Optional[str] = None,
    ) -> dict[str, Any]:
        self.calls.append({
            "system_prompt": system_prompt,
            "user_payload": copy.deepcopy(user_payload),
            "schema_name": schema_name,
            "schema": schema,
            "model": model,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if schema_name in self.errors:
            raise self.errors[schema_name]
        response = self.responses[schema_name]
        if callable(response):
            return response(user_payload)
        return copy.deepcopy(response)

    def calls_for(self, schema_name: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["schema_name"] == schema_name]

    async def health_check(self) -> bool:
        return self.healthy


@pytest.fixture
def stub_llm() -> StubCompletionClient:
    """Stub answering every call type with a fixed fixture."""
    return StubCompletionClient(
        responses={
            "overview": OVERVIEW_FIXTURE,
            "pillar_insights": INSIGHTS_FIXTURE,
            "plan": PLAN_FIXTURE,
            "clinical_note": SOAP_FIXTURE,
        }
    )


@pytest.fixture
def minimal_assessment() -> dict:
    return {
        "selectedTop3": [1],
        "scores": {"1": 7},
        "reflections": {"1": {"q1": "felt good"}},
    }


@pytest.fixture(scope="function")
async def client(stub_llm: StubCompletionClient) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with the LLM client replaced by the stub."""
    app.dependency_overrides[get_llm_client] = lambda: stub_llm

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_stub() -> type[StubCompletionClient]:
    """Stub class, for tests that need their own responses or errors."""
    return StubCompletionClient


@pytest.fixture
def fixtures() -> dict[str, Responder]:
    """Fixed responses per schema name, with insights echoed from the payload."""
    return {
        "overview": copy.deepcopy(OVERVIEW_FIXTURE),
        "pillar_insights": echo_insights,
        "plan": copy.deepcopy(PLAN_FIXTURE),
        "clinical_note": copy.deepcopy(SOAP_FIXTURE),
    }
