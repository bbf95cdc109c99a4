from fastapi import Depends

from src.config import Settings, get_settings
from src.llm.openrouter import OpenRouterClient
from src.assessment.analysis import AnalysisConfig, AnalysisOrchestrator
from src.notes.soap import SoapNoteOrchestrator


def get_llm_client() -> OpenRouterClient:
    """LLM client for the current request (HTTP pool is shared)."""
    return OpenRouterClient()


def get_analysis_orchestrator(
    llm: OpenRouterClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
) -> AnalysisOrchestrator:
    return AnalysisOrchestrator(llm, AnalysisConfig.from_settings(settings))


def get_soap_orchestrator(
    llm: OpenRouterClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
) -> SoapNoteOrchestrator:
    return SoapNoteOrchestrator(
        llm,
        model=settings.openrouter_model,
        call_timeout_seconds=settings.llm_call_timeout_seconds,
    )
