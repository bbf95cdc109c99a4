from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from src.api.deps import get_llm_client
from src.llm.openrouter import OpenRouterClient

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/llm")
async def health_check_llm(llm: OpenRouterClient = Depends(get_llm_client)):
    """Health check with LLM provider reachability."""
    reachable = await llm.health_check()

    return {
        "status": "healthy" if reachable else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "llm": "reachable" if reachable else "unreachable",
    }
