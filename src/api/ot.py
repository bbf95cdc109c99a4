"""
OT API Endpoints

Assessment analysis, note generation from shorthand, and the pillar
reference list. Every response uses the ``{ok, ...}`` envelope; errors are
caught here and never escape as unhandled faults.
"""

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.config import Settings, get_settings
from src.exceptions import CopilotError, InputValidationError
from src.api.deps import get_analysis_orchestrator, get_soap_orchestrator
from src.assessment.analysis import AnalysisOrchestrator
from src.assessment.pillars import PILLARS
from src.notes.soap import SoapNoteOrchestrator
from src.schemas.assessment import AnalyzeRequest, AnalyzeResponse, PillarListResponse
from src.schemas.common import ErrorResponse
from src.schemas.notes import SoapNotesRequest, SoapNotesResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ot", tags=["ot"])

GENERIC_ERROR = "Internal server error"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_assessment(
    body: AnalyzeRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_analysis_orchestrator),
):
    """Generate the overview, pillar insights and plan suggestion for an assessment."""
    try:
        result = await orchestrator.analyze(body.assessment, body.resolved_name_map())
    except CopilotError as e:
        logger.exception("Assessment analysis failed")
        return error_response(500, str(e))
    except Exception:
        logger.exception("Assessment analysis failed unexpectedly")
        return error_response(500, GENERIC_ERROR)

    return {"ok": True, "result": result}


@router.post(
    "/soap_notes",
    response_model=SoapNotesResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_soap_notes(
    body: SoapNotesRequest,
    orchestrator: SoapNoteOrchestrator = Depends(get_soap_orchestrator),
):
    """Convert therapist shorthand into note bullets."""
    try:
        note = await orchestrator.generate(body.shorthand, body.client_context)
    except InputValidationError as e:
        logger.warning(f"Rejected SOAP note request: {e}")
        return error_response(400, str(e))
    except CopilotError as e:
        logger.exception("SOAP note generation failed")
        return error_response(500, str(e))
    except Exception:
        logger.exception("SOAP note generation failed unexpectedly")
        return error_response(500, GENERIC_ERROR)

    return {"ok": True, "note": note}


@router.get("/pillars", response_model=PillarListResponse)
async def list_pillars(settings: Settings = Depends(get_settings)):
    """Pillar definitions and the name map used when a request omits one."""
    return {
        "ok": True,
        "pillars": [p.to_dict() for p in PILLARS],
        "default_pillar_name_map": settings.default_pillar_name_map,
    }
