"""AI analysis router"""

from fastapi import APIRouter, Depends

from catalyst_tracker.analysis_service import AnalysisService
from catalyst_tracker.api.dependencies import get_analysis_service
from catalyst_tracker.api.schemas import ErrorResponse
from catalyst_tracker.models.analysis import AiAnalysis

router = APIRouter(prefix="/analyses", tags=["analyses"])


@router.get(
    "/{event_id}",
    response_model=AiAnalysis,
    responses={404: {"model": ErrorResponse, "description": "No analysis stored for event"}},
    summary="Get stored AI analysis",
)
async def get_analysis(
    event_id: str,
    service: AnalysisService = Depends(get_analysis_service),
):
    return await service.get_analysis(event_id)


@router.post(
    "/{event_id}",
    response_model=AiAnalysis,
    responses={
        404: {"model": ErrorResponse, "description": "Event not found"},
        500: {"model": ErrorResponse, "description": "Generation or upstream failure"},
        503: {"model": ErrorResponse, "description": "AI analysis not configured"},
    },
    summary="Generate AI analysis",
    description="Return the event's analysis, generating it on first request. "
    "An event is only ever analysed once.",
)
async def generate_analysis(
    event_id: str,
    service: AnalysisService = Depends(get_analysis_service),
):
    return await service.generate_or_fetch(event_id)
