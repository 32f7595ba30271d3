"""
Simulated analysis endpoint
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from truthcheck.core.logging_config import LoggingConfig
from truthcheck.services.simulated_analysis import SimulatedAnalysisService

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(prefix="/api", tags=["analysis"])


class AnalyzePayload(BaseModel):
    """Incoming body; blank text is answered with a service error, not a 422"""
    text: str = ""


def get_analysis_service() -> SimulatedAnalysisService:
    return SimulatedAnalysisService()


@router.post("/analyze")
async def analyze(
    payload: AnalyzePayload,
    service: SimulatedAnalysisService = Depends(get_analysis_service),
):
    """
    Analyze a piece of news text

    Returns:
        dict: {verdict, confidence, explanation, redFlags} or {error}
    """
    return await service.analyze_text(payload.text)
