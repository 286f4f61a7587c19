"""
Hazard Routes — AI Fine-Kinney analysis of observed hazards.

  POST /hazards/analyze          → one observation (text and/or one photo)
  POST /hazards/analyze-photos   → each photo in ``images`` analysed in turn

The band in every response is the scoring engine's, not the model's.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from isg.ai.hazard_analyzer import HazardAnalyzer
from isg.api.dependencies import get_hazard_analyzer
from isg.models.hazard_models import (
    HazardAnalysisRequest,
    HazardAnalysisResult,
    HazardBatchResult,
)

logger = logging.getLogger("isg.api.hazard")

router = APIRouter(prefix="/hazards", tags=["hazards"])


def _require(analyzer: HazardAnalyzer | None) -> HazardAnalyzer:
    if analyzer is None:
        raise HTTPException(
            status_code=503,
            detail="AI hazard analysis is not configured (GROQ_API_KEY missing)",
        )
    return analyzer


@router.post("/analyze", response_model=HazardAnalysisResult)
async def analyze_hazard(
    req: HazardAnalysisRequest,
    analyzer: HazardAnalyzer | None = Depends(get_hazard_analyzer),
):
    result = await _require(analyzer).analyze(req)
    if result is None:
        logger.warning("Hazard analysis returned no usable result")
        raise HTTPException(status_code=502, detail="AI hazard analysis failed")
    return result


@router.post("/analyze-photos", response_model=HazardBatchResult)
async def analyze_photos(
    req: HazardAnalysisRequest,
    analyzer: HazardAnalyzer | None = Depends(get_hazard_analyzer),
):
    if not req.images:
        raise HTTPException(status_code=422, detail="Provide at least one photo in 'images'")

    result = await _require(analyzer).analyze_photos(req)
    if result is None:
        logger.warning(f"None of {len(req.images)} photo(s) could be analysed")
        raise HTTPException(status_code=502, detail="AI hazard analysis failed for every photo")
    return result
