"""
Risk Routes — Fine-Kinney scoring for the host UI.

  GET  /risk/scales    → selectable factor values
  POST /risk/score     → score + band for a factor triple
  POST /risk/classify  → band for a pre-computed score
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from isg.core.risk_scorer import BAND_INFO, assess, assess_score
from isg.core.scales import is_scale_value, scale_options
from isg.models.risk_models import RiskAssessment
from isg.models.session_models import ClassifyRequest, ScoreRequest

logger = logging.getLogger("isg.api.risk")

router = APIRouter(prefix="/risk", tags=["risk"])


@router.get("/scales")
async def get_scales():
    """Factor scales and band definitions."""
    return {
        "scales": scale_options(),
        "bands": [info.model_dump() for info in BAND_INFO.values()],
    }


@router.post("/score", response_model=RiskAssessment)
async def score_risk(req: ScoreRequest):
    """Score a probability × severity × frequency triple."""
    if req.strict:
        invalid = [
            name
            for name in ("probability", "severity", "frequency")
            if not is_scale_value(name, getattr(req, name))
        ]
        if invalid:
            logger.info(f"Strict scoring rejected off-scale values: {invalid}")
            raise HTTPException(
                status_code=422,
                detail=f"Values not on the Fine-Kinney scale: {', '.join(invalid)}",
            )

    return assess(req.probability, req.severity, req.frequency)


@router.post("/classify", response_model=RiskAssessment)
async def classify_score(req: ClassifyRequest):
    """Band a score computed elsewhere (e.g. by an AI analysis)."""
    return assess_score(req.score, source="ai")
