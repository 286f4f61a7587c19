"""
Health Check Route — GET /health
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from isg.api.dependencies import get_llm_gateway
from isg.config import settings
from isg.llm.gateway import LLMGateway
from isg.wizards.registry import WIZARD_REGISTRY

router = APIRouter()


@router.get("/health")
async def health(gateway: LLMGateway | None = Depends(get_llm_gateway)):
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": "1.0.0",
        "model": settings.isg_model,
        "ai_enabled": gateway is not None,
        "tokens_used": gateway.tokens_used if gateway is not None else 0,
        "wizards": sorted(WIZARD_REGISTRY),
    }
