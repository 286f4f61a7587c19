"""
FastAPI Dependencies — Shared singletons injected via Depends().
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from isg.ai.hazard_analyzer import HazardAnalyzer
from isg.audit.logger import AuditLogger
from isg.config import settings
from isg.drafts.store import DraftStore
from isg.llm.gateway import LLMGateway
from isg.workers.session_manager import SessionManager


@lru_cache
def get_draft_store() -> DraftStore:
    """Shared draft store singleton."""
    return DraftStore()


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Shared audit logger singleton."""
    return AuditLogger()


@lru_cache
def get_session_manager() -> SessionManager:
    """Shared session manager singleton."""
    return SessionManager(
        drafts=get_draft_store(),
        audit=get_audit_logger(),
    )


@lru_cache
def get_llm_gateway() -> LLMGateway | None:
    """Shared LLM gateway singleton; None when no API key is configured."""
    if not settings.groq_api_key:
        return None
    return LLMGateway()


def get_hazard_analyzer(
    gateway: LLMGateway | None = Depends(get_llm_gateway),
) -> HazardAnalyzer | None:
    return HazardAnalyzer(gateway) if gateway is not None else None
