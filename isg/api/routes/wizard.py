"""
Wizard Routes — drive wizard sessions from a remote UI.

  GET    /wizards                          → available wizard definitions
  POST   /wizards/{wizard_id}/sessions     → open (or resume) a session; 409 if the
                                             resume id is open under another wizard
  GET    /sessions/{session_id}            → current state and progress
  PATCH  /sessions/{session_id}/fields     → set fields
  POST   /sessions/{session_id}/navigate   → gated step transition
  POST   /sessions/{session_id}/submit     → validate, hand off, close
  DELETE /sessions/{session_id}            → cancel and drop the draft
  GET    /drafts                           → saved drafts that can be resumed
  GET    /submissions                      → recent submissions from the audit trail

Validation failures are part of the normal response (``ok: false``), not
HTTP errors.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from isg.api.dependencies import get_audit_logger, get_session_manager
from isg.audit.logger import AuditLogger
from isg.export.document_fields import build_document_fields, export_name
from isg.models.session_models import (
    CreateSessionRequest,
    DraftSummary,
    FieldUpdateRequest,
    NavigateRequest,
    NavigateResponse,
    SessionState,
    SubmitResponse,
)
from isg.wizards.registry import WIZARD_REGISTRY, describe_definition, get_definition
from isg.workers.session_manager import SessionConflictError, SessionManager

logger = logging.getLogger("isg.api.wizard")

router = APIRouter(tags=["wizards"])


def _state_or_404(manager: SessionManager, session_id: str) -> SessionState:
    try:
        return manager.state(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")


@router.get("/wizards")
async def list_wizards():
    return {"wizards": [describe_definition(get_definition(w)) for w in WIZARD_REGISTRY]}


@router.post("/wizards/{wizard_id}/sessions", response_model=SessionState, status_code=201)
async def create_session(
    wizard_id: str,
    req: CreateSessionRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        session_id, _ = manager.create(
            wizard_id, data=req.data, resume_session_id=req.resume_session_id
        )
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown wizard: {wizard_id}")
    except SessionConflictError as e:
        logger.warning(f"Resume conflict for '{wizard_id}': {e}")
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        logger.warning(f"Rejected session request for '{wizard_id}': {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Opened {wizard_id} session {session_id}")
    return manager.state(session_id)


@router.get("/sessions/{session_id}", response_model=SessionState)
async def get_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    return _state_or_404(manager, session_id)


@router.patch("/sessions/{session_id}/fields", response_model=SessionState)
async def update_fields(
    session_id: str,
    req: FieldUpdateRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        manager.update_fields(session_id, req.fields)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return manager.state(session_id)


@router.post("/sessions/{session_id}/navigate", response_model=NavigateResponse)
async def navigate(
    session_id: str,
    req: NavigateRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    if req.target_index is None and req.direction is None:
        raise HTTPException(status_code=422, detail="Provide target_index or direction")

    try:
        transition = manager.navigate(
            session_id, target_index=req.target_index, direction=req.direction
        )
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")

    return NavigateResponse(transition=transition, session=manager.state(session_id))


@router.post("/sessions/{session_id}/submit", response_model=SubmitResponse)
async def submit(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        wizard_id = manager.get(session_id).definition.id
        result = manager.submit(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")

    if not result.ok or result.record is None:
        return SubmitResponse(result=result)

    return SubmitResponse(
        result=result,
        document_fields=build_document_fields(
            result.record, result.assessment, wizard_id=wizard_id
        ),
        filename=export_name(wizard_id, result.record),
    )


@router.delete("/sessions/{session_id}")
async def cancel_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    if not manager.close(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"status": "cancelled", "session_id": session_id}


@router.get("/drafts", response_model=list[DraftSummary])
async def list_drafts(
    wizard_id: str | None = None,
    manager: SessionManager = Depends(get_session_manager),
):
    return manager.list_drafts(wizard_id)


@router.get("/submissions")
async def recent_submissions(
    wizard_id: str | None = None,
    count: int = Query(default=50, ge=1, le=500),
    audit: AuditLogger = Depends(get_audit_logger),
):
    return {"submissions": audit.read_recent(count, wizard_id=wizard_id)}
