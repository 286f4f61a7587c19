"""
Session Request/Response Models — API contract schemas.

These are the public-facing Pydantic models used by the FastAPI endpoints
that drive wizard sessions and risk scoring.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from isg.models.risk_models import RiskAssessment
from isg.models.wizard_models import StepTransition, SubmissionResult


class ScoreRequest(BaseModel):
    """Request body for /risk/score."""

    probability: float = Field(..., ge=0, allow_inf_nan=False)
    severity: float = Field(..., ge=0, allow_inf_nan=False)
    frequency: float = Field(..., ge=0, allow_inf_nan=False)
    strict: bool = Field(
        default=False, description="Reject values that are not on the Fine-Kinney scales"
    )


class ClassifyRequest(BaseModel):
    """Request body for /risk/classify."""

    score: float = Field(..., ge=0, allow_inf_nan=False)


class CreateSessionRequest(BaseModel):
    """Request body for POST /wizards/{wizard_id}/sessions."""

    data: dict[str, Any] = Field(default_factory=dict)
    resume_session_id: str | None = Field(
        default=None, description="Restore the saved draft of this session id"
    )


class FieldUpdateRequest(BaseModel):
    fields: dict[str, Any] = Field(..., min_length=1)


class NavigateRequest(BaseModel):
    """Either an explicit target index or a relative direction."""

    target_index: int | None = None
    direction: Literal["next", "previous"] | None = None


class SessionState(BaseModel):
    session_id: str
    wizard_id: str
    current_step_index: int
    current_step_id: str
    step_count: int
    progress: int = Field(default=0, ge=0, le=100)
    data: dict[str, Any] = Field(default_factory=dict)
    assessment: RiskAssessment | None = None


class NavigateResponse(BaseModel):
    transition: StepTransition
    session: SessionState


class SubmitResponse(BaseModel):
    result: SubmissionResult
    document_fields: dict[str, str | int | float] | None = None
    filename: str | None = Field(default=None, description="Suggested download name")


class DraftSummary(BaseModel):
    """A saved draft that can be resumed."""

    session_id: str
    wizard_id: str
    current_step_index: int
    is_open: bool = Field(description="True if the session is also open in memory")


class AuditEntry(BaseModel):
    """Audit metadata for a submitted wizard."""

    session_id: str
    wizard_id: str
    fields_submitted: int
    risk_score: float | None = None
    risk_band: str | None = None
    ai_assisted: bool = False
