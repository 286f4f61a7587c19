"""
Hazard Analysis Models — Schemas for AI hazard analysis input/output.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from isg.models.risk_models import RiskAssessment


class HazardAnalysisRequest(BaseModel):
    """
    Request body for /hazards/analyze and /hazards/analyze-photos.

    A photo may stand on its own: the description is only required when no
    image is sent.
    """

    description: str = Field(default="", max_length=4000, description="Observed condition")
    location: str = Field(default="", description="Where the hazard was observed")
    sector: str = Field(default="", description="Workplace sector")
    image_url: str | None = Field(
        default=None, description="Optional photo (https or data URL) for vision models"
    )
    images: list[str] = Field(
        default_factory=list,
        max_length=20,
        description="Photos analysed one by one by /hazards/analyze-photos",
    )

    @model_validator(mode="after")
    def _needs_description_or_photo(self) -> "HazardAnalysisRequest":
        if not self.description.strip() and not self.image_url and not self.images:
            raise ValueError("Provide a description or at least one photo")
        return self


class HazardAnalysis(BaseModel):
    """Validated AI analysis. Accepts the camelCase keys the model is asked for."""

    model_config = ConfigDict(populate_by_name=True)

    hazard_description: str = Field(..., alias="hazardDescription", min_length=1)
    probability: float = Field(default=3, ge=0)
    frequency: float = Field(default=6, ge=0)
    severity: float = Field(default=15, ge=0)
    risk_score: float = Field(..., alias="riskScore", ge=0)
    reported_level: str | None = Field(
        default=None, alias="riskLevel", description="Band label claimed by the model"
    )
    legal_reference: str = Field(default="6331 Sayılı İSG Kanunu", alias="legalReference")
    immediate_action: str = Field(default="Acil müdahale gerekli", alias="immediateAction")
    preventive_action: str = Field(default="Kalıcı önlem alınmalı", alias="preventiveAction")
    justification: str = Field(default="Risk analizi yapılmıştır")


class HazardAnalysisResult(BaseModel):
    """AI analysis plus the band re-derived by the scoring engine."""

    analysis: HazardAnalysis
    assessment: RiskAssessment
    model: str = ""
    tokens_used: int = 0
    repaired: bool = Field(
        default=False, description="True if the raw model output needed JSON repair"
    )
    photo_number: int | None = Field(
        default=None, description="1-based position of the photo in a batch"
    )


class HazardBatchSummary(BaseModel):
    total_photos: int
    analyzed_photos: int
    highest_risk: RiskAssessment | None = None
    processing_seconds: float = 0.0


class HazardBatchResult(BaseModel):
    """Per-photo analyses; photos the model failed on are left out."""

    photo_analyses: list[HazardAnalysisResult]
    summary: HazardBatchSummary
