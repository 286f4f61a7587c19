"""
Risk Scoring Data Models — Fine-Kinney bands, scales and assessments.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class RiskBand(str, Enum):
    """Ordered Fine-Kinney bands, least to most severe."""

    ACCEPTABLE = "acceptable"
    POSSIBLE = "possible"
    SUBSTANTIAL = "substantial"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(RiskBand).index(self)


class BandInfo(BaseModel):
    """Display data for a single band."""

    band: RiskBand
    label: str
    local_label: str = Field(default="", description="Turkish label used on reports")
    recommendation: str
    upper_bound: float | None = Field(
        default=None, description="Inclusive upper score bound, None for the top band"
    )


class ScaleOption(BaseModel):
    """One selectable value of a risk factor scale."""

    value: float
    label: str


class RiskFactors(BaseModel):
    """A Fine-Kinney factor triple."""

    probability: float = Field(..., ge=0, allow_inf_nan=False)
    severity: float = Field(..., ge=0, allow_inf_nan=False)
    frequency: float = Field(..., ge=0, allow_inf_nan=False)


class RiskAssessment(BaseModel):
    """A scored and banded risk, ready for display or export."""

    score: float = Field(..., ge=0, allow_inf_nan=False)
    band: RiskBand
    label: str
    recommendation: str
    factors: RiskFactors | None = None
    source: Literal["manual", "ai"] = "manual"
    formula: str = Field(
        default="risk = probability × severity × frequency",
        description="Human-readable formula used",
    )
