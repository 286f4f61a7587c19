"""
Risk Scoring Engine — Fine-Kinney scores and bands.

Risk Score = probability × severity × frequency

The score is mapped to one of five ordered bands by ascending upper bounds
(20, 70, 200, 400). A score equal to a bound belongs to the lower band.
Scores supplied by an AI analysis go through the same ``classify`` so that
manual and AI results are banded identically.
"""

from __future__ import annotations

import logging
import math
import sys

from isg.models.risk_models import BandInfo, RiskAssessment, RiskBand, RiskFactors

logger = logging.getLogger("isg.risk")

# Ordered (upper_bound, band); the last band has no upper bound
BAND_THRESHOLDS: list[tuple[float, RiskBand]] = [
    (20, RiskBand.ACCEPTABLE),
    (70, RiskBand.POSSIBLE),
    (200, RiskBand.SUBSTANTIAL),
    (400, RiskBand.HIGH),
]

BAND_INFO: dict[RiskBand, BandInfo] = {
    RiskBand.ACCEPTABLE: BandInfo(
        band=RiskBand.ACCEPTABLE,
        label="Acceptable",
        local_label="Kabul Edilebilir",
        recommendation="Risk is acceptable. No immediate action required.",
        upper_bound=20,
    ),
    RiskBand.POSSIBLE: BandInfo(
        band=RiskBand.POSSIBLE,
        label="Possible",
        local_label="Olası",
        recommendation="Attention required. Keep the hazard under regular review.",
        upper_bound=70,
    ),
    RiskBand.SUBSTANTIAL: BandInfo(
        band=RiskBand.SUBSTANTIAL,
        label="Substantial",
        local_label="Önemli",
        recommendation="Correction required. Put control measures in place promptly.",
        upper_bound=200,
    ),
    RiskBand.HIGH: BandInfo(
        band=RiskBand.HIGH,
        label="High",
        local_label="Yüksek",
        recommendation="Immediate correction required before work continues.",
        upper_bound=400,
    ),
    RiskBand.CRITICAL: BandInfo(
        band=RiskBand.CRITICAL,
        label="Critical",
        local_label="Kritik",
        recommendation="Stop the activity immediately. Critical intervention required.",
        upper_bound=None,
    ),
}


def compute_score(probability: float, severity: float, frequency: float) -> float:
    """Fine-Kinney score. Scale membership is the caller's concern."""
    return float(probability) * float(severity) * float(frequency)


def classify(score: float) -> RiskBand:
    """Return the unique band whose range contains ``score``."""
    for upper_bound, band in BAND_THRESHOLDS:
        if score <= upper_bound:
            return band
    return RiskBand.CRITICAL


def describe(band: RiskBand) -> BandInfo:
    """Label and recommendation text for a band."""
    return BAND_INFO[band]


def bounded_score(score: float) -> float:
    """Map a raw score into the finite, non-negative score domain."""
    score = float(score)
    if math.isnan(score) or score < 0:
        logger.warning(f"Risk score {score} outside the score domain, using 0")
        return 0.0
    if math.isinf(score):
        logger.warning("Infinite risk score capped to the largest float")
        return sys.float_info.max
    return score


def assess(probability: float, severity: float, frequency: float) -> RiskAssessment:
    """Score, band and describe a manually selected factor triple."""
    score = bounded_score(compute_score(probability, severity, frequency))
    info = describe(classify(score))
    return RiskAssessment(
        score=score,
        band=info.band,
        label=info.label,
        recommendation=info.recommendation,
        factors=RiskFactors(
            probability=probability, severity=severity, frequency=frequency
        ),
        source="manual",
    )


def assess_score(
    score: float,
    factors: RiskFactors | None = None,
    source: str = "ai",
) -> RiskAssessment:
    """
    Band a pre-computed score, typically one returned by an AI analysis.

    Negative and NaN inputs become 0 and infinities are capped, so the
    result always stays inside the finite, non-negative score domain.
    """
    score = bounded_score(score)
    info = describe(classify(score))
    return RiskAssessment(
        score=score,
        band=info.band,
        label=info.label,
        recommendation=info.recommendation,
        factors=factors,
        source=source,
    )
