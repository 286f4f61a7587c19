"""
Tests for Risk Scorer — Fine-Kinney formula, bands and descriptions.
"""

import sys

import pytest

from isg.core.risk_scorer import (
    BAND_INFO,
    assess,
    assess_score,
    classify,
    compute_score,
    describe,
)
from isg.core.scales import is_scale_value, scale_options, scale_values
from isg.core.validators import as_number
from isg.models.risk_models import RiskBand


def test_score_is_product_of_factors():
    assert compute_score(3, 7, 2) == 42
    assert compute_score(10, 100, 10) == 10_000
    assert compute_score(0.1, 1, 0.5) == pytest.approx(0.05)


@pytest.mark.parametrize(
    "score, band",
    [
        (0, RiskBand.ACCEPTABLE),
        (20, RiskBand.ACCEPTABLE),
        (20.0001, RiskBand.POSSIBLE),
        (70, RiskBand.POSSIBLE),
        (70.01, RiskBand.SUBSTANTIAL),
        (200, RiskBand.SUBSTANTIAL),
        (200.5, RiskBand.HIGH),
        (400, RiskBand.HIGH),
        (400.01, RiskBand.CRITICAL),
        (500, RiskBand.CRITICAL),
        (1_000_000, RiskBand.CRITICAL),
    ],
)
def test_band_boundaries(score, band):
    assert classify(score) == band


def test_band_labels_match_boundaries():
    assert describe(classify(20)).label == "Acceptable"
    assert describe(classify(20.0001)).label == "Possible"
    assert describe(classify(70.01)).label == "Substantial"
    assert describe(classify(500)).label == "Critical"


def test_classification_is_monotonic():
    scores = [0, 5, 19.9, 20, 21, 69, 70, 71, 150, 200, 201, 399, 400, 401, 9000]
    ranks = [classify(s).rank for s in scores]
    assert ranks == sorted(ranks)


def test_classify_is_pure():
    assert classify(250) == classify(250) == RiskBand.HIGH


def test_every_band_described():
    assert set(BAND_INFO) == set(RiskBand)
    for band in RiskBand:
        info = describe(band)
        assert info.label
        assert info.local_label
        assert info.recommendation
    assert describe(RiskBand.CRITICAL).upper_bound is None


def test_assess_manual_triple():
    result = assess(6, 40, 6)
    assert result.score == 1440
    assert result.band == RiskBand.CRITICAL
    assert result.source == "manual"
    assert result.factors.severity == 40
    assert result.recommendation == describe(RiskBand.CRITICAL).recommendation


def test_assess_score_uses_same_bands_as_manual():
    manual = assess(3, 7, 2)
    ai = assess_score(42)
    assert ai.band == manual.band == RiskBand.POSSIBLE
    assert ai.source == "ai"


def test_assess_score_clamps_negative():
    result = assess_score(-5)
    assert result.score == 0
    assert result.band == RiskBand.ACCEPTABLE


def test_assess_score_keeps_nan_and_infinity_in_domain():
    nan = assess_score(float("nan"))
    assert nan.score == 0
    assert nan.band == RiskBand.ACCEPTABLE

    infinite = assess_score(float("inf"))
    assert infinite.score == sys.float_info.max
    assert infinite.band == RiskBand.CRITICAL


def test_overflowing_factors_are_capped():
    result = assess(1e200, 1e200, 1)
    assert result.score == sys.float_info.max
    assert result.band == RiskBand.CRITICAL


@pytest.mark.parametrize("value", ["nan", "inf", "-inf", "1e400", float("nan"), True, None, "abc"])
def test_as_number_rejects_non_finite_and_non_numeric(value):
    assert as_number(value) is None


def test_as_number_accepts_numeric_strings():
    assert as_number("42") == 42
    assert as_number(0) == 0


def test_scales_membership():
    assert scale_values("severity") == [1, 3, 7, 15, 40, 100]
    assert is_scale_value("probability", 0.5)
    assert is_scale_value("probability", "6")
    assert not is_scale_value("probability", 4)
    assert not is_scale_value("frequency", "often")
    assert not is_scale_value("frequency", None)


def test_scale_options_shape():
    options = scale_options()
    assert set(options) == {"probability", "severity", "frequency"}
    assert options["frequency"][0] == {"value": 0.5, "label": "Once a year"}
