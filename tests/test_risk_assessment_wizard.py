"""
Tests for the risk assessment report wizard.
"""

import base64
from datetime import date

import pytest
from dateutil.relativedelta import relativedelta

from isg.config import settings
from isg.models.risk_models import RiskBand
from isg.wizards.risk_assessment import data_url_size, has_risk_basis


def _pass_firm_step(session):
    session.set_fields({"firm_name": "Acme Metal", "report_date": "2026-01-10"})


def test_defaults(risk_session):
    today = date.today()
    assert risk_session.data["hazard_class"] == "Tehlikeli"
    assert risk_session.data["report_date"] == today.isoformat()
    assert risk_session.data["validity_date"] == (today + relativedelta(years=4)).isoformat()


def test_validity_follows_hazard_class(risk_session):
    risk_session.set_fields({"report_date": "2026-01-10", "hazard_class": "Çok Tehlikeli"})
    assert risk_session.data["validity_date"] == "2028-01-10"

    risk_session.set_field("hazard_class", "Az Tehlikeli")
    assert risk_session.data["validity_date"] == "2032-01-10"


def test_nace_code_sets_class_and_validity(risk_session):
    risk_session.set_fields({"report_date": "2026-01-10", "nace_code": "42.11"})
    assert risk_session.data["hazard_class"] == "Çok Tehlikeli"
    assert risk_session.data["validity_date"] == "2028-01-10"
    assert "sector" not in risk_session.data


def test_firm_name_gates_first_step(risk_session):
    result = risk_session.next_step()
    assert result.ok is False
    assert result.error.validator == "required:firm_name"

    _pass_firm_step(risk_session)
    assert risk_session.next_step().ok is True


def test_invalid_report_date_blocks(risk_session):
    risk_session.set_fields({"firm_name": "Acme", "report_date": "yesterday"})
    result = risk_session.next_step()
    assert result.error.validator == "date:report_date"


def test_oversized_logo_blocks(risk_session, monkeypatch):
    monkeypatch.setattr(settings, "max_logo_bytes", 4)
    _pass_firm_step(risk_session)
    risk_session.set_field("logo", "data:image/png;base64," + base64.b64encode(b"hello").decode())

    result = risk_session.next_step()
    assert result.ok is False
    assert result.error.validator == "logo_size"

    risk_session.set_field("logo", "data:image/png;base64," + base64.b64encode(b"hi").decode())
    assert risk_session.next_step().ok is True


def test_data_url_size():
    assert data_url_size("data:image/png;base64,aGVsbG8=") == 5
    assert data_url_size("aGVsbG8=") == 5


def test_risk_step_needs_basis(risk_session):
    _pass_firm_step(risk_session)
    result = risk_session.go_to_step(3)
    assert result.ok is False
    assert result.error.step_id == "risk"
    assert result.error.validator == "risk_basis"

    risk_session.set_field("risks", "Açık elektrik panosu")
    assert risk_session.go_to_step(3).ok is True


def test_factor_must_be_on_scale(risk_session):
    _pass_firm_step(risk_session)
    risk_session.set_fields({"probability": 4, "severity": 7, "frequency": 2})
    result = risk_session.go_to_step(3)
    assert result.error.validator == "scale:probability"

    risk_session.set_field("probability", 3)
    assert risk_session.go_to_step(3).ok is True


def test_has_risk_basis():
    assert not has_risk_basis({})
    assert has_risk_basis({"probability": 3, "severity": 7, "frequency": 2})
    assert has_risk_basis({"ai_risk_score": 0})
    assert not has_risk_basis({"probability": 3, "severity": 7})


def test_manual_triple_is_scored(risk_session):
    risk_session.set_fields({"probability": 3, "severity": 7, "frequency": 2})
    assessment = risk_session.risk_assessment()
    assert assessment.score == 42
    assert assessment.band == RiskBand.POSSIBLE
    assert assessment.source == "manual"


def test_ai_score_used_without_triple(risk_session):
    risk_session.set_field("ai_risk_score", 250)
    assessment = risk_session.risk_assessment()
    assert assessment.band == RiskBand.HIGH
    assert assessment.source == "ai"


def test_no_assessment_without_inputs(risk_session):
    assert risk_session.risk_assessment() is None


@pytest.mark.parametrize("score", ["nan", "inf", "1e400"])
def test_non_finite_ai_score_is_not_a_risk_basis(risk_session, score):
    risk_session.set_field("ai_risk_score", score)
    assert risk_session.risk_assessment() is None
    assert not has_risk_basis(risk_session.data)


def test_progress(risk_session):
    # The default report date already yields a validity date
    assert risk_session.compute_progress() == 10

    risk_session.set_fields({
        "firm_name": "Acme",
        "observations": "Gözlem",
        "measures": "Önlem",
        "risks": "Risk",
        "compliance": "Uygun",
        "probability": 3,
        "severity": 7,
        "frequency": 2,
    })
    assert risk_session.compute_progress() == 100


def test_full_submission(risk_session):
    _pass_firm_step(risk_session)
    risk_session.set_fields({"probability": 6, "severity": 40, "frequency": 6})
    assert risk_session.go_to_step(5).ok is True

    result = risk_session.submit()
    assert result.ok is True
    assert result.record["firm_name"] == "Acme Metal"
    assert result.record["validity_date"] == "2030-01-10"
    assert result.record["risk_score"] == 1440
    assert result.record["risk_band"] == "critical"
    assert result.record["risk_label"] == "Critical"
    assert risk_session.data["firm_name"] == ""
