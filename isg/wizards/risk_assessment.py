"""
Risk assessment report wizard.

Steps: firm → management → risk → actions → reports → preview.
The report validity date follows the hazard class (6 / 4 / 2 years). A
Fine-Kinney triple or an AI-supplied score, when present, is scored into
the submitted record.
"""

from __future__ import annotations

import base64
import binascii
from datetime import date
from typing import Any, Mapping

from isg.config import settings
from isg.core import validators
from isg.core.derivations import HazardClass, hazard_class_for_nace, validity_date
from isg.core.validators import as_number, is_filled
from isg.models.wizard_models import (
    DerivedField,
    FieldSpec,
    ProgressRule,
    Step,
    Validator,
    WizardDefinition,
)

WIZARD_ID = "risk-assessment"

RISK_FIELDS = ("probability", "severity", "frequency")


def data_url_size(value: str) -> int:
    """Decoded byte size of a base64 data URL (or bare base64 string)."""
    payload = value.split(",", 1)[1] if value.startswith("data:") and "," in value else value
    try:
        return len(base64.b64decode(payload, validate=False))
    except (binascii.Error, ValueError):
        return len(payload)


def _logo_within_limit(data: Mapping[str, Any]) -> bool:
    logo = data.get("logo")
    if not is_filled(logo):
        return True
    return isinstance(logo, str) and data_url_size(logo) <= settings.max_logo_bytes


def has_complete_factors(data: Mapping[str, Any]) -> bool:
    return all(as_number(data.get(name)) is not None for name in RISK_FIELDS)


def has_risk_basis(data: Mapping[str, Any]) -> bool:
    """A full factor triple, an AI score or a written risk description."""
    return (
        has_complete_factors(data)
        or as_number(data.get("ai_risk_score")) is not None
        or is_filled(data.get("risks"))
    )


LOGO_VALIDATOR = Validator(
    name="logo_size",
    field="logo",
    message="Logo must not exceed 2MB",
    check=_logo_within_limit,
)

RISK_BASIS_VALIDATOR = Validator(
    name="risk_basis",
    field="risks",
    message="Score the risk (probability, severity, frequency) or describe the identified risks",
    check=has_risk_basis,
)


def build_definition() -> WizardDefinition:
    return WizardDefinition(
        id=WIZARD_ID,
        title="Risk Değerlendirme Raporu",
        steps=[
            Step(
                id="firm",
                label="Firma Bilgileri",
                validators=(
                    validators.required("firm_name", "Firm name is required"),
                    validators.one_of(
                        "hazard_class",
                        [h.value for h in HazardClass],
                        "Select a hazard class",
                    ),
                    validators.valid_date("report_date", "Report date must be a valid date"),
                    LOGO_VALIDATOR,
                ),
            ),
            Step(id="management", label="Yönetimi"),
            Step(
                id="risk",
                label="Risk Eşleme",
                validators=(
                    validators.optional_scale_value("probability", "probability"),
                    validators.optional_scale_value("severity", "severity"),
                    validators.optional_scale_value("frequency", "frequency"),
                    RISK_BASIS_VALIDATOR,
                ),
            ),
            Step(id="actions", label="İşlemler"),
            Step(id="reports", label="Raporlar"),
            Step(id="preview", label="Önizleme PDF"),
        ],
        fields=[
            FieldSpec("firm_name", str, "", label="Firma Adı"),
            FieldSpec("nace_code", str, "", label="NACE Kodu"),
            FieldSpec("hazard_class", str, HazardClass.MEDIUM.value, label="Tehlike Sınıfı"),
            FieldSpec(
                "report_date",
                str,
                default_factory=lambda: date.today().isoformat(),
                label="Rapor Tarihi",
            ),
            FieldSpec("validity_date", str, None, label="Geçerlilik Tarihi"),
            FieldSpec("logo", str, None, label="Logo"),
            FieldSpec("observations", str, "", label="Gözlemler"),
            FieldSpec("measures", str, "", label="Alınması Gereken Önlemler"),
            FieldSpec("risks", str, "", label="Belirlenen Riskler"),
            FieldSpec("compliance", str, "", label="Mevzuat Uygunluğu"),
            FieldSpec("probability", (int, float), None, label="Olasılık"),
            FieldSpec("severity", (int, float), None, label="Şiddet"),
            FieldSpec("frequency", (int, float), None, label="Frekans"),
            FieldSpec("ai_risk_score", (int, float), None, label="AI Risk Skoru"),
        ],
        derived=[
            DerivedField(
                name="hazard_class",
                inputs=("nace_code",),
                derive=hazard_class_for_nace,
                overridable=True,
            ),
            DerivedField(
                name="validity_date",
                inputs=("report_date", "hazard_class"),
                derive=validity_date,
            ),
        ],
        progress_rules=[
            ProgressRule("firm_name", 20, lambda d: is_filled(d.get("firm_name"))),
            ProgressRule("report_date", 10, lambda d: d.get("validity_date") is not None),
            ProgressRule("observations", 15, lambda d: is_filled(d.get("observations"))),
            ProgressRule("measures", 15, lambda d: is_filled(d.get("measures"))),
            ProgressRule("risks", 15, lambda d: is_filled(d.get("risks"))),
            ProgressRule("compliance", 15, lambda d: is_filled(d.get("compliance"))),
            ProgressRule(
                "risk_scored",
                10,
                lambda d: has_complete_factors(d) or as_number(d.get("ai_risk_score")) is not None,
            ),
        ],
        risk_fields=RISK_FIELDS,
        ai_score_field="ai_risk_score",
    )
