"""
Emergency action plan (ADEP) wizard.

Steps: company → teams → scenarios → blueprint → preview. The next review
date of the plan is derived from the plan date and the hazard class. A
NACE code fills in the hazard class and sector, both of which stay editable.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from isg.core import validators
from isg.core.derivations import (
    HazardClass,
    hazard_class_for_nace,
    sector_for_nace,
    validity_date,
)
from isg.core.validators import as_number, is_filled
from isg.models.wizard_models import (
    DerivedField,
    FieldSpec,
    ProgressRule,
    Step,
    Validator,
    WizardDefinition,
)
from isg.wizards.scenarios import known_scenario_ids
from isg.wizards.teams import empty_teams, total_members, validate_teams

WIZARD_ID = "emergency-plan"


def _teams_valid(data: Mapping[str, Any]) -> bool:
    return validate_teams(data.get("teams")).valid


def _teams_message(data: Mapping[str, Any]) -> str:
    errors = validate_teams(data.get("teams")).errors
    return errors[0] if errors else "Emergency teams are understaffed"


TEAMS_VALIDATOR = Validator(
    name="teams",
    field="teams",
    message=_teams_message,
    check=_teams_valid,
)

SCENARIO_VALIDATOR = Validator(
    name="scenarios",
    field="scenarios",
    message="Select at least one emergency scenario",
    check=lambda data: len(known_scenario_ids(data.get("scenarios"))) > 0,
)


def _has_contact(data: Mapping[str, Any]) -> bool:
    return is_filled(data.get("contact_person")) and is_filled(data.get("contact_phone"))


def _has_employees(data: Mapping[str, Any]) -> bool:
    count = as_number(data.get("employee_count"))
    return count is not None and count >= 1


def build_definition() -> WizardDefinition:
    return WizardDefinition(
        id=WIZARD_ID,
        title="Acil Durum Eylem Planı",
        steps=[
            Step(
                id="company",
                label="İşyeri Bilgileri",
                validators=(
                    validators.required("company_name", "Company name is required"),
                    validators.required("address", "Company address is required"),
                    validators.required("contact_person", "Contact person is required"),
                    validators.required("contact_phone", "Contact phone is required"),
                    validators.min_number(
                        "employee_count", 1, "Employee count must be at least 1"
                    ),
                    validators.one_of(
                        "hazard_class",
                        [h.value for h in HazardClass],
                        "Select a hazard class",
                    ),
                ),
            ),
            Step(id="teams", label="Acil Durum Ekipleri", validators=(TEAMS_VALIDATOR,)),
            Step(id="scenarios", label="Senaryo Seçimi", validators=(SCENARIO_VALIDATOR,)),
            Step(id="blueprint", label="Tahliye Krokisi"),
            Step(id="preview", label="Önizleme"),
        ],
        fields=[
            FieldSpec("company_name", str, "", label="Firma Adı"),
            FieldSpec("address", str, "", label="Adres"),
            FieldSpec("nace_code", str, "", label="NACE Kodu"),
            FieldSpec("hazard_class", str, HazardClass.MEDIUM.value, label="Tehlike Sınıfı"),
            FieldSpec("employee_count", int, 50, label="Çalışan Sayısı"),
            FieldSpec("sector", str, "", label="Sektör"),
            FieldSpec("contact_person", str, "", label="Yetkili Kişi"),
            FieldSpec("contact_phone", str, "", label="Yetkili Telefon"),
            FieldSpec("teams", dict, default_factory=empty_teams, label="Ekipler"),
            FieldSpec("scenarios", list, [], label="Senaryolar"),
            FieldSpec("blueprint_image", str, "", label="Kroki"),
            FieldSpec(
                "plan_date",
                str,
                default_factory=lambda: date.today().isoformat(),
                label="Plan Tarihi",
            ),
            FieldSpec("next_review_date", str, None, label="Sonraki Gözden Geçirme"),
        ],
        derived=[
            DerivedField(
                name="hazard_class",
                inputs=("nace_code",),
                derive=hazard_class_for_nace,
                overridable=True,
            ),
            DerivedField(
                name="sector",
                inputs=("nace_code",),
                derive=sector_for_nace,
                overridable=True,
            ),
            DerivedField(
                name="next_review_date",
                inputs=("plan_date", "hazard_class"),
                derive=validity_date,
            ),
        ],
        progress_rules=[
            ProgressRule("company_name", 15, lambda d: is_filled(d.get("company_name"))),
            ProgressRule("address", 15, lambda d: is_filled(d.get("address"))),
            ProgressRule("contact", 10, _has_contact),
            ProgressRule("employee_count", 10, _has_employees),
            ProgressRule("team_member", 20, lambda d: total_members(d.get("teams")) > 0),
            ProgressRule(
                "scenario", 20, lambda d: len(known_scenario_ids(d.get("scenarios"))) > 0
            ),
            ProgressRule("blueprint", 10, lambda d: is_filled(d.get("blueprint_image"))),
        ],
    )
