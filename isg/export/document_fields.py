"""
Document fields — flat key/value inputs for the PDF/DOCX renderer.

The renderer is a templating collaborator: it receives a flat mapping of
``key -> str | int | float`` and never sees nested structures. Nested dicts
become dotted keys, lists of scalars are joined, lists of records are
counted and enumerated.
"""

from __future__ import annotations

import re
import time
from typing import Any

from isg.models.risk_models import RiskAssessment
from isg.wizards import emergency_plan, risk_assessment
from isg.wizards.scenarios import selected_scenarios
from isg.wizards.teams import TEAM_REQUIREMENTS, recommended_team_sizes

FieldValue = str | int | float

# Letters (including Turkish), digits, whitespace and basic punctuation
_UNSAFE_CHARS = re.compile(r"[^\w\s\-.,!?;:()/%'\"]", re.UNICODE)
_WHITESPACE = re.compile(r"[ \t]+")


def clean_text(text: str) -> str:
    """Drop characters the report fonts cannot render (emoji, symbols)."""
    cleaned = _UNSAFE_CHARS.sub("", text)
    return _WHITESPACE.sub(" ", cleaned).strip()


def _scalar(value: Any) -> FieldValue:
    if isinstance(value, bool):
        return "Evet" if value else "Hayır"
    if isinstance(value, (int, float)):
        return value
    return clean_text(str(value))


def _flatten(prefix: str, value: Any, out: dict[str, FieldValue]) -> None:
    if value is None:
        return
    if isinstance(value, dict):
        for key, item in value.items():
            _flatten(f"{prefix}.{key}" if prefix else str(key), item, out)
        return
    if isinstance(value, (list, tuple)):
        out[f"{prefix}.count"] = len(value)
        if all(not isinstance(item, (dict, list, tuple)) for item in value):
            out[prefix] = ", ".join(str(_scalar(item)) for item in value if item is not None)
        else:
            for index, item in enumerate(value, start=1):
                _flatten(f"{prefix}.{index}", item, out)
        return
    if isinstance(value, str) and value.startswith("data:"):
        # Embedded images pass through untouched for the renderer to decode
        out[prefix] = value
        return
    out[prefix] = _scalar(value)


def _plan_fields(data: dict[str, Any], fields: dict[str, FieldValue]) -> None:
    """Scenario procedures and team minimums the plan template prints."""
    for index, scenario in enumerate(selected_scenarios(data.get("scenarios")), start=1):
        prefix = f"scenario.{index}"
        fields[f"{prefix}.name"] = clean_text(scenario.name)
        fields[f"{prefix}.risk_level"] = scenario.risk_level
        fields[f"{prefix}.duration"] = scenario.estimated_duration
        fields[f"{prefix}.team"] = TEAM_REQUIREMENTS[scenario.responsible_team]["label"]
        fields[f"{prefix}.equipment"] = ", ".join(
            clean_text(item) for item in scenario.required_equipment
        )
        for step, procedure in enumerate(scenario.procedures, start=1):
            fields[f"{prefix}.procedure.{step}"] = clean_text(procedure)

    for team, required in recommended_team_sizes().items():
        fields[f"teams.{team}.label"] = TEAM_REQUIREMENTS[team]["label"]
        fields[f"teams.{team}.required"] = required


def build_document_fields(
    data: dict[str, Any],
    assessment: RiskAssessment | None = None,
    wizard_id: str | None = None,
) -> dict[str, FieldValue]:
    """
    Flatten a submitted record plus its risk assessment.

    Emergency plans also get the catalogue details of each selected
    scenario and the minimum size of every team.
    """
    fields: dict[str, FieldValue] = {}
    for key, value in data.items():
        _flatten(key, value, fields)

    if wizard_id == emergency_plan.WIZARD_ID:
        _plan_fields(data, fields)

    if assessment is not None:
        fields["risk.score"] = round(assessment.score, 2)
        fields["risk.band"] = assessment.band.value
        fields["risk.label"] = assessment.label
        fields["risk.recommendation"] = assessment.recommendation
        fields["risk.source"] = assessment.source
        if assessment.factors is not None:
            fields["risk.probability"] = assessment.factors.probability
            fields["risk.severity"] = assessment.factors.severity
            fields["risk.frequency"] = assessment.factors.frequency
            fields["risk.formula"] = (
                f"{assessment.factors.probability:g} × {assessment.factors.severity:g} × "
                f"{assessment.factors.frequency:g} = {assessment.score:.1f}"
            )

    return fields


def export_filename(prefix: str, name: str, extension: str = "pdf", timestamp: int | None = None) -> str:
    """e.g. ``ADEP-Acme-Metal-1767225600000.pdf``"""
    slug = re.sub(r"\s+", "-", clean_text(name)) or "untitled"
    millis = timestamp if timestamp is not None else int(time.time() * 1000)
    return f"{prefix}-{slug}-{millis}.{extension}"


EXPORT_PREFIXES: dict[str, tuple[str, str]] = {
    emergency_plan.WIZARD_ID: ("ADEP", "company_name"),
    risk_assessment.WIZARD_ID: ("Risk_Raporu", "firm_name"),
}


def export_name(wizard_id: str, record: dict[str, Any], timestamp: int | None = None) -> str:
    """Download name for a submitted record, keyed on its company name."""
    prefix, name_field = EXPORT_PREFIXES.get(wizard_id, (wizard_id, "company_name"))
    return export_filename(prefix, str(record.get(name_field) or ""), timestamp=timestamp)
