"""
Wizard Registry — every wizard definition, keyed by id.
"""

from __future__ import annotations

from typing import Callable

from isg.models.wizard_models import WizardDefinition
from isg.wizards import emergency_plan, risk_assessment

# Built per session so date defaults are evaluated at session start
WIZARD_REGISTRY: dict[str, Callable[[], WizardDefinition]] = {
    risk_assessment.WIZARD_ID: risk_assessment.build_definition,
    emergency_plan.WIZARD_ID: emergency_plan.build_definition,
}


def get_definition(wizard_id: str) -> WizardDefinition:
    if wizard_id not in WIZARD_REGISTRY:
        raise KeyError(f"Unknown wizard: {wizard_id}")
    return WIZARD_REGISTRY[wizard_id]()


def describe_definition(definition: WizardDefinition) -> dict:
    """Plain-data summary of a definition for UIs."""

    def type_name(t) -> str:
        if isinstance(t, tuple):
            return "|".join(x.__name__ for x in t)
        return t.__name__

    return {
        "id": definition.id,
        "title": definition.title,
        "steps": [{"id": s.id, "label": s.label} for s in definition.steps],
        "fields": [
            {
                "name": f.name,
                "type": type_name(f.type),
                "label": f.label,
                "derived": f.name in definition.derived_names,
                "read_only": f.name in definition.read_only_names,
            }
            for f in definition.fields
        ],
    }
