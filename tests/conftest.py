"""
Test fixtures shared across all İSG Risk Engine tests.
"""

import json

import pytest

from isg.core.derivations import add_years, parse_date
from isg.core.validators import required
from isg.core.wizard import WizardSession
from isg.models.wizard_models import (
    DerivedField,
    FieldSpec,
    ProgressRule,
    Step,
    WizardDefinition,
)
from isg.wizards import emergency_plan, risk_assessment

CATEGORY_YEARS = {"low": 6, "medium": 4, "high": 2}


def _expiry(start, category):
    start_date = parse_date(start)
    if start_date is None or category not in CATEGORY_YEARS:
        return None
    return add_years(start_date, CATEGORY_YEARS[category]).isoformat()


@pytest.fixture
def simple_definition():
    """Three-step wizard: company info, details, confirm."""
    return WizardDefinition(
        id="simple",
        title="Simple",
        steps=[
            Step(
                id="company",
                label="Company",
                validators=(required("name"), required("address"), required("contact")),
            ),
            Step(id="details", label="Details", validators=(required("notes"),)),
            Step(id="confirm", label="Confirm"),
        ],
        fields=[
            FieldSpec("name", str, ""),
            FieldSpec("address", str, ""),
            FieldSpec("contact", str, ""),
            FieldSpec("notes", str, ""),
            FieldSpec("category", str, None),
            FieldSpec("start_date", str, None),
            FieldSpec("expiry_date", str, None),
        ],
        derived=[
            DerivedField("expiry_date", ("start_date", "category"), _expiry),
        ],
        progress_rules=[
            ProgressRule("name", 25, lambda d: bool(d.get("name"))),
            ProgressRule("address", 25, lambda d: bool(d.get("address"))),
            ProgressRule("contact", 25, lambda d: bool(d.get("contact"))),
            ProgressRule("notes", 25, lambda d: bool(d.get("notes"))),
        ],
    )


@pytest.fixture
def simple_session(simple_definition):
    return WizardSession(simple_definition)


@pytest.fixture
def risk_session():
    return WizardSession(risk_assessment.build_definition())


@pytest.fixture
def plan_session():
    return WizardSession(emergency_plan.build_definition())


@pytest.fixture
def company_fields():
    return {
        "company_name": "Acme Metal A.Ş.",
        "address": "Organize Sanayi Bölgesi 4. Cadde No:12, Bursa",
        "contact_person": "Ayşe Yılmaz",
        "contact_phone": "+90 224 555 01 02",
        "employee_count": 120,
        "hazard_class": "Çok Tehlikeli",
    }


def _members(prefix, count):
    return [
        {"id": f"{prefix}-{i}", "name": f"{prefix} member {i}", "role": "member", "phone": ""}
        for i in range(count)
    ]


@pytest.fixture
def full_teams():
    return {
        "fire_fighting": _members("ff", 3),
        "rescue": _members("rs", 3),
        "protection": _members("pr", 2),
        "first_aid": _members("fa", 2),
    }


@pytest.fixture
def analysis_json():
    """A well-formed model answer whose own level label disagrees with its score."""
    return json.dumps({
        "hazardDescription": "Açık elektrik panosu nedeniyle 380V gerilime temas riski",
        "probability": 6,
        "frequency": 6,
        "severity": 40,
        "riskScore": 1440,
        "riskLevel": "Low",
        "legalReference": "Elektrik İç Tesisleri Yönetmeliği Md. 34",
        "immediateAction": "Enerji kesilerek pano kapatılmalı.",
        "preventiveAction": "Panolar tip onaylı kapak ile kapatılmalı.",
        "justification": "6 × 6 × 40 = 1440",
    }, ensure_ascii=False)


class FakeGateway:
    """Stands in for LLMGateway; records prompts and replays a canned answer."""

    model = "fake-model"

    def __init__(self, content="", success=True):
        # A list replays one answer per call; None in it fails that call
        self.content = content
        self.success = success
        self.prompts = []
        self.images = []

    async def complete(self, prompt, image_url=None):
        self.prompts.append(prompt)
        self.images.append(image_url)
        content = self.content
        if isinstance(content, list):
            content = content[len(self.prompts) - 1]
        if not self.success or content is None:
            return {"content": "", "tokens_used": 0, "success": False, "error": "boom"}
        return {"content": content, "tokens_used": 321, "success": True}


@pytest.fixture
def fake_gateway_factory():
    return FakeGateway
