"""
Tests for the emergency action plan (ADEP) wizard, teams and scenarios.
"""

import pytest

from isg.core.wizard import WizardSession
from isg.wizards.registry import WIZARD_REGISTRY, describe_definition, get_definition
from isg.wizards.scenarios import SCENARIOS, known_scenario_ids, selected_scenarios
from isg.wizards.teams import (
    empty_teams,
    recommended_team_sizes,
    total_members,
    validate_teams,
)


class TestTeams:
    def test_empty_teams_block_on_fire_and_rescue(self):
        result = validate_teams(empty_teams())
        assert result.valid is False
        assert len(result.errors) == 2
        assert "Söndürme Ekibi" in result.errors[0]
        assert "Kurtarma Ekibi" in result.errors[1]
        assert len(result.warnings) == 2

    def test_minimum_blocking_teams_pass_with_warnings(self, full_teams):
        teams = {"fire_fighting": full_teams["fire_fighting"], "rescue": full_teams["rescue"]}
        result = validate_teams(teams)
        assert result.valid is True
        assert result.errors == []
        assert len(result.warnings) == 2

    def test_full_teams(self, full_teams):
        result = validate_teams(full_teams)
        assert result.valid is True
        assert result.warnings == []
        assert total_members(full_teams) == 10

    def test_malformed_input(self):
        assert validate_teams(None).valid is False
        assert total_members({"rescue": "three people"}) == 0

    def test_recommended_sizes(self):
        assert recommended_team_sizes() == {
            "fire_fighting": 3,
            "rescue": 3,
            "protection": 2,
            "first_aid": 2,
        }


class TestScenarios:
    def test_catalogue_ids_unique(self):
        ids = [s.id for s in SCENARIOS]
        assert len(ids) == len(set(ids)) == 10

    def test_unknown_ids_dropped(self):
        assert known_scenario_ids(["yangin", "tsunami", 3, "deprem"]) == ["yangin", "deprem"]
        assert known_scenario_ids("yangin") == []

    def test_selected_scenarios(self):
        selected = selected_scenarios(["deprem"])
        assert selected[0].name == "Deprem"
        assert selected[0].responsible_team == "rescue"
        assert selected[0].procedures


class TestPlanWizard:
    def test_initial_state(self, plan_session):
        assert plan_session.data["teams"] == empty_teams()
        assert plan_session.data["scenarios"] == []
        assert plan_session.data["next_review_date"] is not None
        # The default employee count already satisfies its rule
        assert plan_session.compute_progress() == 10

    def test_company_step_gate(self, plan_session, company_fields):
        plan_session.set_fields({**company_fields, "contact_phone": ""})
        result = plan_session.next_step()
        assert result.error.validator == "required:contact_phone"

        plan_session.set_fields({"contact_phone": "+90 224 555 01 02", "employee_count": 0})
        result = plan_session.next_step()
        assert result.error.validator == "min:employee_count"

        plan_session.set_field("employee_count", 120)
        assert plan_session.next_step().ok is True

    def test_teams_gate_reports_first_shortfall(self, plan_session, company_fields):
        plan_session.set_fields(company_fields)
        plan_session.next_step()

        result = plan_session.next_step()
        assert result.ok is False
        assert result.error.step_id == "teams"
        assert "Söndürme Ekibi" in result.error.message

    def test_scenarios_gate(self, plan_session, company_fields, full_teams):
        plan_session.set_fields({**company_fields, "teams": full_teams, "scenarios": ["tsunami"]})
        result = plan_session.go_to_step(3)
        assert result.error.validator == "scenarios"

        plan_session.set_field("scenarios", ["yangin"])
        assert plan_session.go_to_step(3).ok is True

    def test_review_date_follows_hazard_class(self, plan_session):
        plan_session.set_fields({"plan_date": "2026-01-10", "hazard_class": "Çok Tehlikeli"})
        assert plan_session.data["next_review_date"] == "2028-01-10"

    def test_nace_code_fills_class_sector_and_review_date(self, plan_session):
        plan_session.set_fields({"plan_date": "2026-01-10", "nace_code": "41.20"})
        assert plan_session.data["hazard_class"] == "Çok Tehlikeli"
        assert plan_session.data["sector"] == "construction"
        assert plan_session.data["next_review_date"] == "2028-01-10"

        plan_session.set_field("nace_code", "64.19")
        assert plan_session.data["hazard_class"] == "Az Tehlikeli"
        assert plan_session.data["sector"] == "office"
        assert plan_session.data["next_review_date"] == "2032-01-10"

    def test_manual_class_overrides_nace(self, plan_session):
        plan_session.set_fields({"plan_date": "2026-01-10", "nace_code": "10.11"})
        assert plan_session.data["hazard_class"] == "Tehlikeli"

        plan_session.set_field("hazard_class", "Çok Tehlikeli")
        assert plan_session.data["hazard_class"] == "Çok Tehlikeli"
        assert plan_session.data["next_review_date"] == "2028-01-10"

    def test_unparseable_nace_keeps_current_values(self, plan_session):
        plan_session.set_fields({"hazard_class": "Çok Tehlikeli", "sector": "mining"})
        plan_session.set_field("nace_code", "xx")
        assert plan_session.data["hazard_class"] == "Çok Tehlikeli"
        assert plan_session.data["sector"] == "mining"

    def test_restore_keeps_overridden_class(self, plan_session):
        plan_session.set_fields({"plan_date": "2026-01-10", "nace_code": "41.20"})
        plan_session.set_field("hazard_class", "Az Tehlikeli")

        restored = WizardSession.restore(plan_session.definition, plan_session.snapshot())
        assert restored.data["hazard_class"] == "Az Tehlikeli"
        assert restored.data["next_review_date"] == "2032-01-10"

    def test_complete_plan(self, plan_session, company_fields, full_teams):
        plan_session.set_fields({
            **company_fields,
            "teams": full_teams,
            "scenarios": ["yangin", "deprem"],
            "blueprint_image": "data:image/png;base64,aGVsbG8=",
        })
        assert plan_session.compute_progress() == 100
        assert plan_session.go_to_step(4).ok is True

        result = plan_session.submit()
        assert result.ok is True
        assert result.assessment is None
        assert result.record["company_name"] == "Acme Metal A.Ş."
        assert result.record["scenarios"] == ["yangin", "deprem"]


class TestRegistry:
    def test_known_wizards(self):
        assert set(WIZARD_REGISTRY) == {"risk-assessment", "emergency-plan"}

    def test_unknown_wizard(self):
        with pytest.raises(KeyError):
            get_definition("fire-drill")

    def test_describe(self):
        summary = describe_definition(get_definition("emergency-plan"))
        assert [s["id"] for s in summary["steps"]] == [
            "company", "teams", "scenarios", "blueprint", "preview",
        ]
        derived = [f["name"] for f in summary["fields"] if f["derived"]]
        assert derived == ["hazard_class", "sector", "next_review_date"]
        read_only = [f["name"] for f in summary["fields"] if f["read_only"]]
        assert read_only == ["next_review_date"]
