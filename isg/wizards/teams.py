"""
Emergency team validation.

Minimum team sizes for an emergency action plan. Shortfalls in the
fire-fighting and rescue teams block the plan; shortfalls in the protection
and first-aid teams are reported as warnings.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

TEAM_REQUIREMENTS: dict[str, dict[str, Any]] = {
    "fire_fighting": {"min": 3, "label": "Söndürme Ekibi", "blocking": True},
    "rescue": {"min": 3, "label": "Kurtarma Ekibi", "blocking": True},
    "protection": {"min": 2, "label": "Koruma Ekibi", "blocking": False},
    "first_aid": {"min": 2, "label": "İlk Yardım Ekibi", "blocking": False},
}


class TeamValidation(BaseModel):
    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def empty_teams() -> dict[str, list]:
    return {team: [] for team in TEAM_REQUIREMENTS}


def member_count(teams: Any, team: str) -> int:
    """Number of members listed for ``team``; malformed input counts as 0."""
    if not isinstance(teams, dict):
        return 0
    members = teams.get(team)
    return len(members) if isinstance(members, list) else 0


def total_members(teams: Any) -> int:
    return sum(member_count(teams, team) for team in TEAM_REQUIREMENTS)


def validate_teams(teams: Any) -> TeamValidation:
    result = TeamValidation()
    for team, requirement in TEAM_REQUIREMENTS.items():
        count = member_count(teams, team)
        if count >= requirement["min"]:
            continue
        message = (
            f"{requirement['label']} must have at least {requirement['min']} "
            f"members ({count} assigned)"
        )
        if requirement["blocking"]:
            result.errors.append(message)
        else:
            result.warnings.append(message)

    result.valid = not result.errors
    return result


def recommended_team_sizes() -> dict[str, int]:
    return {team: requirement["min"] for team, requirement in TEAM_REQUIREMENTS.items()}
