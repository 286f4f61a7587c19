"""
Wizard Data Models — Definitions, snapshots and transition results.

Definitions carry callables and are plain dataclasses. Everything that
crosses a process boundary (snapshots, validation errors, results) is a
Pydantic model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from pydantic import BaseModel, Field

from isg.models.risk_models import RiskAssessment

# A gate check receives the accumulated form data
PredicateFn = Callable[[Mapping[str, Any]], bool]
# A derivation receives the current values of its declared inputs
DeriveFn = Callable[..., Any]


@dataclass(frozen=True)
class Validator:
    """A named predicate that must hold before leaving a step."""

    name: str
    check: PredicateFn
    message: str | Callable[[Mapping[str, Any]], str]
    field: str = ""


@dataclass(frozen=True)
class Step:
    """One wizard step."""

    id: str
    label: str
    validators: tuple[Validator, ...] = ()


@dataclass(frozen=True)
class FieldSpec:
    """Declared form field."""

    name: str
    type: type | tuple[type, ...] = object
    default: Any = None
    default_factory: Callable[[], Any] | None = None
    label: str = ""


@dataclass(frozen=True)
class DerivedField:
    """
    A field recomputed whenever one of its inputs changes.

    Read-only by default. An ``overridable`` field also accepts direct
    writes, and a derive result of None leaves its current value alone.
    """

    name: str
    inputs: tuple[str, ...]
    derive: DeriveFn
    overridable: bool = False


@dataclass(frozen=True)
class ProgressRule:
    """Contributes ``points`` to progress while ``satisfied`` holds."""

    name: str
    points: int
    satisfied: PredicateFn


@dataclass
class WizardDefinition:
    """
    Declared shape of a wizard: steps, field schema, derived fields and
    progress weights.

    Raises ValueError on inconsistent definitions (duplicate step ids,
    progress points not summing to 100, derived inputs not declared).
    """

    id: str
    title: str
    steps: list[Step]
    fields: list[FieldSpec] = field(default_factory=list)
    derived: list[DerivedField] = field(default_factory=list)
    progress_rules: list[ProgressRule] = field(default_factory=list)
    risk_fields: tuple[str, str, str] | None = None
    ai_score_field: str | None = None

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError(f"Wizard '{self.id}' has no steps")

        step_ids = [s.id for s in self.steps]
        if len(set(step_ids)) != len(step_ids):
            raise ValueError(f"Wizard '{self.id}' has duplicate step ids: {step_ids}")

        if self.progress_rules:
            total = sum(rule.points for rule in self.progress_rules)
            if total != 100:
                raise ValueError(
                    f"Wizard '{self.id}' progress points sum to {total}, expected 100"
                )

        declared = {f.name for f in self.fields}
        for rule in self.derived:
            missing = [name for name in rule.inputs if name not in declared]
            if missing:
                raise ValueError(
                    f"Derived field '{rule.name}' depends on undeclared inputs {missing}"
                )

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def derived_names(self) -> set[str]:
        return {rule.name for rule in self.derived}

    @property
    def read_only_names(self) -> set[str]:
        return {rule.name for rule in self.derived if not rule.overridable}

    def derived_rule(self, name: str) -> DerivedField | None:
        for rule in self.derived:
            if rule.name == name:
                return rule
        return None

    def field_spec(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def triggers(self, name: str) -> list[DerivedField]:
        """Derived fields that depend on ``name``."""
        return [rule for rule in self.derived if name in rule.inputs]

    def initial_data(self) -> dict[str, Any]:
        """Defaults for every declared field; mutable defaults are copied."""
        data: dict[str, Any] = {}
        for spec in self.fields:
            if spec.default_factory is not None:
                data[spec.name] = spec.default_factory()
                continue
            default = spec.default
            if isinstance(default, (list, dict)):
                default = type(default)(default)
            data[spec.name] = default
        return data


class StepValidationError(BaseModel):
    """Why a forward transition was refused."""

    step_id: str
    step_index: int
    validator: str
    field: str = ""
    message: str


class StepTransition(BaseModel):
    """Outcome of ``go_to_step``."""

    ok: bool
    moved: bool = False
    current_step_index: int
    error: StepValidationError | None = None


class WizardSnapshot(BaseModel):
    """Serializable session state used to persist and restore drafts."""

    wizard_id: str
    current_step_index: int = 0
    data: dict[str, Any] = Field(default_factory=dict)


class SubmissionResult(BaseModel):
    """Outcome of ``submit``; ``record`` is the plain hand-off for storage."""

    ok: bool
    record: dict[str, Any] | None = None
    assessment: RiskAssessment | None = None
    error: StepValidationError | None = None
