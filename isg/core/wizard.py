"""
Wizard State Machine — step sequencing, gating, derived fields, progress.

A ``WizardSession`` owns the form data of one user flow over a declared
``WizardDefinition``:

1. ``set_field`` stores a value and re-derives dependent fields, transitively
2. ``go_to_step`` moves backward freely, forward only past valid steps
3. ``compute_progress`` sums the points of satisfied progress rules
4. ``submit`` hands the final record (plus any risk assessment) off and resets

Validation failures are returned, never raised, and leave the session as it
was.
"""

from __future__ import annotations

import logging
from typing import Any

from isg.core.risk_scorer import assess, assess_score
from isg.core.validators import as_number
from isg.models.risk_models import RiskAssessment
from isg.models.wizard_models import (
    StepTransition,
    StepValidationError,
    SubmissionResult,
    WizardDefinition,
    WizardSnapshot,
)

logger = logging.getLogger("isg.wizard")


class WizardSession:
    """Mutable state of a single wizard run. Not thread-safe; one owner."""

    def __init__(self, definition: WizardDefinition) -> None:
        self.definition = definition
        self.current_step_index = 0
        self.data: dict[str, Any] = definition.initial_data()
        self._recompute_all()

    # ── Restore / persist ──

    @classmethod
    def restore(
        cls, definition: WizardDefinition, snapshot: WizardSnapshot
    ) -> "WizardSession":
        """
        Rebuild a session from a persisted draft.

        Unknown keys are kept, the step index is clamped into range and
        read-only derived fields are recomputed rather than trusted.
        Overridable derived values are restored as saved.
        """
        if snapshot.wizard_id != definition.id:
            raise ValueError(
                f"Snapshot belongs to '{snapshot.wizard_id}', not '{definition.id}'"
            )

        session = cls(definition)
        for key, value in snapshot.data.items():
            if key not in definition.read_only_names:
                session.data[key] = value
        session._recompute_all()
        session.current_step_index = min(
            max(snapshot.current_step_index, 0), definition.step_count - 1
        )
        return session

    def snapshot(self) -> WizardSnapshot:
        return WizardSnapshot(
            wizard_id=self.definition.id,
            current_step_index=self.current_step_index,
            data=dict(self.data),
        )

    def reset(self) -> None:
        self.current_step_index = 0
        self.data = self.definition.initial_data()
        self._recompute_all()

    # ── Fields ──

    def set_field(self, key: str, value: Any) -> None:
        """Store ``value`` and re-derive the fields it triggers."""
        if key in self.definition.read_only_names:
            logger.warning(f"Ignoring write to derived field '{key}'")
            return

        if self.definition.fields and self.definition.field_spec(key) is None:
            logger.debug(f"Field '{key}' is not declared by '{self.definition.id}'")

        self.data[key] = value
        self._cascade(key, {key})

    def set_fields(self, values: dict[str, Any]) -> None:
        for key, value in values.items():
            self.set_field(key, value)

    def _cascade(self, changed: str, visited: set[str]) -> None:
        for rule in self.definition.triggers(changed):
            if rule.name not in visited:
                visited.add(rule.name)
                if self._recompute(rule.name):
                    self._cascade(rule.name, visited)

    def _recompute(self, name: str) -> bool:
        """Re-derive ``name``; True if its stored value was written."""
        rule = self.definition.derived_rule(name)
        if rule is None:
            return False
        value = rule.derive(*[self.data.get(input_name) for input_name in rule.inputs])
        if value is None and rule.overridable:
            return False
        self.data[name] = value
        return True

    def _recompute_all(self) -> None:
        # Overridable values are stored data; only read-only fields are rebuilt
        for rule in self.definition.derived:
            if not rule.overridable:
                self._recompute(rule.name)

    # ── Navigation ──

    @property
    def current_step(self):
        return self.definition.steps[self.current_step_index]

    @property
    def is_last_step(self) -> bool:
        return self.current_step_index == self.definition.step_count - 1

    def validate_step(self, index: int) -> StepValidationError | None:
        """First failing validator of step ``index``, in declared order."""
        step = self.definition.steps[index]
        for validator in step.validators:
            try:
                passed = bool(validator.check(self.data))
            except Exception as e:
                logger.warning(f"Validator '{validator.name}' raised {type(e).__name__}: {e}")
                passed = False
            if not passed:
                return StepValidationError(
                    step_id=step.id,
                    step_index=index,
                    validator=validator.name,
                    field=validator.field,
                    message=self._message(validator),
                )
        return None

    def _message(self, validator) -> str:
        if callable(validator.message):
            return validator.message(self.data)
        return validator.message

    def go_to_step(self, target_index: int) -> StepTransition:
        """
        Move to ``target_index``.

        Out-of-range targets are ignored. Moving forward validates every
        step being left behind, from the current one up to the target, so a
        jump is refused when any skipped step is incomplete, not only the
        step right before the target.
        """
        if not 0 <= target_index < self.definition.step_count:
            return StepTransition(
                ok=True, moved=False, current_step_index=self.current_step_index
            )

        if target_index > self.current_step_index:
            for index in range(self.current_step_index, target_index):
                error = self.validate_step(index)
                if error is not None:
                    logger.info(
                        f"[{self.definition.id}] blocked at step '{error.step_id}': "
                        f"{error.message}"
                    )
                    return StepTransition(
                        ok=False,
                        moved=False,
                        current_step_index=self.current_step_index,
                        error=error,
                    )

        moved = target_index != self.current_step_index
        self.current_step_index = target_index
        return StepTransition(ok=True, moved=moved, current_step_index=target_index)

    def next_step(self) -> StepTransition:
        return self.go_to_step(self.current_step_index + 1)

    def previous_step(self) -> StepTransition:
        return self.go_to_step(self.current_step_index - 1)

    # ── Progress ──

    def compute_progress(self) -> int:
        """Sum of points of satisfied progress rules, 0..100."""
        total = 0
        for rule in self.definition.progress_rules:
            try:
                if rule.satisfied(self.data):
                    total += rule.points
            except Exception as e:
                logger.warning(f"Progress rule '{rule.name}' raised {type(e).__name__}: {e}")
        return min(100, max(0, total))

    # ── Risk ──

    def risk_assessment(self) -> RiskAssessment | None:
        """
        Score the session's Fine-Kinney triple if complete, otherwise band
        an AI-supplied score if one is present.
        """
        if self.definition.risk_fields:
            values = [as_number(self.data.get(name)) for name in self.definition.risk_fields]
            if all(v is not None and v >= 0 for v in values):
                probability, severity, frequency = values
                return assess(probability, severity, frequency)

        if self.definition.ai_score_field:
            score = as_number(self.data.get(self.definition.ai_score_field))
            if score is not None:
                return assess_score(score, source="ai")

        return None

    # ── Submission ──

    def submit(self) -> SubmissionResult:
        """
        Validate every step and, on success, return the plain record and
        reset the session. Only allowed from the final step.
        """
        if not self.is_last_step:
            step = self.current_step
            return SubmissionResult(
                ok=False,
                error=StepValidationError(
                    step_id=step.id,
                    step_index=self.current_step_index,
                    validator="final_step",
                    message="Submission is only possible from the final step",
                ),
            )

        for index in range(self.definition.step_count):
            error = self.validate_step(index)
            if error is not None:
                return SubmissionResult(ok=False, error=error)

        assessment = self.risk_assessment()
        record = dict(self.data)
        if assessment is not None:
            record["risk_score"] = assessment.score
            record["risk_band"] = assessment.band.value
            record["risk_label"] = assessment.label
            record["risk_recommendation"] = assessment.recommendation

        logger.info(f"[{self.definition.id}] submitted with {len(record)} fields")
        self.reset()
        return SubmissionResult(ok=True, record=record, assessment=assessment)
