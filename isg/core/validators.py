"""
Validator factories — reusable gate predicates for wizard steps.

Each factory returns a ``Validator`` whose check reads the accumulated form
data. Checks never raise: malformed values simply fail the predicate.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from isg.core.derivations import parse_date
from isg.core.scales import is_scale_value
from isg.models.wizard_models import Validator


def is_filled(value: Any) -> bool:
    """Non-empty after stripping; zero and False count as filled."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) > 0
    return True


def as_number(value: Any) -> float | None:
    """Finite float for numeric input, else None (bools, NaN and infinities included)."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def required(field: str, message: str | None = None) -> Validator:
    return Validator(
        name=f"required:{field}",
        field=field,
        message=message or f"'{field}' is required",
        check=lambda data: is_filled(data.get(field)),
    )


def min_number(field: str, minimum: float, message: str | None = None) -> Validator:
    def check(data: Mapping[str, Any]) -> bool:
        number = as_number(data.get(field))
        return number is not None and number >= minimum

    return Validator(
        name=f"min:{field}",
        field=field,
        message=message or f"'{field}' must be at least {minimum}",
        check=check,
    )


def valid_date(field: str, message: str | None = None) -> Validator:
    return Validator(
        name=f"date:{field}",
        field=field,
        message=message or f"'{field}' must be a valid date",
        check=lambda data: parse_date(data.get(field)) is not None,
    )


def one_of(field: str, allowed: Iterable[Any], message: str | None = None) -> Validator:
    allowed_values = set(allowed)
    return Validator(
        name=f"one_of:{field}",
        field=field,
        message=message or f"'{field}' must be one of {sorted(map(str, allowed_values))}",
        check=lambda data: data.get(field) in allowed_values,
    )


def optional_scale_value(field: str, scale: str) -> Validator:
    """If ``field`` is filled it must be a member of the Fine-Kinney ``scale``."""

    def check(data: Mapping[str, Any]) -> bool:
        value = data.get(field)
        return not is_filled(value) or is_scale_value(scale, value)

    return Validator(
        name=f"scale:{field}",
        field=field,
        message=f"'{field}' must be a value from the {scale} scale",
        check=check,
    )


def min_items(field: str, count: int, message: str | None = None) -> Validator:
    def check(data: Mapping[str, Any]) -> bool:
        value = data.get(field)
        return isinstance(value, (list, tuple)) and len(value) >= count

    return Validator(
        name=f"min_items:{field}",
        field=field,
        message=message or f"'{field}' needs at least {count} item(s)",
        check=check,
    )
