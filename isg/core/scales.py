"""
Fine-Kinney factor scales.

Each scale is a fixed list of (value, label) pairs. These are configuration
data: the scoring engine multiplies whatever it is given, callers use these
lists to decide which values are selectable.
"""

from __future__ import annotations

from isg.models.risk_models import ScaleOption

PROBABILITY_SCALE: list[ScaleOption] = [
    ScaleOption(value=0.1, label="Virtually impossible"),
    ScaleOption(value=0.2, label="Practically impossible"),
    ScaleOption(value=0.5, label="Conceivable but very unlikely"),
    ScaleOption(value=1, label="Remotely possible"),
    ScaleOption(value=3, label="Unusual but possible"),
    ScaleOption(value=6, label="Quite possible"),
    ScaleOption(value=10, label="Might well be expected"),
]

SEVERITY_SCALE: list[ScaleOption] = [
    ScaleOption(value=1, label="First aid, minor injury"),
    ScaleOption(value=3, label="Significant injury"),
    ScaleOption(value=7, label="Serious injury, hospitalisation"),
    ScaleOption(value=15, label="Single fatality"),
    ScaleOption(value=40, label="Multiple fatalities"),
    ScaleOption(value=100, label="Catastrophe"),
]

FREQUENCY_SCALE: list[ScaleOption] = [
    ScaleOption(value=0.5, label="Once a year"),
    ScaleOption(value=1, label="A few times a year"),
    ScaleOption(value=2, label="Once a month"),
    ScaleOption(value=3, label="Once a week"),
    ScaleOption(value=6, label="Once a day"),
    ScaleOption(value=10, label="Hourly or continuous"),
]

SCALES: dict[str, list[ScaleOption]] = {
    "probability": PROBABILITY_SCALE,
    "severity": SEVERITY_SCALE,
    "frequency": FREQUENCY_SCALE,
}


def scale_values(scale: str) -> list[float]:
    """Allowed numeric values for a named scale."""
    return [option.value for option in SCALES[scale]]


def is_scale_value(scale: str, value: object) -> bool:
    """True if ``value`` parses to a member of the named scale."""
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False
    return any(abs(number - allowed) < 1e-9 for allowed in scale_values(scale))


def scale_options() -> dict[str, list[dict]]:
    """All scales as plain dicts, for UIs."""
    return {
        name: [option.model_dump() for option in options]
        for name, options in SCALES.items()
    }
