"""
Response Parser — Turns raw LLM text into a validated ``HazardAnalysis``.

Models wrap JSON in markdown fences, prepend chatter and get cut off at the
token limit. Parsing therefore tries, in order:

1. the text as-is
2. the first fenced or brace-balanced JSON block
3. the truncated object, closed after dropping its last incomplete member

Missing fields are filled with conservative defaults and numeric fields are
coerced. A missing or non-numeric score falls back to p × s × f.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from pydantic import ValidationError

from isg.core.risk_scorer import classify, compute_score, describe
from isg.models.hazard_models import HazardAnalysis

logger = logging.getLogger("isg.llm.parser")

FACTOR_DEFAULTS: dict[str, float] = {
    "probability": 3,
    "frequency": 6,
    "severity": 15,
}

TEXT_DEFAULTS: dict[str, str] = {
    "legalReference": "6331 Sayılı İSG Kanunu",
    "immediateAction": "Acil müdahale gerekli",
    "preventiveAction": "Kalıcı önlem alınmalı",
    "justification": "Risk analizi yapılmıştır",
}

_MAX_REPAIR_CUTS = 20

_FENCED_OBJECT = re.compile(r"```[A-Za-z]*\s*(\{.*?\})\s*```", re.DOTALL)


def _scan(fragment: str) -> tuple[int | None, list[str], bool]:
    """
    Walk a JSON fragment that starts at an opening brace.

    Returns the index where the outermost structure closes (None if it
    never does), the closers still pending and whether a string is open.
    """
    pending: list[str] = []
    in_string = False
    escaped = False
    for index, ch in enumerate(fragment):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            pending.append("}" if ch == "{" else "]")
        elif ch in "}]" and pending:
            pending.pop()
            if not pending:
                return index, pending, False
    return None, pending, in_string


def extract_json(text: str) -> dict | None:
    """First fenced object, else the first brace-balanced object in the text."""
    fenced = _FENCED_OBJECT.search(text)
    if fenced:
        try:
            return json.loads(fenced.group(1))
        except json.JSONDecodeError:
            logger.debug("Fenced block is not valid JSON, scanning for braces")

    start = text.find("{")
    if start == -1:
        return None
    end, _, _ = _scan(text[start:])
    if end is None:
        return None
    try:
        return json.loads(text[start : start + end + 1])
    except json.JSONDecodeError:
        return None


def _close_open_structures(fragment: str) -> str:
    """Append the quote and brackets a truncated JSON fragment is missing."""
    _, pending, in_string = _scan(fragment)
    closed = fragment + ('"' if in_string else "")
    closed = closed.rstrip().rstrip(",")
    return closed + "".join(reversed(pending))


def repair_truncated_json(text: str) -> dict | None:
    """Recover the complete members of a JSON object cut off mid-stream."""
    start = text.find("{")
    if start == -1:
        return None

    candidate = re.sub(r"```(?:json)?", "", text[start:]).strip()
    for _ in range(_MAX_REPAIR_CUTS):
        try:
            parsed = json.loads(_close_open_structures(candidate))
            return parsed if isinstance(parsed, dict) else None
        except json.JSONDecodeError:
            pass
        cut = candidate.rfind(",")
        if cut <= 0:
            return None
        candidate = candidate[:cut]
    return None


def parse_json_payload(content: str) -> tuple[dict | None, bool]:
    """Returns (parsed object or None, whether repair was needed)."""
    if not content or not content.strip():
        return None, False

    try:
        parsed = json.loads(content)
        if isinstance(parsed, dict):
            return parsed, False
    except json.JSONDecodeError:
        pass

    parsed = extract_json(content)
    if parsed is not None:
        return parsed, False

    repaired = repair_truncated_json(content)
    if repaired is not None:
        logger.warning("LLM output was truncated; recovered complete fields only")
    return repaired, repaired is not None


def _to_number(value: Any) -> float | None:
    number = None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = re.search(r"-?\d+(?:[.,]\d+)?", value)
        if match:
            number = float(match.group(0).replace(",", "."))
    if number is None or not math.isfinite(number):
        return None
    return number


def normalize_analysis(parsed: dict[str, Any]) -> dict[str, Any]:
    """Fill defaults and coerce numbers on a raw analysis dict (copy)."""
    result = dict(parsed)

    for key, default in FACTOR_DEFAULTS.items():
        number = _to_number(result.get(key))
        result[key] = number if number is not None and number > 0 else default

    for key, default in TEXT_DEFAULTS.items():
        if not isinstance(result.get(key), str) or not result[key].strip():
            result[key] = default

    score = _to_number(result.get("riskScore"))
    if score is None or score < 0:
        score = compute_score(result["probability"], result["severity"], result["frequency"])
    result["riskScore"] = score

    level = result.get("riskLevel")
    if not isinstance(level, str) or not level.strip():
        result["riskLevel"] = describe(classify(score)).local_label

    return result


def parse_hazard_response(content: str) -> tuple[HazardAnalysis | None, bool]:
    """Parse, normalize and validate raw LLM text."""
    parsed, repaired = parse_json_payload(content)
    if parsed is None:
        logger.warning("LLM returned non-JSON or empty response")
        return None, repaired

    try:
        return HazardAnalysis(**normalize_analysis(parsed)), repaired
    except ValidationError as e:
        logger.warning(f"Hazard analysis failed schema validation: {e}")
        return None, repaired
