"""
Prompt Builder — Fine-Kinney hazard analysis prompt.

The prompt pins the model to the same factor scales the scoring engine uses
and asks for a single strict JSON object.
"""

from __future__ import annotations

from isg.core.scales import FREQUENCY_SCALE, PROBABILITY_SCALE, SEVERITY_SCALE
from isg.models.hazard_models import HazardAnalysisRequest
from isg.models.risk_models import ScaleOption

SYSTEM_PROMPT = (
    "You are a certified occupational health and safety (İSG) expert. "
    "You assess workplace hazards with the Fine-Kinney method under Turkish "
    "law no. 6331 and always answer with a single JSON object."
)

LEGAL_REFERENCES = [
    ("Electrical", "Elektrik İç Tesisleri Yönetmeliği"),
    ("General safety", "6331 Sayılı İSG Kanunu"),
    ("Fire", "Binaların Yangından Korunması Hakkında Yönetmelik"),
    ("Gas / LPG", "LPG Piyasası Kanunu ve Yönetmelikleri"),
    ("Work at height", "Yüksekte Çalışmalarda Sağlık ve Güvenlik Önlemleri Yönetmeliği"),
    ("Machinery", "Makine Emniyeti Yönetmeliği"),
    ("PPE", "Kişisel Koruyucu Donanımlar Yönetmeliği"),
]

OUTPUT_SCHEMA = """{
  "hazardDescription": "Concrete technical description (what, where, how)",
  "probability": 6,
  "frequency": 6,
  "severity": 40,
  "riskScore": 1440,
  "riskLevel": "Critical",
  "legalReference": "Regulation and article",
  "immediateAction": "Temporary measure to apply today",
  "preventiveAction": "Permanent engineering or organisational measure",
  "justification": "Why these factor values, with the calculation P × F × S"
}"""


def _format_scale(name: str, scale: list[ScaleOption]) -> str:
    rows = "\n".join(f"  - {option.value:g}: {option.label}" for option in scale)
    return f"{name}:\n{rows}"


def build_hazard_prompt(
    request: HazardAnalysisRequest,
    photo_number: int | None = None,
    photo_count: int | None = None,
) -> str:
    """
    Build the user prompt for one hazard observation.

    In a batch, ``photo_number`` and ``photo_count`` tell the model which of
    the attached photos it is looking at.
    """
    description = request.description.strip() or "Analyze the attached photo."
    context_lines = [f"Observation: {description}"]
    if photo_number is not None:
        context_lines.append(f"Photo: {photo_number} of {photo_count or photo_number}")
    if request.location:
        context_lines.append(f"Location: {request.location.strip()}")
    if request.sector:
        context_lines.append(f"Sector: {request.sector.strip()}")
    if request.image_url or photo_number is not None:
        context_lines.append("A photo of the area is attached; inspect it for every visible hazard.")

    scales = "\n\n".join(
        [
            _format_scale("Probability (P)", PROBABILITY_SCALE),
            _format_scale("Frequency (F)", FREQUENCY_SCALE),
            _format_scale("Severity (S)", SEVERITY_SCALE),
        ]
    )
    references = "\n".join(f"- {topic}: \"{law}\"" for topic, law in LEGAL_REFERENCES)

    return (
        "## Observation\n"
        + "\n".join(context_lines)
        + "\n\n## Fine-Kinney scales (choose values ONLY from these lists)\n"
        + scales
        + "\n\n## Legal references\n"
        + references
        + "\n\n## Rules\n"
        "1. Be concrete: name the energy source, location and exposed persons.\n"
        "2. Score realistically, neither exaggerating nor understating.\n"
        "3. riskScore must equal probability × frequency × severity.\n"
        "4. Separate the immediate action (today) from the preventive action (permanent).\n"
        "\n## Output\n"
        "Return ONLY this JSON object, no markdown and no commentary:\n"
        + OUTPUT_SCHEMA
    )
