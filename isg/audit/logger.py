"""
Audit Logger — JSON-lines trail of submitted wizards.

One line per submission: UTC timestamp, session and wizard ids, number of
submitted fields and the risk score/band when the record was scored. Write
failures are logged and never block a submission.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from isg.config import settings
from isg.models.risk_models import RiskAssessment
from isg.models.session_models import AuditEntry

logger = logging.getLogger("isg.audit")


class AuditLogger:
    def __init__(self, log_path: str | None = None) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)

    def log(self, entry: AuditEntry) -> None:
        line = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            **entry.model_dump(),
        }
        try:
            with self.log_path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(line, ensure_ascii=False) + "\n")
        except OSError as e:
            logger.error(f"Could not append to {self.log_path}: {e}")

    def log_submission(
        self,
        session_id: str,
        wizard_id: str,
        record: dict[str, Any],
        assessment: RiskAssessment | None = None,
    ) -> AuditEntry:
        entry = AuditEntry(
            session_id=session_id,
            wizard_id=wizard_id,
            fields_submitted=len(record),
            risk_score=assessment.score if assessment else None,
            risk_band=assessment.band.value if assessment else None,
            ai_assisted=assessment is not None and assessment.source == "ai",
        )
        self.log(entry)
        return entry

    def read_recent(self, count: int = 50, wizard_id: str | None = None) -> list[dict]:
        """Last ``count`` submissions, oldest first; malformed lines are skipped."""
        recent: deque[dict] = deque(maxlen=max(count, 0))
        try:
            with self.log_path.open(encoding="utf-8") as f:
                for raw in f:
                    try:
                        entry = json.loads(raw)
                    except json.JSONDecodeError:
                        continue
                    if not isinstance(entry, dict):
                        continue
                    if wizard_id is not None and entry.get("wizard_id") != wizard_id:
                        continue
                    recent.append(entry)
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error(f"Could not read {self.log_path}: {e}")
            return []
        return list(recent)
