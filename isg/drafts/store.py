"""
Draft Store — JSON file per wizard session.

Holds the latest ``WizardSnapshot`` of each open session so an interrupted
flow can be resumed. Unreadable or corrupt drafts are logged and treated as
absent.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from isg.config import settings
from isg.models.wizard_models import WizardSnapshot

logger = logging.getLogger("isg.drafts")

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class DraftStore:
    """Writes wizard snapshots to ``<draft_dir>/<session_id>.json``."""

    def __init__(self, draft_dir: str | None = None) -> None:
        self.draft_dir = Path(draft_dir or settings.draft_dir)

    def _path(self, session_id: str) -> Path:
        if not _SAFE_ID.match(session_id):
            raise ValueError(f"Invalid draft id: {session_id!r}")
        return self.draft_dir / f"{session_id}.json"

    def save(self, session_id: str, snapshot: WizardSnapshot) -> None:
        """Persist a snapshot, replacing any previous draft."""
        path = self._path(session_id)
        try:
            self.draft_dir.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".tmp")
            tmp.write_text(snapshot.model_dump_json(), encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            logger.error(f"Failed to save draft {session_id}: {e}")

    def load(self, session_id: str) -> WizardSnapshot | None:
        """Return the stored snapshot, or None if missing or unreadable."""
        path = self._path(session_id)
        if not path.exists():
            return None

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return WizardSnapshot(**raw)
        except (OSError, json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable draft {session_id}: {e}")
            return None

    def delete(self, session_id: str) -> bool:
        """Remove a draft. Returns True if one existed."""
        path = self._path(session_id)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete draft {session_id}: {e}")
            return False

    def list_ids(self) -> list[str]:
        if not self.draft_dir.exists():
            return []
        return sorted(p.stem for p in self.draft_dir.glob("*.json"))
