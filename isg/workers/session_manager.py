"""
Session Manager — In-memory registry of open wizard sessions.

Owns one ``WizardSession`` per session id, autosaves a draft after every
change and writes an audit entry on submission.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from isg.audit.logger import AuditLogger
from isg.config import settings
from isg.core.wizard import WizardSession
from isg.drafts.store import DraftStore
from isg.models.session_models import DraftSummary, SessionState
from isg.models.wizard_models import StepTransition, SubmissionResult
from isg.wizards.registry import get_definition

logger = logging.getLogger("isg.sessions")


class SessionConflictError(Exception):
    """A resume id names an open session of a different wizard."""


class SessionManager:
    """Keeps open sessions in memory (upgrade to Redis for multi-process)."""

    def __init__(
        self,
        drafts: DraftStore | None = None,
        audit: AuditLogger | None = None,
    ) -> None:
        self.drafts = drafts
        self.audit = audit
        self._sessions: dict[str, WizardSession] = {}

    def create(
        self,
        wizard_id: str,
        data: dict[str, Any] | None = None,
        resume_session_id: str | None = None,
    ) -> tuple[str, WizardSession]:
        """
        Open a session, or resume one by id.

        Resuming an open session of the same wizard returns it as is.
        Resuming an open session of another wizard raises
        SessionConflictError. A saved draft is restored only when its
        wizard matches; otherwise a fresh session gets a new id, so an
        existing draft is never overwritten. Raises KeyError for unknown
        wizard ids.
        """
        definition = get_definition(wizard_id)

        if resume_session_id and resume_session_id in self._sessions:
            session = self._sessions[resume_session_id]
            if session.definition.id != wizard_id:
                raise SessionConflictError(
                    f"Session {resume_session_id} belongs to '{session.definition.id}'"
                )
            return self._apply(resume_session_id, session, data)

        if resume_session_id and self.drafts is not None:
            snapshot = self.drafts.load(resume_session_id)
            if snapshot is not None and snapshot.wizard_id == wizard_id:
                session = WizardSession.restore(definition, snapshot)
                logger.info(f"Restored draft {resume_session_id} for '{wizard_id}'")
                return self._apply(resume_session_id, session, data)
            if snapshot is not None:
                logger.warning(
                    f"Draft {resume_session_id} belongs to '{snapshot.wizard_id}', "
                    f"opening a new '{wizard_id}' session"
                )

        return self._apply(uuid.uuid4().hex, WizardSession(definition), data)

    def _apply(
        self,
        session_id: str,
        session: WizardSession,
        data: dict[str, Any] | None,
    ) -> tuple[str, WizardSession]:
        if data:
            session.set_fields(data)
        self._sessions[session_id] = session
        self._autosave(session_id)
        return session_id, session

    def get(self, session_id: str) -> WizardSession:
        """Raises KeyError if the session is not open."""
        if session_id not in self._sessions:
            raise KeyError(f"Unknown session: {session_id}")
        return self._sessions[session_id]

    def update_fields(self, session_id: str, fields: dict[str, Any]) -> WizardSession:
        session = self.get(session_id)
        session.set_fields(fields)
        self._autosave(session_id)
        return session

    def navigate(
        self,
        session_id: str,
        target_index: int | None = None,
        direction: str | None = None,
    ) -> StepTransition:
        session = self.get(session_id)
        if direction == "next":
            transition = session.next_step()
        elif direction == "previous":
            transition = session.previous_step()
        elif target_index is not None:
            transition = session.go_to_step(target_index)
        else:
            transition = StepTransition(
                ok=True, moved=False, current_step_index=session.current_step_index
            )

        if transition.moved:
            self._autosave(session_id)
        return transition

    def submit(self, session_id: str) -> SubmissionResult:
        """Submit and close the session; on failure the session stays open."""
        session = self.get(session_id)
        wizard_id = session.definition.id
        result = session.submit()
        if not result.ok:
            return result

        self.close(session_id)
        if self.audit is not None and result.record is not None:
            self.audit.log_submission(session_id, wizard_id, result.record, result.assessment)
        return result

    def close(self, session_id: str) -> bool:
        """Discard a session and its draft. Returns True if it was open."""
        existed = self._sessions.pop(session_id, None) is not None
        if self.drafts is not None:
            self.drafts.delete(session_id)
        return existed

    def state(self, session_id: str) -> SessionState:
        session = self.get(session_id)
        return SessionState(
            session_id=session_id,
            wizard_id=session.definition.id,
            current_step_index=session.current_step_index,
            current_step_id=session.current_step.id,
            step_count=session.definition.step_count,
            progress=session.compute_progress(),
            data=session.data,
            assessment=session.risk_assessment(),
        )

    def _autosave(self, session_id: str) -> None:
        if self.drafts is None or not settings.drafts_enabled:
            return
        self.drafts.save(session_id, self._sessions[session_id].snapshot())

    def list_drafts(self, wizard_id: str | None = None) -> list[DraftSummary]:
        """Saved drafts, optionally for one wizard. Unreadable drafts are skipped."""
        if self.drafts is None:
            return []
        summaries = []
        for session_id in self.drafts.list_ids():
            snapshot = self.drafts.load(session_id)
            if snapshot is None:
                continue
            if wizard_id is not None and snapshot.wizard_id != wizard_id:
                continue
            summaries.append(
                DraftSummary(
                    session_id=session_id,
                    wizard_id=snapshot.wizard_id,
                    current_step_index=snapshot.current_step_index,
                    is_open=session_id in self._sessions,
                )
            )
        return summaries

    @property
    def size(self) -> int:
        return len(self._sessions)
