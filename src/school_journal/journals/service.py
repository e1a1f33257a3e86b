from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.datetime_utils import require_iso_date
from ..common.ids import new_id
from ..common.validators import optional_str, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import JournalEntry
from .repository import JournalRepository

logger = logging.getLogger(__name__)


class JournalService:
    """Use cases: students write entries, teachers add feedback."""

    def __init__(self, journals: JournalRepository):
        self._journals = journals

    def list_journals(self) -> Sequence[JournalEntry]:
        return self._journals.list_all()

    def create_journal(self, payload: dict) -> JournalEntry:
        journal_id = optional_str(payload.get("id"), "id") or new_id()
        if self._journals.get_by_id(journal_id):
            raise ValidationError("Journal ID already exists")

        entry = self._build(payload, journal_id=journal_id)
        self._journals.insert(entry)
        return entry

    def update_journal(self, payload: dict) -> JournalEntry:
        journal_id = optional_str(payload.get("id"), "id")
        if not journal_id:
            raise ValidationError("Bad request: Missing journal ID.")

        existing = self._journals.get_by_id(journal_id)
        if not existing:
            raise NotFoundError("Journal not found")

        entry = self._build(payload, journal_id=journal_id, existing=existing)
        if not self._journals.update(entry):
            raise NotFoundError("Journal not found")
        return entry

    def delete_journal(self, journal_id: str) -> None:
        if not self._journals.delete_by_id(journal_id):
            logger.info("Delete requested for unknown journal %s", journal_id)

    def _build(self, payload: dict, *, journal_id: str, existing: Optional[JournalEntry] = None) -> JournalEntry:
        def pick(key: str, current: Any) -> Any:
            return payload[key] if key in payload else current

        acknowledged = pick("acknowledged", existing.acknowledged if existing else False)
        if not isinstance(acknowledged, bool):
            raise ValidationError("acknowledged must be true or false")

        return JournalEntry(
            journal_id=journal_id,
            student_id=require_non_empty(pick("studentId", existing.student_id if existing else None), "studentId"),
            entry_date=require_iso_date(pick("date", existing.entry_date if existing else None)),
            category=require_non_empty(pick("category", existing.category if existing else None), "category"),
            content=require_non_empty(pick("content", existing.content if existing else None), "content"),
            feedback=optional_str(pick("feedback", existing.feedback if existing else None), "feedback"),
            feedback_by=optional_str(pick("feedbackBy", existing.feedback_by if existing else None), "feedbackBy"),
            acknowledged=acknowledged,
        )
