from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class JournalEntry:
    """Domain entity: a student's daily journal entry plus teacher feedback."""

    journal_id: str
    student_id: str
    entry_date: str
    category: str
    content: str
    feedback: Optional[str] = None
    feedback_by: Optional[str] = None
    acknowledged: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.journal_id,
            "studentId": self.student_id,
            "date": self.entry_date,
            "category": self.category,
            "content": self.content,
            "feedback": self.feedback,
            "feedbackBy": self.feedback_by,
            "acknowledged": self.acknowledged,
        }
