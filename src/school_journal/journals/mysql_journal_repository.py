from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import JournalEntry
from .repository import JournalRepository

_COLUMNS = "id, student_id, entry_date, category, content, feedback, feedback_by, acknowledged"


def _row_to_entry(row: dict) -> JournalEntry:
    return JournalEntry(
        journal_id=str(row["id"]),
        student_id=str(row["student_id"]),
        entry_date=normalize_mysql_date(row["entry_date"]),
        category=row["category"],
        content=row["content"],
        feedback=row.get("feedback"),
        feedback_by=row.get("feedback_by"),
        acknowledged=bool(row.get("acknowledged", 0)),
    )


class MySQLJournalRepository(JournalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[JournalEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM journals ORDER BY entry_date DESC, created_at DESC")
            return [_row_to_entry(r) for r in fetchall(cur)]

    def get_by_id(self, journal_id: str) -> Optional[JournalEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM journals WHERE id=%s", (journal_id,))
            row = fetchone(cur)
            return _row_to_entry(row) if row else None

    def insert(self, entry: JournalEntry) -> JournalEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO journals(id, student_id, entry_date, category, content, feedback, feedback_by, acknowledged)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.journal_id,
                    entry.student_id,
                    entry.entry_date,
                    entry.category,
                    entry.content,
                    entry.feedback,
                    entry.feedback_by,
                    int(entry.acknowledged),
                ),
            )
        return entry

    def update(self, entry: JournalEntry) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE journals
                SET student_id=%s, entry_date=%s, category=%s, content=%s,
                    feedback=%s, feedback_by=%s, acknowledged=%s
                WHERE id=%s
                """,
                (
                    entry.student_id,
                    entry.entry_date,
                    entry.category,
                    entry.content,
                    entry.feedback,
                    entry.feedback_by,
                    int(entry.acknowledged),
                    entry.journal_id,
                ),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS hit FROM journals WHERE id=%s", (entry.journal_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, journal_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM journals WHERE id=%s", (journal_id,))
            return cur.rowcount > 0

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM journals")
            return int(cur.rowcount)
