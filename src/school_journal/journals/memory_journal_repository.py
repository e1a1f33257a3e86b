from __future__ import annotations

from itertools import count
from threading import RLock
from typing import Optional, Sequence

from .model import JournalEntry
from .repository import JournalRepository


class InMemoryJournalRepository(JournalRepository):
    def __init__(self):
        self._entries: dict[str, JournalEntry] = {}
        # insertion order breaks ties between entries of the same date
        self._order: dict[str, int] = {}
        self._seq = count(1)
        self._lock = RLock()

    def list_all(self) -> Sequence[JournalEntry]:
        with self._lock:
            return sorted(
                self._entries.values(),
                key=lambda e: (e.entry_date, self._order[e.journal_id]),
                reverse=True,
            )

    def get_by_id(self, journal_id: str) -> Optional[JournalEntry]:
        with self._lock:
            return self._entries.get(journal_id)

    def insert(self, entry: JournalEntry) -> JournalEntry:
        with self._lock:
            if entry.journal_id in self._entries:
                raise ValueError(f"duplicate journal id {entry.journal_id!r}")
            self._entries[entry.journal_id] = entry
            self._order[entry.journal_id] = next(self._seq)
            return entry

    def update(self, entry: JournalEntry) -> bool:
        with self._lock:
            if entry.journal_id not in self._entries:
                return False
            self._entries[entry.journal_id] = entry
            return True

    def delete_by_id(self, journal_id: str) -> bool:
        with self._lock:
            self._order.pop(journal_id, None)
            return self._entries.pop(journal_id, None) is not None

    def delete_all(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
            self._order.clear()
            return removed
