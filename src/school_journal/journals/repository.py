from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import JournalEntry


class JournalRepository(Protocol):
    def list_all(self) -> Sequence[JournalEntry]:
        """All entries, newest date first."""
        raise NotImplementedError

    def get_by_id(self, journal_id: str) -> Optional[JournalEntry]:
        raise NotImplementedError

    def insert(self, entry: JournalEntry) -> JournalEntry:
        raise NotImplementedError

    def update(self, entry: JournalEntry) -> bool:
        raise NotImplementedError

    def delete_by_id(self, journal_id: str) -> bool:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError
