from __future__ import annotations

from threading import RLock
from typing import Optional, Sequence

from ..core.enums import Role
from .model import User
from .repository import UserRepository


class InMemoryUserRepository(UserRepository):
    """Process-local store used by tests and the ``memory`` backend."""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._lock = RLock()

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def list_all(self) -> Sequence[User]:
        with self._lock:
            return sorted(self._users.values(), key=lambda u: (u.name.casefold(), u.user_id))

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def find_by_identifier(self, role: Role, identifier: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.role == role and user.login_identifier == identifier:
                    return user
            return None

    def insert(self, user: User) -> User:
        with self._lock:
            if user.user_id in self._users:
                raise ValueError(f"duplicate user id {user.user_id!r}")
            self._users[user.user_id] = user
            return user

    def update(self, user: User) -> bool:
        with self._lock:
            if user.user_id not in self._users:
                return False
            self._users[user.user_id] = user
            return True

    def delete_by_id(self, user_id: str) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None

    def delete_all(self) -> int:
        with self._lock:
            removed = len(self._users)
            self._users.clear()
            return removed
