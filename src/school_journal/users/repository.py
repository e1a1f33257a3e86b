from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete store.
    """

    def count(self) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        """All users ordered by name ascending."""
        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def find_by_identifier(self, role: Role, identifier: str) -> Optional[User]:
        raise NotImplementedError

    def insert(self, user: User) -> User:
        raise NotImplementedError

    def update(self, user: User) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: str) -> bool:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError
