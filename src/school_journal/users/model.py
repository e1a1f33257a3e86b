from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import LOGIN_IDENTIFIER_FIELD, Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, no DB access. ``to_dict`` is the wire form and
    never carries the password hash.
    """

    user_id: str
    name: str
    role: Role
    password_hash: str
    avatar: Optional[str] = None
    nisn: Optional[str] = None
    nip: Optional[str] = None
    nik: Optional[str] = None
    class_name: Optional[str] = None
    parent_id: Optional[str] = None

    @property
    def login_identifier(self) -> Optional[str]:
        return getattr(self, LOGIN_IDENTIFIER_FIELD[self.role])

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "role": self.role.value,
            "nisn": self.nisn,
            "nip": self.nip,
            "nik": self.nik,
            "avatar": self.avatar,
            "className": self.class_name,
            "parentId": self.parent_id,
        }
