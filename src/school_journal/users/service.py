from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.ids import new_id
from ..common.validators import optional_str, require_non_empty
from ..core.constants import INITIAL_USERS
from ..core.enums import LOGIN_IDENTIFIER_FIELD, Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..journals.repository import JournalRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid identifier or password"


def hash_password(password: str) -> str:
    # Passwords match case-insensitively, so the folded form is what gets hashed.
    return generate_password_hash(password.casefold())


def verify_password(password_hash: str, candidate: str) -> bool:
    try:
        return check_password_hash(password_hash, candidate.casefold())
    except ValueError:
        # e.g. placeholder hashes or corrupted values
        return False


def parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Invalid role specified")


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, role: Any, identifier: Any, password: Any) -> User:
        if not role or not identifier or not password:
            raise ValidationError("Role, identifier, and password are required")

        user = self._users.find_by_identifier(parse_role(role), str(identifier).strip())
        if not user or not verify_password(user.password_hash, str(password)):
            raise AuthenticationError(INVALID_CREDENTIALS)
        return user


class UserService:
    """Use case: manage users (admin) and the initial roster."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self) -> Sequence[User]:
        if self._users.count() == 0:
            self.seed_initial_roster()
        return self._users.list_all()

    def seed_initial_roster(self) -> int:
        for payload in INITIAL_USERS:
            self._users.insert(self._build(payload, user_id=payload["id"]))
        logger.info("Seeded initial roster (%d users)", len(INITIAL_USERS))
        return len(INITIAL_USERS)

    def create_user(self, payload: dict) -> User:
        user_id = optional_str(payload.get("id"), "id") or new_id()
        if self._users.get_by_id(user_id):
            raise ValidationError("User ID already exists")

        user = self._build(payload, user_id=user_id)
        self._users.insert(user)
        return user

    def update_user(self, payload: dict) -> User:
        user_id = optional_str(payload.get("id"), "id")
        if not user_id:
            raise ValidationError("Bad request: Missing user ID.")

        existing = self._users.get_by_id(user_id)
        if not existing:
            raise NotFoundError("User not found")

        user = self._build(payload, user_id=user_id, existing=existing)
        if not self._users.update(user):
            raise NotFoundError("User not found")
        return user

    def delete_user(self, user_id: str) -> None:
        # Deleting an unknown id is not an error; the end state is the same.
        if not self._users.delete_by_id(user_id):
            logger.info("Delete requested for unknown user %s", user_id)

    def _build(self, payload: dict, *, user_id: str, existing: Optional[User] = None) -> User:
        def pick(key: str, current: Any) -> Any:
            return payload[key] if key in payload else current

        role = parse_role(pick("role", existing.role.value if existing else None))
        name = require_non_empty(pick("name", existing.name if existing else None), "name")

        fields = {
            "nisn": optional_str(pick("nisn", existing.nisn if existing else None), "nisn"),
            "nip": optional_str(pick("nip", existing.nip if existing else None), "nip"),
            "nik": optional_str(pick("nik", existing.nik if existing else None), "nik"),
        }
        identifier_field = LOGIN_IDENTIFIER_FIELD[role]
        identifier = fields[identifier_field]
        if not identifier:
            raise ValidationError(f"{identifier_field} is required for role {role.value}")

        clash = self._users.find_by_identifier(role, identifier)
        if clash and clash.user_id != user_id:
            raise ValidationError(f"{identifier_field} {identifier} is already registered")

        password = payload.get("password")
        if existing and not password:
            password_hash = existing.password_hash
        else:
            password_hash = hash_password(require_non_empty(password, "password"))

        avatar = optional_str(pick("avatar", existing.avatar if existing else None), "avatar")
        return User(
            user_id=user_id,
            name=name,
            role=role,
            password_hash=password_hash,
            avatar=avatar or f"https://i.pravatar.cc/150?u={user_id}",
            class_name=optional_str(pick("className", existing.class_name if existing else None), "className"),
            parent_id=optional_str(pick("parentId", existing.parent_id if existing else None), "parentId"),
            **fields,
        )


class DataResetService:
    """Use case: wipe journals and users, then restore the initial roster."""

    def __init__(self, users: UserService, users_repo: UserRepository, journals_repo: JournalRepository):
        self._users = users
        self._users_repo = users_repo
        self._journals_repo = journals_repo

    def reset_application_data(self) -> None:
        journals = self._journals_repo.delete_all()
        users = self._users_repo.delete_all()
        self._users.seed_initial_roster()
        logger.warning("Application data reset (removed %d journals, %d users)", journals, users)
