from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import LOGIN_IDENTIFIER_FIELD, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "id, name, role, nisn, nip, nik, password_hash, avatar, class_name, parent_id"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=str(row["id"]),
        name=row["name"],
        role=Role(row["role"]),
        password_hash=row["password_hash"],
        avatar=row.get("avatar"),
        nisn=row.get("nisn"),
        nip=row.get("nip"),
        nik=row.get("nik"),
        class_name=row.get("class_name"),
        parent_id=row.get("parent_id"),
    )


def _params(user: User) -> tuple:
    return (
        user.name,
        user.role.value,
        user.nisn,
        user.nip,
        user.nik,
        user.password_hash,
        user.avatar,
        user.class_name,
        user.parent_id,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users")
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY name ASC, id ASC")
            return [_row_to_user(r) for r in fetchall(cur)]

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def find_by_identifier(self, role: Role, identifier: str) -> Optional[User]:
        # column name comes from a fixed mapping, never from input
        column = LOGIN_IDENTIFIER_FIELD[role]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role=%s AND {column}=%s LIMIT 1",
                (role.value, identifier),
            )
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def insert(self, user: User) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(id, name, role, nisn, nip, nik, password_hash, avatar, class_name, parent_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (user.user_id, *_params(user)),
            )
        return user

    def update(self, user: User) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET name=%s, role=%s, nisn=%s, nip=%s, nik=%s, password_hash=%s,
                    avatar=%s, class_name=%s, parent_id=%s
                WHERE id=%s
                """,
                (*_params(user), user.user_id),
            )
            if cur.rowcount > 0:
                return True
            # MySQL reports 0 affected rows when nothing changed
            cur.execute("SELECT 1 AS hit FROM users WHERE id=%s", (user.user_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (user_id,))
            return cur.rowcount > 0

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users")
            return int(cur.rowcount)
