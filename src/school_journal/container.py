from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .journals.memory_journal_repository import InMemoryJournalRepository
from .journals.mysql_journal_repository import MySQLJournalRepository
from .journals.repository import JournalRepository
from .journals.service import JournalService
from .users.memory_user_repository import InMemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, DataResetService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    journals_repo: JournalRepository

    auth_service: AuthService
    user_service: UserService
    journal_service: JournalService
    reset_service: DataResetService


def build_container(*, backend: str = "mysql", db_config: Optional[dict] = None) -> Container:
    if backend == "memory":
        users_repo: UserRepository = InMemoryUserRepository()
        journals_repo: JournalRepository = InMemoryJournalRepository()
    elif backend == "mysql":
        if db_config is None:
            raise ValueError("db_config is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        users_repo = MySQLUserRepository(conn)
        journals_repo = MySQLJournalRepository(conn)
    else:
        raise ValueError(f"Unknown storage backend: {backend!r}")

    user_service = UserService(users_repo)
    return Container(
        users_repo=users_repo,
        journals_repo=journals_repo,
        auth_service=AuthService(users_repo),
        user_service=user_service,
        journal_service=JournalService(journals_repo),
        reset_service=DataResetService(user_service, users_repo, journals_repo),
    )
