from __future__ import annotations

import pytest

from school_journal.core.enums import Role
from school_journal.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from school_journal.journals.memory_journal_repository import InMemoryJournalRepository
from school_journal.journals.model import JournalEntry
from school_journal.users.memory_user_repository import InMemoryUserRepository
from school_journal.users.service import AuthService, DataResetService, UserService


def _seeded():
    repo = InMemoryUserRepository()
    users = UserService(repo)
    users.list_users()
    return repo, users, AuthService(repo)


def test_first_listing_seeds_roster_sorted_by_name():
    repo = InMemoryUserRepository()
    users = UserService(repo)

    listed = users.list_users()

    assert [u.name for u in listed] == [
        "Administrator",
        "Andi Pratama",
        "Budi Santoso",
        "Hendra Pratama",
        "Siti Aminah",
    ]
    users.list_users()
    assert repo.count() == 5


def test_seeded_student_is_linked_to_parent_and_class():
    repo, _, _ = _seeded()

    andi = repo.get_by_id("u3")
    assert andi.role == Role.STUDENT
    assert andi.class_name == "7A"
    assert andi.parent_id == "u5"
    assert repo.get_by_id("u5").role == Role.PARENT


def test_login_password_is_case_insensitive():
    _, _, auth = _seeded()

    user = auth.authenticate("STUDENT", "123456", "Abc123")

    assert user.user_id == "u3"


def test_login_identifier_belongs_to_role():
    _, _, auth = _seeded()

    with pytest.raises(AuthenticationError):
        auth.authenticate("TEACHER", "123456", "abc123")
    with pytest.raises(AuthenticationError):
        auth.authenticate("STUDENT", "123456", "wrong")


def test_login_requires_all_fields_and_known_role():
    _, _, auth = _seeded()

    with pytest.raises(ValidationError):
        auth.authenticate("STUDENT", "", "abc123")
    with pytest.raises(ValidationError, match="Invalid role specified"):
        auth.authenticate("JANITOR", "123456", "abc123")


def test_wire_record_never_contains_password():
    _, users, _ = _seeded()

    for user in users.list_users():
        data = user.to_dict()
        assert "password" not in data
        assert "password_hash" not in data
        assert user.password_hash not in data.values()


def test_create_user_generates_id_and_default_avatar():
    _, users, auth = _seeded()

    created = users.create_user(
        {"name": "Rina Wulandari", "role": "STUDENT", "nisn": "777001", "password": "Rahasia1", "className": "7B"}
    )

    assert created.user_id
    assert created.avatar.endswith(created.user_id)
    assert auth.authenticate("STUDENT", "777001", "rahasia1").user_id == created.user_id


def test_create_user_rejects_missing_identifier_and_duplicates():
    _, users, _ = _seeded()

    with pytest.raises(ValidationError, match="nisn is required"):
        users.create_user({"name": "Tanpa NISN", "role": "STUDENT", "password": "x"})
    with pytest.raises(ValidationError, match="already registered"):
        users.create_user({"name": "Kembar", "role": "STUDENT", "nisn": "123456", "password": "x"})
    with pytest.raises(ValidationError, match="User ID already exists"):
        users.create_user({"id": "u1", "name": "Lagi", "role": "ADMIN", "nip": "lain", "password": "x"})


def test_update_user_keeps_password_when_not_given():
    _, users, auth = _seeded()

    updated = users.update_user({"id": "u3", "name": "Andi P."})

    assert updated.name == "Andi P."
    assert updated.nisn == "123456"
    assert updated.parent_id == "u5"
    assert auth.authenticate("STUDENT", "123456", "abc123").name == "Andi P."


def test_update_user_errors():
    _, users, _ = _seeded()

    with pytest.raises(ValidationError, match="Missing user ID"):
        users.update_user({"name": "Tanpa ID"})
    with pytest.raises(NotFoundError):
        users.update_user({"id": "missing", "name": "Hilang"})


def test_delete_unknown_user_is_not_an_error():
    repo, users, _ = _seeded()

    users.delete_user("missing")
    users.delete_user("u4")

    assert repo.get_by_id("u4") is None
    assert repo.count() == 4


def test_reset_restores_roster_and_drops_journals():
    repo, users, _ = _seeded()
    journals = InMemoryJournalRepository()
    journals.insert(JournalEntry("j1", "u3", "2024-01-01", "Belajar", "membaca"))
    users.create_user({"name": "Tamu", "role": "PARENT", "nik": "999", "password": "x"})
    users.delete_user("u1")

    DataResetService(users, repo, journals).reset_application_data()

    assert sorted(u.user_id for u in repo.list_all()) == ["u1", "u2", "u3", "u4", "u5"]
    assert list(journals.list_all()) == []
