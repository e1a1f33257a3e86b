from __future__ import annotations

import pytest

from school_journal.client.dispatcher import dispatch, related_students
from school_journal.client.errors import UnknownRoleError
from school_journal.client.sync import SyncController

USERS = [
    {"id": "u1", "name": "Administrator", "role": "ADMIN"},
    {"id": "u2", "name": "Budi Santoso", "role": "TEACHER", "className": "7A"},
    {"id": "u3", "name": "Andi Pratama", "role": "STUDENT", "className": "7A", "parentId": "u5"},
    {"id": "u4", "name": "Siti Aminah", "role": "STUDENT", "className": "7A"},
    {"id": "u5", "name": "Hendra Pratama", "role": "PARENT"},
    {"id": "u6", "name": "Dewi Lestari", "role": "STUDENT", "className": "8B"},
]
JOURNALS = [
    {"id": "j1", "studentId": "u3", "date": "2024-01-03", "category": "Belajar", "content": "a"},
    {"id": "j2", "studentId": "u4", "date": "2024-01-02", "category": "Ibadah", "content": "b"},
    {"id": "j3", "studentId": "u6", "date": "2024-01-01", "category": "Sakit", "content": "c"},
]


class NullGateway:
    async def _noop(self, *args):
        return None

    login = list_users = list_journals = _noop
    create_user = update_user = delete_user = reset_application_data = _noop
    create_journal = update_journal = delete_journal = _noop


@pytest.fixture
def controller(session_store):
    return SyncController(NullGateway(), session_store)


def _view(user_id, preferences, controller):
    user = next(u for u in USERS if u["id"] == user_id)
    return dispatch(user, users=USERS, journals=JOURNALS, preferences=preferences, controller=controller)


def test_student_sees_own_journals_and_settings(preferences, controller):
    view = _view("u3", preferences, controller)

    assert view.name == "student"
    assert [j["id"] for j in view.data["journals"]] == ["j1"]
    assert view.data["journalCategories"] == preferences.journal_categories
    assert view.data["attendanceWindow"] == {"startTime": "07:00", "endTime": "09:00"}
    assert set(view.actions) == {"add_journal", "update_journal", "delete_journal"}


def test_teacher_sees_own_class(preferences, controller):
    view = _view("u2", preferences, controller)

    assert view.name == "teacher"
    assert [s["id"] for s in view.data["students"]] == ["u3", "u4"]
    assert [j["id"] for j in view.data["journals"]] == ["j1", "j2"]
    assert "give_feedback" in view.actions


def test_teacher_without_class_sees_every_student():
    teacher = {"id": "t9", "role": "TEACHER"}

    assert [s["id"] for s in related_students(teacher, USERS)] == ["u3", "u4", "u6"]


def test_parent_sees_children_read_only(preferences, controller):
    view = _view("u5", preferences, controller)

    assert view.name == "parent"
    assert [s["id"] for s in view.data["students"]] == ["u3"]
    assert [j["id"] for j in view.data["journals"]] == ["j1"]
    assert dict(view.actions) == {}


def test_admin_gets_everything(preferences, controller):
    view = _view("u1", preferences, controller)

    assert view.name == "admin"
    assert len(view.data["users"]) == len(USERS)
    assert len(view.data["journals"]) == len(JOURNALS)
    assert view.data["schoolName"] == preferences.school_name
    assert {"add_user", "update_user", "delete_user", "reset_data", "set_school_name"} <= set(view.actions)


def test_unknown_role_is_rejected(preferences, controller):
    with pytest.raises(UnknownRoleError):
        dispatch(
            {"id": "x", "role": "GUEST"},
            users=USERS,
            journals=JOURNALS,
            preferences=preferences,
            controller=controller,
        )
