"""Role dispatcher: which dashboard an authenticated role gets, with what data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from ..core.enums import Role
from .errors import UnknownRoleError
from .storage import PreferenceStore
from .sync import SyncController


@dataclass(frozen=True)
class DashboardView:
    name: str
    user: dict
    data: Mapping[str, Any] = field(default_factory=dict)
    actions: Mapping[str, Callable[..., Any]] = field(default_factory=dict)


def students(users: Sequence[dict]) -> list[dict]:
    return [u for u in users if u.get("role") == Role.STUDENT.value]


def journals_for(journals: Sequence[dict], student_ids: set[str]) -> list[dict]:
    return [j for j in journals if j.get("studentId") in student_ids]


def related_students(user: dict, users: Sequence[dict]) -> list[dict]:
    """Students a teacher supervises (same class) or a parent looks after."""
    role = user.get("role")
    if role == Role.PARENT.value:
        return [s for s in students(users) if s.get("parentId") == user.get("id")]
    if role == Role.TEACHER.value:
        class_name = user.get("className")
        if not class_name:
            return students(users)
        return [s for s in students(users) if s.get("className") == class_name]
    return []


def dispatch(
    user: dict,
    *,
    users: Sequence[dict],
    journals: Sequence[dict],
    preferences: PreferenceStore,
    controller: SyncController,
) -> DashboardView:
    try:
        role = Role(user.get("role"))
    except ValueError:
        raise UnknownRoleError(user.get("role"))

    if role == Role.STUDENT:
        return DashboardView(
            name="student",
            user=user,
            data={
                "journals": journals_for(journals, {user["id"]}),
                "journalCategories": preferences.journal_categories,
                "attendanceWindow": preferences.attendance_window.to_dict(),
            },
            actions={
                "add_journal": controller.add_journal,
                "update_journal": controller.update_journal,
                "delete_journal": controller.delete_journal,
            },
        )

    if role == Role.TEACHER:
        mine = related_students(user, users)
        return DashboardView(
            name="teacher",
            user=user,
            data={
                "students": mine,
                "journals": journals_for(journals, {s["id"] for s in mine}),
            },
            actions={
                "update_journal": controller.update_journal,
                "give_feedback": controller.give_feedback,
            },
        )

    if role == Role.PARENT:
        children = related_students(user, users)
        return DashboardView(
            name="parent",
            user=user,
            data={
                "students": children,
                "journals": journals_for(journals, {s["id"] for s in children}),
            },
        )

    return DashboardView(
        name="admin",
        user=user,
        data={
            "users": list(users),
            "journals": list(journals),
            "journalCategories": preferences.journal_categories,
            "attendanceWindow": preferences.attendance_window.to_dict(),
            "schoolName": preferences.school_name,
        },
        actions={
            "add_user": controller.add_user,
            "update_user": controller.update_user,
            "delete_user": controller.delete_user,
            "set_journal_categories": preferences.set_journal_categories,
            "set_attendance_window": preferences.set_attendance_window,
            "set_school_name": preferences.set_school_name,
            "reset_data": controller.reset_all_data,
        },
    )
