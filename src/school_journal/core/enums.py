from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles; each one owns a dashboard."""

    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    PARENT = "PARENT"
    ADMIN = "ADMIN"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


# Column holding the login identifier for each role.
LOGIN_IDENTIFIER_FIELD = {
    Role.STUDENT: "nisn",
    Role.TEACHER: "nip",
    Role.PARENT: "nik",
    Role.ADMIN: "nip",
}
