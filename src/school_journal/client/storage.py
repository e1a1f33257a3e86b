"""Client-local persistence: UI preferences and the logged-in identity.

A single JSON file plays the role of browser local storage. Each value is
read with a default (the default gets written back on first read) and
written independently of the others.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from threading import RLock
from typing import Any, Optional

from ..common.validators import require_non_empty, require_time_of_day
from ..core.constants import (
    DEFAULT_ATTENDANCE_WINDOW,
    DEFAULT_JOURNAL_CATEGORIES,
    DEFAULT_SCHOOL_NAME,
    DEFAULT_THEME,
)
from ..core.enums import Role, Theme
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

SESSION_KEY = "currentUser"
CATEGORIES_KEY = "journalCategories"
ATTENDANCE_KEY = "attendanceSettings"
SCHOOL_NAME_KEY = "schoolName"
THEME_KEY = "theme"


class JsonFileStore:
    """Key/value store persisted as one JSON object on disk."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = RLock()
        self._data: dict[str, Any] = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Could not load local store %s, starting empty", self._path)
            return {}
        if not isinstance(data, dict):
            logger.error("Local store %s is not a JSON object, starting empty", self._path)
            return {}
        return data

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".store-", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value
            self._flush()

    def remove(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._flush()


def load_state(store: JsonFileStore, key: str, default: Any) -> Any:
    """Read ``key``; when missing, persist ``default`` for next time and return it."""
    if key not in store:
        save_state(store, key, default)
        return default
    return store.get(key)


def save_state(store: JsonFileStore, key: str, value: Any) -> None:
    try:
        store.set(key, value)
    except (OSError, TypeError, ValueError):
        # Preferences stay usable in memory even when the disk write fails.
        logger.exception("Could not save local state for key %s", key)


@dataclass(frozen=True)
class AttendanceWindow:
    start_time: str
    end_time: str

    @classmethod
    def from_dict(cls, data: dict) -> "AttendanceWindow":
        window = cls(
            start_time=require_time_of_day(data.get("startTime"), "startTime"),
            end_time=require_time_of_day(data.get("endTime"), "endTime"),
        )
        if window.start_time >= window.end_time:
            raise ValidationError("startTime must be before endTime")
        return window

    def to_dict(self) -> dict:
        return {"startTime": self.start_time, "endTime": self.end_time}


class PreferenceStore:
    """Settings bundle: categories, attendance window, school name, theme."""

    def __init__(self, store: JsonFileStore):
        self._store = store

    @property
    def journal_categories(self) -> list[str]:
        value = load_state(self._store, CATEGORIES_KEY, list(DEFAULT_JOURNAL_CATEGORIES))
        if not isinstance(value, list):
            return list(DEFAULT_JOURNAL_CATEGORIES)
        return [str(c) for c in value]

    def set_journal_categories(self, categories: list[str]) -> list[str]:
        cleaned: list[str] = []
        for category in categories:
            category = require_non_empty(category, "category")
            if category not in cleaned:
                cleaned.append(category)
        if not cleaned:
            raise ValidationError("At least one journal category is required")
        save_state(self._store, CATEGORIES_KEY, cleaned)
        return cleaned

    @property
    def attendance_window(self) -> AttendanceWindow:
        value = load_state(self._store, ATTENDANCE_KEY, dict(DEFAULT_ATTENDANCE_WINDOW))
        try:
            return AttendanceWindow.from_dict(value if isinstance(value, dict) else {})
        except ValidationError:
            logger.warning("Stored attendance window %r is invalid, using default", value)
            return AttendanceWindow.from_dict(DEFAULT_ATTENDANCE_WINDOW)

    def set_attendance_window(self, start_time: str, end_time: str) -> AttendanceWindow:
        window = AttendanceWindow.from_dict({"startTime": start_time, "endTime": end_time})
        save_state(self._store, ATTENDANCE_KEY, window.to_dict())
        return window

    @property
    def school_name(self) -> str:
        value = load_state(self._store, SCHOOL_NAME_KEY, DEFAULT_SCHOOL_NAME)
        return value if isinstance(value, str) and value.strip() else DEFAULT_SCHOOL_NAME

    def set_school_name(self, name: str) -> str:
        name = require_non_empty(name, "schoolName")
        save_state(self._store, SCHOOL_NAME_KEY, name)
        return name

    @property
    def theme(self) -> Theme:
        value = load_state(self._store, THEME_KEY, DEFAULT_THEME)
        try:
            return Theme(value)
        except ValueError:
            return Theme(DEFAULT_THEME)

    def set_theme(self, theme: Theme | str) -> Theme:
        try:
            theme = Theme(theme)
        except ValueError:
            raise ValidationError(f"Unknown theme: {theme!r}")
        save_state(self._store, THEME_KEY, theme.value)
        return theme

    def toggle_theme(self) -> Theme:
        return self.set_theme(Theme.DARK if self.theme == Theme.LIGHT else Theme.LIGHT)


@dataclass(frozen=True)
class StoredUser:
    """Minimal identity kept locally so a reload does not need a new login."""

    id: str
    name: str
    role: Role
    avatar: Optional[str] = None

    @classmethod
    def from_record(cls, record: dict) -> "StoredUser":
        return cls(
            id=str(record["id"]),
            name=str(record.get("name") or ""),
            role=Role(record["role"]),
            avatar=record.get("avatar"),
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["role"] = self.role.value
        return data


class SessionStore:
    def __init__(self, store: JsonFileStore):
        self._store = store

    def load(self) -> Optional[StoredUser]:
        value = self._store.get(SESSION_KEY)
        if value is None:
            return None
        try:
            return StoredUser.from_record(value)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding unreadable stored session %r", value)
            self.clear()
            return None

    def save(self, user: StoredUser) -> None:
        self._store.set(SESSION_KEY, user.to_dict())

    def clear(self) -> None:
        self._store.remove(SESSION_KEY)
