from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

os.environ["APP_ENV"] = "testing"
os.environ["STORAGE_BACKEND"] = "memory"

from school_journal.client.gateway import decode_response
from school_journal.client.storage import JsonFileStore, PreferenceStore, SessionStore
from school_journal.core.constants import RESET_ACTION
from school_journal.main import create_app


class FlaskGateway:
    """Async gateway that talks to the app through Flask's test client.

    Responses go through the same ``decode_response`` as the HTTP gateway,
    so status codes map onto the same error classes.
    """

    def __init__(self, client):
        self._client = client
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def _call(self, method: str, path: str, *, params: Optional[dict] = None, body=None):
        self.calls.append((method, path))
        response = self._client.open(path, method=method, query_string=params, json=body)
        return decode_response(response.status_code, response.get_data(as_text=True))

    async def login(self, role, identifier, password):
        return await self._call(
            "POST", "/api/login", body={"role": role, "identifier": identifier, "password": password}
        )

    async def list_users(self):
        return await self._call("GET", "/api/users")

    async def create_user(self, user):
        return await self._call("POST", "/api/users", body=user)

    async def update_user(self, user):
        return await self._call("PUT", "/api/users", body=user)

    async def delete_user(self, user_id):
        await self._call("DELETE", "/api/users", params={"id": user_id})

    async def reset_application_data(self):
        await self._call("DELETE", "/api/users", params={"action": RESET_ACTION})

    async def list_journals(self):
        return await self._call("GET", "/api/journals")

    async def create_journal(self, entry):
        return await self._call("POST", "/api/journals", body=entry)

    async def update_journal(self, entry):
        return await self._call("PUT", "/api/journals", body=entry)

    async def delete_journal(self, journal_id):
        await self._call("DELETE", "/api/journals", params={"id": journal_id})

    async def close(self):
        self.closed = True


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def gateway(client):
    return FlaskGateway(client)


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path / "local_storage.json")


@pytest.fixture
def preferences(store):
    return PreferenceStore(store)


@pytest.fixture
def session_store(store):
    return SessionStore(store)
