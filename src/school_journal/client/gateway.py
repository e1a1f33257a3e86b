"""Remote data gateway.

Thin async HTTP client over the backend endpoints. Every call returns the
decoded JSON body of a successful response or raises a
:class:`~school_journal.client.errors.GatewayError`. The gateway never
retries; retry policy belongs to the synchronization controller.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
import time
from typing import Any, Optional

import aiohttp

from ..core.constants import NO_STORE_HEADERS, RESET_ACTION
from .errors import INVALID_RESPONSE_MESSAGE, InvalidResponseError, NetworkError, remote_error_for

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Accept": "application/json", "User-Agent": "SchoolJournal-Client/1.0"}


def decode_response(status: int, text: str) -> Any:
    """Turn a status code and raw body into a payload or a ``GatewayError``."""
    payload: Any = None
    malformed = False
    if text:
        try:
            payload = json.loads(text)
        except ValueError:
            malformed = True

    if 200 <= status < 300:
        if malformed:
            raise InvalidResponseError(INVALID_RESPONSE_MESSAGE)
        return payload

    message = None
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                message = value
                break
    raise remote_error_for(status, message)


class RemoteDataGateway:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 20.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None
        self._bust = itertools.count(1)

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout, headers=JSON_HEADERS)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _cache_buster(self) -> str:
        # unique per call even within the same clock tick
        return f"{time.time_ns()}-{next(self._bust)}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        body: Any = None,
        read: bool = False,
    ) -> Any:
        session = await self._ensure_session()
        url = f"{self._base_url}{path}"
        params = dict(params or {})
        headers = {}
        if read:
            params["t"] = self._cache_buster()
            headers.update({k: v for k, v in NO_STORE_HEADERS.items() if k != "Expires"})

        try:
            async with session.request(
                method,
                url,
                params=params or None,
                json=body,
                headers=headers or None,
            ) as response:
                raw = await response.read()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(f"Tidak dapat terhubung ke server: {e}") from e

        logger.debug("%s %s -> %s", method, path, status)
        # undecodable bytes end up as an invalid payload, never a UnicodeDecodeError
        return decode_response(status, raw.decode("utf-8", errors="replace"))

    # --- auth ---

    async def login(self, role: str, identifier: str, password: str) -> dict:
        return await self._request(
            "POST",
            "/api/login",
            body={"role": role, "identifier": identifier, "password": password},
        )

    # --- users ---

    async def list_users(self) -> list:
        return await self._request("GET", "/api/users", read=True)

    async def create_user(self, user: dict) -> dict:
        return await self._request("POST", "/api/users", body=user)

    async def update_user(self, user: dict) -> dict:
        return await self._request("PUT", "/api/users", body=user)

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", "/api/users", params={"id": user_id})

    async def reset_application_data(self) -> None:
        await self._request("DELETE", "/api/users", params={"action": RESET_ACTION})

    # --- journals ---

    async def list_journals(self) -> list:
        return await self._request("GET", "/api/journals", read=True)

    async def create_journal(self, entry: dict) -> dict:
        return await self._request("POST", "/api/journals", body=entry)

    async def update_journal(self, entry: dict) -> dict:
        return await self._request("PUT", "/api/journals", body=entry)

    async def delete_journal(self, journal_id: str) -> None:
        await self._request("DELETE", "/api/journals", params={"id": journal_id})
