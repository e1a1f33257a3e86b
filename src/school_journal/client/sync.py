"""Synchronization controller.

Owns the canonical client-side copies of ``users`` and ``journals`` and
orchestrates every remote mutation. Mutations follow a single policy,
confirm-via-refetch: after the backend accepts a change the controller
runs a fresh refresh cycle and only then returns.

Refresh cycles are tagged with an increasing sequence number. Background
triggers (polling, visibility) join the cycle already in flight; forced
cycles (mutations, login, retry, reset) always start a new one. A cycle
whose result lands after a newer cycle was applied is dropped, so the
collections always equal one complete, most recent pair of fetches.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Protocol

from ..core.enums import Role
from .errors import INVALID_RESPONSE_MESSAGE, GatewayError
from .storage import SessionStore, StoredUser

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Gagal terhubung ke server. Silakan coba lagi nanti."


class DataGateway(Protocol):
    async def login(self, role: str, identifier: str, password: str) -> dict: ...

    async def list_users(self) -> list: ...

    async def create_user(self, user: dict) -> dict: ...

    async def update_user(self, user: dict) -> dict: ...

    async def delete_user(self, user_id: str) -> None: ...

    async def reset_application_data(self) -> None: ...

    async def list_journals(self) -> list: ...

    async def create_journal(self, entry: dict) -> dict: ...

    async def update_journal(self, entry: dict) -> dict: ...

    async def delete_journal(self, journal_id: str) -> None: ...


class SyncState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    SYNCHRONIZING = "synchronizing"
    READY = "ready"
    ERROR = "error"


class MutationKind(str, Enum):
    ADD_USER = "add_user"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"
    ADD_JOURNAL = "add_journal"
    UPDATE_JOURNAL = "update_journal"
    DELETE_JOURNAL = "delete_journal"


Listener = Callable[["SyncController"], None]


def _consume_result(task: asyncio.Future) -> None:
    # Joiners may have timed out; keep asyncio from warning about lost errors.
    if not task.cancelled():
        task.exception()


class SyncController:
    def __init__(
        self,
        gateway: DataGateway,
        session_store: SessionStore,
        *,
        bootstrap_timeout: Optional[float] = 10.0,
    ):
        self._gateway = gateway
        self._session = session_store
        self._bootstrap_timeout = bootstrap_timeout

        self._users: tuple[dict, ...] = ()
        self._journals: tuple[dict, ...] = ()
        self._has_data = False
        self._identity: Optional[dict] = None
        self._state = SyncState.UNAUTHENTICATED

        self.error: Optional[str] = None
        self.last_error: Optional[GatewayError] = None
        self.login_error: Optional[str] = None

        self._issued = 0
        self._applied = 0
        self._inflight: Optional[asyncio.Future] = None
        self._pending = 0
        self._listeners: list[Listener] = []

        self._operations: dict[MutationKind, Callable[[Any], Awaitable[Any]]] = {
            MutationKind.ADD_USER: gateway.create_user,
            MutationKind.UPDATE_USER: gateway.update_user,
            MutationKind.DELETE_USER: gateway.delete_user,
            MutationKind.ADD_JOURNAL: gateway.create_journal,
            MutationKind.UPDATE_JOURNAL: gateway.update_journal,
            MutationKind.DELETE_JOURNAL: gateway.delete_journal,
        }

    # --- read-only views ---

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def users(self) -> tuple[dict, ...]:
        return self._users

    @property
    def journals(self) -> tuple[dict, ...]:
        return self._journals

    @property
    def current_user(self) -> Optional[dict]:
        return dict(self._identity) if self._identity is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    @property
    def has_data(self) -> bool:
        return self._has_data

    @property
    def is_busy(self) -> bool:
        return self._pending > 0

    @property
    def applied_sequence(self) -> int:
        return self._applied

    # --- listeners ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_listeners(self) -> None:
        self._listeners.clear()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("State listener %r failed", listener)

    def _set_state(self, state: SyncState) -> None:
        if state != self._state:
            logger.debug("state %s -> %s", self._state.value, state.value)
        self._state = state
        self._notify()

    # --- session lifecycle ---

    async def bootstrap(self) -> SyncState:
        stored = self._session.load()
        if stored is None:
            self._identity = None
            self._set_state(SyncState.UNAUTHENTICATED)
            return self._state

        self._identity = stored.to_dict()
        await self._synchronize(timeout=self._bootstrap_timeout)
        return self._state

    async def retry(self) -> SyncState:
        if self._identity is None:
            return await self.bootstrap()
        await self._synchronize(timeout=self._bootstrap_timeout)
        return self._state

    async def login(self, role: Role | str, identifier: str, secret: str) -> dict:
        role_value = role.value if isinstance(role, Role) else str(role)
        self.login_error = None
        try:
            record = await self._gateway.login(role_value, identifier, secret)
            if not isinstance(record, dict):
                raise GatewayError(INVALID_RESPONSE_MESSAGE)
            try:
                stored = StoredUser.from_record(record)
            except (KeyError, TypeError, ValueError):
                raise GatewayError(INVALID_RESPONSE_MESSAGE)
        except GatewayError as e:
            self.login_error = e.message
            logger.info("Login failed for %s %s: %s", role_value, identifier, e.message)
            self._notify()
            raise

        self._identity = dict(record)
        self._session.save(stored)
        logger.info("Logged in as %s (%s)", stored.id, stored.role.value)
        await self._synchronize()
        return dict(record)

    def logout(self) -> None:
        self._session.clear()
        self._identity = None
        self.error = None
        self.login_error = None
        self._set_state(SyncState.UNAUTHENTICATED)

    async def _synchronize(self, *, timeout: Optional[float] = None) -> None:
        self.error = None
        self._set_state(SyncState.SYNCHRONIZING)
        try:
            if timeout:
                await asyncio.wait_for(self.refresh(force=True), timeout)
            else:
                await self.refresh(force=True)
        except (GatewayError, asyncio.TimeoutError) as e:
            self._handle_refresh_failure(e, critical=True)

    def _handle_refresh_failure(self, exc: BaseException, *, critical: bool) -> None:
        if self._identity is None:
            return
        if not critical:
            self.last_error = exc if isinstance(exc, GatewayError) else GatewayError(str(exc))
            logger.warning("Non-critical refresh failed, keeping last data: %s", exc)
            self._notify()
            return
        if self._has_data:
            # A session that already shows data keeps it; the failure is surfaced.
            self.last_error = exc if isinstance(exc, GatewayError) else GatewayError(str(exc))
            self.error = LOAD_FAILED_MESSAGE
            logger.warning("Refresh failed with data on screen: %s", exc)
            self._set_state(SyncState.READY)
            return
        logger.error("Initial data load failed: %s", exc)
        self.error = LOAD_FAILED_MESSAGE
        self._set_state(SyncState.ERROR)

    # --- refresh ---

    async def refresh(self, *, force: bool = False) -> bool:
        """Fetch users and journals together and replace both collections.

        Returns ``True`` when this cycle's result was applied, ``False`` when
        a newer cycle had already landed. Gateway failures propagate and
        leave the collections untouched.
        """
        task = self._inflight
        if force or task is None or task.done():
            self._issued += 1
            task = asyncio.ensure_future(self._run_refresh(self._issued))
            task.add_done_callback(_consume_result)
            self._inflight = task
        return await asyncio.shield(task)

    async def refresh_in_background(self) -> bool:
        """Trigger used by polling and visibility changes; never raises gateway errors."""
        if self._identity is None:
            return False
        try:
            return await self.refresh()
        except GatewayError as e:
            self._handle_refresh_failure(e, critical=False)
            return False

    async def _run_refresh(self, seq: int) -> bool:
        results = await asyncio.gather(
            self._gateway.list_users(),
            self._gateway.list_journals(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                logger.debug("refresh #%d failed: %r", seq, result)
                raise result

        users, journals = results
        if not isinstance(users, list) or not isinstance(journals, list):
            raise GatewayError(INVALID_RESPONSE_MESSAGE)

        if seq <= self._applied:
            logger.debug("refresh #%d discarded, #%d already applied", seq, self._applied)
            return False

        self._applied = seq
        self._users = tuple(users)
        self._journals = tuple(journals)
        self._has_data = True
        self.last_error = None

        self._reconcile()
        if self._identity is not None:
            self.error = None
            self._state = SyncState.READY
        self._notify()
        return True

    # --- self reconciliation ---

    def reconcile_self(self) -> bool:
        changed = self._reconcile()
        if changed:
            self._notify()
        return changed

    def _reconcile(self) -> bool:
        if self._identity is None:
            return False

        user_id = self._identity.get("id")
        record = next((u for u in self._users if u.get("id") == user_id), None)
        if record is None:
            logger.warning("Account %s no longer exists, ending session", user_id)
            self._session.clear()
            self._identity = None
            self.error = None
            self.login_error = None
            self._state = SyncState.UNAUTHENTICATED
            return True

        if record == self._identity:
            return False

        self._identity = dict(record)
        try:
            self._session.save(StoredUser.from_record(record))
        except (KeyError, ValueError):
            logger.warning("Account %s has an unusable record, keeping stored session", user_id)
        return True

    # --- mutations ---

    async def mutate(self, kind: MutationKind | str, payload: Any) -> Any:
        kind = MutationKind(kind)
        operation = self._operations[kind]

        self._pending += 1
        self._notify()
        try:
            try:
                result = await operation(payload)
            except GatewayError as e:
                logger.warning("%s failed: %s", kind.value, e.message)
                raise
            await self._confirm(kind.value)
            return result
        finally:
            self._pending -= 1
            self._notify()

    async def _confirm(self, what: str) -> None:
        """Refetch after an accepted write.

        The write already happened server-side, so a failed refetch is
        reported through ``last_error`` instead of failing the write.
        """
        try:
            await self.refresh(force=True)
        except GatewayError as e:
            logger.warning("%s applied but refresh failed: %s", what, e.message)
            self._handle_refresh_failure(e, critical=False)

    async def add_user(self, user: dict) -> dict:
        return await self.mutate(MutationKind.ADD_USER, user)

    async def update_user(self, user: dict) -> dict:
        return await self.mutate(MutationKind.UPDATE_USER, user)

    async def delete_user(self, user_id: str) -> None:
        await self.mutate(MutationKind.DELETE_USER, user_id)

    async def add_journal(self, entry: dict) -> dict:
        return await self.mutate(MutationKind.ADD_JOURNAL, entry)

    async def update_journal(self, entry: dict) -> dict:
        return await self.mutate(MutationKind.UPDATE_JOURNAL, entry)

    async def delete_journal(self, journal_id: str) -> None:
        await self.mutate(MutationKind.DELETE_JOURNAL, journal_id)

    async def give_feedback(self, journal_id: str, feedback: str) -> dict:
        if self._identity is None:
            raise RuntimeError("give_feedback requires an active session")
        return await self.mutate(
            MutationKind.UPDATE_JOURNAL,
            {
                "id": journal_id,
                "feedback": feedback,
                "feedbackBy": self._identity["id"],
                "acknowledged": True,
            },
        )

    async def reset_all_data(self) -> None:
        self._pending += 1
        self._notify()
        try:
            try:
                await self._gateway.reset_application_data()
            except GatewayError:
                # The reset is several steps server-side; show whatever survived.
                try:
                    await self.refresh(force=True)
                except GatewayError as e:
                    logger.warning("Refresh after failed reset also failed: %s", e)
                raise
            await self._confirm("reset")
        finally:
            self._pending -= 1
            self._notify()
