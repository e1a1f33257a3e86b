"""Client application context.

Everything the dashboards need lives on one object with an explicit
lifecycle: ``start()`` restores the session and starts polling,
``shutdown()`` stops the background work and releases the HTTP session.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from ..config import get_settings_module
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import Theme
from ..core.logging_config import setup_logging
from .dispatcher import DashboardView, dispatch
from .gateway import RemoteDataGateway
from .pagination import Page, paginate
from .storage import JsonFileStore, PreferenceStore, SessionStore
from .sync import DataGateway, SyncController, SyncState

logger = logging.getLogger(__name__)

STORE_FILENAME = "local_storage.json"


class ClientContext:
    def __init__(
        self,
        *,
        gateway: DataGateway,
        controller: SyncController,
        preferences: PreferenceStore,
        session_store: SessionStore,
        poll_interval: Optional[float] = 30.0,
    ):
        self.gateway = gateway
        self.controller = controller
        self.preferences = preferences
        self.session_store = session_store
        self._poll_interval = poll_interval
        self._poller: Optional[asyncio.Task] = None
        self._tasks: set[asyncio.Task] = set()
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def theme(self) -> Theme:
        return self.preferences.theme

    def toggle_theme(self) -> Theme:
        return self.preferences.toggle_theme()

    async def start(self) -> SyncState:
        if self._started:
            raise RuntimeError("client context already started")
        self._started = True
        state = await self.controller.bootstrap()
        if self._poll_interval:
            self._poller = asyncio.ensure_future(self._poll_loop())
        logger.info("client started in state %s", state.value)
        return state

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            try:
                await self.controller.refresh_in_background()
            except Exception:
                logger.exception("Polling refresh crashed")

    def on_visibility_change(self, visible: bool) -> Optional[asyncio.Task]:
        """Coming back to the foreground pulls fresh data."""
        if not visible or not self._started:
            return None
        logger.debug("became visible, refreshing")
        task = asyncio.ensure_future(self.controller.refresh_in_background())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def shutdown(self) -> None:
        pending = [t for t in (self._poller, *self._tasks) if t is not None]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._poller = None
        self._tasks.clear()
        self.controller.clear_listeners()

        close = getattr(self.gateway, "close", None)
        if close is not None:
            await close()
        self._started = False
        logger.info("client stopped")

    async def __aenter__(self) -> "ClientContext":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.shutdown()

    def dashboard(self) -> Optional[DashboardView]:
        user = self.controller.current_user
        if user is None:
            return None
        return dispatch(
            user,
            users=self.controller.users,
            journals=self.controller.journals,
            preferences=self.preferences,
            controller=self.controller,
        )

    def journal_page(self, page: int = 1, *, per_page: int = DEFAULT_PAGE_SIZE) -> Page[dict]:
        view = self.dashboard()
        journals = view.data.get("journals", []) if view else []
        return paginate(journals, page, per_page)


def build_client(
    *,
    gateway: Optional[DataGateway] = None,
    data_dir: Optional[str | Path] = None,
) -> ClientContext:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    store = JsonFileStore(Path(data_dir or getattr(settings, "CLIENT_DATA_DIR")) / STORE_FILENAME)
    if gateway is None:
        gateway = RemoteDataGateway(
            getattr(settings, "API_BASE_URL"),
            timeout=float(getattr(settings, "HTTP_TIMEOUT_SECONDS", 20.0)),
        )
    session_store = SessionStore(store)
    controller = SyncController(
        gateway,
        session_store,
        bootstrap_timeout=float(getattr(settings, "BOOTSTRAP_TIMEOUT_SECONDS", 10.0)),
    )
    return ClientContext(
        gateway=gateway,
        controller=controller,
        preferences=PreferenceStore(store),
        session_store=session_store,
        poll_interval=float(getattr(settings, "POLL_INTERVAL_SECONDS", 30.0)),
    )
