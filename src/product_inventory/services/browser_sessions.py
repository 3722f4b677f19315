"""Per-browser application state keyed by a cookie."""

import logging
import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from product_inventory.domain.auth import AuthSession
from product_inventory.services.auth import AuthGateway, AuthService
from product_inventory.services.product_forms import ProductForm
from product_inventory.services.product_list import ProductList
from product_inventory.services.products import (
    ImageStorage,
    ProductRepository,
    ProductService,
)
from product_inventory.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


@dataclass
class BrowserSession:
    """Everything one browser tab set interacts with."""

    id: str
    session_manager: SessionManager
    auth_service: AuthService
    product_service: ProductService
    product_form: ProductForm
    product_list: ProductList

    def close(self) -> None:
        self.session_manager.close()


def assemble_browser_session(
    session_id: str,
    gateway: AuthGateway,
    repository: ProductRepository,
    storage: ImageStorage,
    google_client_id: str | None = None,
) -> BrowserSession:
    """Wire the components for one browser and restore its session."""
    product_service = ProductService(repository=repository, storage=storage)
    product_list = ProductList(product_service)

    def handle_session_change(
        previous: AuthSession | None, current: AuthSession | None
    ) -> None:
        previous_user = previous.user_id if previous else None
        current_user = current.user_id if current else None
        if previous_user != current_user:
            product_list.reset()

    session_manager = SessionManager(gateway, on_change=handle_session_change)

    def refresh_after_create() -> None:
        product_list.fetch_products(session_manager.require_session())

    browser = BrowserSession(
        id=session_id,
        session_manager=session_manager,
        auth_service=AuthService(gateway, google_client_id=google_client_id),
        product_service=product_service,
        product_form=ProductForm(product_service, on_success=refresh_after_create),
        product_list=product_list,
    )
    session_manager.start()
    return browser


@dataclass
class BrowserSessionRegistry:
    """Creates browser sessions on first sight and tears down idle ones."""

    factory: Callable[[str], BrowserSession]
    idle_timeout: float = 1800.0
    clock: Callable[[], float] = time.monotonic
    _sessions: dict[str, BrowserSession] = field(default_factory=dict, init=False)
    _last_seen: dict[str, float] = field(default_factory=dict, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def get_or_create(self, session_id: str | None) -> BrowserSession:
        """Return the browser session for the cookie value, creating it if needed.

        Sessions idle for longer than ``idle_timeout`` are closed first, so a
        stale cookie gets a fresh browser session.
        """
        with self._lock:
            now = self.clock()
            expired = self._pop_idle(now)
            browser = self._sessions.get(session_id) if session_id else None
            created = browser is None
            if browser is None:
                browser = self.factory(secrets.token_urlsafe(32))
                self._sessions[browser.id] = browser
            self._last_seen[browser.id] = now
        for stale in expired:
            stale.close()
        if expired:
            logger.info("Evicted idle browser sessions", extra={"count": len(expired)})
        if created:
            logger.info("Created browser session")
        return browser

    def discard(self, session_id: str) -> None:
        with self._lock:
            browser = self._sessions.pop(session_id, None)
            self._last_seen.pop(session_id, None)
        if browser is not None:
            browser.close()

    def close_all(self) -> None:
        with self._lock:
            browsers = list(self._sessions.values())
            self._sessions.clear()
            self._last_seen.clear()
        for browser in browsers:
            browser.close()
        logger.info("Closed browser sessions", extra={"count": len(browsers)})

    def __len__(self) -> int:
        return len(self._sessions)

    def _pop_idle(self, now: float) -> list[BrowserSession]:
        idle = [
            session_id
            for session_id, seen in self._last_seen.items()
            if now - seen > self.idle_timeout
        ]
        for session_id in idle:
            del self._last_seen[session_id]
        return [self._sessions.pop(session_id) for session_id in idle]
