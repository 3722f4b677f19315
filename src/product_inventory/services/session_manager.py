"""Tracks the authenticated identity of one browser."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from product_inventory.domain.auth import AuthEvent, AuthSession
from product_inventory.errors import BackendError, NotAuthenticatedError
from product_inventory.services.auth import AuthGateway

logger = logging.getLogger(__name__)


@dataclass
class SessionManager:
    """Holds the current session and follows provider notifications."""

    gateway: AuthGateway
    on_change: Callable[[AuthSession | None, AuthSession | None], None] | None = None
    session: AuthSession | None = field(default=None, init=False)
    _unsubscribe: Callable[[], None] | None = field(
        default=None, init=False, repr=False
    )

    def start(self) -> None:
        """Restore any existing session and subscribe to changes."""
        if self._unsubscribe is not None:
            return
        try:
            self.session = self.gateway.get_session()
        except BackendError:
            logger.warning("Failed to restore session", exc_info=True)
            self.session = None
        self._unsubscribe = self.gateway.on_auth_state_change(self._handle_change)

    def close(self) -> None:
        """Drop the provider subscription."""
        if self._unsubscribe is None:
            return
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        unsubscribe()

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    @property
    def view(self) -> Literal["auth", "main"]:
        """Return which top-level view the browser should render."""
        return "main" if self.session is not None else "auth"

    def require_session(self) -> AuthSession:
        if self.session is None:
            raise NotAuthenticatedError
        return self.session

    def _handle_change(self, event: AuthEvent, session: AuthSession | None) -> None:
        logger.info("Auth state changed", extra={"event": str(event)})
        previous, self.session = self.session, session
        if self.on_change is not None:
            self.on_change(previous, session)
