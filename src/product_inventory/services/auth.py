"""Auth form operations backed by the hosted auth provider."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from product_inventory.domain.auth import AuthEvent, AuthSession, Credentials
from product_inventory.domain.notifications import Notification
from product_inventory.errors import ValidationError
from product_inventory.services.guards import SubmitGuard

logger = logging.getLogger(__name__)

GOOGLE_PROVIDER = "google"

AuthListener = Callable[[AuthEvent, AuthSession | None], None]


class AuthGateway(Protocol):
    """Interface for the auth provider."""

    def get_session(self) -> AuthSession | None:
        """Return the current session, if any."""

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Register a session-change listener and return its unsubscribe handle."""

    def sign_up(self, credentials: Credentials, redirect_to: str | None) -> None:
        """Register a new account pending email confirmation."""

    def sign_in_with_password(self, credentials: Credentials) -> None:
        """Start a session from email and password."""

    def sign_in_with_id_token(self, provider: str, token: str) -> None:
        """Exchange a third-party identity token for a session."""

    def sign_out(self) -> None:
        """End the current session."""


@dataclass
class AuthService:
    """Submits sign-in and sign-up requests for one browser.

    Session state is never stored here: a successful call makes the provider
    notify the session manager's listener.
    """

    gateway: AuthGateway
    google_client_id: str | None = None
    guard: SubmitGuard = field(default_factory=lambda: SubmitGuard("auth"))

    def sign_in(self, email: str, password: str) -> Notification:
        """Sign in with email and password."""
        credentials = _credentials(email, password)
        with self.guard.submitting():
            self.gateway.sign_in_with_password(credentials)
        return Notification.success("Successfully logged in!")

    def sign_up(
        self, email: str, password: str, redirect_to: str | None = None
    ) -> Notification:
        """Register an account; the provider confirms it out of band."""
        credentials = _credentials(email, password)
        with self.guard.submitting():
            self.gateway.sign_up(credentials, redirect_to)
        return Notification.success("Check your email for the confirmation link!")

    def sign_in_with_federated_identity(self, token: str) -> Notification:
        """Exchange a Google ID token for a session."""
        if not token or not token.strip():
            raise ValidationError("Missing identity token")
        with self.guard.submitting():
            self.gateway.sign_in_with_id_token(GOOGLE_PROVIDER, token.strip())
        return Notification.success("Successfully logged in with Google!")

    def sign_out(self) -> Notification:
        self.gateway.sign_out()
        return Notification.success("Signed out")

    def federated_prompt_config(self) -> dict[str, object] | None:
        """Return the one-tap prompt configuration when a client id is set."""
        if not self.google_client_id:
            return None
        return {
            "client_id": self.google_client_id,
            "auto_select": True,
            "cancel_on_tap_outside": False,
            "context": "signin",
            "ux_mode": "popup",
            "itp_support": True,
            "use_fedcm_for_prompt": True,
        }


def _credentials(email: str, password: str) -> Credentials:
    email = (email or "").strip()
    if not email or not password:
        raise ValidationError("Email and password are required")
    return Credentials(email=email, password=password)
