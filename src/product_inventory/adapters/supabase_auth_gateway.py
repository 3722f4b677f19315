"""Supabase-backed auth gateway."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

import httpx
from supabase import AuthError, Client

from product_inventory.domain.auth import AuthEvent, AuthSession, Credentials
from product_inventory.errors import AuthFailedError, provider_message
from product_inventory.services.auth import AuthGateway, AuthListener

logger = logging.getLogger(__name__)

_AUTH_ERRORS = (AuthError, httpx.HTTPError)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Supabase implementation of the auth provider interface."""

    client: Client

    def get_session(self) -> AuthSession | None:
        """Return the session stored in this client, refreshing it if needed."""
        try:
            return _to_session(self.client.auth.get_session())
        except _AUTH_ERRORS as exc:
            raise AuthFailedError(provider_message(exc)) from exc

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Forward provider notifications as domain sessions."""

        def forward(event: str, session: object | None) -> None:
            callback(_to_event(event), _to_session(session))

        subscription = self.client.auth.on_auth_state_change(forward)
        return subscription.unsubscribe

    def sign_up(self, credentials: Credentials, redirect_to: str | None) -> None:
        """Register an account; the provider sends a confirmation email."""
        payload: dict[str, object] = {
            "email": credentials.email,
            "password": credentials.password,
        }
        if redirect_to:
            payload["options"] = {"email_redirect_to": redirect_to}
        try:
            self.client.auth.sign_up(payload)
        except _AUTH_ERRORS as exc:
            raise AuthFailedError(provider_message(exc)) from exc

    def sign_in_with_password(self, credentials: Credentials) -> None:
        try:
            self.client.auth.sign_in_with_password(
                {"email": credentials.email, "password": credentials.password}
            )
        except _AUTH_ERRORS as exc:
            raise AuthFailedError(provider_message(exc)) from exc

    def sign_in_with_id_token(self, provider: str, token: str) -> None:
        try:
            self.client.auth.sign_in_with_id_token(
                {"provider": provider, "token": token}
            )
        except _AUTH_ERRORS as exc:
            raise AuthFailedError(provider_message(exc)) from exc

    def sign_out(self) -> None:
        try:
            self.client.auth.sign_out()
        except _AUTH_ERRORS as exc:
            raise AuthFailedError(provider_message(exc)) from exc


def _to_event(raw: str) -> AuthEvent:
    try:
        return AuthEvent(raw)
    except ValueError:
        logger.info("Unhandled auth event", extra={"event": raw})
        return AuthEvent.USER_UPDATED


def _to_session(session: object | None) -> AuthSession | None:
    """Convert a provider session into a domain session."""
    user = getattr(session, "user", None)
    if session is None or user is None:
        return None
    return AuthSession(
        user_id=UUID(str(user.id)),
        email=getattr(user, "email", None),
        access_token=str(getattr(session, "access_token", "")),
    )
