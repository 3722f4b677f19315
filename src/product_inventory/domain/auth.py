"""Domain models for authenticated sessions."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class AuthEvent(StrEnum):
    """Session-change notifications emitted by the auth provider."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"


@dataclass(frozen=True)
class AuthSession:
    """Represents the signed-in identity for one browser."""

    user_id: UUID
    email: str | None
    access_token: str


@dataclass(frozen=True)
class Credentials:
    """Email and password submitted through the auth form."""

    email: str
    password: str
