"""Transient user-facing notifications."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class Notification:
    """A toast shown after a user-initiated operation."""

    level: Literal["success", "error"]
    message: str

    @classmethod
    def success(cls, message: str) -> "Notification":
        return cls(level="success", message=message)

    @classmethod
    def error(cls, message: str) -> "Notification":
        return cls(level="error", message=message)
