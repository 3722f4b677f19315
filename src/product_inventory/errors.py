"""Typed failures raised by inventory operations."""

from enum import StrEnum


class FailureKind(StrEnum):
    """Enumerates every way a user-initiated operation can fail."""

    VALIDATION = "validation"
    NOT_AUTHENTICATED = "not_authenticated"
    CONFIRMATION_REQUIRED = "confirmation_required"
    IN_PROGRESS = "in_progress"
    NOT_FOUND = "not_found"
    AUTH = "auth"
    STORAGE = "storage"
    DATABASE = "database"


class InventoryError(Exception):
    """Base error carrying a failure kind and a user-facing message."""

    kind: FailureKind = FailureKind.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Input rejected locally before any backend call."""

    kind = FailureKind.VALIDATION


class NotAuthenticatedError(InventoryError):
    """Operation needs a present session."""

    kind = FailureKind.NOT_AUTHENTICATED

    def __init__(self, message: str = "No user found") -> None:
        super().__init__(message)


class ConfirmationRequiredError(InventoryError):
    """Destructive operation was not confirmed by the user."""

    kind = FailureKind.CONFIRMATION_REQUIRED

    def __init__(
        self, message: str = "Are you sure you want to delete this product?"
    ) -> None:
        super().__init__(message)


class SubmissionInProgressError(InventoryError):
    """A form was submitted again while its previous request is in flight."""

    kind = FailureKind.IN_PROGRESS

    def __init__(self, message: str = "Processing...") -> None:
        super().__init__(message)


class ProductNotFoundError(InventoryError):
    """Product is not part of the current working set."""

    kind = FailureKind.NOT_FOUND

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class BackendError(InventoryError):
    """Failure reported by the hosted backend."""


class AuthFailedError(BackendError):
    """Auth provider rejected the request."""

    kind = FailureKind.AUTH


class StorageFailedError(BackendError):
    """Object storage rejected the request."""

    kind = FailureKind.STORAGE


class DatabaseFailedError(BackendError):
    """Database rejected the request."""

    kind = FailureKind.DATABASE


def provider_message(exc: Exception) -> str:
    """Extract the human-readable message from a backend client error."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    if exc.args and isinstance(exc.args[0], dict):
        detail = exc.args[0].get("message") or exc.args[0].get("error")
        if detail:
            return str(detail)
    return str(exc) or type(exc).__name__
