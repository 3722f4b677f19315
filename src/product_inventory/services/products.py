"""Product create, update and delete against storage and the database."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID, uuid4

from pydantic import ValidationError as PydanticValidationError

from product_inventory.domain.auth import AuthSession
from product_inventory.domain.products import ImageUpload, Product, ProductDraft
from product_inventory.errors import (
    DatabaseFailedError,
    ProductNotFoundError,
    StorageFailedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_FIELD_MESSAGES = {
    "name": "Product name is required",
    "price": "Price must be a non-negative number",
    "comments": "Comments are required",
}


class ProductRepository(Protocol):
    """Persistence interface for product rows."""

    def insert(self, user_id: UUID, payload: dict[str, object]) -> Product:
        """Insert a row owned by the user and return it."""

    def list_for_owner(self, user_id: UUID) -> list[Product]:
        """Return the user's rows, newest first."""

    def update(
        self, user_id: UUID, product_id: int, payload: dict[str, object]
    ) -> Product | None:
        """Apply a patch to the user's row and return it, if it exists."""

    def delete(self, user_id: UUID, product_id: int) -> None:
        """Delete the user's row."""


class ImageStorage(Protocol):
    """Interface for the product image bucket."""

    def upload(self, key: str, image: ImageUpload) -> str:
        """Store the image under the key and return its path."""

    def remove(self, paths: list[str]) -> None:
        """Delete stored objects."""

    def public_url(self, path: str) -> str:
        """Return the public URL for a stored object."""


def random_image_name(image: ImageUpload) -> str:
    """Build a random object key keeping the original file extension."""
    stem = uuid4().hex
    return f"{stem}.{image.extension}" if image.extension else stem


def parse_draft(name: str, price: str | float, comments: str) -> ProductDraft:
    """Validate raw form fields into a draft."""
    try:
        return ProductDraft(name=name, price=price, comments=comments)
    except PydanticValidationError as exc:
        field_name = str(exc.errors()[0]["loc"][0])
        raise ValidationError(
            _FIELD_MESSAGES.get(field_name, "Invalid product")
        ) from exc


@dataclass
class ProductService:
    """Two-phase product writes: object storage first, then the row."""

    repository: ProductRepository
    storage: ImageStorage
    image_name: Callable[[ImageUpload], str] = random_image_name

    def list_products(self, session: AuthSession) -> list[Product]:
        """Return the session owner's products, newest first."""
        return self.repository.list_for_owner(session.user_id)

    def create_product(
        self, session: AuthSession, draft: ProductDraft, image: ImageUpload | None
    ) -> Product:
        """Upload the image and insert a row referencing it.

        A failed insert removes the uploaded object again.
        """
        if image is None:
            raise ValidationError("Please select an image")
        path = self.storage.upload(self.image_name(image), image)
        try:
            return self.repository.insert(
                session.user_id, {**draft.to_payload(), "image_url": path}
            )
        except DatabaseFailedError:
            self._remove_quietly(path, "Removing image after failed insert")
            raise

    def update_product(
        self,
        session: AuthSession,
        product: Product,
        draft: ProductDraft,
        image: ImageUpload | None = None,
    ) -> Product:
        """Update the row, replacing its image when a new one is given.

        The new object is uploaded before the row changes and the old one is
        removed only after the row points at the new path.
        """
        payload = draft.to_payload()
        new_path: str | None = None
        if image is not None:
            new_path = self.storage.upload(self.image_name(image), image)
            payload["image_url"] = new_path
        try:
            updated = self.repository.update(session.user_id, product.id, payload)
        except DatabaseFailedError:
            if new_path:
                self._remove_quietly(new_path, "Removing image after failed update")
            raise
        if updated is None:
            if new_path:
                self._remove_quietly(new_path, "Removing image for missing product")
            raise ProductNotFoundError(product.id)
        if new_path and product.image_url and product.image_url != new_path:
            self._remove_quietly(product.image_url, "Removing replaced image")
        return updated

    def delete_product(
        self, session: AuthSession, product_id: int, image_url: str
    ) -> None:
        """Remove the stored image, then the row.

        The row is deleted even when the image removal fails.
        """
        if image_url:
            self._remove_quietly(image_url, "Removing product image")
        self.repository.delete(session.user_id, product_id)

    def public_image_url(self, path: str) -> str:
        return self.storage.public_url(path)

    def _remove_quietly(self, path: str, reason: str) -> None:
        logger.info(reason, extra={"path": path})
        try:
            self.storage.remove([path])
        except StorageFailedError:
            logger.warning("Failed to remove stored image", extra={"path": path})
