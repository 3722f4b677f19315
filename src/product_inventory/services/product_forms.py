"""Create and edit product forms."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from product_inventory.domain.auth import AuthSession
from product_inventory.domain.notifications import Notification
from product_inventory.domain.products import ImageUpload, Product
from product_inventory.errors import BackendError, ValidationError
from product_inventory.services.guards import SubmitGuard
from product_inventory.services.products import ProductService, parse_draft

logger = logging.getLogger(__name__)


def _refresh(on_success: Callable[[], None]) -> None:
    """Run the post-write refresh; the write has already been committed."""
    try:
        on_success()
    except BackendError:
        logger.warning("Failed to refresh products after a write", exc_info=True)


@dataclass
class ProductForm:
    """Write-only form that adds a product and reports success."""

    service: ProductService
    on_success: Callable[[], None]
    guard: SubmitGuard = field(default_factory=lambda: SubmitGuard("create"))

    def submit(
        self,
        session: AuthSession,
        name: str,
        price: str,
        comments: str,
        image: ImageUpload | None,
    ) -> Notification:
        """Validate locally, then upload and insert."""
        if image is None:
            raise ValidationError("Please select an image")
        draft = parse_draft(name, price, comments)
        with self.guard.submitting():
            self.service.create_product(session, draft, image)
        _refresh(self.on_success)
        return Notification.success("Product added successfully!")


@dataclass
class EditProductForm:
    """Edits exactly one product; omitting the image keeps the stored one."""

    service: ProductService
    product: Product
    on_success: Callable[[], None]
    on_close: Callable[[], None]
    guard: SubmitGuard = field(default_factory=lambda: SubmitGuard("edit"))

    def initial_values(self) -> dict[str, object]:
        return {
            "name": self.product.name,
            "price": str(self.product.price),
            "comments": self.product.comments,
        }

    def submit(
        self,
        session: AuthSession,
        name: str,
        price: str,
        comments: str,
        image: ImageUpload | None = None,
    ) -> Notification:
        draft = parse_draft(name, price, comments)
        with self.guard.submitting():
            self.service.update_product(session, self.product, draft, image)
        self.on_close()
        _refresh(self.on_success)
        return Notification.success("Product updated successfully!")
