"""The per-browser working set of products."""

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from product_inventory.domain.auth import AuthSession
from product_inventory.domain.notifications import Notification
from product_inventory.domain.products import Product
from product_inventory.errors import ConfirmationRequiredError, ProductNotFoundError
from product_inventory.services.product_forms import EditProductForm
from product_inventory.services.products import ProductService

EMPTY_LIST_MESSAGE = "No products found. Add some!"
NO_MATCH_MESSAGE = "No products match your search."


def filter_products(products: Sequence[Product], query: str) -> list[Product]:
    """Return products whose name contains the query, ignoring case."""
    needle = query.lower()
    return [product for product in products if needle in product.name.lower()]


@dataclass
class ProductList:
    """Owns the loaded products, the search view and the open edit form."""

    service: ProductService
    products: list[Product] = field(default_factory=list)
    filtered: list[Product] = field(default_factory=list)
    query: str = ""
    loaded: bool = False
    editing: EditProductForm | None = None
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False)

    def fetch_products(
        self, session: AuthSession, query: str | None = None
    ) -> list[Product]:
        """Reload the session owner's products; failures keep the old set.

        A given query replaces the stored one, otherwise the stored one is
        applied to the fresh set.
        """
        with self._lock:
            if query is not None:
                self.query = query
            self._replace(self.service.list_products(session))
            self.loaded = True
            return self.filtered

    def search(self, query: str) -> list[Product]:
        with self._lock:
            self.query = query
            self.filtered = filter_products(self.products, query)
            return self.filtered

    def find(self, product_id: int) -> Product:
        for product in self.products:
            if product.id == product_id:
                return product
        raise ProductNotFoundError(product_id)

    def delete_product(
        self,
        session: AuthSession,
        product_id: int,
        image_url: str,
        *,
        confirmed: bool,
    ) -> Notification:
        """Delete a confirmed product and drop it from the working set."""
        if not confirmed:
            raise ConfirmationRequiredError
        with self._lock:
            self.service.delete_product(session, product_id, image_url)
            self._replace([p for p in self.products if p.id != product_id])
            if self.editing is not None and self.editing.product.id == product_id:
                self.close_edit()
        return Notification.success("Product deleted successfully")

    def open_edit(self, session: AuthSession, product_id: int) -> EditProductForm:
        """Show the edit form for one product, replacing any open one."""
        with self._lock:
            self.editing = EditProductForm(
                service=self.service,
                product=self.find(product_id),
                on_success=lambda: self.fetch_products(session),
                on_close=self.close_edit,
            )
            return self.editing

    def close_edit(self) -> None:
        with self._lock:
            self.editing = None

    def reset(self) -> None:
        """Forget everything loaded for the previous identity."""
        with self._lock:
            self.products = []
            self.filtered = []
            self.query = ""
            self.loaded = False
            self.editing = None

    @property
    def empty_message(self) -> str | None:
        if not self.products:
            return EMPTY_LIST_MESSAGE
        if not self.filtered:
            return NO_MATCH_MESSAGE
        return None

    def _replace(self, products: Sequence[Product]) -> None:
        self.products = list(products)
        self.filtered = filter_products(self.products, self.query)
