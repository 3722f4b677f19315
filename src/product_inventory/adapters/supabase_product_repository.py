"""Supabase-backed product repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

import httpx
from supabase import Client, PostgrestAPIError

from product_inventory.domain.products import Product
from product_inventory.errors import DatabaseFailedError, provider_message
from product_inventory.services.products import ProductRepository

_DATABASE_ERRORS = (PostgrestAPIError, httpx.HTTPError)


@dataclass
class SupabaseProductRepository(ProductRepository):
    """Supabase implementation for product rows, scoped by owner."""

    client: Client
    table_name: str = "products"

    def insert(self, user_id: UUID, payload: dict[str, object]) -> Product:
        """Insert a product row and return it."""
        try:
            response = (
                self.client.table(self.table_name)
                .insert({**payload, "user_id": str(user_id)})
                .execute()
            )
        except _DATABASE_ERRORS as exc:
            raise DatabaseFailedError(provider_message(exc)) from exc
        if not response.data:
            raise DatabaseFailedError("Failed to create product")
        return _parse_product(response.data[0])

    def list_for_owner(self, user_id: UUID) -> list[Product]:
        """Return the owner's products, newest first."""
        try:
            response = (
                self.client.table(self.table_name)
                .select("*")
                .eq("user_id", str(user_id))
                .order("created_at", desc=True)
                .execute()
            )
        except _DATABASE_ERRORS as exc:
            raise DatabaseFailedError(provider_message(exc)) from exc
        return [_parse_product(row) for row in response.data or []]

    def update(
        self, user_id: UUID, product_id: int, payload: dict[str, object]
    ) -> Product | None:
        """Patch a product row and return it, if it matched."""
        try:
            response = (
                self.client.table(self.table_name)
                .update(payload)
                .eq("id", product_id)
                .eq("user_id", str(user_id))
                .execute()
            )
        except _DATABASE_ERRORS as exc:
            raise DatabaseFailedError(provider_message(exc)) from exc
        if not response.data:
            return None
        return _parse_product(response.data[0])

    def delete(self, user_id: UUID, product_id: int) -> None:
        try:
            self.client.table(self.table_name).delete().eq("id", product_id).eq(
                "user_id", str(user_id)
            ).execute()
        except _DATABASE_ERRORS as exc:
            raise DatabaseFailedError(provider_message(exc)) from exc


def _parse_product(row: dict[str, object]) -> Product:
    """Parse a products row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return Product(
        id=int(row["id"]),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        price=float(row.get("price") or 0.0),
        comments=str(row.get("comments") or ""),
        image_url=str(row.get("image_url") or ""),
        created_at=created_at,
    )
