"""Supabase Storage bucket for product images."""

from dataclasses import dataclass

import httpx
from supabase import Client, StorageException

from product_inventory.domain.products import ImageUpload
from product_inventory.errors import StorageFailedError, provider_message
from product_inventory.services.products import ImageStorage

_STORAGE_ERRORS = (StorageException, httpx.HTTPError)


@dataclass
class SupabaseImageStorage(ImageStorage):
    """Stores product images in a public Supabase bucket."""

    client: Client
    bucket: str
    supabase_url: str

    def upload(self, key: str, image: ImageUpload) -> str:
        """Upload an image and return its path inside the bucket."""
        file_options = {"content-type": image.content_type or "application/octet-stream"}
        try:
            response = self.client.storage.from_(self.bucket).upload(
                path=key, file=image.content, file_options=file_options
            )
        except _STORAGE_ERRORS as exc:
            raise StorageFailedError(provider_message(exc)) from exc
        return getattr(response, "path", None) or key

    def remove(self, paths: list[str]) -> None:
        try:
            self.client.storage.from_(self.bucket).remove(paths)
        except _STORAGE_ERRORS as exc:
            raise StorageFailedError(provider_message(exc)) from exc

    def public_url(self, path: str) -> str:
        """Return the fixed public address of an object."""
        base = self.supabase_url.rstrip("/")
        return f"{base}/storage/v1/object/public/{self.bucket}/{path}"
