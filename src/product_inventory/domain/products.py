"""Domain models for inventory products."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePosixPath
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Product:
    """Represents a persisted product row."""

    id: int
    user_id: UUID
    name: str
    price: float
    comments: str
    image_url: str
    created_at: datetime | None = None


class ProductDraft(BaseModel):
    """Validated product fields collected by the create and edit forms."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    comments: str = Field(min_length=1)

    def to_payload(self) -> dict[str, object]:
        """Return the row fields written for this draft."""
        return {"name": self.name, "price": self.price, "comments": self.comments}


@dataclass(frozen=True)
class ImageUpload:
    """An image file selected in a product form."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        """Return the original extension without the leading dot."""
        return PurePosixPath(self.filename).suffix.lstrip(".")
