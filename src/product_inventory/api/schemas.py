"""Pydantic models for the JSON API."""

from datetime import datetime

from pydantic import BaseModel

from product_inventory.domain.notifications import Notification
from product_inventory.domain.products import Product


class CredentialsBody(BaseModel):
    """Email and password submitted by the auth form."""

    email: str = ""
    password: str = ""


class GoogleCredentialBody(BaseModel):
    """Google Identity Services credential response."""

    credential: str = ""


class NotificationOut(BaseModel):
    level: str
    message: str

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationOut":
        return cls(level=notification.level, message=notification.message)


class ProductOut(BaseModel):
    """Product as rendered by the list view."""

    id: int
    name: str
    price: float
    comments: str
    image_url: str
    image_public_url: str
    created_at: datetime | None = None

    @classmethod
    def from_product(cls, product: Product, public_url: str) -> "ProductOut":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            comments=product.comments,
            image_url=product.image_url,
            image_public_url=public_url,
            created_at=product.created_at,
        )
