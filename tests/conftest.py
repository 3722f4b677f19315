"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from product_inventory.api.app import create_app
from product_inventory.config import Settings
from product_inventory.containers import AppContainer
from product_inventory.domain.auth import AuthEvent, AuthSession, Credentials
from product_inventory.domain.products import ImageUpload, Product
from product_inventory.errors import (
    AuthFailedError,
    DatabaseFailedError,
    StorageFailedError,
)
from product_inventory.services.auth import AuthGateway, AuthListener
from product_inventory.services.browser_sessions import (
    BrowserSessionRegistry,
    assemble_browser_session,
)
from product_inventory.services.products import ImageStorage, ProductRepository


@dataclass
class FakeAuthProvider:
    """Accounts shared by every browser in a test."""

    users: dict[str, tuple[UUID, str]] = field(default_factory=dict)
    id_tokens: dict[str, str] = field(default_factory=dict)
    confirmations: list[tuple[str, str | None]] = field(default_factory=list)

    def register(self, email: str, password: str) -> UUID:
        user_id = uuid4()
        self.users[email] = (user_id, password)
        return user_id


@dataclass
class FakeAuthGateway(AuthGateway):
    """Auth gateway that notifies listeners the way the provider does."""

    provider: FakeAuthProvider
    session: AuthSession | None = None
    listeners: dict[int, AuthListener] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    _next_listener: int = 0

    def get_session(self) -> AuthSession | None:
        self.calls.append("get_session")
        return self.session

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        listener_id = self._next_listener
        self._next_listener += 1
        self.listeners[listener_id] = callback

        def unsubscribe() -> None:
            self.listeners.pop(listener_id, None)

        return unsubscribe

    def sign_up(self, credentials: Credentials, redirect_to: str | None) -> None:
        self.calls.append("sign_up")
        if credentials.email in self.provider.users:
            raise AuthFailedError("User already registered")
        self.provider.register(credentials.email, credentials.password)
        self.provider.confirmations.append((credentials.email, redirect_to))

    def sign_in_with_password(self, credentials: Credentials) -> None:
        self.calls.append("sign_in_with_password")
        account = self.provider.users.get(credentials.email)
        if account is None or account[1] != credentials.password:
            raise AuthFailedError("Invalid login credentials")
        self._start(account[0], credentials.email)

    def sign_in_with_id_token(self, provider: str, token: str) -> None:
        self.calls.append(f"sign_in_with_id_token:{provider}")
        email = self.provider.id_tokens.get(token)
        if email is None:
            raise AuthFailedError("Invalid ID token")
        account = self.provider.users.get(email)
        user_id = account[0] if account else self.provider.register(email, "")
        self._start(user_id, email)

    def sign_out(self) -> None:
        self.calls.append("sign_out")
        self.session = None
        self.emit(AuthEvent.SIGNED_OUT)

    def emit(self, event: AuthEvent) -> None:
        for listener in list(self.listeners.values()):
            listener(event, self.session)

    def _start(self, user_id: UUID, email: str) -> None:
        self.session = AuthSession(
            user_id=user_id, email=email, access_token=f"token-{user_id}"
        )
        self.emit(AuthEvent.SIGNED_IN)


@dataclass
class InMemoryProductRepository(ProductRepository):
    """In-memory product table for tests."""

    rows: dict[int, Product] = field(default_factory=dict)
    fail_next: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    _next_id: int = 1
    _clock: datetime = field(
        default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC)
    )

    def insert(self, user_id: UUID, payload: dict[str, object]) -> Product:
        self.calls.append("insert")
        self._maybe_fail("insert")
        self._clock += timedelta(seconds=1)
        product = Product(
            id=self._next_id,
            user_id=user_id,
            name=str(payload["name"]),
            price=float(payload["price"]),
            comments=str(payload["comments"]),
            image_url=str(payload["image_url"]),
            created_at=self._clock,
        )
        self.rows[product.id] = product
        self._next_id += 1
        return product

    def list_for_owner(self, user_id: UUID) -> list[Product]:
        self.calls.append("select")
        self._maybe_fail("select")
        owned = [row for row in self.rows.values() if row.user_id == user_id]
        return sorted(owned, key=lambda row: row.created_at, reverse=True)

    def update(
        self, user_id: UUID, product_id: int, payload: dict[str, object]
    ) -> Product | None:
        self.calls.append("update")
        self._maybe_fail("update")
        current = self.rows.get(product_id)
        if current is None or current.user_id != user_id:
            return None
        updated = Product(
            id=current.id,
            user_id=current.user_id,
            name=str(payload.get("name", current.name)),
            price=float(payload.get("price", current.price)),
            comments=str(payload.get("comments", current.comments)),
            image_url=str(payload.get("image_url", current.image_url)),
            created_at=current.created_at,
        )
        self.rows[product_id] = updated
        return updated

    def delete(self, user_id: UUID, product_id: int) -> None:
        self.calls.append("delete")
        self._maybe_fail("delete")
        current = self.rows.get(product_id)
        if current is not None and current.user_id == user_id:
            del self.rows[product_id]

    def _maybe_fail(self, action: str) -> None:
        if action in self.fail_next:
            self.fail_next.discard(action)
            raise DatabaseFailedError(f"{action} rejected")


@dataclass
class InMemoryImageStorage(ImageStorage):
    """In-memory bucket for tests."""

    objects: dict[str, bytes] = field(default_factory=dict)
    fail_next: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    def upload(self, key: str, image: ImageUpload) -> str:
        self.calls.append("upload")
        self._maybe_fail("upload")
        if key in self.objects:
            raise StorageFailedError("The resource already exists")
        self.objects[key] = image.content
        return key

    def remove(self, paths: list[str]) -> None:
        self.calls.append("remove")
        self._maybe_fail("remove")
        for path in paths:
            self.objects.pop(path, None)

    def public_url(self, path: str) -> str:
        return (
            "https://example.supabase.co/storage/v1/object/public/productimages/"
            f"{path}"
        )

    def _maybe_fail(self, action: str) -> None:
        if action in self.fail_next:
            self.fail_next.discard(action)
            raise StorageFailedError(f"{action} rejected")


def make_session(user_id: UUID | None = None) -> AuthSession:
    resolved = user_id or uuid4()
    return AuthSession(user_id=resolved, email="user@example.com", access_token="t")


def make_image(filename: str = "widget.png") -> ImageUpload:
    return ImageUpload(filename=filename, content=b"png-bytes", content_type="image/png")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
        google_client_id="google-client-id",
        environment="local",
    )


@pytest.fixture
def auth_provider() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest.fixture
def product_repository() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture
def image_storage() -> InMemoryImageStorage:
    return InMemoryImageStorage()


@pytest.fixture
def container(
    settings: Settings,
    auth_provider: FakeAuthProvider,
    product_repository: InMemoryProductRepository,
    image_storage: InMemoryImageStorage,
) -> AppContainer:
    registry = BrowserSessionRegistry(
        factory=lambda session_id: assemble_browser_session(
            session_id,
            gateway=FakeAuthGateway(auth_provider),
            repository=product_repository,
            storage=image_storage,
            google_client_id=settings.google_client_id,
        )
    )

    async def close_resources() -> None:
        registry.close_all()

    return AppContainer(
        settings=settings,
        browser_sessions=registry,
        close_resources=close_resources,
    )


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))
