"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from uuid import uuid4

import pytest
from supabase import AuthError, PostgrestAPIError, StorageException

from product_inventory.adapters.supabase_auth_gateway import SupabaseAuthGateway
from product_inventory.adapters.supabase_image_storage import SupabaseImageStorage
from product_inventory.adapters.supabase_product_repository import (
    SupabaseProductRepository,
)
from product_inventory.domain.auth import AuthEvent, Credentials
from product_inventory.errors import (
    AuthFailedError,
    DatabaseFailedError,
    StorageFailedError,
)
from tests.conftest import make_image


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeBucket:
    objects: dict[str, bytes] = field(default_factory=dict)
    removed: list[list[str]] = field(default_factory=list)
    last_options: dict[str, str] | None = None
    error: Exception | None = None

    def upload(self, path: str, file: bytes, file_options=None):  # type: ignore[no-untyped-def]
        if self.error is not None:
            raise self.error
        self.objects[path] = file
        self.last_options = file_options
        return type("UploadResponse", (), {"path": path, "full_path": f"b/{path}"})()

    def remove(self, paths: list[str]) -> list[dict[str, object]]:
        if self.error is not None:
            raise self.error
        self.removed.append(paths)
        return [{"name": path} for path in paths]


@dataclass
class FakeStorage:
    buckets: dict[str, FakeBucket] = field(default_factory=dict)

    def from_(self, bucket: str) -> FakeBucket:
        return self.buckets.setdefault(bucket, FakeBucket())


@dataclass
class FakeUser:
    id: str
    email: str | None


@dataclass
class FakeSession:
    access_token: str
    user: FakeUser


@dataclass
class FakeSubscription:
    auth: "FakeAuth"
    callback: object

    def unsubscribe(self) -> None:
        self.auth.subscriptions.remove(self)


class RejectedAuth(AuthError):
    def __init__(self, message: str) -> None:
        Exception.__init__(self, message)
        self.message = message


@dataclass
class FakeAuth:
    session: FakeSession | None = None
    subscriptions: list[FakeSubscription] = field(default_factory=list)
    calls: list[tuple[str, object]] = field(default_factory=list)
    error: Exception | None = None

    def get_session(self) -> FakeSession | None:
        return self.session

    def on_auth_state_change(self, callback) -> FakeSubscription:  # type: ignore[no-untyped-def]
        subscription = FakeSubscription(self, callback)
        self.subscriptions.append(subscription)
        return subscription

    def sign_up(self, credentials) -> None:  # type: ignore[no-untyped-def]
        self._record("sign_up", credentials)

    def sign_in_with_password(self, credentials) -> None:  # type: ignore[no-untyped-def]
        self._record("sign_in_with_password", credentials)
        self.session = FakeSession(
            access_token="jwt", user=FakeUser(str(uuid4()), credentials["email"])
        )
        self._notify("SIGNED_IN")

    def sign_in_with_id_token(self, credentials) -> None:  # type: ignore[no-untyped-def]
        self._record("sign_in_with_id_token", credentials)

    def sign_out(self) -> None:
        self._record("sign_out", None)
        self.session = None
        self._notify("SIGNED_OUT")

    def _record(self, name: str, payload: object) -> None:
        if self.error is not None:
            raise self.error
        self.calls.append((name, payload))

    def _notify(self, event: str) -> None:
        for subscription in list(self.subscriptions):
            subscription.callback(event, self.session)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    storage: FakeStorage = field(default_factory=FakeStorage)
    auth: FakeAuth = field(default_factory=FakeAuth)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _row(product_id: int, user_id: str, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": product_id,
        "user_id": user_id,
        "name": "Widget",
        "price": 9.99,
        "comments": "test",
        "image_url": "abc.png",
        "created_at": "2024-05-01T10:00:00+00:00",
    }
    row.update(overrides)
    return row


def test_product_repository_insert_sets_owner() -> None:
    client = FakeSupabaseClient()
    user_id = uuid4()
    client.table("products").queue("insert", [_row(1, str(user_id))])

    repository = SupabaseProductRepository(client)
    product = repository.insert(
        user_id, {"name": "Widget", "price": 9.99, "comments": "test"}
    )

    payload = client.table("products").last_payload
    assert isinstance(payload, dict)
    assert payload["user_id"] == str(user_id)
    assert product.id == 1
    assert product.created_at is not None


def test_product_repository_lists_owner_rows_newest_first() -> None:
    client = FakeSupabaseClient()
    user_id = str(uuid4())
    table = client.table("products")
    table.queue("select", [_row(2, user_id, name="B"), _row(1, user_id, name="A")])

    products = SupabaseProductRepository(client).list_for_owner(uuid4())

    assert [p.name for p in products] == ["B", "A"]
    assert table.last_order == ("created_at", True)
    assert table.last_filters[0][0] == "user_id"


def test_product_repository_update_filters_by_id_and_owner() -> None:
    client = FakeSupabaseClient()
    user_id = uuid4()
    table = client.table("products")
    table.queue("update", [_row(7, str(user_id), price=12.5)])

    updated = SupabaseProductRepository(client).update(user_id, 7, {"price": 12.5})

    assert updated is not None
    assert updated.price == 12.5
    assert table.last_filters == [("id", 7), ("user_id", str(user_id))]


def test_product_repository_update_without_match_returns_none() -> None:
    client = FakeSupabaseClient()

    assert SupabaseProductRepository(client).update(uuid4(), 7, {"price": 1}) is None


def test_product_repository_wraps_api_errors() -> None:
    client = FakeSupabaseClient()
    client.table("products").error = PostgrestAPIError(
        {"message": "permission denied", "code": "42501", "hint": None, "details": None}
    )

    with pytest.raises(DatabaseFailedError) as excinfo:
        SupabaseProductRepository(client).delete(uuid4(), 1)

    assert excinfo.value.message == "permission denied"


def test_image_storage_upload_and_remove() -> None:
    client = FakeSupabaseClient()
    storage = SupabaseImageStorage(client, "productimages", "https://x.supabase.co/")

    path = storage.upload("abc.png", make_image())
    storage.remove([path])

    bucket = client.storage.from_("productimages")
    assert path == "abc.png"
    assert bucket.last_options == {"content-type": "image/png"}
    assert bucket.removed == [["abc.png"]]
    assert storage.public_url(path) == (
        "https://x.supabase.co/storage/v1/object/public/productimages/abc.png"
    )


def test_image_storage_wraps_storage_errors() -> None:
    client = FakeSupabaseClient()
    client.storage.from_("productimages").error = StorageException(
        {"statusCode": 409, "message": "The resource already exists"}
    )
    storage = SupabaseImageStorage(client, "productimages", "https://x.supabase.co")

    with pytest.raises(StorageFailedError) as excinfo:
        storage.upload("abc.png", make_image())

    assert excinfo.value.message == "The resource already exists"


def test_auth_gateway_forwards_session_changes() -> None:
    client = FakeSupabaseClient()
    gateway = SupabaseAuthGateway(client)
    events = []

    unsubscribe = gateway.on_auth_state_change(
        lambda event, session: events.append((event, session))
    )
    gateway.sign_in_with_password(Credentials("a@example.com", "pw"))
    gateway.sign_out()
    unsubscribe()

    assert [event for event, _ in events] == [AuthEvent.SIGNED_IN, AuthEvent.SIGNED_OUT]
    assert events[0][1] is not None
    assert events[0][1].email == "a@example.com"
    assert events[1][1] is None
    assert client.auth.subscriptions == []


def test_auth_gateway_get_session_converts() -> None:
    client = FakeSupabaseClient()
    user_id = uuid4()
    client.auth.session = FakeSession("jwt", FakeUser(str(user_id), "a@example.com"))

    session = SupabaseAuthGateway(client).get_session()

    assert session is not None
    assert session.user_id == user_id
    assert session.access_token == "jwt"


def test_auth_gateway_sign_up_passes_redirect() -> None:
    client = FakeSupabaseClient()

    SupabaseAuthGateway(client).sign_up(
        Credentials("a@example.com", "pw"), "https://app.example"
    )

    name, payload = client.auth.calls[0]
    assert name == "sign_up"
    assert payload["options"] == {"email_redirect_to": "https://app.example"}


def test_auth_gateway_id_token_and_errors() -> None:
    client = FakeSupabaseClient()
    gateway = SupabaseAuthGateway(client)

    gateway.sign_in_with_id_token("google", "jwt")
    assert client.auth.calls[0] == (
        "sign_in_with_id_token",
        {"provider": "google", "token": "jwt"},
    )

    client.auth.error = RejectedAuth("Invalid login credentials")
    with pytest.raises(AuthFailedError) as excinfo:
        gateway.sign_in_with_password(Credentials("a@example.com", "bad"))
    assert excinfo.value.message == "Invalid login credentials"
