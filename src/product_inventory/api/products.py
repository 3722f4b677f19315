"""Product endpoints backing the list, create and edit views."""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from product_inventory.api.deps import get_browser_session
from product_inventory.api.schemas import NotificationOut, ProductOut
from product_inventory.domain.auth import AuthSession
from product_inventory.domain.products import ImageUpload, Product
from product_inventory.services.browser_sessions import BrowserSession

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
def list_products(
    q: str = "", browser: BrowserSession = Depends(get_browser_session)
) -> dict[str, object]:
    """Re-fetch the signed-in user's products filtered by the given query."""
    session = browser.session_manager.require_session()
    browser.product_list.fetch_products(session, query=q)
    return _list_payload(browser)


@router.get("/search")
def search_products(
    q: str = "", browser: BrowserSession = Depends(get_browser_session)
) -> dict[str, object]:
    """Filter the loaded products by name without calling the backend."""
    browser.session_manager.require_session()
    browser.product_list.search(q)
    return _list_payload(browser)


@router.post("")
def create_product(
    name: str = Form(default=""),
    price: str = Form(default=""),
    comments: str = Form(default=""),
    image: UploadFile | None = File(default=None),
    browser: BrowserSession = Depends(get_browser_session),
) -> dict[str, object]:
    session = browser.session_manager.require_session()
    notification = browser.product_form.submit(
        session, name, price, comments, _read_upload(image)
    )
    return {
        "notification": NotificationOut.from_notification(notification).model_dump(),
        **_list_payload(browser),
    }


@router.delete("/edit")
def close_edit(
    browser: BrowserSession = Depends(get_browser_session),
) -> dict[str, object]:
    """Close the edit form, discarding unsaved changes."""
    browser.product_list.close_edit()
    return {"editing": None}


@router.post("/{product_id}/edit")
def open_edit(
    product_id: int, browser: BrowserSession = Depends(get_browser_session)
) -> dict[str, object]:
    session = browser.session_manager.require_session()
    _ensure_loaded(browser, session)
    form = browser.product_list.open_edit(session, product_id)
    return {
        "editing": _product_out(browser, form.product),
        "values": form.initial_values(),
    }


@router.put("/{product_id}")
def update_product(  # noqa: PLR0913
    product_id: int,
    name: str = Form(default=""),
    price: str = Form(default=""),
    comments: str = Form(default=""),
    image: UploadFile | None = File(default=None),
    browser: BrowserSession = Depends(get_browser_session),
) -> dict[str, object]:
    """Submit the edit form; an omitted image keeps the stored one."""
    session = browser.session_manager.require_session()
    _ensure_loaded(browser, session)
    form = browser.product_list.editing
    if form is None or form.product.id != product_id:
        form = browser.product_list.open_edit(session, product_id)
    notification = form.submit(session, name, price, comments, _read_upload(image))
    return {
        "notification": NotificationOut.from_notification(notification).model_dump(),
        **_list_payload(browser),
    }


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    confirm: bool = False,
    browser: BrowserSession = Depends(get_browser_session),
) -> dict[str, object]:
    """Delete a product once the user has confirmed it."""
    session = browser.session_manager.require_session()
    _ensure_loaded(browser, session)
    product = browser.product_list.find(product_id)
    notification = browser.product_list.delete_product(
        session, product.id, product.image_url, confirmed=confirm
    )
    return {
        "notification": NotificationOut.from_notification(notification).model_dump(),
        **_list_payload(browser),
    }


def _ensure_loaded(browser: BrowserSession, session: AuthSession) -> None:
    if not browser.product_list.loaded:
        browser.product_list.fetch_products(session)


def _read_upload(upload: UploadFile | None) -> ImageUpload | None:
    if upload is None or not upload.filename:
        return None
    return ImageUpload(
        filename=upload.filename,
        content=upload.file.read(),
        content_type=upload.content_type,
    )


def _product_out(browser: BrowserSession, product: Product) -> dict[str, object]:
    public_url = browser.product_service.public_image_url(product.image_url)
    return ProductOut.from_product(product, public_url).model_dump(mode="json")


def _list_payload(browser: BrowserSession) -> dict[str, object]:
    product_list = browser.product_list
    editing = product_list.editing
    return {
        "products": [_product_out(browser, p) for p in product_list.filtered],
        "total": len(product_list.products),
        "query": product_list.query,
        "empty_message": product_list.empty_message,
        "editing": editing.product.id if editing else None,
    }
