"""Auth endpoints backing the login view."""

from fastapi import APIRouter, Depends, Request, Response

from product_inventory.api.deps import (
    end_browser_session,
    get_browser_session,
    redirect_url,
)
from product_inventory.api.schemas import (
    CredentialsBody,
    GoogleCredentialBody,
    NotificationOut,
)
from product_inventory.domain.notifications import Notification
from product_inventory.services.browser_sessions import BrowserSession

router = APIRouter(prefix="/api", tags=["auth"])


@router.get("/session")
def current_session(
    browser: BrowserSession = Depends(get_browser_session),
) -> dict[str, object]:
    """Return which view to render and the signed-in user, if any."""
    manager = browser.session_manager
    session = manager.session
    return {
        "view": manager.view,
        "user": (
            {"id": str(session.user_id), "email": session.email} if session else None
        ),
        "federated_prompt": browser.auth_service.federated_prompt_config(),
    }


@router.post("/auth/sign-in")
def sign_in(
    body: CredentialsBody, browser: BrowserSession = Depends(get_browser_session)
) -> dict[str, object]:
    notification = browser.auth_service.sign_in(body.email, body.password)
    return _auth_result(browser, notification)


@router.post("/auth/sign-up")
def sign_up(
    body: CredentialsBody,
    request: Request,
    browser: BrowserSession = Depends(get_browser_session),
) -> dict[str, object]:
    notification = browser.auth_service.sign_up(
        body.email, body.password, redirect_url(request)
    )
    return _auth_result(browser, notification)


@router.post("/auth/google")
def sign_in_with_google(
    body: GoogleCredentialBody,
    browser: BrowserSession = Depends(get_browser_session),
) -> dict[str, object]:
    """Exchange a Google credential, from the button or one-tap."""
    notification = browser.auth_service.sign_in_with_federated_identity(
        body.credential
    )
    return _auth_result(browser, notification)


@router.post("/auth/sign-out")
def sign_out(
    request: Request,
    response: Response,
    browser: BrowserSession = Depends(get_browser_session),
) -> dict[str, object]:
    """End the session and forget this browser's server-side state."""
    notification = browser.auth_service.sign_out()
    result = _auth_result(browser, notification)
    end_browser_session(request, response, browser)
    return result


def _auth_result(browser: BrowserSession, notification: Notification) -> dict:
    return {
        "notification": NotificationOut.from_notification(notification).model_dump(),
        "view": browser.session_manager.view,
    }
