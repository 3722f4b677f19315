"""Request dependencies shared by the routers."""

from fastapi import Request, Response

from product_inventory.containers import AppContainer
from product_inventory.services.browser_sessions import BrowserSession


def get_browser_session(request: Request, response: Response) -> BrowserSession:
    """Resolve the caller's browser session, issuing a cookie for new ones."""
    container: AppContainer = request.app.state.container
    cookie_name = container.settings.session_cookie_name
    cookie_value = request.cookies.get(cookie_name)
    browser = container.browser_sessions.get_or_create(cookie_value)
    if cookie_value != browser.id:
        response.set_cookie(
            cookie_name,
            browser.id,
            max_age=container.settings.session_idle_seconds,
            httponly=True,
            samesite="lax",
            secure=container.settings.environment != "local",
        )
    return browser


def end_browser_session(
    request: Request, response: Response, browser: BrowserSession
) -> None:
    """Drop the browser session and its cookie."""
    container: AppContainer = request.app.state.container
    container.browser_sessions.discard(browser.id)
    response.delete_cookie(container.settings.session_cookie_name)


def redirect_url(request: Request) -> str:
    """Return where confirmation links should send the user back to."""
    container: AppContainer = request.app.state.container
    return container.settings.site_url or str(request.base_url).rstrip("/")
