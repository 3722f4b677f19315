"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import Client, create_client

from product_inventory.adapters.supabase_auth_gateway import SupabaseAuthGateway
from product_inventory.adapters.supabase_image_storage import SupabaseImageStorage
from product_inventory.adapters.supabase_product_repository import (
    SupabaseProductRepository,
)
from product_inventory.config import Settings, normalize_client_id
from product_inventory.services.browser_sessions import (
    BrowserSession,
    BrowserSessionRegistry,
    assemble_browser_session,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    browser_sessions: BrowserSessionRegistry
    close_resources: Callable[[], Awaitable[None]]


def build_browser_session(
    session_id: str, client: Client, settings: Settings
) -> BrowserSession:
    """Build one browser's components around its own Supabase client."""
    return assemble_browser_session(
        session_id,
        gateway=SupabaseAuthGateway(client),
        repository=SupabaseProductRepository(client, settings.products_table),
        storage=SupabaseImageStorage(
            client, settings.storage_bucket, settings.supabase_url
        ),
        google_client_id=normalize_client_id(settings.google_client_id),
    )


def build_container(
    settings: Settings | None = None,
    client_factory: Callable[[Settings], Client] | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()

    def default_client_factory(config: Settings) -> Client:
        return create_client(config.supabase_url, config.supabase_anon_key)

    make_client = client_factory or default_client_factory
    registry = BrowserSessionRegistry(
        factory=lambda session_id: build_browser_session(
            session_id, make_client(resolved_settings), resolved_settings
        ),
        idle_timeout=resolved_settings.session_idle_seconds,
    )

    async def close_resources() -> None:
        registry.close_all()

    return AppContainer(
        settings=resolved_settings,
        browser_sessions=registry,
        close_resources=close_resources,
    )
