"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from product_inventory.api.auth import router as auth_router
from product_inventory.api.page import router as page_router
from product_inventory.api.products import router as products_router
from product_inventory.app_logging import configure_logging
from product_inventory.containers import AppContainer
from product_inventory.errors import FailureKind, InventoryError

_STATUS_BY_KIND = {
    FailureKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    FailureKind.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    FailureKind.CONFIRMATION_REQUIRED: status.HTTP_428_PRECONDITION_REQUIRED,
    FailureKind.IN_PROGRESS: status.HTTP_409_CONFLICT,
    FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.AUTH: status.HTTP_400_BAD_REQUEST,
    FailureKind.STORAGE: status.HTTP_502_BAD_GATEWAY,
    FailureKind.DATABASE: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InventoryError)
    async def inventory_error_handler(
        request: Request, exc: InventoryError
    ) -> JSONResponse:
        """Turn any operation failure into an error notification."""
        logger.warning(
            "Operation failed",
            extra={"kind": str(exc.kind), "path": request.url.path},
        )
        return JSONResponse(
            status_code=_STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST),
            content={
                "kind": str(exc.kind),
                "notification": {"level": "error", "message": exc.message},
            },
        )

    app.include_router(page_router)
    app.include_router(auth_router)
    app.include_router(products_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
