"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nutriledger.api.routes import routers
from nutriledger.app_logging import configure_logging
from nutriledger.containers import AppContainer
from nutriledger.errors import NutriLedgerError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="nutriledger", lifespan=lifespan)
    app.state.container = container

    for router in routers:
        app.include_router(router)

    @app.exception_handler(NutriLedgerError)
    async def handle_service_error(
        request: Request, exc: NutriLedgerError
    ) -> JSONResponse:
        logger.info(
            "%s %s rejected with %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code, content={"detail": exc.message}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
