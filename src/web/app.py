"""FastAPI application factory and setup."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import DEBUG

from fastapi.applications import FastAPI
from fastapi.responses import JSONResponse
from starlette.requests import Request

from src import __version__, config, log
from src.config.database import NotificationsDB
from src.config.settings import IIIFNotificationsConfig
from src.core.aggregator import Fetcher
from src.exceptions import IIIFNotificationsError
from src.web.middlewares.cors import CORSHeaderMiddleware
from src.web.middlewares.request_logging import RequestLoggingMiddleware
from src.web.responses import PrettyJSONResponse
from src.web.routes import router
from src.web.state import AppState

__all__ = ["create_app"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan context manager.

    Args:
        app (FastAPI): The FastAPI application instance.

    Returns:
        AsyncGenerator: The application lifespan context manager.
    """
    state: AppState = app.state.app_state
    log.success(f"Web: Serving manifests from $$'{state.manifests_path}'$$")
    try:
        yield
    finally:
        await state.shutdown()
        log.success("Web: Application shut down")


def create_app(
    db: NotificationsDB,
    app_config: IIIFNotificationsConfig | None = None,
    fetcher: Fetcher | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        db (NotificationsDB): Database shared by every request.
        app_config (IIIFNotificationsConfig | None): Configuration, defaults to
            the global one.
        fetcher (Fetcher | None): Payload fetcher override, mostly for tests.

    Returns:
        FastAPI: The created FastAPI application.
    """
    app_config = app_config or config
    app = FastAPI(
        title="IIIFNotifications",
        lifespan=lifespan,
        version=__version__,
        default_response_class=PrettyJSONResponse,
    )

    state = AppState(db, app_config, fetcher=fetcher)
    state.add_shutdown_callback(db.dispose)
    app.state.app_state = state

    # Add request logging middleware if in debug mode
    if log.level <= DEBUG:
        app.add_middleware(RequestLoggingMiddleware)
        log.debug("Web: Request logging enabled (debug mode)")

    # Added last so it wraps every other middleware
    app.add_middleware(CORSHeaderMiddleware, allow_origin="*")

    app.include_router(router)

    @app.exception_handler(IIIFNotificationsError)
    async def domain_exception_handler(
        request: Request, exc: IIIFNotificationsError
    ) -> JSONResponse:
        """Handle IIIFNotifications errors with structured JSON responses.

        Args:
            request (Request): The incoming HTTP request.
            exc (IIIFNotificationsError): The exception instance.

        Returns:
            JSONResponse: Structured JSON response with error details.
        """
        cls = exc.__class__
        payload = {
            "error": cls.__name__,
            "detail": str(exc) or cls.__doc__ or "",
            "path": request.url.path,
        }
        return PrettyJSONResponse(status_code=cls.status_code, content=payload)

    return app
