"""Middleware advertising the CORS origin on every response."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

__all__ = ["CORSHeaderMiddleware"]


class CORSHeaderMiddleware(BaseHTTPMiddleware):
    """Set `Access-Control-Allow-Origin` unless a route already set it.

    Unlike Starlette's CORSMiddleware the header is sent whether or not the
    request carries an `Origin` header.
    """

    def __init__(self, app: ASGIApp, allow_origin: str = "*") -> None:
        """Initialize the middleware.

        Args:
            app (ASGIApp): The wrapped application.
            allow_origin (str): Value of the `Access-Control-Allow-Origin` header.
        """
        super().__init__(app)
        self.allow_origin = allow_origin

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Forward the request and decorate the response."""
        response = await call_next(request)
        response.headers.setdefault("Access-Control-Allow-Origin", self.allow_origin)
        return response
