"""Debug request logging middleware."""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src import log

__all__ = ["RequestLoggingMiddleware"]

_TEXT_CONTENT_TYPES = ("application/json", "application/ld+json", "text/")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request line, body preview, status and duration at DEBUG level."""

    MAX_BODY_PREVIEW = 1000

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Log around the downstream handler, re-raising its errors."""
        started = time.perf_counter()
        line = f"{request.method} {request.url.path}"
        if request.url.query:
            line += f"?{request.url.query}"
        body = await self._body_preview(request)

        try:
            response = await call_next(request)
        except Exception:
            elapsed = (time.perf_counter() - started) * 1000
            log.debug(f"{line} - Failed after {elapsed:.1f}ms{body}")
            raise

        elapsed = (time.perf_counter() - started) * 1000
        log.debug(f"{line} - Response: {response.status_code} ({elapsed:.1f}ms){body}")
        return response

    async def _body_preview(self, request: Request) -> str:
        if request.method not in ("POST", "PUT", "PATCH"):
            return ""

        try:
            raw = await request.body()
        except Exception as e:
            return f" - Body: <error reading body: {e}>"
        if not raw:
            return ""

        content_type = request.headers.get("content-type", "")
        if not content_type.startswith(_TEXT_CONTENT_TYPES):
            return f" - Body: <{content_type or 'unknown'}, {len(raw)} bytes>"
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            return f" - Body: <binary data, {len(raw)} bytes>"

        if len(text) > self.MAX_BODY_PREVIEW:
            text = text[: self.MAX_BODY_PREVIEW] + "..."
        return f" - Body: {text}"
