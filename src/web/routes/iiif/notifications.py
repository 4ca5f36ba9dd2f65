"""Notification inbox routes."""

from typing import Any

from fastapi.param_functions import Depends, Query
from fastapi.routing import APIRouter
from starlette.requests import Request

from src.core.notifications import loads_json
from src.exceptions import (
    InvalidNotificationPayloadError,
    UnsupportedContentTypeError,
)
from src.web.state import AppState, get_app_state

__all__ = ["router"]

JSON_MEDIA_TYPE = "application/json"

router = APIRouter()


def this_endpoint_uri(request: Request) -> str:
    """Absolute URI of the current endpoint without query or trailing slash."""
    url = request.url
    return f"{url.scheme}://{url.netloc}{url.path.rstrip('/')}"


@router.get("")
@router.get("/", include_in_schema=False)
async def list_notifications(
    request: Request,
    target: str | None = Query(None, description="Exact target URI to filter by"),
    state: AppState = Depends(get_app_state),
) -> dict[str, Any]:
    """List received notifications as an LDP container.

    Every listed notification's payloads are fetched and merged into its
    manifest before the listing is returned.
    """
    container = await state.aggregator.build_container(
        this_endpoint_uri(request), target
    )
    return container.to_json()


@router.post("")
@router.post("/", include_in_schema=False)
async def create_notification(
    request: Request, state: AppState = Depends(get_app_state)
) -> str:
    """Accept a JSON notification and return its new identifier.

    Raises:
        UnsupportedContentTypeError: If the body is not sent as application/json.
        InvalidNotificationPayloadError: If the body is not a JSON object.
    """
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != JSON_MEDIA_TYPE:
        raise UnsupportedContentTypeError(
            f"Expected {JSON_MEDIA_TYPE}, got '{content_type or 'no content type'}'"
        )

    try:
        payload = loads_json(await request.body())
    except ValueError as e:
        raise InvalidNotificationPayloadError(
            "Notification body is not valid JSON"
        ) from e

    return state.notifications.create_notification(payload)


@router.get("/{identifier}")
def get_notification(
    identifier: str, state: AppState = Depends(get_app_state)
) -> dict[str, Any]:
    """Return one notification, or an empty object if it cannot be found."""
    return state.notifications.get_notification(identifier)


@router.delete("/{identifier}")
def delete_notification(
    identifier: str, state: AppState = Depends(get_app_state)
) -> dict[str, int]:
    """Delete one notification; unknown identifiers are ignored."""
    state.notifications.delete_notification(identifier)
    return {"ok": 1}
