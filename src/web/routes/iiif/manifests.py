"""Manifest routes."""

from typing import Any

from fastapi.exceptions import HTTPException
from fastapi.param_functions import Depends
from fastapi.responses import FileResponse
from fastapi.routing import APIRouter

from src.web.responses import PrettyJSONResponse
from src.web.state import AppState, get_app_state

__all__ = ["INBOX_LINK", "router"]

INBOX_LINK = '</notifications>; rel="http://www.w3.org/ns/ldp#inbox"'

router = APIRouter()


@router.get("/{name}.json", response_class=FileResponse)
def manifest_file(name: str, state: AppState = Depends(get_app_state)) -> FileResponse:
    """Serve a static manifest file from the manifests directory."""
    root = state.manifests_path.resolve()
    path = (root / f"{name}.json").resolve()
    if not path.is_relative_to(root) or not path.is_file():
        raise HTTPException(status_code=404, detail=f"Manifest file '{name}' not found")
    return FileResponse(path, media_type="application/json")


@router.get("/{name}/manifest")
@router.get("/{name}/manifest/", include_in_schema=False)
def get_manifest(
    name: str, state: AppState = Depends(get_app_state)
) -> PrettyJSONResponse:
    """Return the stored manifest named `name`, or an empty object.

    The response advertises the notifications inbox in its `Link` header.
    """
    document: dict[str, Any] = (
        state.manifests.get_manifest(state.manifests.canonical_id(name)) or {}
    )
    return PrettyJSONResponse(document, headers={"Link": INBOX_LINK})
