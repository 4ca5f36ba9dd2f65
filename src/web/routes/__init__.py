"""Route aggregators for the web application."""

from fastapi.routing import APIRouter

from src.web.responses import PrettyJSONResponse
from src.web.routes.iiif import router as iiif_router

__all__ = ["router"]

router = APIRouter(default_response_class=PrettyJSONResponse)


@router.get("/")
async def root() -> dict:
    """Return an empty JSON object."""
    return {}


router.include_router(iiif_router, prefix="/iiif", tags=["iiif"])
