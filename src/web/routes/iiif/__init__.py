"""IIIF routes."""

from fastapi.routing import APIRouter

from src.web.routes.iiif.manifests import router as manifests_router
from src.web.routes.iiif.notifications import router as notifications_router

__all__ = ["router"]

router = APIRouter()

# Manifests first: `/notifications/manifest` is the manifest named "notifications"
router.include_router(manifests_router)
router.include_router(notifications_router, prefix="/notifications")
