"""
API routers package.

Mounted under ``/api`` by the application factory.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .events import router as events_router
from .users import router as users_router

router = APIRouter()
router.include_router(auth_router, prefix="/auth")
router.include_router(events_router, prefix="/events")
router.include_router(users_router, prefix="/users")

__all__ = ["router"]
