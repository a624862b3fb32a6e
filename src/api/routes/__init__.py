"""
API routes package.

Collects the signup, session and checkout routers into one router.
"""

from fastapi import APIRouter

from src.api.routes.auth import router as auth_router
from src.api.routes.payments import router as payments_router
from src.api.routes.signup import router as signup_router

router = APIRouter()
router.include_router(signup_router)
router.include_router(auth_router)
router.include_router(payments_router)

__all__ = ["router"]
