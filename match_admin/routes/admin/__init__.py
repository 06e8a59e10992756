"""Admin API routes.

Sub-routers:
- matches: list, edit and auto-fill match results
"""

from fastapi import APIRouter

from match_admin.routes.admin.matches import router as matches_router

router = APIRouter(prefix="/admin", tags=["admin"])

router.include_router(matches_router)
