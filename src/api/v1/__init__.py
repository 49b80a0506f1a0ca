"""
API v1 routes.
"""

from fastapi import APIRouter

from src.api.v1 import auth, files, search, admin

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(files.router, tags=["Files"])
router.include_router(search.router, prefix="/search", tags=["Search"])
router.include_router(admin.router, prefix="/admin", tags=["Administration"])
