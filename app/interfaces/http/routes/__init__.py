from fastapi import APIRouter

from .admin_bulk import router as admin_bulk_router
from .auth import router as auth_router
from .campaigns import router as campaigns_router
from .retailers import admin_router as admin_retailers_router
from .retailers import router as retailers_router

api_router = APIRouter()

# Include all routers with prefixes
api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(retailers_router, prefix="/retailers", tags=["Retailers"])
api_router.include_router(admin_retailers_router, prefix="/admin", tags=["Retailers"])
api_router.include_router(admin_bulk_router, prefix="/admin", tags=["Bulk Upload"])
api_router.include_router(campaigns_router, prefix="/admin/campaigns", tags=["Campaigns"])
