from fastapi import APIRouter

from placement.modules.accounts.router import profile_router
from placement.modules.accounts.router import router as auth_router
from placement.modules.admin.router import router as admin_router
from placement.modules.applications.router import router as applications_router
from placement.modules.postings.router import router as postings_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(profile_router, prefix="/profile", tags=["Profile"])

api_router.include_router(postings_router, prefix="/postings", tags=["Postings"])

api_router.include_router(applications_router, prefix="/applications", tags=["Applications"])

api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])
