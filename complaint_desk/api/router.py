from fastapi import APIRouter
from complaint_desk.api.routes.auth import router as auth_router
from complaint_desk.api.routes.complaints import router as complaints_router
from complaint_desk.api.routes.admin import router as admin_router
from complaint_desk.api.routes.departments import router as departments_router
from complaint_desk.api.routes.seed import router as seed_router
from complaint_desk.api.routes.realtime import router as realtime_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(complaints_router, prefix="/complaints", tags=["complaints"])
api_router.include_router(admin_router, tags=["admin"])
api_router.include_router(departments_router, prefix="/departments", tags=["departments"])
api_router.include_router(seed_router, prefix="/seed", tags=["seed"])
api_router.include_router(realtime_router, tags=["realtime"])
