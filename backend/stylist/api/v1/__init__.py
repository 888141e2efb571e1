
from fastapi import APIRouter


# public
from .routes_health import router as health_router

# guarded by X-Admin-Secret (see admin_jobs.require_admin_secret)
from .admin_jobs import router as admin_jobs_router


api_v1 = APIRouter()
api_v1.include_router(health_router)
api_v1.include_router(admin_jobs_router)
