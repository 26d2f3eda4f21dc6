from fastapi import APIRouter

from talentmatch.api.v1.endpoints import applications, health, matching

api_router = APIRouter()

# Include routers from different modules
api_router.include_router(health.router)  # Health endpoints at root level
api_router.include_router(matching.router)
api_router.include_router(applications.router)
