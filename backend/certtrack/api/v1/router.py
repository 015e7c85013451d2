from fastapi import APIRouter

from certtrack.core.config import settings
from certtrack.api.v1.endpoints import auth, certifications, dashboard, health, users

api_router = APIRouter()

api_router.include_router(health.router)


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint"""
    return {"status": "healthy", "service": settings.APP_NAME}


api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(certifications.router, prefix="/certifications", tags=["Certifications"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
