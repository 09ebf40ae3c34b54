from fastapi import APIRouter

from .analytics import analytics_router
from .resume import resume_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(resume_router, prefix="/resumes", tags=["resumes"])
v1_router.include_router(analytics_router, prefix="/analytics", tags=["analytics"])

__all__ = ["v1_router", "resume_router", "analytics_router"]
