from typing import Optional

from fastapi import APIRouter, Depends, Query

from ....schemas.pydantic import AnalyticsSummary
from ....services import AnalyticsService
from ...deps import get_analytics_service, get_current_user

analytics_router = APIRouter()


@analytics_router.get("", response_model=AnalyticsSummary, summary="Views and downloads across my resumes")
async def get_analytics(
    tz: Optional[str] = Query(None, description="IANA timezone used to bucket events by day"),
    user_id: str = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await service.summarize(user_id, tz=tz)
