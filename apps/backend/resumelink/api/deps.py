from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core import get_db_session, settings
from ..repositories import SqlEventLog, SqlResumeStore
from ..services import AnalyticsService, ResumeResolver, ResumeService
from ..storage import LocalBlobStorage


def get_optional_user(request: Request) -> Optional[str]:
    """User id set by the upstream auth proxy, if any."""
    user_id = (request.headers.get(settings.USER_ID_HEADER) or "").strip()
    return user_id or None


def get_current_user(user_id: Optional[str] = Depends(get_optional_user)) -> str:
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    return user_id


def get_storage(request: Request) -> LocalBlobStorage:
    return request.app.state.storage


def get_resume_service(
    db: AsyncSession = Depends(get_db_session),
    storage: LocalBlobStorage = Depends(get_storage),
) -> ResumeService:
    return ResumeService(SqlResumeStore(db), storage)


def get_resolver(db: AsyncSession = Depends(get_db_session)) -> ResumeResolver:
    return ResumeResolver(SqlResumeStore(db))


def get_analytics_service(db: AsyncSession = Depends(get_db_session)) -> AnalyticsService:
    return AnalyticsService(SqlResumeStore(db), SqlEventLog(db))
