from collections import OrderedDict
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

from ..core.config import settings
from ..exceptions import AnalyticsUnavailableError, ResumeValidationError, StoreError
from ..models import EventType
from ..repositories import EventLog, ResumeStore
from ..schemas.pydantic import AnalyticsSummary, DailyPoint, TopResume

logger = structlog.get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_timezone(name: Optional[str]) -> tzinfo:
    try:
        return ZoneInfo(name or settings.DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ResumeValidationError(f"Unknown timezone: {name}") from e


class AnalyticsService:
    """Dashboard statistics for one owner.

    Totals come from the stored counters and are not windowed. The daily
    series only covers the trailing ``ANALYTICS_WINDOW_DAYS`` and has one
    point per local calendar date that saw at least one event.
    """

    def __init__(
        self,
        resumes: ResumeStore,
        events: EventLog,
        window_days: Optional[int] = None,
        top_limit: Optional[int] = None,
    ) -> None:
        self.resumes = resumes
        self.events = events
        self.window_days = settings.ANALYTICS_WINDOW_DAYS if window_days is None else window_days
        self.top_limit = settings.TOP_RESUMES_LIMIT if top_limit is None else top_limit

    async def summarize(
        self,
        user_id: str,
        now: Optional[datetime] = None,
        tz: Optional[str] = None,
    ) -> AnalyticsSummary:
        zone = resolve_timezone(tz)
        now = _as_utc(now or datetime.now(timezone.utc))

        try:
            resumes = await self.resumes.list_for_user(user_id)
            if not resumes:
                return AnalyticsSummary()

            since = now - timedelta(days=self.window_days)
            events = await self.events.list_since([r.id for r in resumes], since)
        except StoreError as e:
            logger.error("analytics_load_failed", user_id=user_id, error=str(e))
            raise AnalyticsUnavailableError() from e

        total_views = sum(r.views for r in resumes)
        total_downloads = sum(r.downloads for r in resumes)

        # sorted() is stable: equal view counts keep the store's listing order.
        ranked = sorted(resumes, key=lambda r: r.views, reverse=True)[: self.top_limit]

        grouped: "OrderedDict" = OrderedDict()
        for event in sorted(events, key=lambda e: _as_utc(e.created_at)):
            day = _as_utc(event.created_at).astimezone(zone).date()
            point = grouped.setdefault(day, DailyPoint(date=day))
            if event.event_type == EventType.VIEW.value:
                point.views += 1
            elif event.event_type == EventType.DOWNLOAD.value:
                point.downloads += 1

        return AnalyticsSummary(
            total_views=total_views,
            total_downloads=total_downloads,
            total_resumes=len(resumes),
            conversion_rate=(
                round(total_downloads / total_views * 100) if total_views > 0 else None
            ),
            chart_data=list(grouped.values()),
            top_resumes=[TopResume.model_validate(r) for r in ranked],
        )
