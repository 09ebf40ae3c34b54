"""Short-link resolution and best-effort view/download tracking."""

from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from ..core.config import settings
from ..core.database import AsyncSessionLocal
from ..exceptions import ResumeNotFoundError, StoreError
from ..models import COUNTER_BY_EVENT, EventType, Resume
from ..repositories import EventLog, ResumeStore, SqlEventLog, SqlResumeStore

logger = structlog.get_logger(__name__)


class ResumeResolver:
    """Map a short id onto its resume. Performs no writes."""

    def __init__(self, resumes: ResumeStore) -> None:
        self.resumes = resumes

    async def resolve(self, short_id: str) -> Resume:
        resume = await self.resumes.get_by_short_id(short_id)
        if resume is None:
            logger.info("short_link_not_found", short_id=short_id)
            raise ResumeNotFoundError(f"No resume for short id {short_id!r}")
        return resume


class ResumeTracker:
    """Record view/download events and bump the matching counter.

    Tracking never raises: store failures are logged and dropped so the
    caller can always go on to serve the file.

    With ``atomic_counters`` the store increments in place. Without it the
    new value is the counter held by the caller plus one, so two concurrent
    visitors holding the same snapshot produce a single increment.
    """

    def __init__(
        self,
        resumes: ResumeStore,
        events: EventLog,
        atomic_counters: Optional[bool] = None,
    ) -> None:
        self.resumes = resumes
        self.events = events
        self.atomic_counters = (
            settings.ATOMIC_COUNTERS if atomic_counters is None else atomic_counters
        )

    async def record_view(self, resume: Resume, user_agent: Optional[str] = None) -> None:
        await self._record(resume, EventType.VIEW, user_agent)

    async def record_download(self, resume: Resume, user_agent: Optional[str] = None) -> None:
        await self._record(resume, EventType.DOWNLOAD, user_agent)

    async def _record(
        self, resume: Resume, event_type: EventType, user_agent: Optional[str]
    ) -> None:
        counter = COUNTER_BY_EVENT[event_type]
        log = logger.bind(resume_id=resume.id, event_type=event_type.value)

        try:
            await self.events.append(resume.id, event_type, user_agent=user_agent)
        except StoreError as e:
            log.error("analytics_event_write_failed", error=str(e))

        try:
            if self.atomic_counters:
                value = await self.resumes.increment(resume.id, counter)
            else:
                value = (getattr(resume, counter) or 0) + 1
                await self.resumes.set_counter(resume.id, counter, value)
        except StoreError as e:
            log.error("counter_update_failed", counter=counter, error=str(e))
            return
        log.debug("counter_updated", counter=counter, value=value)


def snapshot(resume: Resume, **overrides) -> Resume:
    """Detached copy of the fields tracking needs, safe to use after the request session closes."""
    fields = {
        "id": resume.id,
        "short_id": resume.short_id,
        "views": resume.views,
        "downloads": resume.downloads,
    }
    fields.update({k: v for k, v in overrides.items() if v is not None})
    return Resume(**fields)


async def track_in_background(
    resume: Resume,
    event_type: EventType,
    user_agent: Optional[str] = None,
    session_factory=None,
) -> None:
    """Background-task entry point: runs on its own session and never raises."""
    factory = session_factory or AsyncSessionLocal
    try:
        async with factory() as session:
            tracker = ResumeTracker(SqlResumeStore(session), SqlEventLog(session))
            if event_type == EventType.DOWNLOAD:
                await tracker.record_download(resume, user_agent)
            else:
                await tracker.record_view(resume, user_agent)
    except SQLAlchemyError as e:
        logger.error(
            "tracking_session_failed",
            resume_id=resume.id,
            event_type=EventType(event_type).value,
            error=str(e),
        )
