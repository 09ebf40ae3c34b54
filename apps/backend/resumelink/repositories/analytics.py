from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import AnalyticsEvent, EventType
from .base import wrap_store_errors


class SqlEventLog:
    """`EventLog` backed by the ``resume_analytics`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @wrap_store_errors
    async def append(
        self,
        resume_id: str,
        event_type: EventType,
        *,
        user_agent: Optional[str] = None,
    ) -> AnalyticsEvent:
        event = AnalyticsEvent(
            resume_id=resume_id,
            event_type=EventType(event_type).value,
            ip_address=None,
            user_agent=user_agent,
        )
        self.session.add(event)
        await self.session.commit()
        return event

    @wrap_store_errors
    async def list_since(
        self, resume_ids: Iterable[str], since: datetime
    ) -> List[AnalyticsEvent]:
        ids = list(resume_ids)
        if not ids:
            return []
        result = await self.session.execute(
            select(AnalyticsEvent)
            .where(AnalyticsEvent.resume_id.in_(ids))
            .where(AnalyticsEvent.created_at >= since)
            .order_by(AnalyticsEvent.created_at, AnalyticsEvent.id)
        )
        return list(result.scalars().all())
