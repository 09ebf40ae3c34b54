from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import DuplicateShortIdError
from ..models import COUNTER_BY_EVENT, AnalyticsEvent, Resume
from .base import wrap_store_errors

logger = logging.getLogger(__name__)

COUNTERS = frozenset(COUNTER_BY_EVENT.values())


def _counter_column(counter: str):
    if counter not in COUNTERS:
        raise ValueError(f"unknown counter: {counter!r}")
    return getattr(Resume, counter)


class SqlResumeStore:
    """`ResumeStore` backed by an SQLAlchemy async session.

    Every write commits immediately; callers never hold a transaction open
    across store calls.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @wrap_store_errors
    async def insert(
        self,
        *,
        user_id: str,
        title: str,
        file_url: str,
        file_name: str,
        short_id: str,
    ) -> Resume:
        resume = Resume(
            user_id=user_id,
            title=title,
            file_url=file_url,
            file_name=file_name,
            short_id=short_id,
            views=0,
            downloads=0,
        )
        self.session.add(resume)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateShortIdError(f"short id {short_id!r} already exists") from e
        await self.session.refresh(resume)
        return resume

    @wrap_store_errors
    async def get(self, resume_id: str) -> Optional[Resume]:
        return await self.session.get(Resume, resume_id)

    @wrap_store_errors
    async def get_by_short_id(self, short_id: str) -> Optional[Resume]:
        result = await self.session.execute(
            select(Resume).where(Resume.short_id == short_id)
        )
        return result.scalar_one_or_none()

    @wrap_store_errors
    async def list_for_user(self, user_id: str) -> List[Resume]:
        result = await self.session.execute(
            select(Resume)
            .where(Resume.user_id == user_id)
            .order_by(Resume.created_at.desc())
        )
        return list(result.scalars().all())

    @wrap_store_errors
    async def increment(self, resume_id: str, counter: str) -> int:
        column = _counter_column(counter)
        result = await self.session.execute(
            update(Resume)
            .where(Resume.id == resume_id)
            .values({column: column + 1})
            .returning(column)
        )
        value = result.scalar_one_or_none()
        await self.session.commit()
        if value is None:
            logger.warning("increment of %s skipped, resume %s is gone", counter, resume_id)
            return 0
        return value

    @wrap_store_errors
    async def set_counter(self, resume_id: str, counter: str, value: int) -> None:
        column = _counter_column(counter)
        await self.session.execute(
            update(Resume).where(Resume.id == resume_id).values({column: value})
        )
        await self.session.commit()

    @wrap_store_errors
    async def delete(self, resume_id: str) -> None:
        await self.session.execute(
            delete(AnalyticsEvent).where(AnalyticsEvent.resume_id == resume_id)
        )
        await self.session.execute(delete(Resume).where(Resume.id == resume_id))
        await self.session.commit()
