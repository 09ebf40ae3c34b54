from __future__ import annotations

import logging
from datetime import datetime
from functools import wraps
from typing import Iterable, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from ..models import AnalyticsEvent, EventType, Resume
from ..exceptions import StoreError

logger = logging.getLogger(__name__)


def wrap_store_errors(func):
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except StoreError:
            raise
        except SQLAlchemyError as e:
            # leave the session usable for the next call
            try:
                await self.session.rollback()
            except SQLAlchemyError as rollback_error:
                logger.debug("rollback after %s failed: %s", func.__name__, rollback_error)
            raise StoreError(f"Database error in {func.__name__}: {e}") from e

    return wrapper


class ResumeStore(Protocol):
    """Record store holding resume metadata and counters."""

    async def insert(
        self,
        *,
        user_id: str,
        title: str,
        file_url: str,
        file_name: str,
        short_id: str,
    ) -> Resume: ...

    async def get(self, resume_id: str) -> Optional[Resume]: ...

    async def get_by_short_id(self, short_id: str) -> Optional[Resume]: ...

    async def list_for_user(self, user_id: str) -> List[Resume]: ...

    async def increment(self, resume_id: str, counter: str) -> int:
        """Atomically add one to *counter* and return the new value."""
        ...

    async def set_counter(self, resume_id: str, counter: str, value: int) -> None: ...

    async def delete(self, resume_id: str) -> None: ...


class EventLog(Protocol):
    """Append-only log of view/download events."""

    async def append(
        self,
        resume_id: str,
        event_type: EventType,
        *,
        user_agent: Optional[str] = None,
    ) -> AnalyticsEvent: ...

    async def list_since(
        self, resume_ids: Iterable[str], since: datetime
    ) -> List[AnalyticsEvent]: ...
