import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class EventType(str, enum.Enum):
    VIEW = "view"
    DOWNLOAD = "download"


# Resume column each event kind bumps.
COUNTER_BY_EVENT = {
    EventType.VIEW: "views",
    EventType.DOWNLOAD: "downloads",
}


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    file_name = Column(String, nullable=False)
    short_id = Column(String(64), nullable=False, unique=True, index=True)
    views = Column(Integer, nullable=False, default=0, server_default="0")
    downloads = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        CheckConstraint("views >= 0", name="ck_resumes_views_non_negative"),
        CheckConstraint("downloads >= 0", name="ck_resumes_downloads_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Resume {self.short_id} views={self.views} downloads={self.downloads}>"


class AnalyticsEvent(Base):
    __tablename__ = "resume_analytics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    resume_id = Column(
        String(32),
        ForeignKey("resumes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_type = Column(String(16), nullable=False)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    __table_args__ = (
        CheckConstraint(
            "event_type IN ('view', 'download')", name="ck_resume_analytics_event_type"
        ),
    )
