from .base import Base
from .resume import COUNTER_BY_EVENT, AnalyticsEvent, EventType, Resume

__all__ = ["Base", "Resume", "AnalyticsEvent", "EventType", "COUNTER_BY_EVENT"]
