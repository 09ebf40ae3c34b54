from .analytics_service import AnalyticsService
from .resume_service import ResumeService
from .short_id import generate_short_id
from .tracking import ResumeResolver, ResumeTracker

__all__ = [
    "AnalyticsService",
    "ResumeService",
    "ResumeResolver",
    "ResumeTracker",
    "generate_short_id",
]
