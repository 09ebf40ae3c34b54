from .analytics import AnalyticsSummary, DailyPoint, TopResume
from .resume import PublicResumeModel, ResumeModel

__all__ = ["AnalyticsSummary", "DailyPoint", "TopResume", "PublicResumeModel", "ResumeModel"]
