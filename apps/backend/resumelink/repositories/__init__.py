from .analytics import SqlEventLog
from .base import EventLog, ResumeStore, wrap_store_errors
from .resumes import SqlResumeStore

__all__ = ["EventLog", "ResumeStore", "SqlEventLog", "SqlResumeStore", "wrap_store_errors"]
