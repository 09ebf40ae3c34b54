from .config import settings, setup_logging
from .database import AsyncSessionLocal, SessionLocal, get_db_session, init_models

__all__ = [
    "settings",
    "setup_logging",
    "AsyncSessionLocal",
    "SessionLocal",
    "get_db_session",
    "init_models",
]
