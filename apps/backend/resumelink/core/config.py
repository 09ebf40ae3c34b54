import os
import sys
import logging
from logging.handlers import RotatingFileHandler

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal


class Settings(BaseSettings):
    PROJECT_NAME: str = "ResumeLink"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    SYNC_DATABASE_URL: str = "sqlite:///./resumelink.db"
    ASYNC_DATABASE_URL: str = "sqlite+aiosqlite:///./resumelink.db"
    DB_ECHO: bool = False
    DB_AUTO_CREATE: bool = True

    STORAGE_ROOT: str = os.path.join(os.getcwd(), "storage")
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    USER_ID_HEADER: str = "X-User-Id"
    AUTH_LOGIN_URL: str = "/"

    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    SHORT_ID_LENGTH: int = 10
    SHORT_ID_MAX_ATTEMPTS: int = 5
    ATOMIC_COUNTERS: bool = True
    OPEN_DELAY_SECONDS: int = 2
    ANALYTICS_WINDOW_DAYS: int = 30
    TOP_RESUMES_LIMIT: int = 5
    DEFAULT_TIMEZONE: str = "UTC"

    LOG_LEVEL: str = "INFO"
    ENV: str = "dev"
    LOG_DIR: str = "logs"

    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(__file__), os.pardir, os.pardir, ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


_LEVEL_BY_ENV: dict[Literal["prod", "staging", "dev"], int] = {
    "prod": logging.INFO,
    "staging": logging.DEBUG,
    "dev": logging.DEBUG,
}


def setup_logging() -> None:
    """
    Configure the root logger exactly once,

    * Rotating file under LOG_DIR plus console (StreamHandler -> stderr)
    * ISO - 8601 timestamps
    * JSON lines in prod, coloured console output elsewhere
    * Prevents duplicate handler creation if called twice
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = settings.LOG_LEVEL.upper()
    level = getattr(logging, level_name, _LEVEL_BY_ENV.get(settings.ENV, logging.INFO))

    os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_file = os.path.join(settings.LOG_DIR, "backend.log")

    file_handler = RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3
    )
    console_handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[file_handler, console_handler],
    )

    renderers = (
        [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        if settings.ENV == "prod"
        else [structlog.dev.ConsoleRenderer()]
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *renderers,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for noisy in ("sqlalchemy.engine", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
