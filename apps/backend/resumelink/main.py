import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .api import pages_router, v1_router
from .core import init_models, settings, setup_logging
from .exceptions import ResumeLinkError
from .models import Base
from .storage import LocalBlobStorage

logger = logging.getLogger(__name__)


async def resumelink_error_handler(request: Request, exc: ResumeLinkError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.DB_AUTO_CREATE:
        await init_models(Base)
    logger.info("%s started, storage at %s", settings.PROJECT_NAME, app.state.storage.root)
    yield


def create_app() -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    os.makedirs(settings.STORAGE_ROOT, exist_ok=True)
    app.state.storage = LocalBlobStorage(settings.STORAGE_ROOT, settings.PUBLIC_BASE_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ResumeLinkError, resumelink_error_handler)

    app.mount("/files", StaticFiles(directory=settings.STORAGE_ROOT), name="files")
    app.include_router(v1_router)
    app.include_router(pages_router)
    return app


app = create_app()
