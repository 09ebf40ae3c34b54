"""Server-rendered pages: landing, dashboard, analytics and the public short link."""

import logging
import os
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from ...core import settings
from ...exceptions import (
    AnalyticsUnavailableError,
    ResumeNotFoundError,
    ResumeValidationError,
    StoreError,
)
from ...models import EventType
from ...schemas.pydantic import PublicResumeModel, ResumeModel
from ...services import AnalyticsService, ResumeResolver, ResumeService
from ...services.tracking import snapshot, track_in_background
from ..deps import get_analytics_service, get_optional_user, get_resolver, get_resume_service
from .v1.resume import read_upload

pages_router = APIRouter(include_in_schema=False)
logger = logging.getLogger(__name__)

templates = Jinja2Templates(
    directory=os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "templates")
)


def _message(request: Request, heading: str, text: str, status_code: int):
    return templates.TemplateResponse(
        request,
        "message.html",
        {"heading": heading, "text": text},
        status_code=status_code,
    )


def _not_found(request: Request):
    return _message(
        request,
        "Resume Not Found",
        "The resume link you're looking for doesn't exist or has been removed.",
        status.HTTP_404_NOT_FOUND,
    )


def _store_failure(request: Request, text: str):
    return _message(request, "Something went wrong", text, status.HTTP_503_SERVICE_UNAVAILABLE)


def _wants_json(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "application/json" in accept and "text/html" not in accept


@pages_router.get("/")
async def landing(request: Request, user_id: Optional[str] = Depends(get_optional_user)):
    if user_id:
        return RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)
    return templates.TemplateResponse(request, "index.html", {})


@pages_router.get("/auth")
async def auth():
    return RedirectResponse(settings.AUTH_LOGIN_URL, status_code=status.HTTP_303_SEE_OTHER)


async def _render_dashboard(
    request: Request,
    user_id: str,
    service: ResumeService,
    error: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
):
    try:
        resumes = [ResumeModel.from_resume(r) for r in await service.list_resumes(user_id)]
    except StoreError as e:
        logger.error("failed to load resumes for %s: %s", user_id, e)
        return _store_failure(request, "Failed to load resumes")
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "resumes": resumes,
            "error": error,
            "max_upload_mb": service.max_upload_bytes // (1024 * 1024),
        },
        status_code=status_code,
    )


@pages_router.get("/dashboard")
async def dashboard(
    request: Request,
    user_id: Optional[str] = Depends(get_optional_user),
    service: ResumeService = Depends(get_resume_service),
):
    if not user_id:
        return RedirectResponse("/auth", status_code=status.HTTP_303_SEE_OTHER)
    return await _render_dashboard(request, user_id, service)


@pages_router.post("/dashboard/upload")
async def dashboard_upload(
    request: Request,
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    user_id: Optional[str] = Depends(get_optional_user),
    service: ResumeService = Depends(get_resume_service),
):
    if not user_id:
        return RedirectResponse("/auth", status_code=status.HTTP_303_SEE_OTHER)
    try:
        service.validate_upload(file.filename, file.content_type, file.size or 1, title)
        data = await read_upload(file, service.max_upload_bytes)
        await service.upload(user_id, file.filename, file.content_type, data, title)
    except ResumeValidationError as e:
        return await _render_dashboard(request, user_id, service, e.message, e.status_code)
    except StoreError as e:
        logger.error("upload failed for %s: %s", user_id, e)
        return await _render_dashboard(
            request, user_id, service, "Failed to upload resume", e.status_code
        )
    return RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)


@pages_router.post("/dashboard/{resume_id}/delete")
async def dashboard_delete(
    request: Request,
    resume_id: str,
    user_id: Optional[str] = Depends(get_optional_user),
    service: ResumeService = Depends(get_resume_service),
):
    if not user_id:
        return RedirectResponse("/auth", status_code=status.HTTP_303_SEE_OTHER)
    try:
        await service.delete_resume(user_id, resume_id)
    except (ResumeNotFoundError, StoreError) as e:
        return await _render_dashboard(
            request, user_id, service, "Failed to delete resume", e.status_code
        )
    return RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)


@pages_router.get("/analytics")
async def analytics(
    request: Request,
    tz: Optional[str] = None,
    user_id: Optional[str] = Depends(get_optional_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    if not user_id:
        return RedirectResponse("/auth", status_code=status.HTTP_303_SEE_OTHER)
    try:
        summary = await service.summarize(user_id, tz=tz)
    except (AnalyticsUnavailableError, ResumeValidationError) as e:
        return _message(request, "Something went wrong", e.message, e.status_code)
    return templates.TemplateResponse(
        request,
        "analytics.html",
        {"summary": summary, "window_days": service.window_days},
    )


@pages_router.get("/r/{short_id}")
async def open_short_link(
    request: Request,
    short_id: str,
    background_tasks: BackgroundTasks,
    resolver: ResumeResolver = Depends(get_resolver),
):
    try:
        resume = await resolver.resolve(short_id)
    except ResumeNotFoundError:
        return _not_found(request)
    except StoreError as e:
        logger.error("short link lookup failed for %s: %s", short_id, e)
        return _store_failure(request, "Failed to load resume")

    background_tasks.add_task(
        track_in_background,
        snapshot(resume),
        EventType.VIEW,
        request.headers.get("user-agent"),
    )

    public = PublicResumeModel.model_validate(resume)
    if _wants_json(request):
        return public
    return templates.TemplateResponse(
        request,
        "resume.html",
        {"resume": public, "open_delay_ms": settings.OPEN_DELAY_SECONDS * 1000},
    )


@pages_router.post("/r/{short_id}/download")
async def download_short_link(
    request: Request,
    short_id: str,
    background_tasks: BackgroundTasks,
    downloads: Optional[int] = Form(None, ge=0),
    resolver: ResumeResolver = Depends(get_resolver),
):
    try:
        resume = await resolver.resolve(short_id)
    except ResumeNotFoundError:
        return _not_found(request)
    except StoreError as e:
        logger.error("download lookup failed for %s: %s", short_id, e)
        return _store_failure(request, "Failed to load resume")

    # the page may only hold a stale copy of the counter, never one ahead of the store
    held = resume.downloads if downloads is None else min(downloads, resume.downloads)
    background_tasks.add_task(
        track_in_background,
        snapshot(resume, downloads=held),
        EventType.DOWNLOAD,
        request.headers.get("user-agent"),
    )
    return RedirectResponse(resume.file_url, status_code=status.HTTP_303_SEE_OTHER)
