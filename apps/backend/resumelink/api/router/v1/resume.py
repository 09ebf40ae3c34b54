import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from ....exceptions import FileTooLargeError
from ....schemas.pydantic import ResumeModel
from ....services import ResumeService
from ...deps import get_current_user, get_resume_service

resume_router = APIRouter()
logger = logging.getLogger(__name__)


async def read_upload(file: UploadFile, limit: int) -> bytes:
    """Read at most one byte past *limit* so oversized bodies fail fast."""
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise FileTooLargeError(f"File size must be less than {limit // (1024 * 1024)}MB")
    return data


@resume_router.post(
    "",
    response_model=ResumeModel,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a PDF resume and get its short link",
)
async def upload_resume(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    user_id: str = Depends(get_current_user),
    service: ResumeService = Depends(get_resume_service),
):
    service.validate_upload(file.filename, file.content_type, file.size or 1, title)
    data = await read_upload(file, service.max_upload_bytes)
    resume = await service.upload(user_id, file.filename, file.content_type, data, title)
    return ResumeModel.from_resume(resume)


@resume_router.get("", response_model=List[ResumeModel], summary="List my resumes")
async def list_resumes(
    user_id: str = Depends(get_current_user),
    service: ResumeService = Depends(get_resume_service),
):
    resumes = await service.list_resumes(user_id)
    return [ResumeModel.from_resume(r) for r in resumes]


@resume_router.get("/{resume_id}", response_model=ResumeModel, summary="Get one of my resumes")
async def get_resume(
    resume_id: str,
    user_id: str = Depends(get_current_user),
    service: ResumeService = Depends(get_resume_service),
):
    resume = await service.get_resume(user_id, resume_id)
    return ResumeModel.from_resume(resume)


@resume_router.delete(
    "/{resume_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a resume"
)
async def delete_resume(
    resume_id: str,
    user_id: str = Depends(get_current_user),
    service: ResumeService = Depends(get_resume_service),
):
    await service.delete_resume(user_id, resume_id)
    return None
