import os
from typing import List, Optional

import structlog

from ..core.config import settings
from ..exceptions import (
    DuplicateShortIdError,
    FileTooLargeError,
    MissingFieldError,
    ResumeNotFoundError,
    StorageConflictError,
    StoreError,
    UnsupportedFileTypeError,
)
from ..models import Resume
from ..repositories import ResumeStore
from ..storage import LocalBlobStorage
from .short_id import generate_short_id

logger = structlog.get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


def default_title(filename: str) -> str:
    name = os.path.basename(filename or "")
    if name.lower().endswith(".pdf"):
        name = name[:-4]
    return name.strip()


class ResumeService:
    """Upload, list and delete an owner's resumes."""

    def __init__(
        self,
        resumes: ResumeStore,
        storage: LocalBlobStorage,
        max_upload_bytes: Optional[int] = None,
    ) -> None:
        self.resumes = resumes
        self.storage = storage
        self.max_upload_bytes = (
            settings.MAX_UPLOAD_BYTES if max_upload_bytes is None else max_upload_bytes
        )

    def validate_upload(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        size: int,
        title: Optional[str] = None,
    ) -> str:
        """Check an upload before anything is written and return its final title."""
        if not filename or size <= 0:
            raise MissingFieldError()
        if content_type != PDF_CONTENT_TYPE:
            raise UnsupportedFileTypeError()
        if size > self.max_upload_bytes:
            raise FileTooLargeError(
                f"File size must be less than {self.max_upload_bytes // (1024 * 1024)}MB"
            )
        final_title = (title or "").strip() or default_title(filename)
        if not final_title:
            raise MissingFieldError()
        return final_title

    async def upload(
        self,
        user_id: str,
        filename: str,
        content_type: Optional[str],
        data: bytes,
        title: Optional[str] = None,
    ) -> Resume:
        final_title = self.validate_upload(filename, content_type, len(data), title)
        file_name = os.path.basename(filename)
        log = logger.bind(user_id=user_id, file_name=file_name)

        for attempt in range(1, settings.SHORT_ID_MAX_ATTEMPTS + 1):
            short_id = generate_short_id()
            path = f"{user_id}/{short_id}-{file_name}"

            try:
                await self.storage.upload(path, data)
            except StorageConflictError:
                log.warning("blob_path_taken", short_id=short_id, attempt=attempt)
                continue

            try:
                resume = await self.resumes.insert(
                    user_id=user_id,
                    title=final_title,
                    file_url=self.storage.public_url(path),
                    file_name=file_name,
                    short_id=short_id,
                )
            except DuplicateShortIdError:
                log.warning("short_id_collision", short_id=short_id, attempt=attempt)
                await self._discard_blob(path)
                continue
            except StoreError:
                await self._discard_blob(path)
                raise

            log.info("resume_uploaded", resume_id=resume.id, short_id=short_id)
            return resume

        raise StoreError(
            f"Could not allocate a unique short id after {settings.SHORT_ID_MAX_ATTEMPTS} attempts"
        )

    async def list_resumes(self, user_id: str) -> List[Resume]:
        try:
            return await self.resumes.list_for_user(user_id)
        except StoreError as e:
            logger.error("resume_list_failed", user_id=user_id, error=str(e))
            raise StoreError("Failed to load resumes") from e

    async def get_resume(self, user_id: str, resume_id: str) -> Resume:
        resume = await self.resumes.get(resume_id)
        if resume is None or resume.user_id != user_id:
            raise ResumeNotFoundError()
        return resume

    async def delete_resume(self, user_id: str, resume_id: str) -> None:
        resume = await self.get_resume(user_id, resume_id)
        await self.resumes.delete(resume.id)
        logger.info("resume_deleted", user_id=user_id, resume_id=resume.id)

        path = self.storage.path_from_url(resume.file_url)
        if path:
            await self._discard_blob(path)

    async def _discard_blob(self, path: str) -> None:
        try:
            await self.storage.remove(path)
        except StoreError as e:
            logger.warning("blob_cleanup_failed", path=path, error=str(e))
