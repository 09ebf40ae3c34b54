from fastapi import status


class ResumeLinkError(Exception):
    """Base class for every error the service raises on purpose."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.detail)
        self.message = message or self.detail


class ResumeNotFoundError(ResumeLinkError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resume not found"


class ResumeValidationError(ResumeLinkError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid resume upload"


class UnsupportedFileTypeError(ResumeValidationError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    detail = "Only PDF files are allowed"


class FileTooLargeError(ResumeValidationError):
    status_code = 413
    detail = "File size must be less than 10MB"


class MissingFieldError(ResumeValidationError):
    detail = "Please fill all fields"


class StoreError(ResumeLinkError):
    """Failure reported by the record store, the event log or blob storage."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Storage backend unavailable"


class DuplicateShortIdError(StoreError):
    detail = "Short id already taken"


class StorageConflictError(StoreError):
    detail = "Blob path already exists"


class AnalyticsUnavailableError(ResumeLinkError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Failed to load analytics"
