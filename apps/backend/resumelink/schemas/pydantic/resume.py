from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ...core.config import settings


def short_url(short_id: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/r/{short_id}"


class ResumeModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    title: str
    file_url: str = Field(..., alias="fileUrl")
    file_name: str = Field(..., alias="fileName")
    short_id: str = Field(..., alias="shortId")
    short_url: str = Field("", alias="shortUrl")
    views: int = Field(0, ge=0)
    downloads: int = Field(0, ge=0)
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_resume(cls, resume) -> "ResumeModel":
        model = cls.model_validate(resume)
        model.short_url = short_url(model.short_id)
        return model


class PublicResumeModel(BaseModel):
    """What a visitor of a short link gets to see."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    title: str
    file_url: str = Field(..., alias="fileUrl")
    short_id: str = Field(..., alias="shortId")
    downloads: int = 0
