import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DailyPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: dt.date
    views: int = 0
    downloads: int = 0


class TopResume(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    title: str
    views: int
    downloads: int


class AnalyticsSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_views: int = Field(0, alias="totalViews")
    total_downloads: int = Field(0, alias="totalDownloads")
    total_resumes: int = Field(0, alias="totalResumes")
    conversion_rate: Optional[int] = Field(None, alias="conversionRate")
    chart_data: List[DailyPoint] = Field(default_factory=list, alias="chartData")
    top_resumes: List[TopResume] = Field(default_factory=list, alias="topResumes")
