from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, Pagination, PartialUpdate, validate_optional_url


class JobCreate(CamelModel):
    company_name: str = Field(min_length=1, max_length=200)
    position_title: str = Field(min_length=1, max_length=200)
    job_description: Optional[str] = Field(default=None, max_length=10000)
    location: Optional[str] = Field(default=None, max_length=200)
    salary_range: Optional[str] = Field(default=None, max_length=100)
    tech_stack: List[str] = Field(default_factory=list, max_length=50)
    source_url: Optional[str] = None
    source_platform: Optional[str] = Field(default=None, max_length=100)
    is_saved: Optional[bool] = None

    @field_validator("source_url")
    @classmethod
    def _url(cls, v):
        return validate_optional_url(v)


class JobUpdate(PartialUpdate):
    company_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    position_title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    job_description: Optional[str] = Field(default=None, max_length=10000)
    location: Optional[str] = Field(default=None, max_length=200)
    salary_range: Optional[str] = Field(default=None, max_length=100)
    tech_stack: Optional[List[str]] = Field(default=None, max_length=50)
    source_url: Optional[str] = None
    source_platform: Optional[str] = Field(default=None, max_length=100)
    is_saved: Optional[bool] = None

    @field_validator("source_url")
    @classmethod
    def _url(cls, v):
        return validate_optional_url(v)


class JobOut(CamelModel):
    id: str
    company_name: str
    position_title: str
    job_description: Optional[str] = None
    location: Optional[str] = None
    salary_range: Optional[str] = None
    tech_stack: List[str] = []
    source_url: Optional[str] = None
    source_platform: Optional[str] = None
    is_saved: bool
    created_at: datetime
    updated_at: datetime


class JobApplicationSummary(CamelModel):
    id: str
    status: str
    applied_date: Optional[datetime] = None
    created_at: datetime


class JobDetailOut(JobOut):
    applications: List[JobApplicationSummary] = []


class JobListOut(CamelModel):
    jobs: List[JobOut]
    pagination: Pagination


class JobStatisticsOut(CamelModel):
    total: int
    saved: int
    unsaved: int
    with_applications: int
    without_applications: int
