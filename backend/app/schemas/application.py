from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.application import ApplicationStatus
from app.schemas.common import CamelModel, Pagination, PartialUpdate
from app.schemas.job import JobOut


class ApplicationCreate(CamelModel):
    job_id: str = Field(min_length=1)
    cv_id: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    applied_date: Optional[datetime] = None
    follow_up_date: Optional[datetime] = None
    interview_date: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=5000)
    contact_person: Optional[str] = Field(default=None, max_length=200)


class ApplicationUpdate(PartialUpdate):
    job_id: Optional[str] = Field(default=None, min_length=1)
    cv_id: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    applied_date: Optional[datetime] = None
    follow_up_date: Optional[datetime] = None
    interview_date: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=5000)
    contact_person: Optional[str] = Field(default=None, max_length=200)


class StatusUpdate(CamelModel):
    status: ApplicationStatus


class CVSummary(CamelModel):
    id: str
    title: str


class CoverLetterSummary(CamelModel):
    id: str
    title: str


class ApplicationOut(CamelModel):
    id: str
    job_id: str
    cv_id: Optional[str] = None
    status: ApplicationStatus
    applied_date: Optional[datetime] = None
    follow_up_date: Optional[datetime] = None
    interview_date: Optional[datetime] = None
    notes: Optional[str] = None
    contact_person: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    job: Optional[JobOut] = None
    cv: Optional[CVSummary] = None


class ApplicationDetailOut(ApplicationOut):
    cover_letters: List[CoverLetterSummary] = []


class ApplicationListOut(CamelModel):
    applications: List[ApplicationOut]
    pagination: Pagination


class StatusCounts(CamelModel):
    to_apply: int
    applied: int
    interview: int
    offer: int
    rejected: int


class ApplicationStatisticsOut(CamelModel):
    total: int
    by_status: StatusCounts
    success_rate: str
    interview_rate: str


class KanbanOut(CamelModel):
    # Bucket names are the status values themselves.
    to_apply: List[ApplicationOut] = Field(alias="TO_APPLY")
    applied: List[ApplicationOut] = Field(alias="APPLIED")
    interview: List[ApplicationOut] = Field(alias="INTERVIEW")
    offer: List[ApplicationOut] = Field(alias="OFFER")
    rejected: List[ApplicationOut] = Field(alias="REJECTED")
