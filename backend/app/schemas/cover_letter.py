from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel, PartialUpdate, RawEmail


class GenerateIn(CamelModel):
    application_id: Optional[str] = None
    job_description: str = Field(min_length=10, max_length=5000)
    company_name: str = Field(min_length=1, max_length=200)
    position_title: str = Field(min_length=1, max_length=200)
    applicant_name: str = Field(min_length=1, max_length=200)
    applicant_email: RawEmail
    applicant_phone: str = Field(min_length=1, max_length=50)
    experience: Optional[str] = Field(default=None, max_length=2000)
    skills: Optional[str] = Field(default=None, max_length=1000)
    education: Optional[str] = Field(default=None, max_length=1000)
    motivation: Optional[str] = Field(default=None, max_length=1000)
    save_as_template: bool = False


class CoverLetterCreate(CamelModel):
    application_id: Optional[str] = None
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=10, max_length=10000)
    is_template: bool = False


class CoverLetterUpdate(PartialUpdate):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=10, max_length=10000)
    is_template: Optional[bool] = None
    application_id: Optional[str] = None


class RefineIn(CamelModel):
    improvement_instructions: str = Field(min_length=5, max_length=1000)


class LinkedJob(CamelModel):
    company_name: str
    position_title: str


class LinkedApplication(CamelModel):
    id: str
    status: str
    job: Optional[LinkedJob] = None


class CoverLetterOut(CamelModel):
    id: str
    application_id: Optional[str] = None
    title: str
    content: str
    is_template: bool
    created_at: datetime
    updated_at: datetime
    application: Optional[LinkedApplication] = None


class CoverLetterStatisticsOut(CamelModel):
    total: int
    templates: int
    linked_to_applications: int
    not_linked: int
