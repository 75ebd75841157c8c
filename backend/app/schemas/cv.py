from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, PartialUpdate, RawEmail, validate_optional_url

SkillLevel = Literal["Beginner", "Intermediate", "Advanced", "Expert"]
LanguageLevel = Literal["A1", "A2", "B1", "B2", "C1", "C2", "Native"]


class PersonalInfo(CamelModel):
    full_name: str = Field(min_length=1, max_length=200)
    email: RawEmail
    phone: str = Field(min_length=1, max_length=50)
    address: Optional[str] = Field(default=None, max_length=200)
    city: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)
    postal_code: Optional[str] = Field(default=None, max_length=20)
    date_of_birth: Optional[str] = None
    nationality: Optional[str] = Field(default=None, max_length=100)
    linked_in: Optional[str] = Field(default=None, alias="linkedIn")
    github: Optional[str] = None
    website: Optional[str] = None
    summary: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("linked_in", "github", "website")
    @classmethod
    def _urls(cls, v):
        return validate_optional_url(v)


class Experience(CamelModel):
    id: str
    company: str = Field(min_length=1, max_length=200)
    position: str = Field(min_length=1, max_length=200)
    location: Optional[str] = Field(default=None, max_length=200)
    start_date: str = Field(min_length=1)
    end_date: Optional[str] = None
    current: bool
    description: str = Field(min_length=1, max_length=2000)
    achievements: Optional[List[str]] = None


class Education(CamelModel):
    id: str
    institution: str = Field(min_length=1, max_length=200)
    degree: str = Field(min_length=1, max_length=200)
    field_of_study: str = Field(min_length=1, max_length=200)
    location: Optional[str] = Field(default=None, max_length=200)
    start_date: str = Field(min_length=1)
    end_date: Optional[str] = None
    current: bool
    grade: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, max_length=1000)


class Skill(CamelModel):
    id: str
    category: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=100)
    level: Optional[SkillLevel] = None


class Language(CamelModel):
    id: str
    name: str = Field(min_length=1, max_length=100)
    level: LanguageLevel
    description: Optional[str] = Field(default=None, max_length=500)


class CVCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    personal_info: PersonalInfo
    experience: List[Experience] = []
    education: List[Education] = []
    skills: List[Skill] = []
    languages: List[Language] = []
    is_default: bool = False


class CVUpdate(PartialUpdate):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    personal_info: Optional[PersonalInfo] = None
    experience: Optional[List[Experience]] = None
    education: Optional[List[Education]] = None
    skills: Optional[List[Skill]] = None
    languages: Optional[List[Language]] = None
    is_default: Optional[bool] = None


class DuplicateIn(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)


class CVApplicationSummary(CamelModel):
    id: str
    status: str
    job_id: str


class CVOut(CamelModel):
    id: str
    title: str
    personal_info: PersonalInfo
    experience: List[Experience] = []
    education: List[Education] = []
    skills: List[Skill] = []
    languages: List[Language] = []
    is_default: bool
    created_at: datetime
    updated_at: datetime


class CVDetailOut(CVOut):
    applications: List[CVApplicationSummary] = []


class DefaultCVRef(CamelModel):
    id: str
    title: str


class CVStatisticsOut(CamelModel):
    total: int
    default_cv: Optional[DefaultCVRef] = Field(default=None, alias="defaultCV")
    with_applications: int
    without_applications: int


def cv_fields(payload: CVCreate | CVUpdate) -> dict:
    """
    Plain-data view of a CV payload for the service layer. Sections are stored
    as JSON documents in their snake_case form.
    """
    return payload.model_dump(exclude_unset=True, mode="json")
