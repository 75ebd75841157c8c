from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth.identity import Identity
from app.core.database import get_db
from app.dependencies.auth import get_current_identity
from app.schemas.common import Envelope, MessageOut, ok
from app.schemas.job import (
    JobCreate,
    JobDetailOut,
    JobListOut,
    JobOut,
    JobStatisticsOut,
    JobUpdate,
)
from app.services import jobs as job_service
from app.services.jobs import JobFilters

router = APIRouter(prefix="/jobs", tags=["jobs"], dependencies=[Depends(get_current_identity)])


def _split_tech(values: list[str] | None) -> list[str]:
    # ?techStack=a&techStack=b and ?techStack=a,b are equivalent.
    out: list[str] = []
    for v in values or []:
        out.extend(part.strip() for part in v.split(",") if part.strip())
    return out


@router.get("/statistics", response_model=Envelope[JobStatisticsOut])
def job_statistics(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(job_service.job_statistics(db, identity.user_id))


@router.get("/search", response_model=Envelope[list[JobOut]])
def search_jobs(
    q: str = Query(default="", max_length=200),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(job_service.search_jobs(db, identity.user_id, q, limit=limit))


@router.post("/", response_model=Envelope[JobOut], status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    job = job_service.create_job(db, identity.user_id, payload.model_dump())
    return ok(job, "Job created successfully")


@router.get("/", response_model=Envelope[JobListOut])
def list_jobs(
    company_name: str | None = Query(default=None, alias="companyName"),
    position_title: str | None = Query(default=None, alias="positionTitle"),
    location: str | None = None,
    tech_stack: list[str] | None = Query(default=None, alias="techStack"),
    is_saved: bool | None = Query(default=None, alias="isSaved"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    filters = JobFilters(
        company_name=company_name,
        position_title=position_title,
        location=location,
        tech_stack=_split_tech(tech_stack),
        is_saved=is_saved,
    )
    result = job_service.list_jobs(db, identity.user_id, filters, page=page, limit=limit)
    return ok({"jobs": result.items, "pagination": result.pagination()})


@router.get("/{job_id}", response_model=Envelope[JobDetailOut])
def get_job(
    job_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(job_service.get_job_for_user(db, job_id, identity.user_id))


@router.put("/{job_id}", response_model=Envelope[JobOut])
def update_job(
    job_id: str,
    payload: JobUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    data = payload.model_dump(exclude_unset=True)
    job = job_service.update_job(db, job_id, identity.user_id, data)
    return ok(job, "Job updated successfully")


@router.delete("/{job_id}", response_model=MessageOut)
def delete_job(
    job_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    job_service.delete_job(db, job_id, identity.user_id)
    return ok(message="Job deleted successfully")
