from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from sqlalchemy import desc, func
from sqlalchemy.orm import Session, joinedload

from app.core.errors import ValidationError
from app.models.application import Application, ApplicationStatus
from app.models.job import Job
from app.services import ownership
from app.services.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, Page, paginate

logger = logging.getLogger(__name__)

_RATE_QUANT = Decimal("0.01")

# Fields copied straight from the payload on update; None clears them.
_PLAIN_FIELDS = (
    "applied_date",
    "follow_up_date",
    "interview_date",
    "notes",
    "contact_person",
)

# Response key for each status bucket in statistics.
_STAT_KEYS = {
    ApplicationStatus.TO_APPLY: "to_apply",
    ApplicationStatus.APPLIED: "applied",
    ApplicationStatus.INTERVIEW: "interview",
    ApplicationStatus.OFFER: "offer",
    ApplicationStatus.REJECTED: "rejected",
}


@dataclass
class ApplicationFilters:
    status: ApplicationStatus | None = None
    company_name: str | None = None
    position_title: str | None = None


def _status_value(status: ApplicationStatus | str | None) -> str:
    if status is None:
        return ApplicationStatus.TO_APPLY.value
    return ApplicationStatus(status).value


def format_rate(part: int, total: int) -> str:
    """
    part/total as a percentage string with two decimals, "0.00" when total is 0.
    """
    if total <= 0:
        return "0.00"
    pct = (Decimal(part) * Decimal(100)) / Decimal(total)
    return str(pct.quantize(_RATE_QUANT, rounding=ROUND_HALF_UP))


def _with_relations(qry):
    return qry.options(joinedload(Application.job), joinedload(Application.cv))


def get_application_for_user(db: Session, application_id: str, user_id: str) -> Application:
    return ownership.applications.get(db, application_id, user_id)


def create_application(db: Session, user_id: str, data: dict[str, Any]) -> Application:
    # References come from the client; both must belong to the caller.
    ownership.jobs.ensure_owned(db, data["job_id"], user_id)
    cv_id = data.get("cv_id") or None
    if cv_id:
        ownership.cvs.ensure_owned(db, cv_id, user_id)

    app_row = ownership.applications.add(
        db,
        user_id,
        job_id=data["job_id"],
        cv_id=cv_id,
        status=_status_value(data.get("status")),
        applied_date=data.get("applied_date"),
        follow_up_date=data.get("follow_up_date"),
        interview_date=data.get("interview_date"),
        notes=data.get("notes") or None,
        contact_person=data.get("contact_person") or None,
    )
    db.commit()
    db.refresh(app_row)
    return app_row


def list_applications(
    db: Session,
    user_id: str,
    filters: ApplicationFilters | None = None,
    *,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
) -> Page[Application]:
    filters = filters or ApplicationFilters()
    qry = ownership.applications.query(db, user_id)

    if filters.status is not None:
        qry = qry.filter(Application.status == _status_value(filters.status))

    if filters.company_name or filters.position_title:
        qry = qry.join(Application.job)
        if filters.company_name:
            qry = qry.filter(Job.company_name.icontains(filters.company_name.strip(), autoescape=True))
        if filters.position_title:
            qry = qry.filter(Job.position_title.icontains(filters.position_title.strip(), autoescape=True))

    qry = _with_relations(qry).order_by(desc(Application.created_at))
    return paginate(qry, page=page, limit=limit)


def update_application(db: Session, application_id: str, user_id: str, data: dict[str, Any]) -> Application:
    """
    Partial update. `data` holds only the fields the client sent; an explicit
    `cv_id=None` unlinks the CV, a non-null one is ownership-checked.
    """
    if not data:
        raise ValidationError("At least one field must be provided for update")

    app_row = get_application_for_user(db, application_id, user_id)

    if data.get("job_id"):
        ownership.jobs.ensure_owned(db, data["job_id"], user_id)
        app_row.job_id = data["job_id"]

    if "cv_id" in data:
        cv_id = data["cv_id"] or None
        if cv_id:
            ownership.cvs.ensure_owned(db, cv_id, user_id)
        app_row.cv_id = cv_id

    if data.get("status") is not None:
        app_row.status = _status_value(data["status"])

    for key in _PLAIN_FIELDS:
        if key in data:
            setattr(app_row, key, data[key])

    db.commit()
    db.refresh(app_row)
    return app_row


def update_status(db: Session, application_id: str, user_id: str, status: ApplicationStatus | str) -> Application:
    return update_application(db, application_id, user_id, {"status": status})


def delete_application(db: Session, application_id: str, user_id: str) -> None:
    app_row = get_application_for_user(db, application_id, user_id)
    # Linked cover letters survive with application_id cleared.
    db.delete(app_row)
    db.commit()


def application_statistics(db: Session, user_id: str) -> dict[str, Any]:
    rows = (
        db.query(Application.status, func.count(Application.id))
        .filter(Application.user_id == user_id)
        .group_by(Application.status)
        .all()
    )
    counts = {status: 0 for status in ApplicationStatus}
    for status, n in rows:
        counts[ApplicationStatus(status)] = int(n or 0)

    total = sum(counts.values())
    offers = counts[ApplicationStatus.OFFER]
    interviews = counts[ApplicationStatus.INTERVIEW]

    return {
        "total": total,
        "by_status": {_STAT_KEYS[s]: counts[s] for s in ApplicationStatus},
        "success_rate": format_rate(offers, total),
        "interview_rate": format_rate(interviews + offers, total),
    }


def applications_by_status(db: Session, user_id: str) -> dict[str, list[Application]]:
    """
    Kanban view: every application of the user, bucketed by status.
    One query, partitioned in memory.
    """
    rows = (
        _with_relations(ownership.applications.query(db, user_id))
        .order_by(desc(Application.created_at))
        .all()
    )
    buckets: dict[str, list[Application]] = {s.value: [] for s in ApplicationStatus}
    for row in rows:
        buckets[row.status].append(row)
    return buckets
