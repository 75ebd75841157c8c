# app/services/ownership.py
"""
Owner-scoped data access shared by every user-owned resource.

Each resource kind gets one `OwnedRepository`, parameterized by its model and
by the not-found error for that kind. All reads, updates and deletes go through
`query()`/`get()`, so a record is only ever visible to the user whose id is in
`user_id`. A record that belongs to someone else is reported exactly like a
record that does not exist.
"""
from __future__ import annotations

from typing import Any, Generic, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from app.core.errors import (
    ApplicationNotFound,
    CoverLetterNotFound,
    CVNotFound,
    JobNotFound,
    NotFoundError,
)
from app.models.application import Application
from app.models.cover_letter import CoverLetter
from app.models.cv import CV
from app.models.job import Job

ModelT = TypeVar("ModelT")


class OwnedRepository(Generic[ModelT]):
    def __init__(self, model: Type[ModelT], not_found: Type[NotFoundError]) -> None:
        self.model = model
        self.not_found = not_found

    def query(self, db: Session, owner_id: str) -> Query:
        return db.query(self.model).filter(self.model.user_id == owner_id)

    def get(self, db: Session, record_id: str, owner_id: str) -> ModelT:
        obj = self.query(db, owner_id).filter(self.model.id == record_id).first()
        if obj is None:
            raise self.not_found()
        return obj

    def ensure_owned(self, db: Session, record_id: str, owner_id: str) -> None:
        """
        Re-validate a reference taken from client input (e.g. an application's
        cvId). Raises this kind's not-found error when absent or foreign.
        """
        hit = (
            db.query(self.model.id)
            .filter(self.model.id == record_id, self.model.user_id == owner_id)
            .first()
        )
        if hit is None:
            raise self.not_found()

    def add(self, db: Session, owner_id: str, **fields: Any) -> ModelT:
        obj = self.model(**fields)
        obj.user_id = owner_id  # ✅ ownership always comes from the caller
        db.add(obj)
        return obj

    def count(self, db: Session, owner_id: str, *criteria) -> int:
        qry = db.query(func.count(self.model.id)).filter(self.model.user_id == owner_id)
        if criteria:
            qry = qry.filter(*criteria)
        return int(qry.scalar() or 0)


jobs = OwnedRepository(Job, JobNotFound)
applications = OwnedRepository(Application, ApplicationNotFound)
cvs = OwnedRepository(CV, CVNotFound)
cover_letters = OwnedRepository(CoverLetter, CoverLetterNotFound)
