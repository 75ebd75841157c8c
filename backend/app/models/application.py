import enum

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship

from app.core.base import Base, generate_uuid, utcnow


class ApplicationStatus(str, enum.Enum):
    # No transition rules: any status may follow any other.
    TO_APPLY = "TO_APPLY"
    APPLIED = "APPLIED"
    INTERVIEW = "INTERVIEW"
    OFFER = "OFFER"
    REJECTED = "REJECTED"


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    # ✅ ownership
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    job_id = Column(
        String(36),
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    cv_id = Column(
        String(36),
        ForeignKey("cvs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    status = Column(
        String(20),
        nullable=False,
        default=ApplicationStatus.TO_APPLY.value,
        server_default=ApplicationStatus.TO_APPLY.value,
        index=True,
    )
    applied_date = Column(DateTime(timezone=True), nullable=True)
    follow_up_date = Column(DateTime(timezone=True), nullable=True)
    interview_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    contact_person = Column(String(200), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    user = relationship("User", back_populates="applications")
    job = relationship("Job", back_populates="applications")
    cv = relationship("CV", back_populates="applications")

    # No delete cascade: deleting an application nulls cover_letters.application_id.
    cover_letters = relationship(
        "CoverLetter",
        back_populates="application",
        order_by="desc(CoverLetter.created_at)",
    )
