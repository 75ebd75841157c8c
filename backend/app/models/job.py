from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, func, true
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from app.core.base import Base, generate_uuid, utcnow


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    # ✅ ownership
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    company_name = Column(String(200), nullable=False)
    position_title = Column(String(200), nullable=False)
    job_description = Column(Text, nullable=True)
    location = Column(String(200), nullable=True)
    salary_range = Column(String(100), nullable=True)

    # Ordered list of technology names, e.g. ["Python", "PostgreSQL"].
    tech_stack = Column(JSON, nullable=False, default=list)

    source_url = Column(String(500), nullable=True)
    source_platform = Column(String(100), nullable=True)
    is_saved = Column(Boolean, nullable=False, default=True, server_default=true())

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    user = relationship("User", back_populates="jobs")

    # Deleting a job deletes its applications.
    applications = relationship(
        "Application",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="desc(Application.created_at)",
    )
