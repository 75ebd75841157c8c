from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, false, func, text
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from app.core.base import Base, generate_uuid, utcnow


class CV(Base):
    __tablename__ = "cvs"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    # ✅ ownership
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(200), nullable=False)

    # Structured sections, stored as JSON documents.
    personal_info = Column(JSON, nullable=False)
    experience = Column(JSON, nullable=False, default=list)
    education = Column(JSON, nullable=False, default=list)
    skills = Column(JSON, nullable=False, default=list)
    languages = Column(JSON, nullable=False, default=list)

    is_default = Column(Boolean, nullable=False, default=False, server_default=false())

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    user = relationship("User", back_populates="cvs")

    # No delete cascade: deleting a CV nulls applications.cv_id.
    applications = relationship(
        "Application",
        back_populates="cv",
        order_by="desc(Application.created_at)",
    )


# At most one default CV per user, enforced by the store itself.
Index(
    "uq_cvs_one_default_per_user",
    CV.user_id,
    unique=True,
    postgresql_where=text("is_default"),
    sqlite_where=text("is_default = 1"),
)
