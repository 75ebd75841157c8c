from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, false, func
from sqlalchemy.orm import relationship

from app.core.base import Base, generate_uuid, utcnow


class CoverLetter(Base):
    """An "Anschreiben": a cover letter, optionally linked to one application."""

    __tablename__ = "cover_letters"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    # ✅ ownership
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    application_id = Column(
        String(36),
        ForeignKey("applications.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    is_template = Column(Boolean, nullable=False, default=False, server_default=false())

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    user = relationship("User", back_populates="cover_letters")
    application = relationship("Application", back_populates="cover_letters")
