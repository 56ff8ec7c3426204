"""Profile aggregate model."""

import uuid

from sqlalchemy import (
    TIMESTAMP,
    Column,
    ForeignKey,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)

from app.database import Base, JSONDocument


class Profile(Base):
    """
    Developer profile, one per user.

    ``experience`` and ``education`` are ordered lists of entry documents
    (newest first), each carrying its own server-assigned ``id``. They are
    stored inline so the whole aggregate is read and written as one row.
    """

    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    company = Column(Text)
    website = Column(Text)
    location = Column(Text)
    bio = Column(Text)
    status = Column(Text, nullable=False)
    github_username = Column(Text)
    skills = Column(JSONDocument, nullable=False, default=list)
    social = Column(JSONDocument, nullable=False, default=dict)
    experience = Column(JSONDocument, nullable=False, default=list)
    education = Column(JSONDocument, nullable=False, default=list)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_profiles_user_id"),
    )
