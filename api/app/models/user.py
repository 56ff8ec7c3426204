"""User identity model."""

import uuid

from sqlalchemy import TIMESTAMP, Column, String, Text, Uuid, func

from app.database import Base


class User(Base):
    """
    Account identity.

    Profiles reference users by id; the profile service only reads the
    public ``name`` and ``avatar`` columns and deletes the row when the
    owner removes their account.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    email = Column(String, unique=True, nullable=False)
    avatar = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
