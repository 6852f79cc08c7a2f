"""
AuthNotes - Authentication Models

SQLAlchemy model for users. A user signs in with a password, a linked
Google account, or both.
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, CheckConstraint
from datetime import datetime

from ..database import Base, new_id


class User(Base):
    """User model for authentication."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    google_id = Column(String, unique=True, index=True, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    avatar = Column(String, nullable=True)
    # Bumped to invalidate every bearer token issued before
    token_version = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(
            "hashed_password IS NOT NULL OR google_id IS NOT NULL",
            name="ck_users_has_credential",
        ),
    )

    @property
    def has_password(self) -> bool:
        return self.hashed_password is not None
