"""
AuthNotes - SQLAlchemy ORM models

Notes are owned by exactly one user; the owner never changes after creation.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from datetime import datetime

from .database import Base, new_id


class Note(Base):
    __tablename__ = "notes"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
