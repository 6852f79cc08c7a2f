"""
SQLAlchemy-backed repositories.

One instance wraps one request-scoped Session. Integrity violations on
insert surface as DuplicateResourceError; lost connections as UpstreamError.
"""
import logging
from functools import wraps
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ..auth.models import User
from ..errors import DuplicateResourceError, IdentityConflictError, UpstreamError
from ..models import Note
from .base import NoteRepository, Repositories, UserRepository

logger = logging.getLogger("authnotes.storage")


def _store_errors(func):
    """Roll back and translate connection failures into UpstreamError."""
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except OperationalError as exc:
            self.db.rollback()
            logger.error("Database operation %s failed: %s", func.__name__, exc)
            raise UpstreamError("Database unavailable")

    return wrapper


class SqlUserRepository(UserRepository):

    def __init__(self, db: Session):
        self.db = db

    @_store_errors
    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    @_store_errors
    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    @_store_errors
    def get_by_google_id(self, google_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.google_id == google_id).first()

    @_store_errors
    def add(self, user: User) -> User:
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # Both email and google_id are unique; report the one that clashed
            if self.get_by_email(user.email) is not None:
                raise DuplicateResourceError()
            raise IdentityConflictError()
        self.db.refresh(user)
        return user

    @_store_errors
    def save(self, user: User) -> User:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise IdentityConflictError()
        self.db.refresh(user)
        return user

    @_store_errors
    def delete(self, user_id: str) -> bool:
        deleted = self.db.query(User).filter(User.id == user_id).delete()
        self.db.commit()
        return deleted > 0

    @_store_errors
    def count(self) -> int:
        return self.db.query(User).count()


class SqlNoteRepository(NoteRepository):

    def __init__(self, db: Session):
        self.db = db

    def _user_query(self, user_id: str):
        return self.db.query(Note).filter(Note.user_id == user_id)

    @_store_errors
    def list_for_user(self, user_id: str) -> List[Note]:
        return self._user_query(user_id).order_by(Note.created_at.desc()).all()

    @_store_errors
    def get_owned(self, note_id: str, user_id: str) -> Optional[Note]:
        return self._user_query(user_id).filter(Note.id == note_id).first()

    @_store_errors
    def add(self, note: Note) -> Note:
        self.db.add(note)
        self.db.commit()
        self.db.refresh(note)
        return note

    @_store_errors
    def save(self, note: Note) -> Note:
        self.db.commit()
        self.db.refresh(note)
        return note

    @_store_errors
    def delete_owned(self, note_id: str, user_id: str) -> bool:
        deleted = self._user_query(user_id).filter(Note.id == note_id).delete()
        self.db.commit()
        return deleted > 0


class SqlRepositories(Repositories):
    mode = "sql"

    def __init__(self, db: Session):
        self.db = db
        super().__init__(SqlUserRepository(db), SqlNoteRepository(db))
