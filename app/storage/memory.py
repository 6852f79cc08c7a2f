"""
In-process storage for demo mode and tests.

Endpoints run in a threadpool, so every read and write takes the store's
lock. Callers get detached copies; changes only land through add()/save().
"""
import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional

from ..auth.models import User
from ..database import new_id
from ..errors import DuplicateResourceError, IdentityConflictError
from ..models import Note
from .base import NoteRepository, Repositories, UserRepository

logger = logging.getLogger("authnotes.storage")


def _clone(obj):
    """Detached copy of a model instance, column values only."""
    return type(obj)(**{column.key: getattr(obj, column.key) for column in obj.__table__.columns})


def _stamp(obj) -> None:
    now = datetime.utcnow()
    if obj.id is None:
        obj.id = new_id()
    if obj.created_at is None:
        obj.created_at = now
    if obj.updated_at is None:
        obj.updated_at = now


class MemoryUserRepository(UserRepository):

    def __init__(self, lock: threading.RLock):
        self._lock = lock
        self._users: Dict[str, User] = {}

    def _find(self, **criteria) -> Optional[User]:
        for user in self._users.values():
            if all(getattr(user, key) == value for key, value in criteria.items()):
                return user
        return None

    def _check_unique(self, user: User) -> None:
        other = self._find(email=user.email)
        if other is not None and other.id != user.id:
            raise DuplicateResourceError()
        if user.google_id:
            other = self._find(google_id=user.google_id)
            if other is not None and other.id != user.id:
                raise IdentityConflictError()

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return _clone(user) if user else None

    def get_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user = self._find(email=email)
            return _clone(user) if user else None

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        with self._lock:
            user = self._find(google_id=google_id)
            return _clone(user) if user else None

    def add(self, user: User) -> User:
        with self._lock:
            self._check_unique(user)
            _stamp(user)
            if user.token_version is None:
                user.token_version = 0
            self._users[user.id] = _clone(user)
            logger.debug("Stored user %s in memory", user.id)
            return user

    def save(self, user: User) -> User:
        with self._lock:
            if user.id not in self._users:
                raise KeyError(user.id)
            self._check_unique(user)
            self._users[user.id] = _clone(user)
            return user

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._users)


class MemoryNoteRepository(NoteRepository):

    def __init__(self, lock: threading.RLock):
        self._lock = lock
        self._notes: Dict[str, Note] = {}

    def list_for_user(self, user_id: str) -> List[Note]:
        with self._lock:
            # Newest insertion first so equal timestamps keep newest-first order
            owned = [_clone(n) for n in reversed(list(self._notes.values())) if n.user_id == user_id]
        return sorted(owned, key=lambda n: n.created_at, reverse=True)

    def get_owned(self, note_id: str, user_id: str) -> Optional[Note]:
        with self._lock:
            note = self._notes.get(note_id)
            if note is None or note.user_id != user_id:
                return None
            return _clone(note)

    def add(self, note: Note) -> Note:
        with self._lock:
            _stamp(note)
            self._notes[note.id] = _clone(note)
            return note

    def save(self, note: Note) -> Note:
        with self._lock:
            stored = self._notes.get(note.id)
            if stored is None:
                raise KeyError(note.id)
            # Owner is fixed at creation
            note.user_id = stored.user_id
            self._notes[note.id] = _clone(note)
            return note

    def delete_owned(self, note_id: str, user_id: str) -> bool:
        with self._lock:
            note = self._notes.get(note_id)
            if note is None or note.user_id != user_id:
                return False
            del self._notes[note_id]
            return True


class MemoryStore(Repositories):
    """Users and notes held in process memory. Lost on restart."""
    mode = "memory"

    def __init__(self):
        lock = threading.RLock()
        super().__init__(MemoryUserRepository(lock), MemoryNoteRepository(lock))
