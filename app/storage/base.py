"""
Storage abstraction layer.

The auth and notes services only talk to these interfaces, so the same
service code runs against the SQL database or the in-process store.

Implementations:
- SqlRepositories    -> SQLAlchemy session (SQLite / PostgreSQL)
- MemoryStore        -> dicts guarded by a lock (demo mode, tests)
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from ..auth.models import User
    from ..models import Note


class UserRepository(ABC):
    """Credential store. Enforces email uniqueness."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Look up by normalized (trimmed, lowercased) email."""
        pass

    @abstractmethod
    def get_by_google_id(self, google_id: str) -> Optional[User]:
        pass

    @abstractmethod
    def add(self, user: User) -> User:
        """
        Insert a new user and return it with id and timestamps assigned.

        Raises:
            DuplicateResourceError: email already registered
            IdentityConflictError: Google subject already bound to another user
        """
        pass

    @abstractmethod
    def save(self, user: User) -> User:
        """
        Persist changes to an existing user.

        Raises:
            IdentityConflictError: Google subject already bound to another user
        """
        pass

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        pass

    @abstractmethod
    def count(self) -> int:
        pass


class NoteRepository(ABC):
    """Note store. Every lookup is scoped to the owning user."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> List[Note]:
        """Notes owned by the user, newest first."""
        pass

    @abstractmethod
    def get_owned(self, note_id: str, user_id: str) -> Optional[Note]:
        """Fetch a note by id and owner; None if absent or owned by someone else."""
        pass

    @abstractmethod
    def add(self, note: Note) -> Note:
        pass

    @abstractmethod
    def save(self, note: Note) -> Note:
        pass

    @abstractmethod
    def delete_owned(self, note_id: str, user_id: str) -> bool:
        pass


class Repositories:
    """The pair of repositories a request works with."""

    mode = "sql"

    def __init__(self, users: UserRepository, notes: NoteRepository):
        self.users = users
        self.notes = notes
