"""
AuthNotes - Notes service.

CRUD over notes owned by one user. Notes belonging to anyone else are
reported as not found.
"""
from datetime import datetime
from typing import List
import logging

from ..auth.models import User
from ..errors import NotFoundError
from ..models import Note
from ..schemas import NoteWrite
from ..storage.base import NoteRepository

logger = logging.getLogger("authnotes.notes")


class NotesService:

    def __init__(self, notes: NoteRepository):
        self.notes = notes

    def list_notes(self, user: User) -> List[Note]:
        return self.notes.list_for_user(user.id)

    def get_note(self, user: User, note_id: str) -> Note:
        note = self.notes.get_owned(note_id, user.id)
        if note is None:
            raise NotFoundError("Note not found")
        return note

    def create_note(self, user: User, data: NoteWrite) -> Note:
        note = self.notes.add(Note(title=data.title, content=data.content, user_id=user.id))
        logger.info("User %s created note %s", user.id, note.id)
        return note

    def update_note(self, user: User, note_id: str, data: NoteWrite) -> Note:
        """Replace title and content; id, owner and created_at stay."""
        note = self.get_note(user, note_id)
        note.title = data.title
        note.content = data.content
        note.updated_at = datetime.utcnow()
        return self.notes.save(note)

    def delete_note(self, user: User, note_id: str) -> None:
        if not self.notes.delete_owned(note_id, user.id):
            raise NotFoundError("Note not found")
        logger.info("User %s deleted note %s", user.id, note_id)
