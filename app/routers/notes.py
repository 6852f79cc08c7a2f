"""
AuthNotes - CRUD API for notes.

Every endpoint requires a bearer token and only ever sees the caller's
own notes.
"""
from fastapi import APIRouter, Depends, Request, status
from typing import List

from ..auth.dependencies import get_current_user
from ..auth.models import User
from ..rate_limit import limiter, RATE_LIMIT_GENERAL, RATE_LIMIT_READ
from ..schemas import MessageResponse, NoteResponse, NoteWrite
from ..services.notes import NotesService
from ..storage.base import Repositories
from ..storage.factory import get_repositories

router = APIRouter()


def get_notes_service(repos: Repositories = Depends(get_repositories)) -> NotesService:
    return NotesService(repos.notes)


@router.get("", response_model=List[NoteResponse])
@limiter.limit(RATE_LIMIT_READ)
def list_notes(
    request: Request,
    current_user: User = Depends(get_current_user),
    notes: NotesService = Depends(get_notes_service),
):
    """List the current user's notes, newest first."""
    return notes.list_notes(current_user)


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_GENERAL)
def create_note(
    request: Request,
    data: NoteWrite,
    current_user: User = Depends(get_current_user),
    notes: NotesService = Depends(get_notes_service),
):
    """Create a new note."""
    return notes.create_note(current_user, data)


@router.put("/{note_id}", response_model=NoteResponse)
@limiter.limit(RATE_LIMIT_GENERAL)
def update_note(
    request: Request,
    note_id: str,
    data: NoteWrite,
    current_user: User = Depends(get_current_user),
    notes: NotesService = Depends(get_notes_service),
):
    """Replace a note's title and content."""
    return notes.update_note(current_user, note_id, data)


@router.delete("/{note_id}", response_model=MessageResponse)
@limiter.limit(RATE_LIMIT_GENERAL)
def delete_note(
    request: Request,
    note_id: str,
    current_user: User = Depends(get_current_user),
    notes: NotesService = Depends(get_notes_service),
):
    """Delete a note."""
    notes.delete_note(current_user, note_id)
    return MessageResponse(message="Note deleted successfully")
