"""
Storage selection and the per-request repositories dependency.

The SQL database is the normal backend. If it cannot be reached at startup
the process keeps running on the in-memory store ("demo" mode) instead of
exiting; data then lives only as long as the process.
"""
import logging
import os
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import make_url

from ..config import settings
from ..database import SessionLocal, check_connection, init_db
from .base import Repositories
from .memory import MemoryStore
from .sql import SqlRepositories

logger = logging.getLogger("authnotes.storage")


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        directory = os.path.dirname(url.database)
        if directory:
            os.makedirs(directory, exist_ok=True)


def setup_storage(backend: Optional[str] = None, bind=None) -> Optional[MemoryStore]:
    """
    Prepare the configured storage backend.

    Returns a MemoryStore when running without the database (configured
    "memory" backend, or database unreachable), None when the SQL store is ready.
    """
    backend = backend or settings.storage_backend
    if backend == "memory":
        logger.info("Using in-memory storage (AUTHNOTES_STORAGE_BACKEND=memory)")
        return MemoryStore()

    try:
        if bind is None:
            _ensure_sqlite_directory(settings.database_url)
        check_connection(bind)
        init_db(bind)
    except (SQLAlchemyError, OSError) as exc:
        logger.warning(
            "Database unavailable (%s). Running in demo mode with in-memory storage; "
            "data will not survive a restart.", exc
        )
        return MemoryStore()

    logger.info("Database ready")
    return None


def get_repositories(request: Request) -> Iterator[Repositories]:
    """FastAPI dependency yielding the repositories for this request."""
    memory_store = getattr(request.app.state, "memory_store", None)
    if memory_store is not None:
        yield memory_store
        return

    db = SessionLocal()
    try:
        yield SqlRepositories(db)
    finally:
        db.close()
