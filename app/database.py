"""
AuthNotes - Database engine, sessions and connection checks.

SQLite is the local default; any other URL (PostgreSQL in hosted setups)
gets a pooled engine. Transient connection failures are retried with
exponential backoff before giving up.
"""
import logging
import random
import time
import uuid
from contextlib import contextmanager
from functools import wraps

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

logger = logging.getLogger("authnotes.database")

Base = declarative_base()

MAX_RETRY_DELAY = 2.0


def new_id() -> str:
    """Opaque store-assigned identifier for users and notes."""
    return str(uuid.uuid4())


def _sqlite_engine(url: str):
    engine = create_engine(url, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _configure_connection(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        # Readers don't block the writer; writers wait instead of failing
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    return engine


def _pooled_engine(url: str):
    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
    )


def create_app_engine(database_url: str = None):
    """Build the engine for the configured database URL."""
    url = database_url or settings.database_url
    backend = make_url(url).get_backend_name()

    if backend == "sqlite":
        engine = _sqlite_engine(url)
    else:
        engine = _pooled_engine(url)

    logger.info("Created %s engine", backend)
    return engine


engine = create_app_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _is_transient_error(exc: Exception) -> bool:
    """Lost connections and lock timeouts are worth retrying; constraint violations are not."""
    if isinstance(exc, IntegrityError):
        return False
    return isinstance(exc, (OperationalError, DBAPIError))


def _backoff_delay(attempt: int) -> float:
    delay = min(settings.db_retry_base_delay * (2 ** attempt), MAX_RETRY_DELAY)
    return delay + random.uniform(0, delay * 0.5)


def with_retry(func):
    """Retry the wrapped call on transient database errors."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        attempts = settings.db_retry_max_attempts

        for attempt in range(attempts):
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                if not _is_transient_error(exc) or attempt == attempts - 1:
                    raise
                delay = _backoff_delay(attempt)
                logger.warning(
                    "Transient DB error in %s (attempt %d/%d), retrying in %.2fs: %s",
                    func.__name__, attempt + 1, attempts, delay, exc
                )
                time.sleep(delay)

    return wrapper


@contextmanager
def session_scope():
    """
    Session for code running outside a request (CLI scripts).

    Usage:
        with session_scope() as db:
            SqlRepositories(db).users.get_by_email(...)
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@with_retry
def check_connection(bind=None) -> None:
    """Run a trivial query. Raises if the database is unreachable."""
    with (bind or engine).connect() as conn:
        conn.execute(text("SELECT 1"))


def init_db(bind=None):
    """
    Create any missing tables from model metadata.

    Runs at startup so a fresh SQLite file works out of the box. Schema
    changes on existing databases go through Alembic: `alembic upgrade head`
    """
    # Register both models on Base.metadata
    from . import models  # noqa: F401
    from .auth import models as auth_models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine, checkfirst=True)
