"""Tests for the repositories, storage selection and demo-mode fallback."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker

from app.auth.models import User
from app.config import settings
from app.errors import DuplicateResourceError, IdentityConflictError
from app.main import app
from app.models import Note
from app.storage.factory import get_repositories, setup_storage
from app.storage.memory import MemoryStore
from app.storage.sql import SqlRepositories

from .conftest import VALID_PASSWORD


@pytest.fixture(params=["sql", "memory"])
def store(request, sql_engine):
    if request.param == "memory":
        yield MemoryStore()
        return
    db = sessionmaker(bind=sql_engine)()
    try:
        yield SqlRepositories(db)
    finally:
        db.close()


def _user(email="alice@example.com"):
    return User(name="Alice", email=email, hashed_password="$2b$10$hash", token_version=0)


class TestUserRepository:

    def test_add_assigns_id_and_timestamps(self, store):
        user = store.users.add(_user())

        assert user.id
        assert user.created_at is not None
        assert store.users.get_by_id(user.id).email == "alice@example.com"
        assert store.users.get_by_email("alice@example.com").id == user.id

    def test_unknown_user(self, store):
        assert store.users.get_by_id("missing") is None
        assert store.users.get_by_email("nobody@example.com") is None
        assert store.users.get_by_google_id("g-missing") is None

    def test_duplicate_email_is_reported_as_email_clash(self, store):
        store.users.add(_user())

        with pytest.raises(DuplicateResourceError) as exc_info:
            store.users.add(_user())

        assert exc_info.value.code == "EMAIL_EXISTS"

    def test_duplicate_google_subject(self, store):
        store.users.add(User(name="A", email="a@example.com", google_id="g-1", token_version=0))

        with pytest.raises(IdentityConflictError) as exc_info:
            store.users.add(User(name="B", email="b@example.com", google_id="g-1", token_version=0))

        assert exc_info.value.code == "IDENTITY_EXISTS"
        assert exc_info.value.message == "Another account already uses this Google identity"
        assert store.users.count() == 1

    def test_lookup_by_google_subject(self, store):
        user = store.users.add(User(name="A", email="a@example.com", google_id="g-1", token_version=0))

        assert store.users.get_by_google_id("g-1").id == user.id

    def test_count(self, store):
        assert store.users.count() == 0
        store.users.add(_user("alice@example.com"))
        store.users.add(_user("bob@example.com"))

        assert store.users.count() == 2

    def test_save_persists_changes(self, store):
        user = store.users.add(_user())

        user.token_version = 3
        store.users.save(user)

        assert store.users.get_by_id(user.id).token_version == 3

    def test_delete(self, store):
        user = store.users.add(_user())

        assert store.users.delete(user.id) is True
        assert store.users.delete(user.id) is False
        assert store.users.get_by_id(user.id) is None


class TestNoteRepository:

    def test_lookups_are_scoped_to_owner(self, store):
        alice = store.users.add(_user("alice@example.com"))
        bob = store.users.add(_user("bob@example.com"))
        note = store.notes.add(Note(title="t", content="c", user_id=alice.id))

        assert store.notes.get_owned(note.id, alice.id).title == "t"
        assert store.notes.get_owned(note.id, bob.id) is None
        assert store.notes.list_for_user(bob.id) == []
        assert store.notes.delete_owned(note.id, bob.id) is False
        assert store.notes.delete_owned(note.id, alice.id) is True
        assert store.notes.list_for_user(alice.id) == []


class TestMemoryStore:

    def test_returns_detached_copies(self):
        store = MemoryStore()
        user = store.users.add(_user())

        copy = store.users.get_by_id(user.id)
        copy.name = "Mallory"

        assert store.users.get_by_id(user.id).name == "Alice"

    def test_note_owner_is_fixed(self):
        store = MemoryStore()
        note = store.notes.add(Note(title="t", content="c", user_id="owner"))

        note.user_id = "someone-else"
        store.notes.save(note)

        assert store.notes.get_owned(note.id, "owner") is not None
        assert store.notes.get_owned(note.id, "someone-else") is None



class TestSetupStorage:

    def test_memory_backend(self):
        assert isinstance(setup_storage(backend="memory"), MemoryStore)

    def test_database_ready(self):
        engine = create_engine("sqlite://")

        assert setup_storage(backend="sql", bind=engine) is None
        assert {"users", "notes"} <= set(inspect(engine).get_table_names())

    def test_unreachable_database_falls_back_to_memory(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "db_retry_base_delay", 0.0)
        engine = create_engine(f"sqlite:///{tmp_path}/missing/dir/notes.db")

        assert isinstance(setup_storage(backend="sql", bind=engine), MemoryStore)


class TestDemoMode:

    @pytest.fixture
    def demo_client(self, monkeypatch):
        memory_store = MemoryStore()
        monkeypatch.setattr(app.state, "memory_store", memory_store, raising=False)
        app.dependency_overrides.pop(get_repositories, None)
        return TestClient(app), memory_store

    def test_health_reports_demo_mode(self, demo_client):
        client, _ = demo_client

        body = client.get("/api/health").json()

        assert body["status"] == "healthy"
        assert body["mode"] == "demo"
        assert body["storage"] == "memory"

    def test_requests_use_memory_store(self, demo_client):
        client, memory_store = demo_client

        response = client.post(
            "/api/auth/signup",
            json={"name": "Alice", "email": "alice@example.com", "password": VALID_PASSWORD},
        )

        assert response.status_code == 201
        assert memory_store.users.get_by_email("alice@example.com") is not None

    def test_health_reports_database_mode(self, monkeypatch):
        monkeypatch.setattr(app.state, "memory_store", None, raising=False)

        body = TestClient(app).get("/api/health").json()

        assert body["mode"] == "database"
        assert body["storage"] == "sql"


def test_security_headers():
    response = TestClient(app).get("/api/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
