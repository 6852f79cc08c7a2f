"""Pytest fixtures for AuthNotes API tests.

Every API test runs twice: once against a throwaway in-memory SQLite
database and once against the in-process MemoryStore. Google ID tokens are
checked by a fake verifier so no network access is needed.
"""
import os

# Settings are read at import time, so configure the environment first
os.environ["AUTHNOTES_SECRET_KEY"] = "test-jwt-secret-for-testing-only"
os.environ["AUTHNOTES_GOOGLE_CLIENT_ID"] = "test-client.apps.googleusercontent.com"
os.environ["AUTHNOTES_RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTHNOTES_BCRYPT_ROUNDS"] = "10"
os.environ["AUTHNOTES_DATABASE_URL"] = "sqlite://"
os.environ["AUTHNOTES_LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.dependencies import get_google_verifier
from app.auth.schemas import VerifiedIdentity
from app.database import Base
from app.errors import InvalidOAuthTokenError
from app.main import app
from app.storage.factory import get_repositories
from app.storage.memory import MemoryStore
from app.storage.sql import SqlRepositories

VALID_PASSWORD = "Password123"


class FakeGoogleVerifier:
    """Stands in for GoogleIdTokenVerifier; knows a fixed set of tokens."""

    def __init__(self):
        self.identities = {}

    def register(self, token, subject, email, name=None, picture=None):
        self.identities[token] = VerifiedIdentity(
            subject=subject, email=email, name=name, picture=picture
        )

    def is_configured(self):
        return True

    def verify(self, token):
        identity = self.identities.get(token)
        if identity is None:
            raise InvalidOAuthTokenError()
        return identity


@pytest.fixture
def sql_engine():
    """Fresh in-memory SQLite database shared by all sessions of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(params=["sql", "memory"])
def repositories_provider(request, sql_engine):
    """Replacement for the get_repositories dependency."""
    if request.param == "memory":
        memory_store = MemoryStore()

        def provide():
            yield memory_store
    else:
        TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=sql_engine)

        def provide():
            db = TestingSession()
            try:
                yield SqlRepositories(db)
            finally:
                db.close()

    return provide


@pytest.fixture
def repos(repositories_provider):
    """Direct access to the same store the API is using."""
    provider = repositories_provider()
    yield next(provider)
    provider.close()


@pytest.fixture
def google_verifier():
    return FakeGoogleVerifier()


@pytest.fixture
def client(repositories_provider, google_verifier):
    app.dependency_overrides[get_repositories] = repositories_provider
    app.dependency_overrides[get_google_verifier] = lambda: google_verifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    """POST /api/auth/signup with sensible defaults."""
    def _signup(email="alice@example.com", name="Alice", password=VALID_PASSWORD, **extra):
        payload = {"name": name, "email": email, "password": password}
        payload.update(extra)
        return client.post("/api/auth/signup", json=payload)
    return _signup


@pytest.fixture
def auth_headers(signup):
    """Sign a user up and return bearer headers for them."""
    def _headers(email="alice@example.com", name="Alice"):
        response = signup(email=email, name=name)
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _headers
