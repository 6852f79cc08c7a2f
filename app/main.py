"""
AuthNotes - FastAPI application entry point.

An authenticated note-taking API: sign up or sign in (password or Google),
then create, edit and delete private notes.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from datetime import datetime
import logging

from . import __version__
from .config import settings
from .errors import register_exception_handlers
from .rate_limit import limiter
from .routers import notes
from .auth.router import router as auth_router
from .storage.factory import setup_storage

# --- Logging Configuration ---
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("authnotes")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check the signing secret and open storage on startup."""
    logger.info("Starting AuthNotes application...")
    # A missing secret aborts startup
    settings.auth.require_secret_key()
    app.state.memory_store = setup_storage()
    logger.info("AuthNotes ready (%s storage)", _storage_mode(app))
    yield
    logger.info("Shutting down AuthNotes...")


def _storage_mode(app: FastAPI) -> str:
    memory_store = getattr(app.state, "memory_store", None)
    return memory_store.mode if memory_store is not None else "sql"


app = FastAPI(
    title="AuthNotes",
    description="Authenticated note-taking API - signup/login (password or Google) and private notes",
    version=__version__,
    lifespan=lifespan
)

# --- Rate Limiting ---
app.state.limiter = limiter

# --- Error Handling ---
register_exception_handlers(app)


# --- Security Headers Middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        return response


# --- Middleware ---
# Parse allowed origins from config
_allowed_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(notes.router, prefix="/api/notes", tags=["notes"])


# --- API Endpoints ---

@app.get("/api/health", tags=["system"])
async def health_check():
    """Health check endpoint for monitoring. mode is "demo" when running without the database."""
    storage = _storage_mode(app)
    return {
        "status": "healthy",
        "mode": "demo" if storage == "memory" else "database",
        "storage": storage,
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat()
    }
