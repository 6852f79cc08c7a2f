"""
AuthNotes - Application configuration.

Centralized configuration using Pydantic Settings for environment variable management.

Environment Variables:
    All settings can be overridden via environment variables with AUTHNOTES_ prefix.

    Auth Settings:
        AUTHNOTES_SECRET_KEY=...             - JWT signing key (required, startup fails without it)
        AUTHNOTES_ACCESS_TOKEN_EXPIRE_DAYS=7 - Bearer token lifetime
        AUTHNOTES_GOOGLE_CLIENT_ID=...       - Google OAuth client id (enables /api/auth/google)

    Storage Settings:
        AUTHNOTES_DATABASE_URL=...           - SQLAlchemy URL (sqlite or postgresql)
        AUTHNOTES_STORAGE_BACKEND=sql        - "sql" or "memory"
"""
from pydantic_settings import BaseSettings
from typing import Optional


class AuthSettings(BaseSettings):
    """
    Authentication configuration settings.

    For production deployment:
        1. Generate a secret key: openssl rand -hex 32
        2. Set AUTHNOTES_SECRET_KEY to the generated key
        3. Optionally set AUTHNOTES_GOOGLE_CLIENT_ID for Google sign-in
    """
    secret_key: Optional[str] = None
    algorithm: str = "HS256"
    access_token_expire_days: int = 7
    bcrypt_rounds: int = 12

    # Google identity tokens are checked against this audience
    google_client_id: Optional[str] = None

    class Config:
        env_prefix = "AUTHNOTES_"
        env_file = ".env"
        extra = "ignore"

    def require_secret_key(self) -> str:
        """Return the signing secret, raising if it is not configured."""
        if not self.secret_key or not self.secret_key.strip():
            raise RuntimeError(
                "AUTHNOTES_SECRET_KEY is not set. Generate one with "
                "`openssl rand -hex 32` and export it before starting the server."
            )
        return self.secret_key


class Settings(BaseSettings):
    """Combined application settings."""
    auth: AuthSettings = AuthSettings()

    # CORS allowed origins (comma-separated, e.g. "http://localhost:5173,https://notes.example.com")
    allowed_origins: str = "*"

    # Storage: "sql" uses database_url, "memory" keeps everything in-process
    storage_backend: str = "sql"

    # Database
    database_url: str = "sqlite:///./data/authnotes.db"

    # Database connection pool (PostgreSQL only)
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800

    # Database retry settings
    db_retry_max_attempts: int = 3
    db_retry_base_delay: float = 0.1

    rate_limit_enabled: bool = True
    log_level: str = "INFO"

    class Config:
        env_prefix = "AUTHNOTES_"
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()
