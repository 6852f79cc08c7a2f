"""
AuthNotes - Centralized rate limiting configuration.

All rate limit decorators should import `limiter` from this module.
The limiter keys on client IP address.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

# --- Rate limit constants ---

# Auth endpoints (signup, login, google): strict, slows credential guessing
RATE_LIMIT_AUTH = "5/minute"

# Note writes (create, update, delete): moderate
RATE_LIMIT_GENERAL = "30/minute"

# Read-heavy endpoints (list, profile): generous, 1/sec sustained
RATE_LIMIT_READ = "60/minute"
