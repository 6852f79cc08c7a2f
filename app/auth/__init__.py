"""
AuthNotes - Authentication Module

Password and Google sign-in with stateless JWT bearer tokens.

Usage:
    from app.auth.dependencies import get_current_user
    from app.auth import User

    @router.get("/protected")
    def protected_route(current_user: User = Depends(get_current_user)):
        return {"user_id": current_user.id}

Configuration (environment variables):
    AUTHNOTES_SECRET_KEY=<key>             - JWT signing key (required)
    AUTHNOTES_ACCESS_TOKEN_EXPIRE_DAYS=7
    AUTHNOTES_GOOGLE_CLIENT_ID=<client id> - enables Google sign-in

The router and dependencies are imported from their modules directly;
they pull in the storage layer, which itself imports the User model.
"""

# Models
from .models import User

# Building blocks
from .passwords import PasswordHasher, check_password_strength
from .tokens import TokenService
from .oauth import GoogleIdTokenVerifier

# Service
from .service import AuthService, AuthResult

__all__ = [
    # Models
    "User",
    # Building blocks
    "PasswordHasher",
    "check_password_strength",
    "TokenService",
    "GoogleIdTokenVerifier",
    # Service
    "AuthService",
    "AuthResult",
]
