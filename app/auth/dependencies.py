"""
AuthNotes - Authentication Dependencies

FastAPI dependencies for route protection and service wiring.

Usage in routers:
    from ..auth.dependencies import get_current_user

    @router.get("/protected")
    def protected_route(current_user: User = Depends(get_current_user)):
        return {"user_id": current_user.id}

The resolved user is handed to the endpoint as a parameter; nothing is
stored on the request object.
"""
from functools import lru_cache
from typing import Optional
import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..errors import AuthenticationError
from ..storage.base import Repositories
from ..storage.factory import get_repositories
from .models import User
from .oauth import GoogleIdTokenVerifier
from .passwords import PasswordHasher
from .service import AuthService
from .tokens import TokenService

logger = logging.getLogger("authnotes.auth")

# auto_error=False allows us to answer missing tokens with our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


# -----------------------------------------------------------------------------
# Service Wiring
# -----------------------------------------------------------------------------

@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


@lru_cache
def get_token_service() -> TokenService:
    return TokenService()


@lru_cache
def get_google_verifier() -> GoogleIdTokenVerifier:
    return GoogleIdTokenVerifier()


def get_auth_service(
    repos: Repositories = Depends(get_repositories),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
    google: GoogleIdTokenVerifier = Depends(get_google_verifier),
) -> AuthService:
    """Build the auth service for this request's repositories."""
    return AuthService(repos.users, hasher, tokens, google)


# -----------------------------------------------------------------------------
# Core Authentication Dependencies
# -----------------------------------------------------------------------------

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Get the current authenticated user from the bearer token.

    Requires "Authorization: Bearer <token>". The token's signature and
    expiry are checked, then its subject is looked up in the user store.

    Raises:
        AuthenticationError: 401 if the header is missing or the token is
            invalid, expired, revoked, or names a user that no longer exists
    """
    if credentials is None or not credentials.credentials:
        logger.debug("No token provided")
        raise AuthenticationError("No token provided")

    return auth_service.resolve_token(credentials.credentials)
