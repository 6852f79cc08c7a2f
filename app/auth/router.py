"""
AuthNotes - Authentication Router

API endpoints for user authentication.

Endpoints:
    POST /api/auth/signup       - Email/password registration -> token
    POST /api/auth/login        - Email/password login -> token
    POST /api/auth/google       - Google ID token login -> token
    GET  /api/auth/profile      - Current user
    POST /api/auth/logout-all   - Revoke every token of the current user
    GET  /api/auth/status       - Auth configuration summary
"""
from fastapi import APIRouter, Depends, Request, status
import logging

from ..config import settings
from ..rate_limit import limiter, RATE_LIMIT_AUTH, RATE_LIMIT_READ
from ..schemas import MessageResponse
from .dependencies import get_auth_service, get_current_user, get_google_verifier
from .models import User
from .oauth import GoogleIdTokenVerifier
from .schemas import (
    SignupRequest, LoginRequest, GoogleLoginRequest,
    AuthResponse, ProfileResponse, AuthStatusResponse,
    UserResponse,
)
from .service import AuthResult, AuthService

logger = logging.getLogger("authnotes.auth")
router = APIRouter()


# -----------------------------------------------------------------------------
# Registration & Login
# -----------------------------------------------------------------------------

@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_AUTH)
def signup(
    request: Request,
    data: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new user with email and password.

    Requires:
    - Non-empty name and a valid email address
    - Password with at least 8 characters, including uppercase, lowercase, and number
    """
    result = auth_service.signup(data)
    return _auth_response("User created successfully", result)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(RATE_LIMIT_AUTH)
def login(
    request: Request,
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Login with email and password.

    Every failure answers the same "Invalid credentials" message.
    """
    result = auth_service.login(data)
    return _auth_response("Login successful", result)


@router.post("/google", response_model=AuthResponse)
@limiter.limit(RATE_LIMIT_AUTH)
def google_login(
    request: Request,
    data: GoogleLoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Login with a Google ID token.

    Creates the account on first use, or links Google to an existing
    account with the same email.
    """
    result = auth_service.google_login(data.token)
    return _auth_response("Google authentication successful", result)


# -----------------------------------------------------------------------------
# Current User
# -----------------------------------------------------------------------------

@router.get("/profile", response_model=ProfileResponse)
@limiter.limit(RATE_LIMIT_READ)
def get_profile(
    request: Request,
    current_user: User = Depends(get_current_user),
):
    """Get the current authenticated user's profile."""
    return ProfileResponse(user=UserResponse.model_validate(current_user))


@router.post("/logout-all", response_model=MessageResponse)
def logout_all(
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Logout from all devices.

    Every token issued to this user so far stops working, including the
    one used for this request.
    """
    auth_service.revoke_all_tokens(current_user)
    return MessageResponse(message="Logged out from all devices")


@router.get("/status", response_model=AuthStatusResponse)
def get_auth_status(
    request: Request,
    google: GoogleIdTokenVerifier = Depends(get_google_verifier),
):
    """
    Get authentication system status.

    Lets the client decide whether to show the Google button.
    """
    memory_store = getattr(request.app.state, "memory_store", None)
    return AuthStatusResponse(
        google_enabled=google.is_configured(),
        token_expire_days=settings.auth.access_token_expire_days,
        storage=memory_store.mode if memory_store is not None else "sql",
    )


# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------

def _auth_response(message: str, result: AuthResult) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=result.token,
        user=UserResponse.model_validate(result.user),
    )
