"""
AuthNotes - Authentication Service

Signup, password login, Google login and profile lookup on top of the
user repository, the password hasher, the token service and the Google
ID token verifier.

Features:
- Bcrypt password hashing
- Stateless JWT bearer tokens (7 days)
- Google account linking by verified email
- Revoke-all via per-user token version
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import logging

from ..errors import AuthenticationError, DuplicateResourceError, InvalidCredentialsError, ValidationError
from ..storage.base import UserRepository
from .models import User
from .oauth import GoogleIdTokenVerifier
from .passwords import PasswordHasher, check_password_strength
from .schemas import LoginRequest, SignupRequest
from .tokens import TokenService

logger = logging.getLogger("authnotes.auth")


@dataclass
class AuthResult:
    user: User
    token: str


class AuthService:
    """
    Authentication orchestration.

    Provides:
    - User creation with password
    - Credential checks that never reveal which part was wrong
    - Google find-or-create with account linking
    - Token resolution back to a user
    """

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        google: Optional[GoogleIdTokenVerifier] = None,
    ):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.google = google

    # -------------------------------------------------------------------------
    # Signup & Login
    # -------------------------------------------------------------------------

    def signup(self, data: SignupRequest) -> AuthResult:
        """
        Create a password account and issue a token.

        Raises:
            ValidationError: password does not meet the policy
            DuplicateResourceError: email already registered
        """
        if self.users.get_by_email(data.email):
            raise DuplicateResourceError()

        strength = check_password_strength(data.password)
        if not strength["valid"]:
            raise ValidationError(
                f"Weak password: {strength['errors'][0]}",
                errors=[{"param": "password", "msg": msg} for msg in strength["errors"]],
            )

        user = self.users.add(User(
            name=data.name,
            email=data.email,
            hashed_password=self.hasher.hash(data.password),
            date_of_birth=data.date_of_birth,
            token_version=0,
        ))

        logger.info("Created new user: %s", user.id)
        token, _ = self.tokens.issue(user)
        return AuthResult(user=user, token=token)

    def login(self, data: LoginRequest) -> AuthResult:
        """
        Authenticate by email and password.

        Unknown email, OAuth-only account and wrong password all raise the
        same InvalidCredentialsError.
        """
        user = self.users.get_by_email(data.email)

        if not user:
            logger.debug("Login for unknown email")
            raise InvalidCredentialsError()

        if not user.hashed_password:
            logger.debug("User %s is OAuth-only (no password)", user.id)
            raise InvalidCredentialsError()

        if not self.hasher.verify(data.password, user.hashed_password):
            logger.debug("Invalid password for user %s", user.id)
            raise InvalidCredentialsError()

        logger.info("User authenticated: %s", user.id)
        token, _ = self.tokens.issue(user)
        return AuthResult(user=user, token=token)

    # -------------------------------------------------------------------------
    # Google Sign-In
    # -------------------------------------------------------------------------

    def google_login(self, id_token: str) -> AuthResult:
        """
        Sign in with a Google ID token.

        An account already bound to the Google subject signs in even if
        the Google email has changed since. Otherwise, if no user has the
        token's email, a new one is created bound to the subject. If one
        exists without a Google binding, the subject and avatar are linked
        to it; its password is kept.
        """
        if self.google is None:
            raise RuntimeError("AuthService was built without a Google verifier")

        identity = self.google.verify(id_token)
        user = self.users.get_by_google_id(identity.subject)
        if user:
            logger.debug("Google login for linked user %s", user.id)
            token, _ = self.tokens.issue(user)
            return AuthResult(user=user, token=token)

        user = self.users.get_by_email(identity.email)

        if not user:
            user = self.users.add(User(
                name=identity.name or "Google User",
                email=identity.email,
                google_id=identity.subject,
                avatar=identity.picture,
                token_version=0,
            ))
            logger.info("Created new Google user: %s", user.id)
        elif not user.google_id:
            user.google_id = identity.subject
            user.avatar = identity.picture
            user.updated_at = datetime.utcnow()
            user = self.users.save(user)
            logger.info("Linked Google account to user %s", user.id)
        else:
            logger.debug("Google login for existing user %s", user.id)

        token, _ = self.tokens.issue(user)
        return AuthResult(user=user, token=token)

    # -------------------------------------------------------------------------
    # Token Resolution & Revocation
    # -------------------------------------------------------------------------

    def resolve_token(self, token: str) -> User:
        """
        Turn a bearer token into the user it was issued for.

        Raises:
            AuthenticationError: invalid/expired token, unknown user, or revoked
        """
        claims = self.tokens.verify(token)

        user = self.users.get_by_id(claims.user_id)
        if not user:
            logger.warning("Token valid but user %s not found", claims.user_id)
            raise AuthenticationError("User not found")

        if claims.version != (user.token_version or 0):
            logger.debug("Token for user %s was revoked", user.id)
            raise AuthenticationError("Token has been revoked")

        return user

    def revoke_all_tokens(self, user: User) -> User:
        """Invalidate every token issued so far for this user."""
        user.token_version = (user.token_version or 0) + 1
        user.updated_at = datetime.utcnow()
        user = self.users.save(user)
        logger.info("Revoked all tokens for user %s", user.id)
        return user

    def set_password(self, user: User, new_password: str) -> User:
        """Replace a user's password and revoke outstanding tokens."""
        strength = check_password_strength(new_password)
        if not strength["valid"]:
            raise ValidationError(f"Weak password: {strength['errors'][0]}")

        user.hashed_password = self.hasher.hash(new_password)
        user = self.revoke_all_tokens(user)
        logger.info("Password updated for user %s", user.id)
        return user
