"""
AuthNotes - Bearer token issuance and verification.

Tokens are HS256 JWTs signed with the process-wide secret. Nothing is
stored server-side: the token carries the user id, the user's token
version and an expiry. Bumping a user's token_version invalidates every
token issued before.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
import logging

from jose import JWTError, ExpiredSignatureError, jwt

from ..config import settings
from ..errors import AuthenticationError
from .models import User
from .schemas import TokenClaims

logger = logging.getLogger("authnotes.auth")

TOKEN_TYPE = "access"


class TokenService:
    """Mints and checks signed bearer tokens."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_days: Optional[int] = None,
    ):
        self.secret_key = secret_key or settings.auth.require_secret_key()
        self.algorithm = algorithm or settings.auth.algorithm
        self.expire_days = expire_days if expire_days is not None else settings.auth.access_token_expire_days

    def issue(self, user: User, expires_delta: Optional[timedelta] = None) -> Tuple[str, datetime]:
        """
        Create a signed token for a user.

        Returns:
            Tuple of (token_string, expiration_datetime)
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else timedelta(days=self.expire_days))

        payload = {
            "sub": str(user.id),
            "ver": user.token_version or 0,
            "iat": now,
            "exp": expire,
            "type": TOKEN_TYPE,
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

        logger.debug("Issued token for user %s", user.id)
        return token, expire

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature, expiry and shape of a token.

        Raises:
            AuthenticationError: on any failure
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.debug("Token expired")
            raise AuthenticationError("Token has expired")
        except JWTError as e:
            logger.debug("Token verification failed: %s", e)
            raise AuthenticationError("Invalid token")

        if payload.get("type") != TOKEN_TYPE:
            logger.warning("Token is not an access token")
            raise AuthenticationError("Invalid token")

        user_id = payload.get("sub")
        if not user_id or "exp" not in payload:
            logger.warning("Token missing required claims")
            raise AuthenticationError("Invalid token")

        return TokenClaims(
            user_id=user_id,
            version=int(payload.get("ver", 0)),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
