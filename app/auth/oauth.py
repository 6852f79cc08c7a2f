"""
AuthNotes - Google Sign-In verification.

The browser obtains a Google ID token (Google Identity Services) and posts it
to /api/auth/google. The token's signature is checked against Google's
published keys and its audience against our OAuth client id.

Setup:
    - Go to https://console.cloud.google.com/apis/credentials
    - Create an OAuth 2.0 Client ID (Web application)
    - Set AUTHNOTES_GOOGLE_CLIENT_ID in .env
"""
import logging
from typing import Optional

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from ..config import settings
from ..errors import InvalidOAuthTokenError, UpstreamError
from .schemas import VerifiedIdentity

logger = logging.getLogger("authnotes.auth")


class GoogleIdTokenVerifier:
    """Validates Google ID tokens and extracts the identity claims."""

    def __init__(self, client_id: Optional[str] = None, transport=None):
        self.client_id = client_id if client_id is not None else settings.auth.google_client_id
        self._transport = transport or google_requests.Request()

    def is_configured(self) -> bool:
        return bool(self.client_id)

    def verify(self, token: str) -> VerifiedIdentity:
        """
        Verify a Google ID token.

        Raises:
            InvalidOAuthTokenError: token rejected, or Google sign-in not configured
            UpstreamError: Google's key endpoint could not be reached
        """
        if not self.is_configured():
            raise InvalidOAuthTokenError(
                "Google sign-in is not configured. Set AUTHNOTES_GOOGLE_CLIENT_ID."
            )

        try:
            claims = id_token.verify_oauth2_token(token, self._transport, self.client_id)
        except google_exceptions.TransportError as e:
            raise UpstreamError(f"Could not reach Google to verify token: {e}")
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            logger.info("Rejected Google ID token: %s", e)
            raise InvalidOAuthTokenError()

        return extract_google_identity(claims)


def extract_google_identity(claims: dict) -> VerifiedIdentity:
    """
    Build a VerifiedIdentity from verified Google claims.

    Accounts are linked by email, so the email must be present and verified.
    """
    subject = claims.get("sub")
    email = claims.get("email")
    if not subject or not email:
        raise InvalidOAuthTokenError("Google token is missing the subject or email claim")
    if str(claims.get("email_verified", True)).lower() == "false":
        raise InvalidOAuthTokenError("Google account email is not verified")

    return VerifiedIdentity(
        subject=str(subject),
        email=email.strip().lower(),
        name=claims.get("name"),
        picture=claims.get("picture"),
    )
