"""Tests for Google ID token verification."""
import pytest
from google.auth import exceptions as google_exceptions

from app.auth import oauth
from app.auth.oauth import GoogleIdTokenVerifier, extract_google_identity
from app.errors import InvalidOAuthTokenError, UpstreamError

CLIENT_ID = "test-client.apps.googleusercontent.com"

CLAIMS = {
    "sub": "109876543210",
    "email": "Alice@Example.com",
    "email_verified": True,
    "name": "Alice Liddell",
    "picture": "https://example.com/alice.png",
}


class TestExtractGoogleIdentity:

    def test_builds_identity(self):
        identity = extract_google_identity(CLAIMS)

        assert identity.subject == "109876543210"
        assert identity.email == "alice@example.com"
        assert identity.name == "Alice Liddell"
        assert identity.picture == "https://example.com/alice.png"

    def test_name_and_picture_are_optional(self):
        identity = extract_google_identity({"sub": "1", "email": "bob@example.com"})

        assert identity.name is None
        assert identity.picture is None

    @pytest.mark.parametrize("missing", ["sub", "email"])
    def test_missing_required_claim(self, missing):
        claims = {k: v for k, v in CLAIMS.items() if k != missing}

        with pytest.raises(InvalidOAuthTokenError):
            extract_google_identity(claims)

    @pytest.mark.parametrize("flag", [False, "false"])
    def test_unverified_email(self, flag):
        with pytest.raises(InvalidOAuthTokenError, match="not verified"):
            extract_google_identity({**CLAIMS, "email_verified": flag})


class TestGoogleIdTokenVerifier:

    def test_not_configured(self):
        verifier = GoogleIdTokenVerifier(client_id="")

        assert verifier.is_configured() is False
        with pytest.raises(InvalidOAuthTokenError, match="not configured"):
            verifier.verify("any-token")

    def test_valid_token(self, monkeypatch):
        seen = {}

        def fake_verify(token, request, audience):
            seen["token"] = token
            seen["audience"] = audience
            return CLAIMS

        monkeypatch.setattr(oauth.id_token, "verify_oauth2_token", fake_verify)

        identity = GoogleIdTokenVerifier(client_id=CLIENT_ID).verify("google-id-token")

        assert identity.email == "alice@example.com"
        assert seen == {"token": "google-id-token", "audience": CLIENT_ID}

    def test_rejected_token(self, monkeypatch):
        def fake_verify(token, request, audience):
            raise ValueError("Token has wrong audience")

        monkeypatch.setattr(oauth.id_token, "verify_oauth2_token", fake_verify)

        with pytest.raises(InvalidOAuthTokenError):
            GoogleIdTokenVerifier(client_id=CLIENT_ID).verify("google-id-token")

    def test_google_unreachable(self, monkeypatch):
        def fake_verify(token, request, audience):
            raise google_exceptions.TransportError("connection refused")

        monkeypatch.setattr(oauth.id_token, "verify_oauth2_token", fake_verify)

        with pytest.raises(UpstreamError):
            GoogleIdTokenVerifier(client_id=CLIENT_ID).verify("google-id-token")
