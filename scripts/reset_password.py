#!/usr/bin/env python3
"""
AuthNotes - Password Reset CLI

Sets a new password for an existing account and signs that account out
everywhere (its token version is bumped).

Usage:
    python scripts/reset_password.py user@email.com NewPassword123
"""
import sys
import os

# Add project root to path so we can import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import init_db, session_scope
from app.errors import ValidationError
from app.auth.passwords import PasswordHasher
from app.auth.service import AuthService
from app.auth.tokens import TokenService
from app.storage.sql import SqlRepositories


def reset_password(email: str, new_password: str) -> int:
    init_db()

    with session_scope() as db:
        repos = SqlRepositories(db)
        user = repos.users.get_by_email(email.strip().lower())
        if not user:
            print(f"Error: no account registered for '{email}'")
            return 1

        service = AuthService(repos.users, PasswordHasher(), TokenService())
        try:
            service.set_password(user, new_password)
        except ValidationError as e:
            print(f"Error: {e.message}")
            return 1

    print(f"Password updated for {email}")
    print("Existing tokens for this account no longer work.")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python scripts/reset_password.py <email> <new_password>")
        print("Example: python scripts/reset_password.py user@example.com MyNewPass123")
        sys.exit(1)

    sys.exit(reset_password(sys.argv[1], sys.argv[2]))
