# AuthNotes - Authenticated notes API
"""
AuthNotes - A small authenticated note-taking backend.

Sign up with email/password or Google, then keep private text notes
scoped to your account.
"""

__version__ = "1.0.0"
__author__ = "AuthNotes"
__description__ = "Authenticated note-taking REST API"
