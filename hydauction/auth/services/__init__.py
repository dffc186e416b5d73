"""
Auth System Services

Contains service classes for authentication operations.
"""

from hydauction.auth.services.token_generator import TokenGenerator
from hydauction.auth.services.session_store import Session, SessionStore, SessionUser
from hydauction.auth.services.session_sweeper import SessionSweeper
from hydauction.auth.services.auth_service import AuthService, LoginResult, decode_password

__all__ = [
    "TokenGenerator",
    "Session",
    "SessionStore",
    "SessionUser",
    "SessionSweeper",
    "AuthService",
    "LoginResult",
    "decode_password",
]
