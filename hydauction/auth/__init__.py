"""
Auth System

Handles signup, login and logout with cookie sessions held in memory.
"""

from hydauction.auth.services.session_store import SessionStore, SessionUser
from hydauction.auth.services.session_sweeper import SessionSweeper
from hydauction.auth.services.auth_service import AuthService

__all__ = [
    "SessionStore",
    "SessionUser",
    "SessionSweeper",
    "AuthService",
]
