"""
User System

Owns user account records (username, email, password hash).
"""

from hydauction.user.services.user_service import UserService

__all__ = [
    "UserService",
]
