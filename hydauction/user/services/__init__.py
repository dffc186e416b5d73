"""
User System Services
"""

from hydauction.user.services.user_service import UserService

__all__ = [
    "UserService",
]
