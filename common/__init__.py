"""
Common library for reusable infrastructure components.

This package provides generic modules that can be used
across multiple projects:

- database: Async MongoDB connection via Motor
- auth: Pluggable password hashing (bcrypt)
- utils: Standard responses and exceptions
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import PasswordHasher, BcryptPasswordHasher
from common.utils import (
    success_response,
    APIException,
    BadRequestException,
    ConflictException,
    InvalidCredentialsException,
    InvalidSessionException,
    ForbiddenException,
    NotFoundException,
    StorageException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "PasswordHasher",
    "BcryptPasswordHasher",
    # Utils
    "success_response",
    "APIException",
    "BadRequestException",
    "ConflictException",
    "InvalidCredentialsException",
    "InvalidSessionException",
    "ForbiddenException",
    "NotFoundException",
    "StorageException",
    # Config
    "BaseAppSettings",
]
