"""
Utilities module - Common helpers for API responses and exceptions.
"""

from common.utils.responses import success_response
from common.utils.exceptions import (
    APIException,
    BadRequestException,
    ConflictException,
    InvalidCredentialsException,
    InvalidSessionException,
    ForbiddenException,
    NotFoundException,
    InternalServerException,
    StorageException,
)

__all__ = [
    "success_response",
    "APIException",
    "BadRequestException",
    "ConflictException",
    "InvalidCredentialsException",
    "InvalidSessionException",
    "ForbiddenException",
    "NotFoundException",
    "InternalServerException",
    "StorageException",
]
