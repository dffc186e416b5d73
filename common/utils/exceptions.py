"""
HTTP errors carrying a machine-readable code.

Every error is a FastAPI HTTPException whose detail is a dict, so clients
receive `{"detail": {"message": ..., "code": ...}}` without any custom
exception handler.

Example:
    from common.utils import NotFoundException

    if item is None:
        raise NotFoundException("Item not found", code="ITEM_NOT_FOUND")
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException


class APIException(HTTPException):
    """HTTPException with a `{message, code, details}` detail payload."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Args:
            status_code: HTTP status code
            message: Human-readable error message
            code: Stable error code clients can switch on
            details: Extra context, included only when given
            headers: Response headers
        """
        detail: Dict[str, Any] = {"message": message}
        if code:
            detail["code"] = code
        if details is not None:
            detail["details"] = details

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    @property
    def message(self) -> str:
        return self.detail["message"]

    @property
    def code(self) -> Optional[str]:
        return self.detail.get("code")


# ─────────────────────────────────────────────────────────────────
# 400
# ─────────────────────────────────────────────────────────────────

class BadRequestException(APIException):
    """400 - The request cannot be processed as sent."""

    def __init__(
        self,
        message: str = "Bad request",
        code: str = "BAD_REQUEST",
        details: Optional[Any] = None,
    ):
        super().__init__(400, message, code, details)


class ConflictException(BadRequestException):
    """
    400 - Username or email already registered.

    Sent as 400, not 409.
    """

    def __init__(
        self,
        message: str = "User already exists",
        code: str = "USER_ALREADY_EXISTS",
        details: Optional[Any] = None,
    ):
        super().__init__(message, code, details)


class InvalidCredentialsException(BadRequestException):
    """400 - Unknown username or wrong password (one error for both)."""

    def __init__(
        self,
        message: str = "Invalid username or password",
        code: str = "INVALID_CREDENTIALS",
        details: Optional[Any] = None,
    ):
        super().__init__(message, code, details)


class InvalidSessionException(BadRequestException):
    """400 - No session cookie, or its token is not in the session store."""

    def __init__(
        self,
        message: str = "Invalid session",
        code: str = "INVALID_SESSION",
        details: Optional[Any] = None,
    ):
        super().__init__(message, code, details)


# ─────────────────────────────────────────────────────────────────
# 403 / 404
# ─────────────────────────────────────────────────────────────────

class ForbiddenException(APIException):
    """403 - Authenticated, but not allowed to touch this resource."""

    def __init__(
        self,
        message: str = "Forbidden",
        code: str = "FORBIDDEN",
        details: Optional[Any] = None,
    ):
        super().__init__(403, message, code, details)


class NotFoundException(APIException):
    """404 - No such resource."""

    def __init__(
        self,
        message: str = "Not found",
        code: str = "NOT_FOUND",
        details: Optional[Any] = None,
    ):
        super().__init__(404, message, code, details)


# ─────────────────────────────────────────────────────────────────
# 500
# ─────────────────────────────────────────────────────────────────

class InternalServerException(APIException):
    """500 - Unexpected server-side failure."""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "INTERNAL_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(500, message, code, details)


class StorageException(InternalServerException):
    """
    500 - The database or the upload directory failed.

    The message stays generic; driver errors are logged, never returned.
    """

    def __init__(
        self,
        message: str = "Storage failure",
        code: str = "STORAGE_ERROR",
    ):
        super().__init__(message, code)
