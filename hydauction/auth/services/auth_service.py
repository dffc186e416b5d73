"""
Signup, login and logout.

Passwords arrive base64-encoded. That encoding only keeps arbitrary bytes
intact through form transport; it is not a security measure, and
credentials must travel over TLS.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from starlette.concurrency import run_in_threadpool

from common.auth import PasswordHasher
from common.utils.exceptions import (
    BadRequestException,
    ConflictException,
    InvalidCredentialsException,
)
from hydauction.auth.services.session_store import SessionStore, SessionUser
from hydauction.user.services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    token: str
    user: SessionUser
    created: bool


def decode_password(encoded_password: str) -> str:
    """
    Recover the raw password from its base64 transport encoding.

    Raises:
        BadRequestException: Not valid base64 or not UTF-8 once decoded
    """
    try:
        return base64.b64decode(encoded_password or "", validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise BadRequestException(
            message="Password must be base64-encoded UTF-8",
            code="INVALID_PASSWORD_ENCODING",
        )


class AuthService:
    """
    Credential checks and session issuance.
    """

    def __init__(
        self,
        user_service: UserService,
        session_store: SessionStore,
        password_hasher: PasswordHasher,
        session_max_age: timedelta,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize AuthService.

        Args:
            user_service: User lookup and creation
            session_store: Where live sessions are kept
            password_hasher: One-way password hashing
            session_max_age: Sessions older than this are not reused at login
            clock: Returns the current time (timezone-aware UTC by default)
        """
        self._user_service = user_service
        self._session_store = session_store
        self._password_hasher = password_hasher
        self._session_max_age = session_max_age
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def signup(
        self,
        username: str,
        email: str,
        encoded_password: str,
    ) -> str:
        """
        Create an account.

        Args:
            username: Desired username
            email: Email address
            encoded_password: base64 of the raw password

        Returns:
            New user id

        Raises:
            BadRequestException: Password not decodable
            ConflictException: username or email already registered
            StorageException: Database failure
        """
        password = decode_password(encoded_password)

        existing = await self._user_service.find_by_username_or_email(username, email)
        if existing:
            logger.info(f"Signup rejected, user exists: {username}")
            raise ConflictException()

        password_hash = await run_in_threadpool(self._password_hasher.hash_password, password)
        user = await self._user_service.create_user(
            username=username,
            email=email,
            password_hash=password_hash,
        )
        return str(user["_id"])

    async def login(
        self,
        username: str,
        encoded_password: str,
    ) -> LoginResult:
        """
        Verify credentials and return a session token.

        A user who already holds a live session gets the same token back.

        Raises:
            BadRequestException: Password not decodable
            InvalidCredentialsException: Unknown username or wrong password
            StorageException: Database failure
        """
        password = decode_password(encoded_password)

        user = await self._user_service.get_user_by_username(username)
        if not user:
            logger.info(f"Login failed, unknown user: {username}")
            raise InvalidCredentialsException()

        valid = await run_in_threadpool(
            self._password_hasher.verify_password, password, user.get("password", "")
        )
        if not valid:
            logger.info(f"Login failed, bad password: {username}")
            raise InvalidCredentialsException()

        session_user = SessionUser.from_document(user)
        token, created = self._session_store.open_session(
            session_user,
            now=self._clock(),
            max_age=self._session_max_age,
        )

        if created:
            logger.info(f"Session created for user {session_user.user_id}")
        else:
            logger.info(f"Existing session reused for user {session_user.user_id}")

        return LoginResult(token=token, user=session_user, created=created)

    def logout(self, token: Optional[str]) -> None:
        """Drop the session for token. Always succeeds."""
        if not token:
            return
        user = self._session_store.get(token)
        self._session_store.remove(token)
        if user:
            logger.info(f"Session ended for user {user.user_id}")
