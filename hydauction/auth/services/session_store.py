"""
In-memory session storage.

Maps an opaque session token to the identity snapshot taken at login.
Presence in the store is the only proof of authentication: expiry is
enforced by removing entries (see SessionSweeper), never by a status flag.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Tuple

from hydauction.auth.services.token_generator import TokenGenerator

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SessionUser:
    """
    Identity snapshot held by a session.

    Only the id and display fields are kept; the password hash stays
    in the users collection.
    """

    user_id: str
    username: str
    email: str

    @classmethod
    def from_document(cls, user: dict) -> "SessionUser":
        return cls(
            user_id=str(user["_id"]),
            username=user.get("username", ""),
            email=user.get("email", ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "email": self.email,
        }


@dataclass
class Session:
    token: str
    user: SessionUser
    created_at: datetime = field(default_factory=_utcnow)

    def is_expired(self, now: datetime, max_age: timedelta) -> bool:
        return now - self.created_at > max_age


class SessionStore:
    """
    Process-wide token -> session mapping.

    One lock guards the mapping. Every critical section is a plain
    dictionary operation, so request handlers and the background sweeper
    never wait on I/O while holding it.
    """

    def __init__(self, token_factory: Callable[[], str] = TokenGenerator.generate_token):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._token_factory = token_factory

    def put(
        self,
        token: str,
        user: SessionUser,
        created_at: Optional[datetime] = None,
    ) -> None:
        """
        Store a session, overwriting any entry with the same token.

        Args:
            token: Session token
            user: Identity snapshot
            created_at: Creation time (defaults to now)
        """
        session = Session(token=token, user=user, created_at=created_at or _utcnow())
        with self._lock:
            self._sessions[token] = session

    def get(self, token: str) -> Optional[SessionUser]:
        """Return the identity for a token, or None. Does not touch expiry."""
        with self._lock:
            session = self._sessions.get(token)
        return session.user if session else None

    def get_session(self, token: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(token)

    def remove(self, token: str) -> None:
        """Drop a session. No-op if the token is unknown."""
        with self._lock:
            self._sessions.pop(token, None)

    def find_token_for_user(self, user_id: str) -> Optional[str]:
        """Return the live token held by a user, if any."""
        with self._lock:
            return self._find_token_locked(user_id)

    def open_session(
        self,
        user: SessionUser,
        now: Optional[datetime] = None,
        max_age: Optional[timedelta] = None,
    ) -> Tuple[str, bool]:
        """
        Return the user's existing token or mint a new one.

        Lookup and insert happen under one lock acquisition so concurrent
        logins for the same user end up sharing a single token.

        Args:
            user: Identity snapshot for the authenticated user
            now: Current time (defaults to now)
            max_age: If given, an existing session older than this is
                replaced instead of reused

        Returns:
            tuple of (token, created) where created is False when an
            existing session was reused
        """
        now = now or _utcnow()

        with self._lock:
            existing = self._find_token_locked(user.user_id)
            if existing is not None:
                session = self._sessions[existing]
                if max_age is None or not session.is_expired(now, max_age):
                    return existing, False
                del self._sessions[existing]

            token = self._token_factory()
            while token in self._sessions:
                token = self._token_factory()
            self._sessions[token] = Session(token=token, user=user, created_at=now)

        return token, True

    def sweep(self, now: datetime, max_age: timedelta) -> int:
        """
        Remove every session older than max_age relative to now.

        Returns:
            Number of sessions removed
        """
        with self._lock:
            expired = [
                token for token, session in self._sessions.items()
                if session.is_expired(now, max_age)
            ]
            for token in expired:
                del self._sessions[token]

        if expired:
            logger.info(f"Swept {len(expired)} expired sessions")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            count = len(self._sessions)
            self._sessions.clear()
        logger.debug(f"Session store cleared ({count} sessions dropped)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._sessions

    def _find_token_locked(self, user_id: str) -> Optional[str]:
        for token, session in self._sessions.items():
            if session.user.user_id == user_id:
                return token
        return None
