"""
Authorization gate for API routes.

Resolves the session cookie to an identity and attaches it to the request.
Which routes need an identity is declared once in RoutePolicy.
"""

import enum
import logging
from typing import FrozenSet, Iterable, Optional, Tuple

from fastapi import Request

from common.utils.exceptions import InvalidSessionException
from hydauction.auth.services.session_store import SessionStore, SessionUser

logger = logging.getLogger(__name__)


class Access(str, enum.Enum):
    PUBLIC = "public"
    OPTIONAL = "optional"
    REQUIRED = "required"


DEFAULT_PUBLIC_PATHS = frozenset({
    "/",
    "/signup",
    "/login",
    "/logout",
    "/health",
    "/docs",
    "/docs/oauth2-redirect",
    "/redoc",
    "/openapi.json",
})

DEFAULT_PUBLIC_PREFIXES = ("/public/",)

DEFAULT_OPTIONAL_ROUTES = frozenset({
    ("GET", "/items"),
})


class RoutePolicy:
    """
    Declared access level per route.

    Paths are matched against the route template (e.g. "/items/{item_id}")
    when one is available, so path parameters never affect the decision.
    Anything not declared public or optional requires a session.
    """

    def __init__(
        self,
        public_paths: Iterable[str] = DEFAULT_PUBLIC_PATHS,
        public_prefixes: Iterable[str] = DEFAULT_PUBLIC_PREFIXES,
        optional_routes: Iterable[Tuple[str, str]] = DEFAULT_OPTIONAL_ROUTES,
    ):
        self.public_paths: FrozenSet[str] = frozenset(public_paths)
        self.public_prefixes: Tuple[str, ...] = tuple(public_prefixes)
        self.optional_routes: FrozenSet[Tuple[str, str]] = frozenset(
            (method.upper(), path) for method, path in optional_routes
        )

    def classify(self, method: str, path: str) -> Access:
        if path in self.public_paths or path.startswith(self.public_prefixes):
            return Access.PUBLIC
        if (method.upper(), path) in self.optional_routes:
            return Access.OPTIONAL
        return Access.REQUIRED

    def classify_request(self, request: Request) -> Access:
        route = request.scope.get("route")
        path = getattr(route, "path", None) or request.url.path
        return self.classify(request.method, path)


class AuthorizationGate:
    """
    Validates the session cookie and attaches the user to the request.
    """

    def __init__(
        self,
        session_store: SessionStore,
        cookie_name: str = "sessionId",
        policy: Optional[RoutePolicy] = None,
    ):
        """
        Initialize AuthorizationGate.

        Args:
            session_store: For session lookup
            cookie_name: Cookie carrying the session token
            policy: Route access declarations
        """
        self._session_store = session_store
        self._cookie_name = cookie_name
        self.policy = policy or RoutePolicy()

    async def __call__(self, request: Request) -> Optional[SessionUser]:
        """
        Apply the route policy to a request.

        Returns:
            The resolved user, or None for public/anonymous access

        Raises:
            InvalidSessionException: Route requires a session and none is valid
        """
        access = self.policy.classify_request(request)
        request.state.user = None

        if access is Access.PUBLIC:
            return None
        if access is Access.OPTIONAL:
            return self.optional_auth(request)
        return self.require_auth(request)

    def require_auth(self, request: Request) -> SessionUser:
        """
        Validate request is authenticated.

        Raises:
            InvalidSessionException: No cookie, or token not in the store.
                Expired and never-issued tokens look the same.
        """
        user = self.resolve(request)
        if user is None:
            logger.debug(f"Rejected {request.method} {request.url.path}: invalid session")
            raise InvalidSessionException()
        return user

    def optional_auth(self, request: Request) -> Optional[SessionUser]:
        """Attach user if authenticated, but don't require it."""
        return self.resolve(request)

    def resolve(self, request: Request) -> Optional[SessionUser]:
        token = self.extract_token(request)
        if not token:
            return None

        user = self._session_store.get(token)
        if user is not None:
            request.state.user = user
            request.state.session_token = token
        return user

    def extract_token(self, request: Request) -> Optional[str]:
        """Read the session token from the request cookie."""
        token = request.cookies.get(self._cookie_name)
        return token or None
