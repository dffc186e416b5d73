"""
FastAPI dependencies for HydAuction.

Services are built once per application in the lifespan and kept on
app.state; route handlers reach them through the getters below.
"""

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import BcryptPasswordHasher, PasswordHasher
from common.utils.exceptions import InvalidSessionException
from hydauction.auth.services.auth_service import AuthService
from hydauction.auth.services.session_store import SessionStore, SessionUser
from hydauction.auth.services.session_sweeper import SessionSweeper
from hydauction.config import Settings
from hydauction.items.services.listing_service import ListingService
from hydauction.media.services.upload_storage import UploadStorage
from hydauction.middleware.auth import AuthorizationGate
from hydauction.user.services.user_service import UserService


@dataclass
class Services:
    settings: Settings
    session_store: SessionStore
    session_sweeper: SessionSweeper
    user_service: UserService
    auth_service: AuthService
    listing_service: ListingService
    upload_storage: UploadStorage
    gate: AuthorizationGate


def build_services(
    db: AsyncIOMotorDatabase,
    settings: Settings,
    password_hasher: Optional[PasswordHasher] = None,
    session_store: Optional[SessionStore] = None,
) -> Services:
    """
    Wire all services for one application instance.

    Args:
        db: MongoDB database connection
        settings: Application settings
        password_hasher: Override for the bcrypt hasher
        session_store: Override for a fresh in-memory store
    """
    session_store = session_store or SessionStore()
    password_hasher = password_hasher or BcryptPasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    user_service = UserService(db=db)

    return Services(
        settings=settings,
        session_store=session_store,
        session_sweeper=SessionSweeper(
            store=session_store,
            interval=settings.session_sweep_interval,
            max_age=settings.session_max_age,
        ),
        user_service=user_service,
        auth_service=AuthService(
            user_service=user_service,
            session_store=session_store,
            password_hasher=password_hasher,
            session_max_age=settings.session_max_age,
        ),
        listing_service=ListingService(
            db=db,
            public_url_prefix=settings.PUBLIC_URL_PREFIX,
            use_transaction=settings.ITEM_DELETE_USE_TRANSACTION,
        ),
        upload_storage=UploadStorage(
            public_dir=settings.PUBLIC_DIR,
            upload_subdir=settings.UPLOAD_SUBDIR,
        ),
        gate=AuthorizationGate(
            session_store=session_store,
            cookie_name=settings.SESSION_COOKIE_NAME,
        ),
    )


# ─────────────────────────────────────────────────────────────────
# Getters
# ─────────────────────────────────────────────────────────────────

def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized. Start the app through its lifespan.")
    return services


def get_settings(request: Request) -> Settings:
    return get_services(request).settings


def get_auth_service(request: Request) -> AuthService:
    return get_services(request).auth_service


def get_listing_service(request: Request) -> ListingService:
    return get_services(request).listing_service


def get_upload_storage(request: Request) -> UploadStorage:
    return get_services(request).upload_storage


# ─────────────────────────────────────────────────────────────────
# Authorization
# ─────────────────────────────────────────────────────────────────

async def session_gate(
    request: Request,
    services: Annotated[Services, Depends(get_services)],
) -> Optional[SessionUser]:
    """
    Application-wide dependency applying the route policy.

    Runs before every API route handler.
    """
    return await services.gate(request)


def require_user(request: Request) -> SessionUser:
    """
    Identity resolved by the gate for a protected route.

    Usage:
        @router.post("/items")
        async def add_item(user: Annotated[SessionUser, Depends(require_user)]):
            ...
    """
    user = getattr(request.state, "user", None)
    if user is None:
        raise InvalidSessionException()
    return user


def optional_user(request: Request) -> Optional[SessionUser]:
    """Identity resolved by the gate, or None for anonymous callers."""
    return getattr(request.state, "user", None)
