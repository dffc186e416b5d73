"""
FastAPI router for Auth system endpoints.

Provides signup, login and logout. The session token only ever travels
in an HTTP-only cookie.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, Response, status

from common.utils import success_response
from hydauction.auth.services.auth_service import AuthService
from hydauction.config import Settings
from hydauction.dependencies import get_auth_service, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    username: Annotated[str, Form(min_length=1)],
    email: Annotated[str, Form(min_length=1)],
    password: Annotated[str, Form(description="base64-encoded password")],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """
    Register a new user account.

    Fails with 400 when the username or the email is already taken.
    """
    user_id = await auth_service.signup(
        username=username,
        email=email,
        encoded_password=password,
    )
    return success_response({"userId": user_id}, message="User created successfully")


@router.post("/login")
async def login(
    response: Response,
    username: Annotated[str, Form(min_length=1)],
    password: Annotated[str, Form(description="base64-encoded password")],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Login to an existing account.

    Sets the session cookie. Logging in again while a session is live
    returns the same session.
    """
    result = await auth_service.login(username=username, encoded_password=password)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=result.token,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        max_age=int(settings.session_max_age.total_seconds()),
    )
    return success_response({"user": result.user.to_dict()}, message="Login successful")


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Logout from current session.

    Always succeeds, with or without a valid session.
    """
    auth_service.logout(request.cookies.get(settings.SESSION_COOKIE_NAME))
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return success_response(message="Logged out successfully")
