"""User authentication controller endpoints."""

from datetime import timedelta

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import auth, get_current_user
from app.database import get_db
from app.domains.user.service import UserService
from app.schemas.user import (
    LogoutResponse,
    UserInfoResponse,
    UserLoginRequest,
    UserSignupRequest,
)
from models.user import User

router = APIRouter(prefix="/api/user", tags=["Authentication"])


def _set_session_cookie(response: Response, user: User) -> None:
    """Issue a fresh session token for the user as an HttpOnly cookie."""
    max_age = timedelta(days=settings.access_token_expire_days)
    token = auth.create_token(user.id, expires_in=max_age)
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=int(max_age.total_seconds()),
        path="/",
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
    )


@router.post("/signup", response_model=UserInfoResponse, status_code=status.HTTP_201_CREATED)
async def signup(signup_data: UserSignupRequest, response: Response, db: AsyncSession = Depends(get_db)):
    """Register a new user and start a session.

    Duplicate emails are rejected with 400.
    """
    user = await UserService(db).create_user(
        name=signup_data.name,
        email=str(signup_data.email),
        password=signup_data.password,
    )
    _set_session_cookie(response, user)
    return UserInfoResponse(message="OK", name=user.name, email=user.email)


@router.post("/login", response_model=UserInfoResponse)
async def login(login_data: UserLoginRequest, response: Response, db: AsyncSession = Depends(get_db)):
    """Authenticate with email and password and start a session."""
    user = await UserService(db).authenticate(str(login_data.email), login_data.password)
    _set_session_cookie(response, user)
    return UserInfoResponse(message="OK", name=user.name, email=user.email)


@router.get("/auth-status", response_model=UserInfoResponse)
async def auth_status(current_user: User = Depends(get_current_user)):
    """Get the profile of the currently authenticated user."""
    return UserInfoResponse(message="OK", name=current_user.name, email=current_user.email)


@router.get("/logout", response_model=LogoutResponse)
async def logout(response: Response, _current_user: User = Depends(get_current_user)):
    """End the session by clearing the session cookie."""
    response.delete_cookie(key=settings.auth_cookie_name, path="/")
    return LogoutResponse(message="OK")
