"""
Authentication router: admin login issuing uploader session tokens.
"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from config import settings
from routers.auth_scope import AuthContext, get_auth_context
from routers.rate_limit import rate_limit
from services.session_token import create_session_token

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    user_id: str
    name: Optional[str] = None
    session_token: str
    session_expires_at: int


class CurrentUserResponse(BaseModel):
    user_id: str
    name: Optional[str] = None
    avatar: Optional[str] = None


def _credentials_match(username: str, password: str) -> bool:
    expected_user = settings.ADMIN_USERNAME.encode("utf-8")
    expected_pass = settings.ADMIN_PASSWORD.encode("utf-8")
    user_ok = hmac.compare_digest(username.encode("utf-8"), expected_user)
    pass_ok = hmac.compare_digest(password.encode("utf-8"), expected_pass)
    return user_ok and pass_ok


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    _rate_limit: None = Depends(rate_limit("login", limit=10, window_seconds=900)),
):
    """Exchange the configured admin credentials for a session token."""
    if not settings.ADMIN_PASSWORD:
        raise HTTPException(status_code=503, detail="Admin login is not configured.")

    if not _credentials_match(request.username, request.password):
        logger.warning("Rejected admin login for %r", request.username)
        raise HTTPException(status_code=401, detail="Invalid username or password.")

    user_id = settings.ADMIN_USERNAME
    session = create_session_token(user_id, name=settings.ADMIN_DISPLAY_NAME)
    return LoginResponse(
        user_id=user_id,
        name=settings.ADMIN_DISPLAY_NAME,
        session_token=session["token"],
        session_expires_at=session["expires_at"],
    )


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(auth: AuthContext = Depends(get_auth_context)):
    """Return the identity carried by the session token."""
    return CurrentUserResponse(user_id=auth.user_id, name=auth.name, avatar=auth.avatar)


@router.post("/logout")
async def logout(_auth: AuthContext = Depends(get_auth_context)):
    """Frontend-managed logout acknowledgment endpoint."""
    return {"message": "Logged out successfully"}
