"""Authentication API routes."""

from typing import Optional
from fastapi import APIRouter, HTTPException, Response, Depends, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_config
from ..services.auth import get_auth_service, Session
from ..models.database import get_db


router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    username: str
    email: str
    message: str


class SessionUserResponse(BaseModel):
    id: int
    username: str
    email: str


def _session_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(get_config().session.cookie_name)


async def get_current_session(request: Request) -> Session:
    """Dependency to get and validate the current session."""
    session_id = _session_cookie(request)
    if not session_id:
        raise HTTPException(status_code=401, detail="Not authenticated")

    session = get_auth_service().get_session(session_id)

    if session is None:
        raise HTTPException(status_code=401, detail="Session expired or invalid")

    return session


async def get_optional_session(request: Request) -> Optional[Session]:
    """Dependency to get the current session if it exists."""
    session_id = _session_cookie(request)
    if not session_id:
        return None

    return get_auth_service().get_session(session_id)


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, response: Response, db: AsyncSession = Depends(get_db)):
    """Authenticate a user with username/password and create a session."""
    auth_service = get_auth_service()
    session = await auth_service.authenticate(db, request.username, request.password)

    if session is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    config = get_config()
    response.set_cookie(
        key=config.session.cookie_name,
        value=session.session_id,
        httponly=True,
        secure=config.session.secure_cookie,
        samesite="lax",
        max_age=config.session.timeout_minutes * 60,
    )

    return LoginResponse(
        username=session.username,
        email=session.email,
        message="Login successful",
    )


@router.post("/logout")
async def logout(request: Request, response: Response):
    """Log out the current user."""
    session_id = _session_cookie(request)
    if session_id:
        get_auth_service().invalidate_session(session_id)

    response.delete_cookie(key=get_config().session.cookie_name)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=SessionUserResponse)
async def get_current_user(session: Session = Depends(get_current_session)):
    """Get the current authenticated user."""
    return SessionUserResponse(
        id=session.user_id,
        username=session.username,
        email=session.email,
    )
