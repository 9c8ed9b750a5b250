"""Admin API routes for user accounts."""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.database import get_db
from ..services.auth import Session, get_auth_service
from ..services.user import UserService
from .auth import get_current_session


router = APIRouter(prefix="/api/admin/users", tags=["admin"])


class UserSchema(BaseModel):
    id: int
    username: str
    email: str
    created_at: str


class CreateUserRequest(BaseModel):
    username: str
    email: str
    password: str


class UpdateUserRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    # Empty or missing keeps the current password
    password: Optional[str] = None


def user_to_schema(user) -> UserSchema:
    """Convert a User model to UserSchema (never exposes the hash)."""
    return UserSchema(
        id=user.id,
        username=user.username,
        email=user.email,
        created_at=user.created_at.isoformat(),
    )


@router.get("", response_model=list[UserSchema])
async def get_users(
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Get all users."""
    users = await UserService(db).get_all_users()
    return [user_to_schema(u) for u in users]


@router.post("", response_model=UserSchema)
async def create_user(
    request: CreateUserRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Create a user."""
    user = await UserService(db).create_user(
        username=request.username,
        password=request.password,
        email=request.email,
    )
    return user_to_schema(user)


@router.put("/{user_id}", response_model=UserSchema)
async def update_user(
    user_id: int,
    request: UpdateUserRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Update a user."""
    user = await UserService(db).update_user(
        user_id,
        username=request.username,
        email=request.email,
        password=request.password,
    )

    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    get_auth_service().rename_user_sessions(user.id, user.username, user.email)
    return user_to_schema(user)


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Delete a user. The logged-in user cannot delete themselves."""
    success = await UserService(db).delete_user(user_id, acting_username=session.username)

    if not success:
        raise HTTPException(status_code=404, detail="User not found")

    get_auth_service().invalidate_user_sessions(user_id)
    return {"message": "User deleted"}
