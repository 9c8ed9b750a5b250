"""Admin API routes for site settings."""

from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.database import get_db
from ..services.auth import Session
from ..services.setting import SettingService
from .auth import get_current_session


router = APIRouter(prefix="/api/admin/settings", tags=["admin"])


class UpdateSettingsRequest(BaseModel):
    values: dict[str, Optional[str]]


@router.get("", response_model=dict[str, Optional[str]])
async def get_settings(
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Get all settings."""
    return await SettingService(db).get_all()


@router.put("", response_model=dict[str, Optional[str]])
async def update_settings(
    request: UpdateSettingsRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Insert or replace several settings at once."""
    return await SettingService(db).set_many(request.values)
