"""Key/value site settings."""

import re
from typing import Optional

from sqlalchemy import select

from ..errors import ValidationError
from ..models.setting import Setting
from .base import StoreService

LOGO_URL = "logo_url"
LOGO_TYPE = "logo_type"
SITE_TITLE = "site_title"
LANDING_PAGE = "landing_page"

KEY_PATTERN = re.compile(r"^[a-z0-9_]{1,100}$")


class SettingService(StoreService):
    """Service for reading and writing site settings."""

    async def get_all(self) -> dict[str, Optional[str]]:
        result = await self._execute(select(Setting).order_by(Setting.key))
        return {setting.key: setting.value for setting in result.scalars().all()}

    async def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        result = await self._execute(select(Setting).where(Setting.key == key))
        setting = result.scalar_one_or_none()
        if setting is None or setting.value is None:
            return default
        return setting.value

    async def set(self, key: str, value: Optional[str]) -> Setting:
        """Insert or replace a setting."""
        if not KEY_PATTERN.match(key or ""):
            raise ValidationError(f"Invalid setting key '{key}'")

        result = await self._execute(select(Setting).where(Setting.key == key))
        setting = result.scalar_one_or_none()
        if setting is None:
            setting = Setting(key=key, value=value)
            self.db.add(setting)
        else:
            setting.value = value

        await self._flush("save setting")
        return setting

    async def set_many(self, values: dict[str, Optional[str]]) -> dict[str, Optional[str]]:
        for key, value in values.items():
            await self.set(key, value)
        return await self.get_all()

    async def delete(self, key: str) -> bool:
        result = await self._execute(select(Setting).where(Setting.key == key))
        setting = result.scalar_one_or_none()
        if setting is None:
            return False
        await self.db.delete(setting)
        await self._flush("delete setting")
        return True
