"""Shared plumbing for database-backed services."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import StorageError, ValidationError

logger = logging.getLogger(__name__)


class StoreService:
    """Base class wrapping an AsyncSession and translating driver errors."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _execute(self, statement):
        """Execute a statement, raising StorageError on failure."""
        try:
            return await self.db.execute(statement)
        except SQLAlchemyError as e:
            logger.error(f"Query failed: {e}")
            raise StorageError(f"Database query failed: {e}") from e

    async def _flush(self, action: str) -> None:
        """Flush pending changes; constraint violations become ValidationError."""
        try:
            await self.db.flush()
        except IntegrityError as e:
            logger.warning(f"Constraint violation while trying to {action}: {e.orig}")
            raise ValidationError(f"Could not {action}: conflicting or invalid data") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to {action}: {e}")
            raise StorageError(f"Could not {action}: {e}") from e
