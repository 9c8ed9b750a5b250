"""Authentication service with in-memory session management."""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_config
from ..utils.security import verify_password
from .user import UserService

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """User session data."""

    session_id: str
    user_id: int
    username: str
    email: str
    created_at: datetime
    last_activity: datetime


@dataclass
class AuthService:
    """Authentication service with in-memory session management."""

    # In-memory session storage
    _sessions: dict[str, Session] = field(default_factory=dict)

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> Optional[Session]:
        """Check a username/password pair against the database and open a session."""
        self.sweep_expired_sessions()
        user = await UserService(db).get_user_by_username(username)
        if user is None:
            logger.info(f"Login failed for unknown user '{username}'")
            return None

        if not verify_password(password, user.password_hash):
            logger.info(f"Login failed for user '{username}': wrong password")
            return None

        now = datetime.utcnow()
        session = Session(
            session_id=secrets.token_urlsafe(32),
            user_id=user.id,
            username=user.username,
            email=user.email,
            created_at=now,
            last_activity=now,
        )

        self._sessions[session.session_id] = session
        logger.info(f"User '{user.username}' logged in")
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        """Get a session by ID, checking for expiration."""
        if session_id not in self._sessions:
            return None

        session = self._sessions[session_id]
        timeout = timedelta(minutes=get_config().session.timeout_minutes)

        # Check if session has expired due to inactivity
        if datetime.utcnow() - session.last_activity > timeout:
            self.invalidate_session(session_id)
            return None

        session.last_activity = datetime.utcnow()
        return session

    def invalidate_session(self, session_id: str) -> None:
        """Invalidate (logout) a session."""
        self._sessions.pop(session_id, None)

    def sweep_expired_sessions(self) -> int:
        """Drop sessions idle for longer than the configured timeout."""
        timeout = timedelta(minutes=get_config().session.timeout_minutes)
        now = datetime.utcnow()

        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if now - session.last_activity > timeout
        ]
        for session_id in expired:
            del self._sessions[session_id]

        if expired:
            logger.debug(f"Removed {len(expired)} expired sessions")
        return len(expired)

    def invalidate_user_sessions(self, user_id: int) -> int:
        """Drop every session of a user (e.g. after the account is deleted)."""
        stale = [sid for sid, s in self._sessions.items() if s.user_id == user_id]
        for session_id in stale:
            del self._sessions[session_id]
        return len(stale)

    def rename_user_sessions(self, user_id: int, username: str, email: str) -> None:
        """Keep open sessions in sync after a user edits their account."""
        for session in self._sessions.values():
            if session.user_id == user_id:
                session.username = username
                session.email = email


# Global singleton instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the global auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(_sessions={})
    return _auth_service
