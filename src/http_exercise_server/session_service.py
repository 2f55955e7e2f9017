"""
Session Service Module

Keeps login sessions in process memory, keyed by an opaque session id that
the client holds in the `sessionId` cookie.

Record shape:
{
  "sessionId": "Xk3...",            # secrets.token_urlsafe
  "username": "admin",
  "createdAt": "2025-01-01T12:00:00+00:00",
  "data": {"theme": "dark"}         # Preferences, flat key -> scalar
}

Sessions live until explicit logout. There is no expiry sweep and nothing
survives a restart.
"""

import asyncio
import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Union

logger = logging.getLogger(__name__)

# Values a preference may hold; nested objects and arrays are rejected
PreferenceValue = Union[str, int, float, bool, None]
PREFERENCE_TYPES = (str, int, float, bool, type(None))


class InvalidCredentialsError(Exception):
    """Username/password pair was not accepted."""


class SessionNotFoundError(LookupError):
    """Session id is unknown (never issued or already logged out)."""


class InvalidPreferencesError(ValueError):
    """Preference payload holds a value of an unsupported type."""


@dataclass
class Session:
    """A single login session"""
    session_id: str
    username: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    data: Dict[str, PreferenceValue] = field(default_factory=dict)

    def age_seconds(self, now: Optional[datetime] = None) -> int:
        """Whole seconds elapsed since the session was created."""
        now = now or datetime.now(timezone.utc)
        return int((now - self.created_at).total_seconds())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "username": self.username,
            "createdAt": self.created_at.isoformat(),
            "data": dict(self.data),
        }


def generate_session_id() -> str:
    """Unpredictable, URL/cookie safe session id."""
    return secrets.token_urlsafe(24)


def validate_preferences(preferences: Dict[str, Any]) -> Dict[str, PreferenceValue]:
    """
    Check that every preference value is a scalar.

    Raises:
        InvalidPreferencesError: On the first nested or unsupported value
    """
    for key, value in preferences.items():
        if not isinstance(value, PREFERENCE_TYPES):
            raise InvalidPreferencesError(
                f"Preference '{key}' must be a string, number, boolean or null"
            )
    return dict(preferences)


class SessionService:
    """Manage login sessions in memory."""

    def __init__(self, username: str, password: str):
        """
        Initialize SessionService.

        Args:
            username: The only username login accepts
            password: Password for that username
        """
        self._username = username
        self._password = password
        self._sessions: Dict[str, Session] = {}
        self._lock = asyncio.Lock()

    def _credentials_match(self, username: Any, password: Any) -> bool:
        if not isinstance(username, str) or not isinstance(password, str):
            return False
        return (
            secrets.compare_digest(username.encode(), self._username.encode())
            and secrets.compare_digest(password.encode(), self._password.encode())
        )

    async def login(self, username: Any, password: Any) -> Session:
        """
        Create a session for the configured credential pair.

        Returns:
            The newly stored Session

        Raises:
            InvalidCredentialsError: If the pair does not match
        """
        if not self._credentials_match(username, password):
            logger.info(f"[SessionService] Rejected login for: {username!r}")
            raise InvalidCredentialsError("Invalid credentials")

        session = Session(session_id=generate_session_id(), username=username)
        async with self._lock:
            self._sessions[session.session_id] = session

        logger.info(f"[SessionService] Created session for {username}")
        return session

    async def get_session(self, session_id: Optional[str]) -> Optional[Session]:
        """
        Look up a session by id.

        Returns:
            A copy of the Session, or None if the id is missing or unknown
        """
        if not session_id:
            return None
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                logger.debug("[SessionService] Unknown session id presented")
                return None
            return Session(
                session_id=session.session_id,
                username=session.username,
                created_at=session.created_at,
                data=dict(session.data),
            )

    async def logout(self, session_id: Optional[str]) -> bool:
        """
        Delete a session. Unknown or missing ids are not an error.

        Returns:
            True if a session was removed, False otherwise
        """
        if not session_id:
            return False
        async with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("[SessionService] Session logged out")
        return removed

    async def update_preferences(
        self,
        session_id: Optional[str],
        preferences: Dict[str, Any]
    ) -> Dict[str, PreferenceValue]:
        """
        Shallow-merge preferences into the session data; new keys win.

        Returns:
            The merged preference map

        Raises:
            SessionNotFoundError: If the session id is unknown
            InvalidPreferencesError: If a value is not a scalar
        """
        validated = validate_preferences(preferences)

        async with self._lock:
            session = self._sessions.get(session_id) if session_id else None
            if session is None:
                raise SessionNotFoundError(session_id)
            session.data = {**session.data, **validated}
            logger.debug(f"[SessionService] Preferences for {session.username}: {list(session.data.keys())}")
            return dict(session.data)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get store statistics (for monitoring/debugging).
        """
        return {"active_sessions": len(self._sessions)}
