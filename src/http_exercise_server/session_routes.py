"""
API Routes for Login Sessions

Login/logout plus the routes that need a live session cookie.
"""

from datetime import datetime, timezone
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request, Response
from slowapi import Limiter
import logging

from .auth_middleware import (
    SESSION_COOKIE,
    USERNAME_COOKIE,
    THEME_COOKIE,
    get_session_id,
)
from .core import Config, read_json_body
from .session_service import (
    SessionService,
    InvalidCredentialsError,
    InvalidPreferencesError,
    PreferenceValue,
    SessionNotFoundError,
)

logger = logging.getLogger(__name__)

# Expires value that makes clients drop a cookie immediately
COOKIE_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def encode_cookie_value(value: PreferenceValue) -> str:
    """
    Cookie-safe text for a preference value.

    Booleans are written as true/false and whole floats without a fraction,
    as a browser would stringify them. The result is percent-encoded so
    parse_cookies decodes it back to the same text.
    """
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)
    return quote(text, safe="")


def create_session_router(session_service: SessionService, limiter: Limiter) -> APIRouter:
    """
    Create FastAPI router for session endpoints.

    Args:
        session_service: SessionService instance
        limiter: slowapi Limiter used to throttle login attempts

    Returns:
        APIRouter with login, session, logout, profile and preferences
    """
    router = APIRouter(tags=["sessions"])

    @router.post("/login")
    @limiter.limit(Config.LOGIN_RATE_LIMIT)
    async def login(request: Request, response: Response):
        """
        Create a session for the demo credentials.

        Request:
            - username
            - password

        Sets the sessionId and username cookies on success.
        """
        body = await read_json_body(request)
        username = body.get("username")

        try:
            session = await session_service.login(username, body.get("password"))
        except InvalidCredentialsError as e:
            logger.warning(f"[LOGIN] Invalid credentials for {username!r}")
            raise HTTPException(status_code=401, detail=str(e))

        max_age = Config.SESSION_COOKIE_MAX_AGE
        response.set_cookie(SESSION_COOKIE, session.session_id, max_age=max_age, path="/", httponly=True)
        response.set_cookie(USERNAME_COOKIE, session.username, max_age=max_age, path="/", httponly=True)

        logger.info(f"[LOGIN] {session.username} logged in")
        return {"message": "Login successful", "username": session.username}

    @router.get("/session")
    async def check_session(request: Request):
        """Report whether the sessionId cookie names a live session."""
        session = await session_service.get_session(get_session_id(request))
        if session is None:
            raise HTTPException(status_code=401, detail="No valid session")

        return {
            "message": "Session active",
            "username": session.username,
            "createdAt": session.created_at.isoformat()
        }

    @router.post("/logout")
    async def logout(request: Request, response: Response):
        """Destroy the session (if any) and expire both cookies. Always 200."""
        await session_service.logout(get_session_id(request))

        for name in (SESSION_COOKIE, USERNAME_COOKIE):
            response.set_cookie(name, "", path="/", expires=COOKIE_EPOCH)
        return {"message": "Logged out"}

    @router.get("/profile")
    async def get_profile(request: Request):
        session = await session_service.get_session(get_session_id(request))
        if session is None:
            raise HTTPException(status_code=401, detail="Please login first")

        return {
            "username": session.username,
            "sessionAge": f"{session.age_seconds()} seconds"
        }

    @router.post("/preferences")
    async def set_preferences(request: Request, response: Response):
        """
        Merge the request body into the session's preference data.

        A truthy `theme` is also stored in a long-lived cookie readable by
        client scripts.
        """
        session_id = get_session_id(request)
        if await session_service.get_session(session_id) is None:
            raise HTTPException(status_code=401, detail="Please login first")

        body = await read_json_body(request)
        try:
            preferences = await session_service.update_preferences(session_id, body)
        except InvalidPreferencesError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except SessionNotFoundError:
            # Logged out between the check above and the merge
            raise HTTPException(status_code=401, detail="Please login first")

        theme = body.get("theme")
        if theme:
            response.set_cookie(
                THEME_COOKIE,
                encode_cookie_value(theme),
                max_age=Config.THEME_COOKIE_MAX_AGE,
                path="/"
            )

        return {"message": "Preferences saved", "preferences": preferences}

    return router
