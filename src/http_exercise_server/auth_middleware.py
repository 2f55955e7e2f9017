"""
Authentication helpers for the session and bearer-token routes.

Reads the session cookie and checks the Authorization header.
"""

from fastapi import HTTPException, Header, Request
from typing import Optional, Dict
import logging

from .core import Config, parse_cookies

logger = logging.getLogger(__name__)

SESSION_COOKIE = "sessionId"
USERNAME_COOKIE = "username"
THEME_COOKIE = "theme"


def get_cookies(request: Request) -> Dict[str, str]:
    """Cookies presented by the client, parsed from the raw Cookie header."""
    return parse_cookies(request.headers.get("cookie"))


def get_session_id(request: Request) -> Optional[str]:
    """Session id from the sessionId cookie, or None"""
    return get_cookies(request).get(SESSION_COOKIE) or None


async def require_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """
    Check the Authorization header against the configured bearer token.

    Returns:
        The accepted token

    Raises:
        HTTPException: 401 if the header is missing or not a Bearer
            credential, 403 if the token is wrong
    """
    if not authorization:
        logger.warning("[PROTECTED] Missing authorization header")
        raise HTTPException(
            status_code=401,
            detail="Authorization required",
            headers={"WWW-Authenticate": 'Bearer realm="api"'}
        )

    if not authorization.startswith("Bearer "):
        logger.warning("[PROTECTED] Invalid authorization header format")
        raise HTTPException(status_code=401, detail="Invalid authorization format")

    token = authorization[len("Bearer "):]
    if token != Config.BEARER_TOKEN:
        logger.warning("[PROTECTED] Rejected bearer token")
        raise HTTPException(status_code=403, detail="Invalid token")

    return token
