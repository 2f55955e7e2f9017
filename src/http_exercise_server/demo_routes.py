"""
Stateless demonstration routes: endpoint listing, header echo, bearer-token
check, file download and conditional caching.
"""

import time
import uuid
import logging
from email.utils import formatdate

from fastapi import APIRouter, Depends, Request, Response

from .auth_middleware import require_bearer_token
from .core import Config, render_json
from .user_service import UserService

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "GET /users": "List all users",
    "GET /users/:id": "Get user by ID",
    "POST /users": "Create new user",
    "PUT /users/:id": "Replace user",
    "PATCH /users/:id": "Update user",
    "DELETE /users/:id": "Delete user",
    "POST /login": "Login (username: admin, password: password)",
    "GET /session": "Check session",
    "POST /logout": "Logout",
    "GET /profile": "Get profile (requires session)",
    "POST /preferences": "Set preferences (requires session)",
    "GET /headers": "Echo request headers",
    "GET /protected": "Protected route (requires Bearer token)",
    "GET /download": "Download users as JSON file",
    "GET /cache": "Caching demo",
}

ECHOED_HEADERS = ["user-agent", "accept", "accept-language", "authorization"]


def now_ms() -> int:
    """Current epoch time in milliseconds."""
    return int(time.time() * 1000)


def make_etag(user_count: int, timestamp_ms: int) -> str:
    """
    Validator for the cache demo.

    Embeds the generation time, so only a repeat within the same
    millisecond can ever match.
    """
    return f'"{user_count}-{timestamp_ms}"'


def create_demo_router(user_service: UserService) -> APIRouter:
    """
    Create FastAPI router for the stateless demo endpoints.

    Args:
        user_service: UserService instance (read-only use)
    """
    router = APIRouter(tags=["demo"])

    @router.get("/")
    async def root():
        return {
            "message": "Welcome to the HTTP Exercise Server!",
            "endpoints": ENDPOINTS
        }

    @router.get("/headers")
    async def echo_headers(request: Request, response: Response):
        """Reflect selected and all request headers back to the caller."""
        request_headers = {name: request.headers.get(name) for name in ECHOED_HEADERS}
        request_headers["all-headers"] = dict(request.headers)

        response.headers["X-Custom-Header"] = "Hello from server!"
        response.headers["X-Request-Id"] = uuid.uuid4().hex[:12]

        return {
            "message": "Request headers received",
            "headers": request_headers
        }

    @router.get("/protected")
    async def protected(token: str = Depends(require_bearer_token)):
        return {
            "message": "Access granted!",
            "user": {"name": "Authenticated User"}
        }

    @router.get("/download")
    async def download():
        """Serve the user list as an attachment."""
        data = render_json(await user_service.list_users()).encode("utf-8")
        return Response(
            content=data,
            media_type="application/json",
            headers={
                "Content-Disposition": 'attachment; filename="users.json"',
                "Content-Length": str(len(data))
            }
        )

    @router.get("/cache")
    async def cache_demo(request: Request):
        etag = make_etag(await user_service.count(), now_ms())

        if request.headers.get("if-none-match") == etag:
            logger.debug(f"[CACHE] Validator matched: {etag}")
            return Response(status_code=304)

        content = render_json({"data": f"This response can be cached for {Config.CACHE_MAX_AGE} seconds"})
        return Response(
            content=content,
            media_type="application/json",
            headers={
                "Cache-Control": f"public, max-age={Config.CACHE_MAX_AGE}",
                "ETag": etag,
                "Last-Modified": formatdate(usegmt=True)
            }
        )

    return router
