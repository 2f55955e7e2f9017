"""
API Routes for User Management

CRUD over the in-memory user store. Ids in paths are matched by the int
converter, so /users/abc matches no route and falls through to 404.
"""

from fastapi import APIRouter, HTTPException, Request, Response
import logging

from .core import read_json_body
from .user_service import (
    UserService,
    UserValidationError,
    UserNotFoundError,
    DuplicateEmailError,
)

logger = logging.getLogger(__name__)


def create_user_router(user_service: UserService) -> APIRouter:
    """
    Create FastAPI router for the /users endpoints.

    Args:
        user_service: UserService instance

    Returns:
        APIRouter with all user endpoints
    """
    router = APIRouter(tags=["users"])

    @router.get("/users")
    async def list_users():
        """List every user with a count (no pagination)."""
        users = await user_service.list_users()
        return {"users": users, "count": len(users)}

    @router.get("/users/{user_id:int}")
    async def get_user(user_id: int):
        try:
            return await user_service.get_user(user_id)
        except UserNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @router.post("/users", status_code=201)
    async def create_user(request: Request, response: Response):
        """
        Create a user.

        Request:
            - name: Display name (required)
            - email: Unique email (required)

        Returns:
            Created user, with a Location header pointing at it
        """
        body = await read_json_body(request)
        try:
            user = await user_service.create_user(body.get("name"), body.get("email"))
        except UserValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except DuplicateEmailError as e:
            raise HTTPException(status_code=409, detail=str(e))

        response.headers["Location"] = f"/users/{user['id']}"
        return user

    @router.put("/users/{user_id:int}")
    async def replace_user(user_id: int, request: Request):
        """Replace every field of a user."""
        body = await read_json_body(request)
        try:
            return await user_service.replace_user(user_id, body.get("name"), body.get("email"))
        except UserValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except UserNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except DuplicateEmailError as e:
            raise HTTPException(status_code=409, detail=str(e))

    @router.patch("/users/{user_id:int}")
    async def update_user(user_id: int, request: Request):
        """Update only the supplied fields of a user."""
        body = await read_json_body(request)
        try:
            return await user_service.update_user(user_id, body)
        except UserNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except DuplicateEmailError as e:
            raise HTTPException(status_code=409, detail=str(e))

    @router.delete("/users/{user_id:int}", status_code=204)
    async def delete_user(user_id: int):
        try:
            await user_service.delete_user(user_id)
        except UserNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return Response(status_code=204)

    return router
