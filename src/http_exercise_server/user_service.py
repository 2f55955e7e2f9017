"""
User Service Module

Owns the in-memory user collection and its id counter.

Record shape:
{
  "id": 3,                    # Assigned on create, never reused
  "name": "Ann",
  "email": "a@x.com"          # Unique across all users
}

Every read and mutation runs under a single asyncio.Lock so concurrent
requests on the event loop never observe a half-applied change.
"""

import asyncio
import logging
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, List, Iterable

logger = logging.getLogger(__name__)

SEED_USERS = [
    {"name": "John Doe", "email": "john@example.com"},
    {"name": "Jane Smith", "email": "jane@example.com"},
]


class UserValidationError(ValueError):
    """Required user fields are missing."""


class UserNotFoundError(LookupError):
    """No user with the requested id."""

    def __init__(self, user_id: int):
        super().__init__(f"User with ID {user_id} not found")
        self.user_id = user_id


class DuplicateEmailError(ValueError):
    """Email is already used by another user."""

    def __init__(self, email: str):
        super().__init__("Email already exists")
        self.email = email


@dataclass
class User:
    """A single user record"""
    id: int
    name: Any
    email: Any

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class UserService:
    """In-memory user store with an auto-incrementing id."""

    def __init__(self, seed: Optional[Iterable[Dict[str, Any]]] = None):
        """
        Initialize UserService.

        Args:
            seed: Initial users (name/email dicts); ids are assigned from 1
        """
        self._users: List[User] = []
        self._next_id = 1
        self._lock = asyncio.Lock()

        for entry in seed or []:
            self._users.append(User(id=self._next_id, name=entry["name"], email=entry["email"]))
            self._next_id += 1

    @classmethod
    def with_seed_users(cls) -> "UserService":
        """Store pre-populated with the two demo users (ids 1 and 2)."""
        return cls(seed=SEED_USERS)

    def _find(self, user_id: int) -> Optional[User]:
        for user in self._users:
            if user.id == user_id:
                return user
        return None

    def _email_taken(self, email: Any, exclude_id: Optional[int] = None) -> bool:
        return any(u.email == email and u.id != exclude_id for u in self._users)

    async def list_users(self) -> List[Dict[str, Any]]:
        """Return all users in insertion order."""
        async with self._lock:
            return [u.to_dict() for u in self._users]

    async def count(self) -> int:
        async with self._lock:
            return len(self._users)

    async def get_user(self, user_id: int) -> Dict[str, Any]:
        """
        Get a user by id.

        Raises:
            UserNotFoundError: If no user has this id
        """
        async with self._lock:
            user = self._find(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            return user.to_dict()

    async def create_user(self, name: Any, email: Any) -> Dict[str, Any]:
        """
        Create a user with the next sequential id.

        Raises:
            UserValidationError: If name or email is missing/empty
            DuplicateEmailError: If the email is already in use
        """
        if not name or not email:
            raise UserValidationError("Name and email are required")

        async with self._lock:
            if self._email_taken(email):
                logger.info(f"[UserService] Rejected create, email in use: {email}")
                raise DuplicateEmailError(email)

            user = User(id=self._next_id, name=name, email=email)
            self._next_id += 1
            self._users.append(user)

        logger.info(f"[UserService] Created user {user.id}")
        return user.to_dict()

    async def replace_user(self, user_id: int, name: Any, email: Any) -> Dict[str, Any]:
        """
        Overwrite every field of an existing user; the id is kept.

        Raises:
            UserValidationError: If name or email is missing/empty
            UserNotFoundError: If no user has this id
            DuplicateEmailError: If another user already has the email
        """
        if not name or not email:
            raise UserValidationError("Name and email are required for PUT")

        async with self._lock:
            user = self._find(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            if self._email_taken(email, exclude_id=user_id):
                raise DuplicateEmailError(email)

            user.name = name
            user.email = email
            logger.info(f"[UserService] Replaced user {user_id}")
            return user.to_dict()

    async def update_user(self, user_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Partially update a user. Only truthy name/email values are applied;
        anything not supplied is left as it was.

        Raises:
            UserNotFoundError: If no user has this id
            DuplicateEmailError: If another user already has the new email
        """
        name = changes.get("name")
        email = changes.get("email")

        async with self._lock:
            user = self._find(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            if email and self._email_taken(email, exclude_id=user_id):
                raise DuplicateEmailError(email)

            if name:
                user.name = name
            if email:
                user.email = email
            logger.info(f"[UserService] Updated user {user_id}")
            return user.to_dict()

    async def delete_user(self, user_id: int) -> None:
        """
        Remove a user. Its id is never handed out again.

        Raises:
            UserNotFoundError: If no user has this id
        """
        async with self._lock:
            user = self._find(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            self._users.remove(user)
        logger.info(f"[UserService] Deleted user {user_id}")
