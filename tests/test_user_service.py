"""
Unit tests for UserService
"""

import asyncio
import pytest

from http_exercise_server.user_service import (
    UserService,
    User,
    UserValidationError,
    UserNotFoundError,
    DuplicateEmailError,
)


@pytest.fixture
def user_service():
    """Create a UserService seeded with the two demo users."""
    return UserService.with_seed_users()


class TestUser:
    """Test User dataclass"""

    def test_to_dict(self):
        user = User(id=7, name="Ann", email="a@x.com")
        assert user.to_dict() == {"id": 7, "name": "Ann", "email": "a@x.com"}


@pytest.mark.asyncio
class TestUserService:
    """Test UserService functionality."""

    async def test_seed_users(self, user_service):
        users = await user_service.list_users()

        assert [u["id"] for u in users] == [1, 2]
        assert users[0] == {"id": 1, "name": "John Doe", "email": "john@example.com"}
        assert users[1]["email"] == "jane@example.com"
        assert await user_service.count() == 2

    async def test_empty_store(self):
        service = UserService()
        assert await service.list_users() == []
        created = await service.create_user("Ann", "a@x.com")
        assert created["id"] == 1

    async def test_get_user(self, user_service):
        user = await user_service.get_user(2)
        assert user["name"] == "Jane Smith"

    async def test_get_user_not_found(self, user_service):
        with pytest.raises(UserNotFoundError) as exc_info:
            await user_service.get_user(99)
        assert str(exc_info.value) == "User with ID 99 not found"

    async def test_create_user_assigns_next_id(self, user_service):
        user = await user_service.create_user("Ann", "a@x.com")

        assert user == {"id": 3, "name": "Ann", "email": "a@x.com"}
        assert await user_service.count() == 3

    @pytest.mark.parametrize("name,email", [
        (None, "a@x.com"),
        ("Ann", None),
        ("", "a@x.com"),
        ("Ann", ""),
    ])
    async def test_create_user_requires_name_and_email(self, user_service, name, email):
        with pytest.raises(UserValidationError, match="Name and email are required"):
            await user_service.create_user(name, email)
        assert await user_service.count() == 2

    async def test_create_duplicate_email_conflicts_regardless_of_name(self, user_service):
        with pytest.raises(DuplicateEmailError, match="Email already exists"):
            await user_service.create_user("Somebody Else", "john@example.com")
        assert await user_service.count() == 2

    async def test_ids_strictly_increase(self, user_service):
        ids = []
        for i in range(5):
            ids.append((await user_service.create_user(f"User {i}", f"u{i}@x.com"))["id"])

        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)
        assert ids[0] > 2

    async def test_ids_not_reused_after_delete(self, user_service):
        created = await user_service.create_user("Ann", "a@x.com")
        await user_service.delete_user(created["id"])

        again = await user_service.create_user("Ann", "a@x.com")
        assert again["id"] == created["id"] + 1

    async def test_replace_user(self, user_service):
        user = await user_service.replace_user(1, "Johnny", "johnny@example.com")

        assert user == {"id": 1, "name": "Johnny", "email": "johnny@example.com"}
        assert await user_service.get_user(1) == user

    async def test_replace_user_validation_before_lookup(self, user_service):
        """Missing fields are reported even for an unknown id"""
        with pytest.raises(UserValidationError, match="required for PUT"):
            await user_service.replace_user(99, "Ann", "")

    async def test_replace_user_not_found(self, user_service):
        with pytest.raises(UserNotFoundError):
            await user_service.replace_user(99, "Ann", "a@x.com")

    async def test_replace_user_keeping_own_email(self, user_service):
        user = await user_service.replace_user(1, "Johnny", "john@example.com")
        assert user["email"] == "john@example.com"

    async def test_replace_user_email_of_other_user_conflicts(self, user_service):
        with pytest.raises(DuplicateEmailError):
            await user_service.replace_user(1, "Johnny", "jane@example.com")
        assert (await user_service.get_user(1))["name"] == "John Doe"

    async def test_update_user_partial(self, user_service):
        user = await user_service.update_user(1, {"name": "Johnny"})
        assert user == {"id": 1, "name": "Johnny", "email": "john@example.com"}

        user = await user_service.update_user(1, {"email": "j@x.com"})
        assert user == {"id": 1, "name": "Johnny", "email": "j@x.com"}

    async def test_update_user_never_clears_fields(self, user_service):
        """Empty or absent values leave the field untouched"""
        user = await user_service.update_user(2, {"name": "", "email": None})
        assert user == {"id": 2, "name": "Jane Smith", "email": "jane@example.com"}

        user = await user_service.update_user(2, {})
        assert user == {"id": 2, "name": "Jane Smith", "email": "jane@example.com"}

    async def test_update_user_not_found(self, user_service):
        with pytest.raises(UserNotFoundError):
            await user_service.update_user(99, {"name": "X"})

    async def test_update_user_email_of_other_user_conflicts(self, user_service):
        with pytest.raises(DuplicateEmailError):
            await user_service.update_user(2, {"email": "john@example.com"})

    async def test_delete_then_get_not_found(self, user_service):
        await user_service.delete_user(1)

        with pytest.raises(UserNotFoundError):
            await user_service.get_user(1)
        assert [u["id"] for u in await user_service.list_users()] == [2]

    async def test_delete_unknown_user(self, user_service):
        with pytest.raises(UserNotFoundError):
            await user_service.delete_user(99)

    async def test_returned_records_are_copies(self, user_service):
        user = await user_service.get_user(1)
        user["name"] = "Mutated"
        assert (await user_service.get_user(1))["name"] == "John Doe"

    async def test_concurrent_creates_get_unique_ids(self, user_service):
        results = await asyncio.gather(*[
            user_service.create_user(f"User {i}", f"c{i}@x.com") for i in range(20)
        ])
        ids = [r["id"] for r in results]
        assert sorted(ids) == list(range(3, 23))

    async def test_concurrent_creates_same_email_single_winner(self, user_service):
        results = await asyncio.gather(
            *[user_service.create_user(f"User {i}", "same@x.com") for i in range(5)],
            return_exceptions=True
        )
        created = [r for r in results if isinstance(r, dict)]
        conflicts = [r for r in results if isinstance(r, DuplicateEmailError)]
        assert len(created) == 1
        assert len(conflicts) == 4
