"""
Unit tests for SQLAlchemyUserRepository.
"""
import pytest

from site_registry.domain.entities.user import User, UserRole
from site_registry.domain.exceptions import DuplicateUserError


class TestUserRepository:
    """Test user persistence."""

    @pytest.mark.asyncio
    async def test_add_and_lookup(self, uow_factory):
        user = User(username="alice", password_hash="hash", role=UserRole.ADMIN)

        async with uow_factory() as uow:
            await uow.users.add(user)
            await uow.commit()

        async with uow_factory() as uow:
            by_name = await uow.users.get_by_username("alice")
            by_id = await uow.users.get_by_id(user.id)

        assert by_name.id == user.id
        assert by_id.role == UserRole.ADMIN
        assert by_id.password_hash == "hash"

    @pytest.mark.asyncio
    async def test_unknown_user(self, uow_factory):
        async with uow_factory() as uow:
            assert await uow.users.get_by_username("nobody") is None

    @pytest.mark.asyncio
    async def test_duplicate_username(self, uow_factory):
        async with uow_factory() as uow:
            await uow.users.add(User(username="alice", password_hash="hash"))
            await uow.commit()

        async with uow_factory() as uow:
            with pytest.raises(DuplicateUserError):
                await uow.users.add(User(username="alice", password_hash="other"))
