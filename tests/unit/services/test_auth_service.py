"""
Unit tests for AuthService.

Tests login for accounts and the break-glass administrator,
registration with the password policy, and token authentication.
"""
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from site_registry.application.services.auth_service import AuthService, BreakGlassCredentials
from site_registry.domain.entities.user import Identity, IdentityKind, User, UserRole
from site_registry.domain.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    WeakPasswordError,
)


@pytest.fixture
def password_hasher():
    """Hasher that prefixes instead of hashing."""
    hasher = MagicMock()
    hasher.hash = MagicMock(side_effect=lambda password: f"hashed:{password}")
    hasher.verify = MagicMock(side_effect=lambda password, hashed: hashed == f"hashed:{password}")
    return hasher


@pytest.fixture
def token_service():
    tokens = MagicMock()
    tokens.issue_token = MagicMock(return_value="signed.token.value")
    tokens.verify_token = MagicMock()
    return tokens


@pytest.fixture
def break_glass():
    return BreakGlassCredentials(username="root", password="Br3akGlass!")


@pytest.fixture
def users_repo(mock_uow):
    repo = mock_uow.users
    repo.get_by_username = AsyncMock(return_value=None)
    repo.get_by_id = AsyncMock(return_value=None)
    repo.add = AsyncMock(side_effect=lambda user: user)
    return repo


@pytest.fixture
def service(mock_uow, users_repo, password_hasher, token_service, break_glass):
    return AuthService(
        uow=mock_uow,
        password_hasher=password_hasher,
        token_service=token_service,
        break_glass=break_glass,
    )


@pytest.fixture
def alice():
    return User(username="alice", password_hash="hashed:Secret123", role=UserRole.ADMIN)


class TestBreakGlassCredentials:
    """Test the environment administrator."""

    def test_matches_both_values(self, break_glass):
        assert break_glass.matches("root", "Br3akGlass!")
        assert not break_glass.matches("root", "wrong")
        assert not break_glass.matches("admin", "Br3akGlass!")

    def test_identity_is_admin(self, break_glass):
        identity = break_glass.to_identity()

        assert identity.is_admin
        assert identity.is_break_glass
        assert identity.user_id is None


class TestLogin:
    """Test login."""

    @pytest.mark.asyncio
    async def test_break_glass_login(self, service, users_repo, token_service):
        result = await service.login("root", "Br3akGlass!")

        assert result.token == "signed.token.value"
        assert result.identity.kind == IdentityKind.BREAK_GLASS
        assert result.identity.to_summary() == {"username": "root", "role": "admin"}
        users_repo.get_by_username.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_account_login(self, service, users_repo, alice):
        users_repo.get_by_username.return_value = alice

        result = await service.login(" alice ", "Secret123")

        assert result.identity.user_id == alice.id
        assert result.identity.role == UserRole.ADMIN
        users_repo.get_by_username.assert_awaited_once_with("alice")

    @pytest.mark.asyncio
    async def test_wrong_password(self, service, users_repo, alice):
        users_repo.get_by_username.return_value = alice

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await service.login("alice", "Secret124")

        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_unknown_user_same_error(self, service):
        """Test unknown usernames are indistinguishable from wrong passwords."""
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await service.login("nobody", "Secret123")

        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_break_glass_disabled(self, mock_uow, users_repo, password_hasher, token_service):
        service = AuthService(mock_uow, password_hasher, token_service, break_glass=None)

        with pytest.raises(InvalidCredentialsError):
            await service.login("root", "Br3akGlass!")


class TestRegister:
    """Test registration."""

    @pytest.mark.asyncio
    async def test_register_creates_plain_user(self, service, users_repo, mock_uow):
        result = await service.register("bob", "Secret123")

        saved = users_repo.add.await_args.args[0]
        assert saved.username == "bob"
        assert saved.role == UserRole.USER
        assert saved.password_hash == "hashed:Secret123"
        assert result.identity.role == UserRole.USER
        mock_uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_existing_username(self, service, users_repo, alice):
        users_repo.get_by_username.return_value = alice

        with pytest.raises(DuplicateUserError) as exc_info:
            await service.register("alice", "Secret123")

        assert exc_info.value.message == "User already exists"

    @pytest.mark.asyncio
    async def test_break_glass_username_reserved(self, service, users_repo):
        with pytest.raises(DuplicateUserError):
            await service.register("root", "Secret123")

        users_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_weak_password(self, service, users_repo, mock_uow):
        with pytest.raises(WeakPasswordError) as exc_info:
            await service.register("bob", "secret")

        assert exc_info.value.problems == [
            "Password must be at least 8 characters long",
            "Password must contain a number",
            "Password must contain an uppercase letter",
        ]
        users_repo.add.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()


class TestAuthenticate:
    """Test resolving tokens to identities."""

    @pytest.mark.asyncio
    async def test_account_reloaded(self, service, users_repo, token_service, alice):
        """Test the stored role wins over the role in the token."""
        token_service.verify_token.return_value = Identity(
            username="alice", role=UserRole.USER, user_id=alice.id
        )
        users_repo.get_by_id.return_value = alice

        identity = await service.authenticate("token")

        assert identity.role == UserRole.ADMIN
        users_repo.get_by_id.assert_awaited_once_with(alice.id)

    @pytest.mark.asyncio
    async def test_deleted_account(self, service, token_service):
        token_service.verify_token.return_value = Identity(
            username="ghost", role=UserRole.USER, user_id=uuid4()
        )

        with pytest.raises(InvalidTokenError) as exc_info:
            await service.authenticate("token")

        assert exc_info.value.message == "User not found"

    @pytest.mark.asyncio
    async def test_break_glass_token(self, service, break_glass, token_service):
        token_service.verify_token.return_value = break_glass.to_identity()

        identity = await service.authenticate("token")

        assert identity.is_break_glass

    @pytest.mark.asyncio
    async def test_break_glass_token_after_removal(self, mock_uow, users_repo, password_hasher, token_service, break_glass):
        """Test break-glass tokens stop working once the credentials are unset."""
        token_service.verify_token.return_value = break_glass.to_identity()
        service = AuthService(mock_uow, password_hasher, token_service, break_glass=None)

        with pytest.raises(InvalidTokenError):
            await service.authenticate("token")

    @pytest.mark.asyncio
    async def test_invalid_token_propagates(self, service, token_service):
        token_service.verify_token.side_effect = InvalidTokenError("Token has expired")

        with pytest.raises(InvalidTokenError) as exc_info:
            await service.authenticate("token")

        assert exc_info.value.message == "Token has expired"
