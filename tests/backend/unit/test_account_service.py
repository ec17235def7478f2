"""
Unit tests for AccountService against an in-memory database.
"""
import pytest

from notekeeper.core.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
)
from notekeeper.core.security import verify_password
from notekeeper.models.user import User


pytestmark = pytest.mark.asyncio


async def _register(services, username="Alice", email="Alice@Example.com", password="Secret#123"):
    return await services.accounts.register("Alice Liddell", email, username, password)


async def test_register_normalizes_and_hides_secrets(services, db):
    out = await _register(services)
    assert out.username == "alice"
    assert out.email == "alice@example.com"
    dumped = out.model_dump()
    assert "password" not in dumped and "passwordHash" not in dumped
    assert "refreshToken" not in dumped

    stored = await User.get(username="alice")
    assert stored.password_hash != "Secret#123"
    assert verify_password("Secret#123", stored.password_hash)
    assert stored.refresh_token is None


@pytest.mark.parametrize(
    "fields",
    [
        ("", "a@example.com", "a", "pw"),
        ("A", "   ", "a", "pw"),
        ("A", "a@example.com", None, "pw"),
        ("A", "a@example.com", "a", ""),
    ],
)
async def test_register_requires_all_fields(services, db, fields):
    with pytest.raises(BadRequestError):
        await services.accounts.register(*fields)


async def test_register_conflicts_on_username_any_case(services, db):
    await _register(services)
    with pytest.raises(ConflictError):
        await _register(services, username="ALICE", email="other@example.com")


async def test_register_conflicts_on_email_any_case(services, db):
    await _register(services)
    with pytest.raises(ConflictError):
        await _register(services, username="bob", email="ALICE@EXAMPLE.COM")


async def test_login_by_username_or_email(services, db):
    await _register(services)
    user, pair = await services.accounts.login(None, "ALICE", "Secret#123")
    assert user.username == "alice"
    assert (await User.get(username="alice")).refresh_token == pair.refresh_token

    user, _ = await services.accounts.login("alice@example.com", None, "Secret#123")
    assert user.email == "alice@example.com"


async def test_login_errors(services, db):
    await _register(services)
    with pytest.raises(BadRequestError):
        await services.accounts.login(None, None, "Secret#123")
    with pytest.raises(BadRequestError):
        await services.accounts.login(None, "alice", None)
    with pytest.raises(NotFoundError):
        await services.accounts.login(None, "nobody", "Secret#123")
    with pytest.raises(UnauthorizedError):
        await services.accounts.login(None, "alice", "wrong")


async def test_logout_is_idempotent(services, db):
    await _register(services)
    await services.accounts.login(None, "alice", "Secret#123")
    user = await User.get(username="alice")

    await services.accounts.logout(user)
    await services.accounts.logout(user)
    assert (await User.get(id=user.id)).refresh_token is None


async def test_current_user_and_auth_status(services, db):
    await _register(services)
    user = await User.get(username="alice")

    assert services.accounts.get_current_user(user).username == "alice"
    with pytest.raises(BadRequestError):
        services.accounts.get_current_user(None)

    assert services.accounts.check_auth_status(user) == (True, 200)
    assert services.accounts.check_auth_status(None) == (False, 400)


async def test_update_account_details(services, db):
    await _register(services)
    await _register(services, username="bob", email="bob@example.com")
    alice = await User.get(username="alice")

    out = await services.accounts.update_account_details(alice, "  Alice L.  ", "New@Example.com")
    assert out.fullName == "Alice L."
    assert out.email == "new@example.com"

    with pytest.raises(BadRequestError):
        await services.accounts.update_account_details(alice, "", "x@example.com")
    with pytest.raises(ConflictError):
        await services.accounts.update_account_details(alice, "Alice", "BOB@example.com")

    # Keeping one's own email is not a conflict
    out = await services.accounts.update_account_details(alice, "Alice", "new@example.com")
    assert out.email == "new@example.com"


async def test_change_password_only_touches_hash(services, db):
    await _register(services)
    _, pair = await services.accounts.login(None, "alice", "Secret#123")
    alice = await User.get(username="alice")

    with pytest.raises(BadRequestError):
        await services.accounts.change_current_password(alice, "wrong", "NewSecret#1")
    with pytest.raises(BadRequestError):
        await services.accounts.change_current_password(alice, "Secret#123", "  ")

    await services.accounts.change_current_password(alice, "Secret#123", "NewSecret#1")
    stored = await User.get(id=alice.id)
    assert verify_password("NewSecret#1", stored.password_hash)
    assert stored.refresh_token == pair.refresh_token
    assert stored.email == alice.email

    with pytest.raises(UnauthorizedError):
        await services.accounts.login(None, "alice", "Secret#123")


async def test_register_accepts_long_full_name(services, db):
    full_name = "F" * 200
    out = await services.accounts.register(full_name, "long@example.com", "longname", "Secret#123")
    assert out.fullName == full_name


async def test_identifier_length_limits(services, db):
    with pytest.raises(BadRequestError):
        await services.accounts.register("A", "a@example.com", "u" * 65, "Secret#123")
    with pytest.raises(BadRequestError):
        await services.accounts.register("A", "e" * 250 + "@example.com", "a", "Secret#123")

    # Too long to belong to any account
    with pytest.raises(NotFoundError):
        await services.accounts.login(None, "u" * 65, "Secret#123")


async def test_repository_maps_field_validation_to_bad_request(services, db):
    with pytest.raises(BadRequestError):
        await services.users.create(
            username="u" * 100,
            email="x@example.com",
            full_name="X",
            password_hash="hash",
        )
    assert await User.filter(email="x@example.com").count() == 0
