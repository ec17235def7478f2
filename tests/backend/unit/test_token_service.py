"""
Unit tests for TokenService: issuing, verifying and rotating token pairs.
"""
import uuid

import pytest

from notekeeper.config import Settings
from notekeeper.core.errors import UnauthorizedError
from notekeeper.core.security import REFRESH_TOKEN_TYPE, encode_token
from notekeeper.models.user import User
from notekeeper.repositories import UserRepository
from notekeeper.services import TokenService


pytestmark = pytest.mark.asyncio


@pytest.fixture
def token_service():
    settings = Settings(
        access_token_secret="access-secret",
        refresh_token_secret="refresh-secret",
        access_token_expire_seconds=60,
        refresh_token_expire_seconds=120,
    )
    return TokenService(UserRepository(), settings)


async def test_issue_pair_persists_refresh_token(token_service, create_user):
    user, _ = await create_user()
    pair = await token_service.issue_pair(user)

    stored = await User.get(id=user.id)
    assert stored.refresh_token == pair.refresh_token
    assert pair.access_token != pair.refresh_token


async def test_issue_pair_overwrites_previous_refresh_token(token_service, create_user):
    user, _ = await create_user()
    first = await token_service.issue_pair(user)
    second = await token_service.issue_pair(user)

    stored = await User.get(id=user.id)
    assert stored.refresh_token == second.refresh_token
    assert first.refresh_token != second.refresh_token


async def test_verify_access_returns_identity(token_service, create_user):
    user, _ = await create_user()
    pair = await token_service.issue_pair(user)

    claims = token_service.verify_access(pair.access_token)
    assert claims["sub"] == str(user.id)
    assert claims["username"] == user.username
    assert claims["email"] == user.email


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
async def test_verify_access_rejects_missing_or_malformed(token_service, token):
    with pytest.raises(UnauthorizedError):
        token_service.verify_access(token)


async def test_verify_access_rejects_refresh_token(token_service, create_user):
    user, _ = await create_user()
    pair = await token_service.issue_pair(user)
    with pytest.raises(UnauthorizedError):
        token_service.verify_access(pair.refresh_token)


async def test_refresh_rotates_and_rejects_reuse(token_service, create_user):
    user, _ = await create_user()
    pair = await token_service.issue_pair(user)

    refreshed_user, new_pair = await token_service.refresh(pair.refresh_token)
    assert refreshed_user.id == user.id
    assert new_pair.refresh_token != pair.refresh_token
    assert (await User.get(id=user.id)).refresh_token == new_pair.refresh_token

    with pytest.raises(UnauthorizedError) as exc_info:
        await token_service.refresh(pair.refresh_token)
    assert exc_info.value.message == "Refresh token is expired or used"

    # The rotated-in token keeps working
    _, third = await token_service.refresh(new_pair.refresh_token)
    assert third.refresh_token != new_pair.refresh_token


async def test_refresh_rejects_unknown_user(token_service, db):
    token = encode_token({"sub": str(uuid.uuid4())}, "refresh-secret", 60, REFRESH_TOKEN_TYPE)
    with pytest.raises(UnauthorizedError):
        await token_service.refresh(token)


async def test_refresh_rejects_expired_token(token_service, create_user):
    user, _ = await create_user()
    token = encode_token({"sub": str(user.id)}, "refresh-secret", -5, REFRESH_TOKEN_TYPE)
    await User.filter(id=user.id).update(refresh_token=token)
    with pytest.raises(UnauthorizedError):
        await token_service.refresh(token)


async def test_refresh_rejects_token_signed_with_access_secret(token_service, create_user):
    user, _ = await create_user()
    pair = await token_service.issue_pair(user)
    with pytest.raises(UnauthorizedError):
        await token_service.refresh(pair.access_token)


async def test_refresh_after_logout_clears_session(token_service, create_user):
    user, _ = await create_user()
    pair = await token_service.issue_pair(user)
    await UserRepository().set_refresh_token(user.id, None)
    with pytest.raises(UnauthorizedError):
        await token_service.refresh(pair.refresh_token)


async def test_refresh_requires_token(token_service):
    with pytest.raises(UnauthorizedError):
        await token_service.refresh(None)
