# notekeeper/services/token_service.py
"""
Token service: issues, verifies and rotates access/refresh token pairs.

Access tokens are stateless. Refresh tokens are valid only while they equal the
value stored on the user, so every successful login or refresh revokes the
previous refresh token (one active session per user).
"""
import logging
import secrets
import uuid
from dataclasses import dataclass

import jwt  # PyJWT

from notekeeper.config import Settings
from notekeeper.core.errors import InternalError, UnauthorizedError
from notekeeper.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    decode_token,
    encode_token,
)
from notekeeper.models.user import User
from notekeeper.repositories.user_repository import UserRepository

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService:
    def __init__(self, users: UserRepository, settings: Settings):
        self.users = users
        self.access_secret = settings.access_token_secret
        self.refresh_secret = settings.refresh_token_secret
        self.access_ttl = settings.access_token_expire_seconds
        self.refresh_ttl = settings.refresh_token_expire_seconds

    def _sign_pair(self, user: User) -> TokenPair:
        access = encode_token(
            {"sub": str(user.id), "username": user.username, "email": user.email},
            self.access_secret,
            self.access_ttl,
            ACCESS_TOKEN_TYPE,
        )
        refresh = encode_token({"sub": str(user.id)}, self.refresh_secret, self.refresh_ttl, REFRESH_TOKEN_TYPE)
        return TokenPair(access_token=access, refresh_token=refresh)

    async def issue_pair(self, user: User) -> TokenPair:
        """
        Sign a new pair and store the refresh token on the user, replacing any
        previous one. Only the refresh_token column is written.

        Raises:
            InternalError: If the refresh token could not be persisted
        """
        pair = self._sign_pair(user)
        try:
            stored = await self.users.set_refresh_token(user.id, pair.refresh_token)
        except Exception as exc:
            logger.exception("[tokens] failed to persist refresh token for user=%s", user.id)
            raise InternalError("Something went wrong while generating refresh and access tokens") from exc
        if not stored:
            raise InternalError("Something went wrong while generating refresh and access tokens")
        return pair

    def verify_access(self, token: str | None) -> dict:
        """
        Validate an access token and return its claims.

        Raises:
            UnauthorizedError: If the token is missing, malformed, expired or badly signed
        """
        if not token:
            raise UnauthorizedError("Unauthorized Request")
        try:
            return decode_token(token, self.access_secret, ACCESS_TOKEN_TYPE)
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Access token expired")
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid Access Token")

    async def refresh(self, presented: str | None) -> tuple[User, TokenPair]:
        """
        Exchange a refresh token for a new pair.

        The presented token must verify AND match the stored one. A mismatch
        means the token was already rotated out (or the user logged out), which
        is treated as reuse and rejected.

        Raises:
            UnauthorizedError: Missing, invalid, expired, unknown user, or reused token
        """
        if not presented:
            raise UnauthorizedError("Unauthorized Request")
        try:
            claims = decode_token(presented, self.refresh_secret, REFRESH_TOKEN_TYPE)
            user_id = uuid.UUID(claims["sub"])
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Refresh token expired")
        except (jwt.InvalidTokenError, ValueError):
            raise UnauthorizedError("Invalid refresh token")

        user = await self.users.get_by_id(user_id)
        if user is None:
            raise UnauthorizedError("Invalid refresh token")

        if not user.refresh_token or not secrets.compare_digest(presented, user.refresh_token):
            logger.warning("[tokens] refresh token reuse or stale token for user=%s", user.id)
            raise UnauthorizedError("Refresh token is expired or used")

        pair = self._sign_pair(user)
        if not await self.users.swap_refresh_token(user.id, presented, pair.refresh_token):
            # Another request rotated the same token first
            logger.warning("[tokens] concurrent refresh lost the race for user=%s", user.id)
            raise UnauthorizedError("Refresh token is expired or used")
        return user, pair
