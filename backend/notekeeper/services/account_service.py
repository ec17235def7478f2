# notekeeper/services/account_service.py
"""
Account service: registration, login, logout, token refresh and profile changes.

Orchestrates the user repository and the token service. Every method either
returns plain data for the route to wrap in the response envelope or raises an
ApiError subclass.
"""
import logging
from typing import Optional

from tortoise.exceptions import IntegrityError

from notekeeper.core.errors import (
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from notekeeper.core.security import hash_password, verify_password
from notekeeper.models.user import EMAIL_MAX_LENGTH, USERNAME_MAX_LENGTH, User
from notekeeper.repositories.user_repository import UserRepository
from notekeeper.schemas.user import UserOut
from notekeeper.services.token_service import TokenPair, TokenService

logger = logging.getLogger("uvicorn.error")


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _check_identity_lengths(username: Optional[str] = None, email: Optional[str] = None) -> None:
    # Bounded by the unique columns on the users table
    if username and len(username) > USERNAME_MAX_LENGTH:
        raise BadRequestError(f"Username must be at most {USERNAME_MAX_LENGTH} characters")
    if email and len(email) > EMAIL_MAX_LENGTH:
        raise BadRequestError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")


class AccountService:
    def __init__(self, users: UserRepository, tokens: TokenService):
        self.users = users
        self.tokens = tokens

    async def register(
        self,
        full_name: Optional[str],
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
    ) -> UserOut:
        """
        Create a new account.

        Username and email are lowercased before the uniqueness check and
        before storage, so uniqueness is case-insensitive for both.

        Raises:
            BadRequestError: Any field empty after trimming
            ConflictError: Username or email already taken
        """
        full_name, email, username = _clean(full_name), _clean(email).lower(), _clean(username).lower()
        if not all([full_name, email, username, _clean(password)]):
            raise BadRequestError("All Fields are required")
        _check_identity_lengths(username, email)

        if await self.users.exists_with(username=username, email=email):
            raise ConflictError("User with username or email already exists")

        try:
            user = await self.users.create(
                username=username,
                email=email,
                full_name=full_name,
                password_hash=hash_password(password),
            )
        except IntegrityError:
            # Unique constraint fired after the check above (concurrent registration)
            raise ConflictError("User with username or email already exists")

        created = await self.users.get_by_id(user.id)
        if created is None:
            raise InternalError("Something went wrong while registering the user")
        logger.info("[accounts] registered user=%s id=%s", created.username, created.id)
        return UserOut.from_model(created)

    async def login(
        self,
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
    ) -> tuple[UserOut, TokenPair]:
        """
        Authenticate by email or username and issue a fresh token pair.

        Raises:
            BadRequestError: No identifier or no password supplied
            NotFoundError: No user with that email/username
            UnauthorizedError: Wrong password
        """
        email, username = _clean(email).lower(), _clean(username).lower()
        if not (email or username):
            raise BadRequestError("Email or username required")
        if not password:
            raise BadRequestError("Password required")
        if len(username) > USERNAME_MAX_LENGTH or len(email) > EMAIL_MAX_LENGTH:
            raise NotFoundError("User does not exist")

        user = await self.users.find_by_identifier(username=username or None, email=email or None)
        if user is None:
            raise NotFoundError("User does not exist")
        if not verify_password(password, user.password_hash):
            raise UnauthorizedError("Invalid User Credentials")

        pair = await self.tokens.issue_pair(user)
        logger.info("[accounts] login user=%s", user.username)
        return UserOut.from_model(user), pair

    async def refresh_session(self, presented: Optional[str]) -> TokenPair:
        _, pair = await self.tokens.refresh(presented)
        return pair

    async def logout(self, user: User) -> None:
        """Forget the stored refresh token. Safe to call repeatedly."""
        await self.users.set_refresh_token(user.id, None)
        logger.info("[accounts] logout user=%s", user.username)

    def get_current_user(self, user: Optional[User]) -> UserOut:
        if user is None:
            raise BadRequestError("No User Logged In")
        return UserOut.from_model(user)

    def check_auth_status(self, user: Optional[User]) -> tuple[bool, int]:
        """Return (is_authenticated, status_code); never raises."""
        if user is None:
            return False, 400
        return True, 200

    async def update_account_details(
        self,
        user: User,
        full_name: Optional[str],
        email: Optional[str],
    ) -> UserOut:
        """
        Raises:
            BadRequestError: fullName or email missing
            ConflictError: Email already used by another account
        """
        full_name, email = _clean(full_name), _clean(email).lower()
        if not full_name or not email:
            raise BadRequestError("All Fields are required")
        _check_identity_lengths(email=email)

        if await self.users.exists_with(email=email, exclude_id=user.id):
            raise ConflictError("Email is already in use")

        try:
            updated = await self.users.update_details(user.id, full_name=full_name, email=email)
        except IntegrityError:
            raise ConflictError("Email is already in use")
        if updated is None:
            raise NotFoundError("User does not exist")
        return UserOut.from_model(updated)

    async def change_current_password(
        self,
        user: User,
        old_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        """
        Replace the password hash; no other field is touched.

        Raises:
            BadRequestError: Old password wrong or new password empty
        """
        if not _clean(new_password):
            raise BadRequestError("New password is required")

        # Re-read: the guard's copy may predate a concurrent password change
        current = await self.users.get_by_id(user.id)
        if current is None:
            raise NotFoundError("User does not exist")
        if not old_password or not verify_password(old_password, current.password_hash):
            raise BadRequestError("Invalid Password")

        await self.users.set_password_hash(user.id, hash_password(new_password))
