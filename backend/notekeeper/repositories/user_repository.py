# notekeeper/repositories/user_repository.py
"""
User repository: credential lookups and single-row updates on the users table.

Every mutation is one UPDATE filtered by primary key, so it relies only on the
database's per-row atomicity.
"""
import uuid
from typing import Optional

from tortoise import timezone
from tortoise.expressions import Q

from notekeeper.models.user import User
from notekeeper.repositories.base import field_validation_as_bad_request


def _identity_filter(username: Optional[str], email: Optional[str]) -> Optional[Q]:
    conditions = []
    if username:
        conditions.append(Q(username=username))
    if email:
        conditions.append(Q(email=email))
    if not conditions:
        return None
    return Q(*conditions, join_type="OR")


class UserRepository:
    """Database access for User records."""

    model = User

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.model.get_or_none(id=user_id)

    async def find_by_identifier(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[User]:
        """
        Find a user matching the username OR the email.

        Both values are expected to be normalized (lowercased) already; a None
        value is not used as a filter.
        """
        query = _identity_filter(username, email)
        if query is None:
            return None
        return await self.model.filter(query).first()

    async def exists_with(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> bool:
        query = _identity_filter(username, email)
        if query is None:
            return False
        qs = self.model.filter(query)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        return await qs.exists()

    async def create(self, *, username: str, email: str, full_name: str, password_hash: str) -> User:
        with field_validation_as_bad_request():
            return await self.model.create(
                username=username,
                email=email,
                full_name=full_name,
                password_hash=password_hash,
            )

    async def set_refresh_token(self, user_id: uuid.UUID, token: Optional[str]) -> bool:
        """Overwrite the stored refresh token (None clears it). Returns False if no row matched."""
        updated = await self.model.filter(id=user_id).update(
            refresh_token=token,
            updated_at=timezone.now(),
        )
        return updated > 0

    async def swap_refresh_token(self, user_id: uuid.UUID, expected: str, new: str) -> bool:
        """
        Replace the stored refresh token only if it still equals `expected`.

        Two concurrent refreshes presenting the same token race on this single
        UPDATE; only one of them can match.
        """
        updated = await self.model.filter(id=user_id, refresh_token=expected).update(
            refresh_token=new,
            updated_at=timezone.now(),
        )
        return updated > 0

    async def update_details(self, user_id: uuid.UUID, *, full_name: str, email: str) -> Optional[User]:
        with field_validation_as_bad_request():
            await self.model.filter(id=user_id).update(
                full_name=full_name,
                email=email,
                updated_at=timezone.now(),
            )
        return await self.get_by_id(user_id)

    async def set_password_hash(self, user_id: uuid.UUID, password_hash: str) -> bool:
        updated = await self.model.filter(id=user_id).update(
            password_hash=password_hash,
            updated_at=timezone.now(),
        )
        return updated > 0
