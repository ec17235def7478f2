# notekeeper/repositories/note_repository.py
"""
Note repository.

Mutations take the owner id and fold it into the WHERE clause, so a note can
only be changed by the query that also proves ownership. Callers get back the
number of affected rows and decide between "missing" and "not yours".
"""
import uuid
from typing import Optional

from tortoise import timezone

from notekeeper.models.note import Note
from notekeeper.repositories.base import field_validation_as_bad_request


class NoteRepository:
    """Database access for Note records."""

    model = Note

    async def get(self, note_id: uuid.UUID) -> Optional[Note]:
        return await self.model.get_or_none(id=note_id)

    async def create(self, *, owner_id: uuid.UUID, title: str, content: str) -> Note:
        with field_validation_as_bad_request():
            return await self.model.create(owner_id=owner_id, title=title, content=content)

    async def update_owned(self, note_id: uuid.UUID, owner_id: uuid.UUID, **fields) -> int:
        with field_validation_as_bad_request():
            return await self.model.filter(id=note_id, owner_id=owner_id).update(
                **fields,
                updated_at=timezone.now(),
            )

    async def set_pinned_if(
        self,
        note_id: uuid.UUID,
        owner_id: uuid.UUID,
        expected: bool,
        pinned: bool,
    ) -> int:
        """Compare-and-set on is_pinned; matches only while the flag still equals `expected`."""
        return await self.model.filter(id=note_id, owner_id=owner_id, is_pinned=expected).update(
            is_pinned=pinned,
            updated_at=timezone.now(),
        )

    async def delete_owned(self, note_id: uuid.UUID, owner_id: uuid.UUID) -> int:
        return await self.model.filter(id=note_id, owner_id=owner_id).delete()

    async def list_for_owner(self, owner_id: uuid.UUID, pinned_only: bool = False) -> list[Note]:
        qs = self.model.filter(owner_id=owner_id)
        if pinned_only:
            qs = qs.filter(is_pinned=True)
        return await qs.order_by("-created_at")
