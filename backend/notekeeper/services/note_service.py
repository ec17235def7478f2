# notekeeper/services/note_service.py
"""
Note service: create, update, delete, pin/unpin and list notes.

Ownership is enforced inside the mutating query (id AND owner). When such a
query affects no rows, `_check_access` tells the two cases apart;
a missing note is always reported as 404 before any 403.
"""
import logging
import uuid
from typing import Optional

from notekeeper.core.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from notekeeper.models.user import User
from notekeeper.repositories.note_repository import NoteRepository
from notekeeper.schemas.note import NoteOut

logger = logging.getLogger("uvicorn.error")


def _parse_note_id(note_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        # A malformed id cannot name an existing note
        raise NotFoundError("Note not found")


def _require_fields(title: Optional[str], content: Optional[str]) -> tuple[str, str]:
    """Return the trimmed title and the content exactly as sent."""
    title = (title or "").strip()
    if not title or not (content or "").strip():
        raise BadRequestError("All Fields are required")
    return title, content


class NoteService:
    def __init__(self, notes: NoteRepository):
        self.notes = notes

    async def _check_access(self, note_id: uuid.UUID, owner: User, action: str) -> None:
        """Raise 404 if the note is missing, 403 if it belongs to someone else."""
        note = await self.notes.get(note_id)
        if note is None:
            raise NotFoundError("Note not found")
        if str(note.owner_id) != str(owner.id):
            raise ForbiddenError(f"User not authorized to {action} this note")

    async def create(self, owner: Optional[User], title: Optional[str], content: Optional[str]) -> NoteOut:
        if owner is None:
            raise BadRequestError("No User Logged In")
        title, content = _require_fields(title, content)

        note = await self.notes.create(owner_id=owner.id, title=title, content=content)
        created = await self.notes.get(note.id)
        if created is None:
            raise InternalError("Something went wrong while creating the note")
        return NoteOut.from_model(created)

    async def update(
        self,
        owner: Optional[User],
        note_id: str,
        title: Optional[str],
        content: Optional[str],
    ) -> NoteOut:
        """
        Raises:
            UnauthorizedError: No authenticated user
            NotFoundError: Note does not exist (or id malformed)
            ForbiddenError: Note belongs to another user
            BadRequestError: Empty title or content
        """
        if owner is None:
            raise UnauthorizedError("User not authenticated")
        nid = _parse_note_id(note_id)
        try:
            title, content = _require_fields(title, content)
        except BadRequestError:
            # Missing or foreign notes are reported before bad input
            await self._check_access(nid, owner, "update")
            raise

        if not await self.notes.update_owned(nid, owner.id, title=title, content=content):
            await self._check_access(nid, owner, "update")
            raise InternalError("Note could not be updated successfully")

        updated = await self.notes.get(nid)
        if updated is None:
            raise InternalError("Note could not be updated successfully")
        return NoteOut.from_model(updated)

    async def delete(self, owner: Optional[User], note_id: str) -> None:
        if owner is None:
            raise UnauthorizedError("User not authenticated")
        nid = _parse_note_id(note_id)

        if not await self.notes.delete_owned(nid, owner.id):
            await self._check_access(nid, owner, "delete")
            raise InternalError("Unable to delete Note")
        logger.info("[notes] deleted note=%s owner=%s", nid, owner.id)

    async def toggle_pin(self, owner: Optional[User], note_id: str) -> tuple[NoteOut, str]:
        """
        Flip is_pinned and return the updated note with a message naming the new state.

        The new value is always the negation of the stored one; clients cannot
        choose it.

        Raises:
            ConflictError: The note was toggled by another request in between
        """
        if owner is None:
            raise UnauthorizedError("User not authenticated")
        nid = _parse_note_id(note_id)

        note = await self.notes.get(nid)
        if note is None:
            raise NotFoundError("Note not found")
        if str(note.owner_id) != str(owner.id):
            action = "unpin" if note.is_pinned else "pin"
            raise ForbiddenError(f"User not authorized to {action} this note")

        pinned = not note.is_pinned
        if not await self.notes.set_pinned_if(nid, owner.id, expected=note.is_pinned, pinned=pinned):
            raise ConflictError("Note was modified by another request")

        updated = await self.notes.get(nid)
        if updated is None:
            raise InternalError(f"Unable to {'pin' if pinned else 'unpin'} note")
        message = f"Note {'pinned' if pinned else 'unpinned'} successfully"
        return NoteOut.from_model(updated), message

    async def _list(self, owner: Optional[User], pinned_only: bool) -> list[NoteOut]:
        if owner is None:
            raise BadRequestError("No User Logged In")
        notes = await self.notes.list_for_owner(owner.id, pinned_only=pinned_only)
        if not notes:
            raise NotFoundError("No notes found for this user")
        return [NoteOut.from_model(n) for n in notes]

    async def list_all(self, owner: Optional[User]) -> list[NoteOut]:
        return await self._list(owner, pinned_only=False)

    async def list_pinned(self, owner: Optional[User]) -> list[NoteOut]:
        return await self._list(owner, pinned_only=True)
