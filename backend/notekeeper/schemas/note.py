# notekeeper/schemas/note.py
"""
Pydantic schemas for note endpoints.
"""
from typing import Optional

from pydantic import BaseModel

from notekeeper.models.note import Note
from notekeeper.schemas.user import iso


class NoteIn(BaseModel):
    """Request body for creating or updating a note."""
    title: Optional[str] = None
    content: Optional[str] = None


class NoteOut(BaseModel):
    id: str
    title: str
    content: str
    owner: str  # Owner user id
    isPinned: bool
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_model(cls, n: Note) -> "NoteOut":
        return cls(
            id=str(n.id),
            title=n.title,
            content=n.content,
            owner=str(n.owner_id),
            isPinned=n.is_pinned,
            createdAt=iso(n.created_at),
            updatedAt=iso(n.updated_at),
        )
