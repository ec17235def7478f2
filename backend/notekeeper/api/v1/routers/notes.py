# notekeeper/api/v1/routers/notes.py
from fastapi import APIRouter, Depends, status

from notekeeper.api.v1.deps import get_current_user, get_services, parse_body
from notekeeper.core.responses import envelope
from notekeeper.models.user import User
from notekeeper.schemas.note import NoteIn
from notekeeper.services import Services

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_note(
    user: User = Depends(get_current_user),
    body: NoteIn = Depends(parse_body(NoteIn)),
    services: Services = Depends(get_services),
):
    """
    Create a note owned by the authenticated user.

    Errors:
        400: Title or content empty after trimming
        401: Not authenticated
    """
    note = await services.notes.create(user, body.title, body.content)
    return envelope(status.HTTP_201_CREATED, note.model_dump(), "Note created successfully")


@router.get("/all")
async def get_all_notes(user: User = Depends(get_current_user), services: Services = Depends(get_services)):
    """
    All notes of the authenticated user, newest first.

    Errors:
        404: The user has no notes
    """
    notes = await services.notes.list_all(user)
    return envelope(status.HTTP_200_OK, [n.model_dump() for n in notes], "Notes fetched successfully")


@router.get("/pinned")
async def get_pinned_notes(user: User = Depends(get_current_user), services: Services = Depends(get_services)):
    notes = await services.notes.list_pinned(user)
    return envelope(status.HTTP_200_OK, [n.model_dump() for n in notes], "Notes fetched successfully")


@router.patch("/update/{note_id}")
async def update_note(
    note_id: str,
    user: User = Depends(get_current_user),
    body: NoteIn = Depends(parse_body(NoteIn)),
    services: Services = Depends(get_services),
):
    """
    Replace title and content of a note.

    Errors:
        400: Title or content empty
        403: Note belongs to another user
        404: Note does not exist
    """
    note = await services.notes.update(user, note_id, body.title, body.content)
    return envelope(status.HTTP_200_OK, note.model_dump(), "Note Updated Successfully")


@router.patch("/pin/{note_id}")
async def pin_note(note_id: str, user: User = Depends(get_current_user), services: Services = Depends(get_services)):
    """Toggle the pinned flag; the message says whether the note is now pinned or unpinned."""
    note, message = await services.notes.toggle_pin(user, note_id)
    return envelope(status.HTTP_200_OK, note.model_dump(), message)


@router.delete("/delete/{note_id}")
async def delete_note(note_id: str, user: User = Depends(get_current_user), services: Services = Depends(get_services)):
    await services.notes.delete(user, note_id)
    return envelope(status.HTTP_200_OK, {}, "Note deleted successfully")
