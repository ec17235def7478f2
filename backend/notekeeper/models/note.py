# notekeeper/models/note.py
import uuid
from tortoise import fields, models

class Note(models.Model):
    """
    A note owned by exactly one user.

    The owner is set on creation and never reassigned; every mutating query
    filters on it.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    owner = fields.ForeignKeyField(
        "models.User",
        related_name="notes",
        on_delete=fields.CASCADE,
    )
    title = fields.TextField()
    content = fields.TextField()
    is_pinned = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "notes"
