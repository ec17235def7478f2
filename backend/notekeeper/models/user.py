# notekeeper/models/user.py
"""
Database model for users.
Holds identity, the password hash and the single currently valid refresh token.
"""
import uuid
from tortoise import fields, models

USERNAME_MAX_LENGTH = 64
EMAIL_MAX_LENGTH = 256

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Notes (one-to-many, via related_name="notes")

    Security:
    - Password is stored as an argon2 hash, never in plain text
    - refresh_token holds at most one value; issuing a new pair overwrites it,
      which revokes the previous session
    - Username and email are unique and stored lowercased
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    username = fields.CharField(max_length=USERNAME_MAX_LENGTH, unique=True, index=True)
    email = fields.CharField(max_length=EMAIL_MAX_LENGTH, unique=True, index=True)
    full_name = fields.TextField()
    password_hash = fields.CharField(max_length=255)
    refresh_token = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"

    def __str__(self) -> str:
        return f"<User {self.username}>"
