# notekeeper/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: User account, credentials and current refresh token
- Note: Note owned by a user
"""
from .user import User
from .note import Note
