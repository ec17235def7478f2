from .note_repository import NoteRepository
from .user_repository import UserRepository
