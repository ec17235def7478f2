"""
Services Module

Stateless business services, built once per process by `build_services` and
shared by all requests through `app.state.services`:
- TokenService: access/refresh token issuance, verification and rotation
- AccountService: registration, login/logout, profile and password changes
- NoteService: ownership-scoped note CRUD and pinning
"""
from dataclasses import dataclass

from notekeeper.config import Settings
from notekeeper.repositories import NoteRepository, UserRepository

from .account_service import AccountService
from .note_service import NoteService
from .token_service import TokenPair, TokenService


@dataclass(frozen=True)
class Services:
    users: UserRepository
    tokens: TokenService
    accounts: AccountService
    notes: NoteService


def build_services(settings: Settings) -> Services:
    """Wire repositories into services."""
    users = UserRepository()
    tokens = TokenService(users, settings)
    return Services(
        users=users,
        tokens=tokens,
        accounts=AccountService(users, tokens),
        notes=NoteService(NoteRepository()),
    )


__all__ = [
    "AccountService",
    "NoteService",
    "Services",
    "TokenPair",
    "TokenService",
    "build_services",
]
