# notekeeper/schemas/user.py
"""
Pydantic schemas for user account endpoints.
Request fields are optional so that missing values reach the service layer and
are reported as 400 with a readable message instead of a validation dump.
"""
import datetime as dt
from typing import Optional

from pydantic import BaseModel

from notekeeper.models.user import User


def iso(ts: Optional[dt.datetime]) -> Optional[str]:
    """Format a timestamp as ISO 8601; naive values are UTC and get a Z suffix."""
    if ts is None:
        return None
    if ts.tzinfo is None:
        return ts.isoformat() + "Z"
    return ts.isoformat()


class RegisterIn(BaseModel):
    fullName: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class LoginIn(BaseModel):
    """Either email or username identifies the account."""
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class RefreshTokenIn(BaseModel):
    refreshToken: Optional[str] = None


class UpdateAccountIn(BaseModel):
    fullName: Optional[str] = None
    email: Optional[str] = None


class ChangePasswordIn(BaseModel):
    oldPassword: Optional[str] = None
    newPassword: Optional[str] = None


class UserOut(BaseModel):
    """
    User information returned by every endpoint.
    Never contains the password hash or the refresh token.
    """
    id: str
    username: str
    email: str
    fullName: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_model(cls, u: User) -> "UserOut":
        return cls(
            id=str(u.id),
            username=u.username,
            email=u.email,
            fullName=u.full_name,
            createdAt=iso(u.created_at),
            updatedAt=iso(u.updated_at),
        )
