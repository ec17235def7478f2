# notekeeper/core/security.py
"""
Security module for authentication.
Handles password hashing and JWT encoding/decoding for access and refresh tokens.
"""
import datetime as dt
import uuid

import jwt  # PyJWT
from passlib.context import CryptContext

# Password hashing context
# Argon2 is a modern, memory-hard password hashing algorithm; every hash carries its own salt
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",   # Automatically handle deprecated schemes
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)


def encode_token(claims: dict, secret: str, lifetime_seconds: int, token_type: str) -> str:
    """
    Sign a JWT with the given claims.

    Every token gets a random `jti`, so two tokens issued for the same user in
    the same second are still distinct strings.

    Token payload includes, on top of `claims`:
        - type: "access" or "refresh"
        - jti: Unique token id
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        **claims,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + dt.timedelta(seconds=lifetime_seconds),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALG)


def decode_token(token: str, secret: str, token_type: str) -> dict:
    """
    Decode and validate a JWT.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is malformed, badly signed, or of another type
    """
    payload = jwt.decode(token, secret, algorithms=[JWT_ALG])
    if payload.get("type") != token_type:
        raise jwt.InvalidTokenError(f"expected a {token_type} token")
    if not payload.get("sub"):
        raise jwt.InvalidTokenError("token has no subject")
    return payload

