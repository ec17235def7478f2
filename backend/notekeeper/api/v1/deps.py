# notekeeper/api/v1/deps.py
import json
import uuid
from typing import Callable, TypeVar

from fastapi import Depends, Header, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from notekeeper.core.errors import BadRequestError, UnauthorizedError
from notekeeper.models.user import User
from notekeeper.services import Services

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

BodyT = TypeVar("BodyT", bound=BaseModel)


def get_services(request: Request) -> Services:
    """Return the service container built at application start."""
    return request.app.state.services


def parse_body(model: type[BodyT]) -> Callable:
    """
    Build a dependency that reads a JSON or form-encoded body into `model`.

    Form fields use the same names as the JSON keys. An empty body is read as
    `{}` so that missing fields reach the service layer and are reported there.

    Usage:
        @router.post("/login")
        async def login(body: LoginIn = Depends(parse_body(LoginIn))):
            ...
    """

    async def dependency(request: Request):
        content_type = request.headers.get("content-type", "").lower()
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            data = dict(form)
        else:
            raw = await request.body()
            if not raw.strip():
                data = {}
            else:
                try:
                    data = json.loads(raw)
                except ValueError:
                    raise BadRequestError("Invalid request body")
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise RequestValidationError(exc.errors())

    return dependency


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
    services: Services = Depends(get_services),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    This dependency extracts and validates the access token from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (accessToken) - fallback method

    The user is also attached to `request.state.user`. Responses built from it
    go through UserOut, which drops the password hash and refresh token.

    Raises:
        UnauthorizedError (401): No token, invalid/expired token, or user no longer exists

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": str(user.id)}
    """
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie: accessToken
    if not token:
        token = request.cookies.get(ACCESS_COOKIE)

    claims = services.tokens.verify_access(token)
    try:
        user_id = uuid.UUID(claims["sub"])
    except ValueError:
        raise UnauthorizedError("Invalid Access Token")

    user = await services.users.get_by_id(user_id)
    if not user:
        raise UnauthorizedError("Invalid Access Token")
    request.state.user = user
    return user
