# notekeeper/api/v1/routers/users.py
from fastapi import APIRouter, Depends, Request, Response, status

from notekeeper.api.v1.deps import ACCESS_COOKIE, REFRESH_COOKIE, get_current_user, get_services, parse_body
from notekeeper.config import settings
from notekeeper.core.responses import envelope
from notekeeper.models.user import User
from notekeeper.schemas.user import (
    ChangePasswordIn,
    LoginIn,
    RefreshTokenIn,
    RegisterIn,
    UpdateAccountIn,
)
from notekeeper.services import Services, TokenPair

router = APIRouter(prefix="/user", tags=["user"])


def _cookie_options() -> dict:
    return {"httponly": True, "secure": settings.cookie_secure, "samesite": "none"}


def _set_token_cookies(response: Response, pair: TokenPair) -> None:
    """
    Deliver both tokens as HttpOnly cookies. max_age matches the token
    lifetimes, so the refresh cookie lives as long as the refresh token on
    both the login and the refresh path.
    """
    response.set_cookie(
        ACCESS_COOKIE, pair.access_token, max_age=settings.access_token_expire_seconds, **_cookie_options()
    )
    response.set_cookie(
        REFRESH_COOKIE, pair.refresh_token, max_age=settings.refresh_token_expire_seconds, **_cookie_options()
    )


def _clear_token_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE, **_cookie_options())
    response.delete_cookie(REFRESH_COOKIE, **_cookie_options())


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterIn = Depends(parse_body(RegisterIn)),
    services: Services = Depends(get_services),
):
    """
    Register a new user account.

    Username and email must be unique (case-insensitive). The created user is
    returned without password or refresh token.

    Errors:
        400: Missing field
        409: Username or email already exists
    """
    user = await services.accounts.register(body.fullName, body.email, body.username, body.password)
    return envelope(status.HTTP_201_CREATED, user.model_dump(), "User registered successfully")


@router.post("/login")
async def login(
    response: Response,
    body: LoginIn = Depends(parse_body(LoginIn)),
    services: Services = Depends(get_services),
):
    """
    Authenticate with email or username plus password.

    Both tokens are set as HttpOnly cookies and also returned in the body for
    clients that send them as a Bearer header.

    Errors:
        400: No identifier or no password
        401: Wrong password
        404: No such user
    """
    user, pair = await services.accounts.login(body.email, body.username, body.password)
    _set_token_cookies(response, pair)
    return envelope(
        status.HTTP_200_OK,
        {"user": user.model_dump(), "accessToken": pair.access_token, "refreshToken": pair.refresh_token},
        "User Logged In successfully",
    )


@router.api_route("/refresh-token", methods=["GET", "POST"])
async def refresh_token(
    request: Request,
    response: Response,
    body: RefreshTokenIn = Depends(parse_body(RefreshTokenIn)),
    services: Services = Depends(get_services),
):
    """
    Rotate the refresh token and issue a new access token.

    The refresh token is read from the refreshToken cookie, or from a
    `refreshToken` body field (JSON or form) when no cookie is present. The
    presented token stops working as soon as this call succeeds.

    Errors:
        401: Missing, invalid, expired or already used refresh token
    """
    presented = request.cookies.get(REFRESH_COOKIE) or body.refreshToken
    pair = await services.accounts.refresh_session(presented)
    _set_token_cookies(response, pair)
    return envelope(
        status.HTTP_200_OK,
        {"accessToken": pair.access_token, "refreshToken": pair.refresh_token},
        "Access Token Refreshed successfully",
    )


@router.get("/logout")
async def logout(response: Response, user: User = Depends(get_current_user), services: Services = Depends(get_services)):
    """Revoke the stored refresh token and clear both cookies."""
    await services.accounts.logout(user)
    _clear_token_cookies(response)
    return envelope(status.HTTP_200_OK, {}, "User Logged Out Successfully")


@router.get("/current-user")
async def current_user(user: User = Depends(get_current_user), services: Services = Depends(get_services)):
    out = services.accounts.get_current_user(user)
    return envelope(status.HTTP_200_OK, out.model_dump(), "Current User Fetched Successfully")


@router.get("/auth-status")
async def auth_status(response: Response, user: User = Depends(get_current_user), services: Services = Depends(get_services)):
    is_authenticated, code = services.accounts.check_auth_status(user)
    response.status_code = code
    message = "User is authenticated" if is_authenticated else "User is not authenticated"
    return envelope(code, {"isAuthenticated": is_authenticated}, message)


@router.patch("/update-account")
async def update_account(
    user: User = Depends(get_current_user),
    body: UpdateAccountIn = Depends(parse_body(UpdateAccountIn)),
    services: Services = Depends(get_services),
):
    """
    Update full name and email of the current user.

    Errors:
        400: fullName or email missing
        409: Email used by another account
    """
    out = await services.accounts.update_account_details(user, body.fullName, body.email)
    return envelope(status.HTTP_200_OK, out.model_dump(), "Account Details Updated successfully")


@router.patch("/change-password")
async def change_password(
    user: User = Depends(get_current_user),
    body: ChangePasswordIn = Depends(parse_body(ChangePasswordIn)),
    services: Services = Depends(get_services),
):
    """
    Change the password of the current user after checking the old one.

    Errors:
        400: Old password incorrect or new password empty
    """
    await services.accounts.change_current_password(user, body.oldPassword, body.newPassword)
    return envelope(status.HTTP_200_OK, {}, "Password Changed Successfully")
