"""
Authentication API endpoints: sign-up, sign-in, sign-out, session lookup
and password reset. Sessions travel in an httpOnly cookie; the token is also
returned in the body for API clients that prefer a Bearer header.
"""

from fastapi import APIRouter, Depends, Response, status
from typing import Optional

from renthive.config import settings
from renthive.models.user import User
from renthive.services.auth import AuthService
from renthive.services.error_handler import ERROR_RESPONSES
from renthive.schemas.auth import (
    MessageResponse,
    PasswordResetRequest,
    PasswordUpdateRequest,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    UserResponse,
)
from renthive.utils.dependencies import get_auth_service, get_optional_current_user


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _session_response(response: Response, user: User, token: str) -> SessionResponse:
    """Set the session cookie and build the body."""
    max_age = settings.access_token_expire_minutes * 60
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
    return SessionResponse(
        user=UserResponse.model_validate(user.to_dict()),
        access_token=token,
        expires_in=max_age,
    )


@router.post(
    "/signup",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description="Create an account and start a session.",
    responses={400: ERROR_RESPONSES[400]}
)
async def sign_up(
    payload: SignUpRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionResponse:
    user, token = await auth_service.sign_up(payload.email, payload.password, payload.full_name)
    return _session_response(response, user, token)


@router.post(
    "/signin",
    response_model=SessionResponse,
    summary="Sign in",
    description="Authenticate with email and password and start a session.",
    responses={400: ERROR_RESPONSES[400]}
)
async def sign_in(
    payload: SignInRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionResponse:
    user, token = await auth_service.sign_in(payload.email, payload.password)
    return _session_response(response, user, token)


@router.post(
    "/signout",
    response_model=MessageResponse,
    summary="Sign out",
    description="Clear the session cookie. Always succeeds."
)
async def sign_out(response: Response) -> MessageResponse:
    response.delete_cookie(key=settings.session_cookie_name, path="/")
    return MessageResponse(message="Signed out")


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current session",
    description="The signed-in user, or a null user when there is no valid session."
)
async def get_session(
    current_user: Optional[User] = Depends(get_optional_current_user)
) -> SessionResponse:
    if current_user is None:
        return SessionResponse(user=None)
    return SessionResponse(user=UserResponse.model_validate(current_user.to_dict()))


@router.post(
    "/password/reset",
    response_model=MessageResponse,
    summary="Request password reset",
    description="Send a reset token if the account exists. The answer is the same either way."
)
async def request_password_reset(
    payload: PasswordResetRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    await auth_service.request_password_reset(payload.email)
    return MessageResponse(message="If an account exists for this email, a reset link has been sent")


@router.post(
    "/password/update",
    response_model=MessageResponse,
    summary="Update password",
    description="Set a new password using the current session or a reset token.",
    responses={400: ERROR_RESPONSES[400], 401: ERROR_RESPONSES[401]}
)
async def update_password(
    payload: PasswordUpdateRequest,
    current_user: Optional[User] = Depends(get_optional_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    await auth_service.update_password(
        payload.password,
        current_user=current_user,
        reset_token=payload.reset_token,
    )
    return MessageResponse(message="Password updated successfully")
