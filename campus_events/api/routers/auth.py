"""
Authentication routes.

Sign-up and login issue bearer tokens; the remaining routes act on the
token's own user.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from campus_events.api.dependencies import get_account_service, get_current_user_id
from campus_events.api.models import (
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    PasswordChangeRequest,
    SignUpRequest,
    TokenResponse,
    UserResponse,
)
from campus_events.domain.accounts import AccountService

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid input or email taken"}},
    summary="Create an account",
)
def sign_up(
    request_data: SignUpRequest,
    service: AccountService = Depends(get_account_service),
) -> TokenResponse:
    """
    Create a regular account and return a bearer token.

    - **email**: Valid email address, unique across accounts
    - **password**: Password (minimum 6 characters)
    """
    token = service.sign_up(
        request_data.name,
        request_data.email,
        request_data.password,
        request_data.preferences,
    )
    return TokenResponse(token=token)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Log in",
)
def login(
    request_data: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> TokenResponse:
    # Unknown email and wrong password share one message and one bcrypt cost
    return TokenResponse(token=service.login(request_data.email, request_data.password))


@router.get(
    "",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid token"}},
    summary="Resolve the token's user",
)
def current_user(
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> UserResponse:
    return UserResponse.from_profile(service.profile(user_id))


@router.put(
    "/password",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse, "description": "Current password is incorrect"}},
    summary="Change password",
)
def change_password(
    request_data: PasswordChangeRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    service.change_password(user_id, request_data.current_password, request_data.new_password)
    return MessageResponse(msg="Password updated successfully")
