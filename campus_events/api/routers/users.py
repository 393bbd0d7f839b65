"""
User routes.

``/me``, ``/profile``, ``/preferences`` and ``/events`` act on the caller's
own record. Listing and deleting users require an admin.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from campus_events.api.dependencies import get_account_service, get_current_user_id
from campus_events.api.models import (
    ErrorResponse,
    EventResponse,
    MessageResponse,
    PreferencesRequest,
    ProfileUpdateRequest,
    UserResponse,
)
from campus_events.domain.accounts import AccountService
from campus_events.domain.exceptions import UserNotFound
from campus_events.domain.models import ProfileUpdate

from ._ids import parse_id

router = APIRouter(tags=["users"])

_AUTH_ERROR = {401: {"model": ErrorResponse, "description": "Missing or invalid token"}}
_ADMIN_ERRORS = {
    **_AUTH_ERROR,
    403: {"model": ErrorResponse, "description": "Admin role required"},
    404: {"model": ErrorResponse, "description": "User not found"},
}


@router.get("/me", response_model=UserResponse, responses=_AUTH_ERROR, summary="Get own profile")
def me(
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> UserResponse:
    return UserResponse.from_profile(service.profile(user_id))


@router.put(
    "/profile",
    response_model=UserResponse,
    responses={
        **_AUTH_ERROR,
        400: {"model": ErrorResponse, "description": "Invalid input or email in use"},
    },
    summary="Update own profile",
)
def update_profile(
    request_data: ProfileUpdateRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> UserResponse:
    """Replace profile fields. Omitted or blank optional fields are cleared."""
    update = ProfileUpdate(
        name=request_data.name,
        email=request_data.email,
        bio=request_data.bio,
        college=request_data.college,
        major=request_data.major,
        graduation_year=request_data.graduation_year,
    )
    return UserResponse.from_profile(service.update_profile(user_id, update))


@router.put(
    "/preferences",
    response_model=UserResponse,
    responses=_AUTH_ERROR,
    summary="Replace own preferences",
)
def update_preferences(
    request_data: PreferencesRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> UserResponse:
    return UserResponse.from_profile(service.update_preferences(user_id, request_data.preferences))


@router.get(
    "/events",
    response_model=list[EventResponse],
    responses=_AUTH_ERROR,
    summary="List own registered events",
)
def registered_events(
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> list[EventResponse]:
    return [EventResponse.from_view(view) for view in service.registered_events(user_id)]


@router.get("", response_model=list[UserResponse], responses=_ADMIN_ERRORS, summary="List users")
def list_users(
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> list[UserResponse]:
    return [UserResponse.from_profile(profile) for profile in service.list_users(user_id)]


@router.delete(
    "/{target_id}", response_model=MessageResponse, responses=_ADMIN_ERRORS, summary="Delete a user"
)
def delete_user(
    target_id: str,
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Delete the user and remove them from every event's registrants. Admin only."""
    service.delete_user(user_id, parse_id(target_id, UserNotFound))
    return MessageResponse(msg="User removed")
