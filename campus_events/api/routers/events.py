"""
Event routes.

Listing and reading are public. Creating, editing and deleting require an
admin; registering and cancelling require any signed-in user.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from campus_events.api.dependencies import (
    get_current_user_id,
    get_event_service,
    get_registration_service,
)
from campus_events.api.models import ErrorResponse, EventRequest, EventResponse, MessageResponse
from campus_events.domain.events import EventService
from campus_events.domain.exceptions import EventNotFound
from campus_events.domain.registration import RegistrationService

from ._ids import parse_id

router = APIRouter(tags=["events"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Validation or rule failure"},
    401: {"model": ErrorResponse, "description": "Missing or invalid token"},
    404: {"model": ErrorResponse, "description": "Event not found"},
}
_ADMIN_ERRORS = {**_ERRORS, 403: {"model": ErrorResponse, "description": "Admin role required"}}


@router.get("", response_model=list[EventResponse], summary="List events by date")
def list_events(service: EventService = Depends(get_event_service)) -> list[EventResponse]:
    return [EventResponse.from_view(view) for view in service.list_events()]


@router.get(
    "/{event_id}",
    response_model=EventResponse,
    responses={404: _ERRORS[404]},
    summary="Get an event",
)
def get_event(event_id: str, service: EventService = Depends(get_event_service)) -> EventResponse:
    return EventResponse.from_view(service.get_event(parse_id(event_id, EventNotFound)))


@router.post("", response_model=EventResponse, responses=_ADMIN_ERRORS, summary="Create an event")
def create_event(
    request_data: EventRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Create an event. Admin only.

    - **category**: social, academic, sports, cultural or other
    - **capacity**: positive integer, omit for unlimited
    """
    view = service.create_event(user_id, request_data.model_dump(exclude_unset=True))
    return EventResponse.from_view(view)


@router.put(
    "/{event_id}", response_model=EventResponse, responses=_ADMIN_ERRORS, summary="Update an event"
)
def update_event(
    event_id: str,
    request_data: EventRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    """Merge the supplied fields into the event. Admin only."""
    view = service.update_event(
        user_id, parse_id(event_id, EventNotFound), request_data.model_dump(exclude_unset=True)
    )
    return EventResponse.from_view(view)


@router.delete(
    "/{event_id}", response_model=MessageResponse, responses=_ADMIN_ERRORS, summary="Delete an event"
)
def delete_event(
    event_id: str,
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
) -> MessageResponse:
    """Delete the event and remove it from every user's registered events. Admin only."""
    service.delete_event(user_id, parse_id(event_id, EventNotFound))
    return MessageResponse(msg="Event removed")


@router.post(
    "/{event_id}/register",
    response_model=EventResponse,
    responses=_ERRORS,
    summary="Register for an event",
)
def register(
    event_id: str,
    user_id: UUID = Depends(get_current_user_id),
    service: RegistrationService = Depends(get_registration_service),
) -> EventResponse:
    """
    Register the caller for the event.

    Fails with 400 when the event is full or the caller is already registered.
    """
    return EventResponse.from_view(service.register(parse_id(event_id, EventNotFound), user_id))


@router.delete(
    "/{event_id}/register",
    response_model=EventResponse,
    responses=_ERRORS,
    summary="Cancel a registration",
)
def cancel_registration(
    event_id: str,
    user_id: UUID = Depends(get_current_user_id),
    service: RegistrationService = Depends(get_registration_service),
) -> EventResponse:
    return EventResponse.from_view(service.cancel(parse_id(event_id, EventNotFound), user_id))
