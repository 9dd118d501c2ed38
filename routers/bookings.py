from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from app.bookings import BookingService
from app.errors import BookingNotFound
from app.schemas import BookingOut, CancelOut, CreateBookingBody, DecisionBody
from routers.deps import Actor, current_actor, get_booking_service, require_admin

router = APIRouter()


@router.post("", status_code=201, response_model=BookingOut)
def create_booking(
    body: CreateBookingBody,
    actor: Actor = Depends(current_actor),
    service: BookingService = Depends(get_booking_service),
):
    """
    Request a room for a time window. The request is stored PENDING if:
      - the room exists and is active
      - end_time is after start_time
      - the window overlaps neither the room's confirmed schedule nor another
        PENDING/ACCEPTED request for the room
    """
    return service.create_booking_request(
        room_id=body.room_id,
        requester_id=actor.user_id,
        booking_date=body.booking_date,
        start=body.start_time,
        end=body.end_time,
        note=body.note,
    )


@router.get("", response_model=List[BookingOut])
def list_bookings(
    status: Optional[str] = Query(default=None),
    room_id: Optional[str] = Query(default=None),
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    sort_by: Literal["created_at", "booking_date", "start_time"] = Query(default="created_at"),
    sort_order: Literal["asc", "desc"] = Query(default="desc"),
    actor: Actor = Depends(current_actor),
    service: BookingService = Depends(get_booking_service),
):
    # Admins see every request; everyone else only their own.
    return service.list_bookings(
        actor_id=actor.user_id,
        actor_role=actor.role,
        status=status,
        room_id=room_id,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_desc=sort_order == "desc",
    )


@router.get("/{booking_id}", response_model=BookingOut)
def get_booking(
    booking_id: str,
    actor: Actor = Depends(current_actor),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_booking(booking_id)
    if not actor.is_admin and booking.user_id != actor.user_id:
        # other users' requests are reported as missing
        raise BookingNotFound()
    return booking


@router.put("/{booking_id}", response_model=BookingOut)
def decide_booking(
    booking_id: str,
    body: DecisionBody,
    actor: Actor = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Accept or reject a PENDING request. Accepting writes it to the room schedule atomically."""
    return service.decide_booking(booking_id, body.status, body.admin_note)


@router.delete("/{booking_id}", response_model=CancelOut)
def cancel_booking(
    booking_id: str,
    actor: Actor = Depends(current_actor),
    service: BookingService = Depends(get_booking_service),
):
    service.cancel_booking(booking_id, actor.user_id, actor.role)
    return CancelOut(booking_id=booking_id)
