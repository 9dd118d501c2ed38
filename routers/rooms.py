from datetime import date, time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.bookings import BookingService
from app.schemas import RoomOut, ScheduleOut
from routers.deps import get_booking_service

router = APIRouter()


@router.get("", response_model=List[RoomOut])
def list_rooms(
    available_on: Optional[date] = Query(default=None),
    available_until: Optional[date] = Query(default=None),
    from_time: Optional[time] = Query(default=None),
    to_time: Optional[time] = Query(default=None),
    service: BookingService = Depends(get_booking_service),
):
    """
    Active rooms. With available_on (and optionally available_until) only rooms
    free over those dates are returned: free in the from_time-to_time window
    when one is given, otherwise free for the whole day.
    """
    return service.available_rooms(available_on, available_until, from_time, to_time)


@router.get("/{room_id}", response_model=RoomOut)
def get_room(room_id: str, service: BookingService = Depends(get_booking_service)):
    return service.get_room(room_id)


@router.get("/{room_id}/schedules", response_model=List[ScheduleOut])
def room_schedules(
    room_id: str,
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    service: BookingService = Depends(get_booking_service),
):
    return service.list_schedules_for_room(room_id, start_date, end_date)
