from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.bookings import BookingService
from app.schemas import ScheduleOut
from routers.deps import Actor, current_actor, get_booking_service

router = APIRouter()


@router.get("", response_model=List[ScheduleOut])
def list_schedules(
    room_id: Optional[str] = Query(default=None),
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    only_mine: bool = Query(default=False),
    actor: Actor = Depends(current_actor),
    service: BookingService = Depends(get_booking_service),
):
    """
    Confirmed reservations across rooms, sorted by date then start time.
    Non-admins only see entries they hold; admins see all unless only_mine.
    """
    return service.list_schedules(
        actor_id=actor.user_id,
        actor_role=actor.role,
        only_mine=only_mine,
        room_id=room_id,
        start_date=start_date,
        end_date=end_date,
    )
