from fastapi import Cookie, Depends, HTTPException
from pydantic import BaseModel

from app.bookings import ADMIN, BookingService
from app.db import get_session_factory
from app.errors import Forbidden


class Actor(BaseModel):
    user_id: str
    role: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


def get_booking_service(session_factory=Depends(get_session_factory)) -> BookingService:
    return BookingService(session_factory)


def current_actor(userId: str | None = Cookie(default=None), role: str | None = Cookie(default=None)) -> Actor:
    # Cookie names are "userId" and "role" on every route.
    if not userId:
        raise HTTPException(status_code=401, detail="Unauthorized: Please log in")
    return Actor(user_id=userId, role=role)


def require_admin(actor: Actor = Depends(current_actor)) -> Actor:
    if not actor.is_admin:
        raise Forbidden("Admin access required.")
    return actor
