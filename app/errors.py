"""
Error kinds raised by the booking engine.

Business errors (everything under BookingError) are expected outcomes of
ordinary contention and validation; the API turns them into structured
responses. StorageFailure is kept outside that hierarchy because it marks an
infrastructure fault, not a business decision.
"""


class BookingError(Exception):
    code = "booking_error"
    message = "Booking operation failed."
    status_code = 400

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class InvalidInterval(BookingError):
    code = "invalid_interval"
    message = "End time must be after start time."


class RoomNotFound(BookingError):
    code = "room_not_found"
    message = "Room not found."
    status_code = 404


class BookingNotFound(BookingError):
    code = "booking_not_found"
    message = "Booking not found."
    status_code = 404


class RoomInactive(BookingError):
    code = "room_inactive"
    message = "Room is not active for booking."


class ScheduleConflict(BookingError):
    code = "time_unavailable"
    message = "Room is already booked for the selected time."
    status_code = 409


class PendingConflict(BookingError):
    # Same public code as ScheduleConflict; only the message and logs differ.
    code = "time_unavailable"
    message = "There is a pending or accepted booking for this time slot."
    status_code = 409


class InvalidState(BookingError):
    code = "invalid_state"
    message = "Only pending bookings can be updated."


class Forbidden(BookingError):
    code = "forbidden"
    message = "You are not allowed to perform this action."
    status_code = 403


class StorageFailure(Exception):
    """Commit/flush failed in the storage layer; the unit of work was rolled back."""

    code = "storage_failure"
    status_code = 500

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": "Storage failure, please retry."}
