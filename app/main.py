import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app import config
from app.db import init_db
from app.errors import BookingError, StorageFailure
from routers import bookings, rooms, schedules

config.configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Room Booking API", version="0.1.0")

app.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
app.include_router(schedules.router, prefix="/schedules", tags=["schedules"])
app.include_router(rooms.router, prefix="/rooms", tags=["rooms"])


@app.exception_handler(BookingError)
def booking_error_handler(request: Request, exc: BookingError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StorageFailure)
def storage_failure_handler(request: Request, exc: StorageFailure):
    logger.error("%s %s -> storage failure: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.on_event("startup")
def on_startup():
    if config.SKIP_DB_INIT:
        return
    init_db()


@app.get("/")
def root():
    return {"ok": True, "service": "room-booking-api"}
