"""
FastAPI application for the Availability Engine.

A thin HTTP surface over AvailabilityService and MeetingScheduler:
- Per-user availability records, dates, range updates and slots
- Projected availability events for calendar rendering
- Meeting scheduling and conflict checks
- Health endpoint
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse

from availability_engine import __version__
from availability_engine.api.dependencies import get_organizer_id, get_scheduler, get_service
from availability_engine.api.middleware import RequestLoggingMiddleware
from availability_engine.api.models import (
    CommonSlotModel,
    CommonSlotsRequest,
    CommonSlotsResponse,
    ConflictCheckRequest,
    ConflictCheckResponse,
    ConflictModel,
    DayAvailabilityResponse,
    DeleteSlotResponse,
    EventListResponse,
    HealthResponse,
    RangeUpdateRequest,
    ScheduleMeetingRequest,
    ToggleResponse,
)
from availability_engine.config import get_settings
from availability_engine.exceptions import AvailabilityStorageError, SchedulingError
from availability_engine.models import (
    Availability,
    CalendarEvent,
    UnavailableSlotDraft,
    UnavailableTimeSlot,
)
from availability_engine.services import (
    AvailabilityService,
    MeetingScheduler,
    describe_recurrence,
    find_common_available_slots,
)
from availability_engine.timeutils import format_date

logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings.validate_production_config()

    if settings.uses_database:
        from availability_engine.database import init_db

        init_db()

    logger.info(f"Availability API started (storage={settings.storage_backend})")

    yield

    logger.info("Shutting down Availability API")


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="Availability API",
    description="""
# Availability API

Working-hours calendars, unavailable slots and meeting scheduling for team members.

## Availability
- Dates without an explicit entry are available Monday-Friday within the
  user's default hours.
- **PUT /users/{user_id}/availability/range** sets every date of a range at once.
- Unavailable slots may recur daily, weekly, monthly or yearly from their date.

## Error Handling
- **400** - Missing X-User-ID header
- **422** - Invalid dates, times or meeting data (`error_type` names the problem)
- **503** - Storage unavailable (retryable)
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(SchedulingError)
async def scheduling_exception_handler(request, exc: SchedulingError):
    """Map engine errors to 422, storage failures to 503."""
    status_code = 503 if isinstance(exc, AvailabilityStorageError) else 422
    if status_code == 503:
        logger.error(f"Storage failure: {exc.message}", exc_info=exc.original_error)
    return JSONResponse(
        status_code=status_code,
        content={
            "error_type": exc.error_type,
            "message": exc.message,
            "retryable": exc.retryable,
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_type": "http_error",
            "message": exc.detail,
            "retryable": exc.status_code >= 500,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error_type": "internal_error",
            "message": "An unexpected error occurred",
            "retryable": True,
        },
    )


# =============================================================================
# Health Endpoint
# =============================================================================


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    tags=["System"],
)
async def health_check():
    """Check API health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        storage_backend=get_settings().storage_backend,
    )


# =============================================================================
# Availability Endpoints
# =============================================================================


@app.get(
    "/users/{user_id}/availability",
    response_model=Availability,
    summary="Get availability record",
    tags=["Availability"],
)
def get_availability(
    user_id: str,
    service: AvailabilityService = Depends(get_service),
):
    """Get a user's record, creating the default record on first access."""
    return service.get_availability(user_id)


@app.delete(
    "/users/{user_id}/availability",
    response_model=Availability,
    summary="Reset availability record",
    tags=["Availability"],
)
def reset_availability(
    user_id: str,
    service: AvailabilityService = Depends(get_service),
):
    """Replace a user's record with the default record."""
    return service.reset_availability(user_id)


@app.get(
    "/users/{user_id}/availability/dates/{date}",
    response_model=DayAvailabilityResponse,
    summary="Get effective availability for a date",
    tags=["Availability"],
)
def get_date_availability(
    user_id: str,
    date: str,
    start_time: Optional[str] = Query(None, description="Window start (HH:MM)"),
    end_time: Optional[str] = Query(None, description="Window end (HH:MM)"),
    service: AvailabilityService = Depends(get_service),
):
    """
    Resolve a date: flag, window, note, recurrence and slots occurring on it.

    With start_time and end_time, also reports whether that window is free.
    """
    day = format_date(date)
    details = service.get_day_details(user_id, day)
    response = DayAvailabilityResponse(
        date=details.date,
        available=details.available,
        start_time=details.start_time,
        end_time=details.end_time,
        explicit=details.explicit,
        note=details.note,
        recurrence=details.recurrence,
        recurrence_description=describe_recurrence(details.recurrence),
        slots=service.slots_on_date(user_id, day),
    )

    if start_time and end_time:
        status = service.get_day_status(user_id, day, start_time, end_time)
        response.window_available = status.available
        response.reason = status.reason

    return response


@app.put(
    "/users/{user_id}/availability/range",
    response_model=Availability,
    summary="Set availability for a date range",
    tags=["Availability"],
)
def update_range(
    user_id: str,
    request: RangeUpdateRequest,
    service: AvailabilityService = Depends(get_service),
):
    """
    Apply one availability decision to every date of an inclusive range.

    A note adds an unavailable slot on every date. Reversed bounds are
    accepted.
    """
    return service.update_range(
        user_id,
        request.start_date,
        request.end_date,
        request.available,
        request.start_time,
        request.end_time,
        note=request.note,
        recurrence=request.recurrence,
    )


@app.post(
    "/users/{user_id}/availability/dates/{date}/toggle",
    response_model=ToggleResponse,
    summary="Toggle a date",
    tags=["Availability"],
)
def toggle_date(
    user_id: str,
    date: str,
    service: AvailabilityService = Depends(get_service),
):
    day = format_date(date)
    return ToggleResponse(date=day, available=service.toggle_date(user_id, day))


@app.post(
    "/users/{user_id}/availability/slots",
    response_model=UnavailableTimeSlot,
    status_code=201,
    summary="Create an unavailable slot",
    tags=["Availability"],
)
def create_slot(
    user_id: str,
    draft: UnavailableSlotDraft,
    service: AvailabilityService = Depends(get_service),
):
    """Create an unavailable slot, optionally recurring from its date."""
    return service.create_slot(user_id, draft)


@app.delete(
    "/users/{user_id}/availability/slots/{slot_id}",
    response_model=DeleteSlotResponse,
    summary="Delete an unavailable slot",
    tags=["Availability"],
)
def delete_slot(
    user_id: str,
    slot_id: str,
    delete_recurring: bool = Query(False, description="Delete the whole recurring series"),
    service: AvailabilityService = Depends(get_service),
):
    """Delete a slot or its series. Unknown ids return deleted=false."""
    deleted = service.delete_slot(user_id, slot_id, delete_recurring)
    return DeleteSlotResponse(
        slot_id=slot_id,
        deleted=deleted,
        delete_recurring=delete_recurring,
    )


@app.get(
    "/users/{user_id}/availability/events",
    response_model=EventListResponse,
    summary="Project availability as calendar events",
    tags=["Availability"],
)
def list_availability_events(
    user_id: str,
    start: Optional[str] = Query(None, description="First date (YYYY-MM-DD)"),
    end: Optional[str] = Query(None, description="Last date (YYYY-MM-DD)"),
    include_available: bool = Query(False, description="Include available dates"),
    service: AvailabilityService = Depends(get_service),
):
    """
    Build pseudo-events for unavailable days and slots.

    With both start and end, recurring slots are expanded within the window.
    """
    events = service.project_events(user_id, start, end, include_available=include_available)
    return EventListResponse(events=events, total=len(events))


# =============================================================================
# Meeting Endpoints
# =============================================================================


@app.post(
    "/meetings",
    response_model=CalendarEvent,
    status_code=201,
    summary="Schedule a meeting",
    tags=["Meetings"],
)
def schedule_meeting(
    request: ScheduleMeetingRequest,
    organizer_id: str = Depends(get_organizer_id),
    scheduler: MeetingScheduler = Depends(get_scheduler),
):
    """
    Schedule a meeting organized by the X-User-ID user.

    Availability is not checked; call POST /meetings/conflicts first to warn
    about unavailable invitees.
    """
    return scheduler.schedule(
        organizer_id=organizer_id,
        invitees=request.invitees,
        title=request.title,
        description=request.description,
        start=request.start,
        end=request.end,
        location=request.location,
        priority=request.priority,
        is_required=request.is_required,
        send_notifications=request.send_notifications,
    )


@app.post(
    "/meetings/conflicts",
    response_model=ConflictCheckResponse,
    summary="Check invitee availability",
    tags=["Meetings"],
)
def check_meeting_conflicts(
    request: ConflictCheckRequest,
    scheduler: MeetingScheduler = Depends(get_scheduler),
):
    conflicts = scheduler.check_conflicts(request.invitees, request.start, request.end)
    return ConflictCheckResponse(
        has_conflicts=bool(conflicts),
        conflicts=[
            ConflictModel(user_id=c.user_id, reason=c.reason, slot_id=c.slot_id)
            for c in conflicts
        ],
    )


@app.post(
    "/meetings/suggestions",
    response_model=CommonSlotsResponse,
    summary="Find common free windows",
    tags=["Meetings"],
)
def suggest_meeting_slots(
    request: CommonSlotsRequest,
    service: AvailabilityService = Depends(get_service),
):
    """List windows on a date when at least min_users users are free."""
    day = format_date(request.date)
    slots = find_common_available_slots(
        service.repository,
        request.user_ids,
        day,
        duration_minutes=request.duration_minutes,
        step_minutes=request.step_minutes,
        min_users=request.min_users,
        default_factory=service.default_record,
    )
    return CommonSlotsResponse(
        date=day,
        slots=[
            CommonSlotModel(
                start_time=s.start_time,
                end_time=s.end_time,
                available_users=s.available_users,
            )
            for s in slots
        ],
    )


def run_server(host: Optional[str] = None, port: Optional[int] = None, reload: Optional[bool] = None):
    """Run the API server with Uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "availability_engine.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=settings.api_reload if reload is None else reload,
    )


if __name__ == "__main__":
    run_server()
