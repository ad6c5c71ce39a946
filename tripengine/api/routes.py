"""
API Routes for the trip engine.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..errors import (
    ConflictError,
    NotFoundError,
    TripEngineError,
    ValidationError,
    user_message,
)
from ..data.provider_trips import CATEGORY_INFO
from ..models.catalog import TripCategory
from ..models.session import TravelerSession, session_store
from ..models.trip import DurationType, TripStatus
from ..services.catalog import CatalogClient, ProviderCatalog
from ..services.lifecycle import PromptKind, StatusPrompt
from ..services.pricing import clamp_minimum
from ..services.trips_client import TripsClient


router = APIRouter(prefix="/api", tags=["trip-engine"])


# Dependencies

_trips_client: Optional[TripsClient] = None
_catalog_client: Optional[CatalogClient] = None
provider_catalog = ProviderCatalog()


def get_trips_client() -> TripsClient:
    """Get or create the shared trips client."""
    global _trips_client
    if _trips_client is None:
        _trips_client = TripsClient()
    return _trips_client


def get_catalog_client() -> CatalogClient:
    """Get or create the shared catalog client (its cache outlives sessions)."""
    global _catalog_client
    if _catalog_client is None:
        _catalog_client = CatalogClient()
    return _catalog_client


def get_session(session_id: str) -> TravelerSession:
    session = session_store.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def to_http_error(error: TripEngineError) -> HTTPException:
    """Map engine errors onto HTTP statuses."""
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail={"message": str(error), "field": error.field})
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=user_message(error))
    if isinstance(error, ConflictError):
        return HTTPException(status_code=409, detail=user_message(error))
    return HTTPException(status_code=502, detail=user_message(error))


# Request/Response Models

class CreateSessionResponse(BaseModel):
    session_id: str


class CitySelectionRequest(BaseModel):
    city_id: str
    start_date: Optional[date] = None


class SelectionUpdateRequest(BaseModel):
    duration_type: Optional[DurationType] = None
    duration_value: Optional[int] = None
    quantity: Optional[int] = None


class SubmitTripRequest(BaseModel):
    start_date: Optional[date] = None
    duration_days: int = Field(default=1, ge=1, le=30)


class StartBookingRequest(BaseModel):
    trip_id: str


class TravelerInfoUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class BookingUpdateRequest(BaseModel):
    selected_date_id: Optional[str] = None
    travelers: Optional[int] = None
    traveler_info: Optional[TravelerInfoUpdate] = None


class PromptResponse(BaseModel):
    kind: PromptKind
    trip: dict


class PromptActionRequest(BaseModel):
    trip_id: str
    kind: PromptKind


class EditDraftRequest(BaseModel):
    start_date: Optional[date] = None
    duration_days: Optional[int] = None


class EditActivityRequest(BaseModel):
    duration_type: Optional[DurationType] = None
    duration_value: Optional[int] = None
    quantity: Optional[int] = None


def _selection_summary(session: TravelerSession) -> dict:
    store = session.selections
    return {
        "city_id": session.city_id,
        "start_date": session.start_date.isoformat(),
        "selections": [
            {**selection.to_wire(), "price": store.price_of(selection.activity_id)}
            for selection in store.selections
        ],
        "total_price": store.total_price(),
    }


def _booking_state(session: TravelerSession) -> dict:
    current = session.booking.current
    return {"booking": current.to_wire() if current else None}


def _draft_state(session: TravelerSession) -> dict:
    draft = session.edit_draft
    if draft is None:
        return {"draft": None}
    return {
        "draft": {
            "trip_id": draft.trip_id,
            "start_date": draft.start_date.isoformat(),
            "end_date": draft.end_date.isoformat(),
            "duration_days": draft.duration_days,
            "activities": [activity.model_dump(mode="json") for activity in draft.activities],
            "grand_total": draft.grand_total,
        }
    }


def _prompt_payload(prompt: Optional[StatusPrompt]) -> Optional[dict]:
    if prompt is None:
        return None
    return PromptResponse(kind=prompt.kind, trip=prompt.trip.to_wire()).model_dump(mode="json")


# Session

@router.post("/session", response_model=CreateSessionResponse)
async def create_session(client: TripsClient = Depends(get_trips_client)):
    """Create a new traveler session."""
    session = session_store.create(client=client, catalog=provider_catalog)
    return CreateSessionResponse(session_id=session.session_id)


@router.get("/session/{session_id}")
async def get_session_summary(session_id: str):
    return get_session(session_id).get_summary()


# Provider catalog

@router.get("/catalog/categories")
async def list_categories():
    return {
        "categories": [
            {"id": category, **info, "count": len(provider_catalog.get_trips_by_category(category))}
            for category, info in CATEGORY_INFO.items()
        ]
    }


@router.get("/catalog/trips")
async def list_provider_trips(category: str = "all"):
    if category != "all" and category not in {c.value for c in TripCategory}:
        raise HTTPException(status_code=400, detail=f"Unknown category: {category}")
    return {"trips": [trip.to_wire() for trip in provider_catalog.get_trips_by_category(category)]}


@router.get("/catalog/trips/{trip_id}")
async def get_provider_trip(trip_id: str):
    trip = provider_catalog.get_trip(trip_id)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip.to_wire()


# Activity selection ("book new trip")

@router.post("/selections/{session_id}/city")
async def choose_city(
    session_id: str,
    request: CitySelectionRequest,
    catalog: CatalogClient = Depends(get_catalog_client)
):
    """Load a city's activities; selections start empty."""
    session = get_session(session_id)
    try:
        activities = await catalog.get_city_activities(request.city_id)
    except TripEngineError as e:
        raise to_http_error(e)

    session.city_id = request.city_id
    if request.start_date:
        session.start_date = request.start_date
    session.selections.set_activities(activities)
    session.selections.clear()
    session.touch()
    return {
        "activities": [activity.to_wire() for activity in activities],
        **_selection_summary(session),
    }


@router.get("/selections/{session_id}")
async def get_selections(session_id: str):
    return _selection_summary(get_session(session_id))


@router.post("/selections/{session_id}/{activity_id}/toggle")
async def toggle_selection(session_id: str, activity_id: str):
    session = get_session(session_id)
    session.selections.toggle(activity_id)
    session.touch()
    return _selection_summary(session)


@router.patch("/selections/{session_id}/{activity_id}")
async def update_selection(session_id: str, activity_id: str, request: SelectionUpdateRequest):
    session = get_session(session_id)
    fields = request.model_dump(exclude_none=True)
    for name in ("duration_value", "quantity"):
        if name in fields:
            fields[name] = clamp_minimum(fields[name])
    session.selections.update(activity_id, **fields)
    session.touch()
    return _selection_summary(session)


@router.post("/selections/{session_id}/preview")
async def preview_selection(session_id: str, request: SubmitTripRequest):
    session = get_session(session_id)
    if not session.city_id:
        raise HTTPException(status_code=400, detail="Choose a city first")
    try:
        trip_request = session.selections.build_trip_request(
            session.city_id, request.start_date or session.start_date, request.duration_days
        )
        preview = await session.board.preview_trip(trip_request)
    except TripEngineError as e:
        raise to_http_error(e)
    return preview.to_wire()


@router.post("/selections/{session_id}/submit")
async def submit_selection(session_id: str, request: SubmitTripRequest):
    """Create a trip from the current selections. Selections survive a failed submit."""
    session = get_session(session_id)
    if not session.city_id:
        raise HTTPException(status_code=400, detail="Choose a city first")
    try:
        trip_request = session.selections.build_trip_request(
            session.city_id, request.start_date or session.start_date, request.duration_days
        )
        trip = await session.board.create_trip(trip_request)
    except TripEngineError as e:
        raise to_http_error(e)

    session.selections.clear()
    session.touch()
    return trip.to_wire()


# Provider-package booking

@router.post("/booking/{session_id}/start")
async def start_booking(session_id: str, request: StartBookingRequest):
    session = get_session(session_id)
    session.booking.start(request.trip_id)
    session.touch()
    return _booking_state(session)


@router.get("/booking/{session_id}")
async def get_booking(session_id: str):
    return _booking_state(get_session(session_id))


@router.patch("/booking/{session_id}")
async def update_booking(session_id: str, request: BookingUpdateRequest):
    session = get_session(session_id)
    fields = request.model_dump(exclude_none=True)
    try:
        session.booking.update(**fields)
    except TripEngineError as e:
        raise to_http_error(e)
    session.touch()
    return _booking_state(session)


@router.delete("/booking/{session_id}")
async def clear_booking(session_id: str):
    session = get_session(session_id)
    session.booking.clear()
    return _booking_state(session)


@router.post("/booking/{session_id}/complete")
async def complete_booking(session_id: str):
    session = get_session(session_id)
    try:
        session.booking.validate()
    except TripEngineError as e:
        raise to_http_error(e)

    booked = session.booking.complete()
    if booked is None:
        raise HTTPException(status_code=400, detail="The selected date is no longer available")
    session.touch()
    return booked.to_wire()


@router.get("/booking/{session_id}/booked")
async def list_booked_trips(session_id: str):
    session = get_session(session_id)
    return {"booked_trips": [booked.to_wire() for booked in session.booking.booked_trips]}


@router.post("/booking/{session_id}/booked/{booking_id}/cancel")
async def cancel_booked_trip(session_id: str, booking_id: str):
    session = get_session(session_id)
    cancelled = session.booking.cancel_booked_trip(booking_id)
    if cancelled is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return cancelled.to_wire()


# Persisted trips

@router.get("/trips/{session_id}")
async def list_trips(session_id: str, status: Optional[TripStatus] = None, page: int = 1):
    """Fetch the trip list and the next lifecycle prompt, if any."""
    session = get_session(session_id)
    try:
        await session.board.load()
    except TripEngineError as e:
        raise to_http_error(e)

    filtered = session.board.filter_by_status(status)
    return {
        "trips": [trip.to_wire() for trip in session.board.paginate(filtered, page)],
        "total": len(filtered),
        "page": max(1, page),
        "prompt": _prompt_payload(session.board.next_prompt()),
    }


def _prompt_for(session: TravelerSession, request: PromptActionRequest) -> StatusPrompt:
    trip = session.board.cache.get(request.trip_id)
    if trip is None or not session.board.evaluator.was_shown(trip.id, request.kind):
        raise HTTPException(status_code=404, detail="No such prompt")
    return StatusPrompt(request.kind, trip)


@router.post("/trips/{session_id}/prompt/confirm")
async def confirm_prompt(session_id: str, request: PromptActionRequest):
    session = get_session(session_id)
    prompt = _prompt_for(session, request)
    try:
        trip = await session.board.confirm_prompt(prompt)
    except TripEngineError as e:
        raise to_http_error(e)
    session.touch()
    return {"trip": trip.to_wire(), "prompt": _prompt_payload(session.board.next_prompt())}


@router.post("/trips/{session_id}/prompt/decline")
async def decline_prompt(session_id: str, request: PromptActionRequest):
    """Declining 'complete' opens the edit draft so the trip can be extended."""
    session = get_session(session_id)
    prompt = _prompt_for(session, request)
    draft = session.board.decline_prompt(prompt)
    if draft is not None:
        session.edit_draft = draft
    session.touch()
    return _draft_state(session)


@router.post("/trips/{session_id}/{trip_id}/cancel")
async def cancel_trip(session_id: str, trip_id: str):
    session = get_session(session_id)
    try:
        trip = await session.board.cancel_trip(trip_id)
    except TripEngineError as e:
        raise to_http_error(e)
    return trip.to_wire()


@router.delete("/trips/{session_id}/{trip_id}")
async def delete_trip(session_id: str, trip_id: str):
    session = get_session(session_id)
    try:
        await session.board.delete_trip(trip_id)
    except TripEngineError as e:
        raise to_http_error(e)
    return {"deleted": trip_id}


# Trip editing

@router.post("/trips/{session_id}/{trip_id}/edit")
async def open_edit(session_id: str, trip_id: str):
    session = get_session(session_id)
    try:
        session.edit_draft = session.board.editor.open(trip_id)
    except TripEngineError as e:
        raise to_http_error(e)
    return _draft_state(session)


def _require_draft(session: TravelerSession) -> None:
    if session.edit_draft is None:
        raise HTTPException(status_code=400, detail="No trip is being edited")


@router.patch("/edit/{session_id}")
async def update_edit_draft(session_id: str, request: EditDraftRequest):
    session = get_session(session_id)
    _require_draft(session)
    if request.start_date is not None:
        session.edit_draft.set_start_date(request.start_date)
    if request.duration_days is not None:
        session.edit_draft.set_duration_days(request.duration_days)
    return _draft_state(session)


@router.patch("/edit/{session_id}/activities/{index}")
async def update_edit_activity(session_id: str, index: int, request: EditActivityRequest):
    session = get_session(session_id)
    _require_draft(session)
    try:
        session.edit_draft.update_activity(index, **request.model_dump(exclude_none=True))
    except TripEngineError as e:
        raise to_http_error(e)
    return _draft_state(session)


@router.delete("/edit/{session_id}/activities/{index}")
async def remove_edit_activity(session_id: str, index: int):
    session = get_session(session_id)
    _require_draft(session)
    try:
        session.edit_draft.remove_activity(index)
    except TripEngineError as e:
        raise to_http_error(e)
    return _draft_state(session)


@router.put("/edit/{session_id}")
async def submit_edit(session_id: str):
    """Submit the draft. It is kept when the service rejects the update."""
    session = get_session(session_id)
    _require_draft(session)
    try:
        trip = await session.board.editor.submit(session.edit_draft)
    except TripEngineError as e:
        raise to_http_error(e)
    session.edit_draft = None
    session.touch()
    return trip.to_wire()


@router.delete("/edit/{session_id}")
async def discard_edit(session_id: str):
    session = get_session(session_id)
    session.edit_draft = None
    return _draft_state(session)
