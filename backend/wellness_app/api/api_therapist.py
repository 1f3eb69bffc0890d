from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import ORJSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.association import BusinessRequestIn
from ..schemas.booking import CompletionResult, MarkCompletedIn
from ..schemas.common import envelope
from ..services import association_registry, booking_workflow, booking_views
from ..crud import crud_association
from ..utils.errors import error_response
from ..utils.notifications import notify_booking_action
from .dependencies import get_current_therapist_user

router = APIRouter(tags=["therapist"], default_response_class=ORJSONResponse)


def _therapist_profile(db: Session, user: User):
    therapist = crud_association.get_therapist_by_user(db, user.id)
    if therapist is None:
        raise error_response("Therapist profile not found", code=404)
    return therapist


@router.post("/request-business")
def request_business(
    body: BusinessRequestIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_therapist_user),
):
    association_registry.request_business(db, current_user, body.business_id)
    return {"success": True, "message": "Business association request submitted successfully"}


@router.get("/business-requests")
def list_business_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_therapist_user),
):
    therapist = _therapist_profile(db, current_user)
    view = booking_views.therapist_business_requests(db, therapist)
    return envelope(data=view.to_json())


@router.get("/businesses")
def list_businesses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_therapist_user),
):
    therapist = _therapist_profile(db, current_user)
    rows = booking_views.businesses_with_status(db, therapist)
    return envelope(data=[r.to_json() for r in rows])


@router.get("/business-responses")
def list_business_responses(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_therapist_user),
):
    therapist = _therapist_profile(db, current_user)
    page, limit = booking_views.clamp_paging(page, limit)
    rows, pagination = booking_views.therapist_business_responses(db, therapist, page, limit, status)
    return envelope(data=rows, pagination=pagination)


def _respond(action: str, booking_id: str, background_tasks, db: Session, user: User):
    booking = booking_workflow.therapist_respond(db, user, booking_id, action)
    notify_booking_action(
        db,
        booking,
        action,
        actor_id=user.id,
        background_tasks=background_tasks,
    )
    past = "confirmed" if action == "confirm" else "cancelled"
    return envelope(f"Booking {past} successfully", booking_views.booking_row(db, booking).to_json())


@router.patch("/bookings/{booking_id}/confirm")
def confirm_booking(
    booking_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_therapist_user),
):
    return _respond("confirm", booking_id, background_tasks, db, current_user)


@router.patch("/bookings/{booking_id}/cancel")
def cancel_booking(
    booking_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_therapist_user),
):
    return _respond("cancel", booking_id, background_tasks, db, current_user)


@router.post("/mark-booking-completed")
def mark_booking_completed(
    body: MarkCompletedIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_therapist_user),
):
    booking = booking_workflow.complete_booking(db, current_user, body.booking_id)
    result = CompletionResult(
        id=booking.id,
        status=booking.status.value,
        payment_status=booking.payment_status.value,
        therapist_payout_status=(
            booking.therapist_payout_status.value if booking.therapist_payout_status else None
        ),
        therapist_payout_amount=(
            float(booking.therapist_payout_amount) if booking.therapist_payout_amount is not None else None
        ),
        completed_at=booking.completed_at,
        confirmed_by=booking.confirmed_by_id,
        confirmed_at=booking.confirmed_at,
    )
    return envelope("Booking marked as completed successfully", result.to_json())
