from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import ORJSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.association import DecisionResult, TherapistDecisionIn
from ..schemas.booking import BookingResponseAction, RescheduleIn
from ..schemas.common import envelope
from ..services import association_registry, booking_workflow, booking_views
from ..crud import crud_association
from ..utils.errors import error_response
from ..utils.notifications import notify_booking_action
from .dependencies import get_current_business_user

router = APIRouter(tags=["business"], default_response_class=ORJSONResponse)


def _owned_business(db: Session, user: User):
    business = crud_association.get_business_by_owner(db, user.id)
    if business is None:
        raise error_response("Business profile not found", code=404)
    return business


@router.patch("/approve-therapist")
def approve_therapist(
    body: TherapistDecisionIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_business_user),
):
    """Approve or reject a therapist's pending request to join the caller's business."""
    business, therapist, new_status, timestamp = association_registry.decide(
        db, current_user, body.therapist_id, body.action
    )
    message = (
        "Therapist approved successfully"
        if body.action == association_registry.APPROVE
        else "Therapist request rejected"
    )
    result = DecisionResult(
        therapist_id=therapist.id,
        business_id=business.id,
        action=new_status.value,
        timestamp=timestamp,
    )
    return envelope(message, result.to_json())


@router.get("/therapist-responses")
def list_therapist_responses(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_business_user),
):
    business = _owned_business(db, current_user)
    page, limit = booking_views.clamp_paging(page, limit)
    rows, pagination = booking_views.business_response_list(db, business, page, limit, status)
    return envelope(data=rows, pagination=pagination)


@router.patch("/therapist-responses/{booking_id}")
def respond_to_therapist_response(
    booking_id: str,
    body: BookingResponseAction,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_business_user),
):
    """Confirm, cancel or reschedule a booking after the therapist has responded."""
    booking = booking_workflow.apply_business_response(db, current_user, booking_id, body)
    extra = {"newDate": body.new_date, "newTime": body.new_time} if body.action == "reschedule" else None
    notify_booking_action(
        db,
        booking,
        body.action,
        actor_id=current_user.id,
        background_tasks=background_tasks,
        extra=extra,
    )
    return envelope(
        f"Booking {body.action} action completed successfully",
        booking_views.booking_row(db, booking).to_json(),
    )


@router.get("/booking-responses")
def list_booking_responses(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_business_user),
):
    business = _owned_business(db, current_user)
    page, limit = booking_views.clamp_paging(page, limit)
    rows, pagination = booking_views.business_response_list(
        db, business, page, limit, status, assigned_only=True
    )
    return envelope(data=rows, pagination=pagination)


@router.patch("/assigned-bookings/cancel/{booking_id}")
def cancel_assigned_booking(
    booking_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_business_user),
):
    """Cancel an admin-assigned booking and free its therapist's slot."""
    booking, slot = booking_workflow.cancel_assigned_booking(db, current_user, booking_id)
    notify_booking_action(
        db,
        booking,
        "cancel",
        actor_id=current_user.id,
        background_tasks=background_tasks,
    )
    data = booking_views.booking_row(db, booking).to_json()
    data["releasedSlotId"] = slot.id if slot is not None else None
    return envelope("Booking cancelled successfully", data)


@router.patch("/assigned-bookings/confirm/{booking_id}")
def confirm_assigned_booking(
    booking_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_business_user),
):
    booking = booking_workflow.confirm_assigned_booking(db, current_user, booking_id)
    notify_booking_action(
        db,
        booking,
        "confirm",
        actor_id=current_user.id,
        background_tasks=background_tasks,
    )
    return envelope("Booking confirmed successfully", booking_views.booking_row(db, booking).to_json())


@router.patch("/assigned-bookings/reschedule/{booking_id}")
def reschedule_assigned_booking(
    booking_id: str,
    body: RescheduleIn,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_business_user),
):
    booking = booking_workflow.reschedule_assigned_booking(
        db, current_user, booking_id, body.new_date, body.new_time
    )
    notify_booking_action(
        db,
        booking,
        "reschedule",
        actor_id=current_user.id,
        background_tasks=background_tasks,
        extra={"newDate": body.new_date, "newTime": body.new_time},
    )
    return envelope("Booking rescheduled successfully", booking_views.booking_row(db, booking).to_json())
