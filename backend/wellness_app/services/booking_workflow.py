"""Status transitions applied to a booking by its therapist and its business.

Each operation validates in a fixed order, mutates the single booking row
and commits once. Notifications are sent by the caller after the commit.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Tuple

from sqlalchemy.orm import Session

from .. import models
from ..crud import crud_association, crud_availability
from ..crud.crud_booking import booking as booking_crud
from ..models import BookingStatus, PaymentStatus, PayoutStatus
from ..schemas.booking import BookingResponseAction
from ..utils.errors import WorkflowError
from ..utils.parsing import is_valid_time, parse_date, parse_id

logger = logging.getLogger(__name__)

BUSINESS_ACTIONS = ("confirm", "cancel", "reschedule")

# Statuses the business-response endpoint treats as "therapist has responded"
RESPONDED_STATUSES = frozenset(
    {
        BookingStatus.THERAPIST_CONFIRMED,
        BookingStatus.THERAPIST_REJECTED,
        BookingStatus.CONFIRMED,
        BookingStatus.PAID,
        BookingStatus.PENDING,
        BookingStatus.NO_SHOW,
        BookingStatus.RESCHEDULED,
    }
)

CANCELLABLE_STATUSES = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.RESCHEDULED}
)
THERAPIST_CONFIRMABLE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.RESCHEDULED})

# Share of the service price owed to the therapist on completion
THERAPIST_PAYOUT_SHARE = Decimal("0.4")

NOT_ADMIN_ASSIGNED = (
    "Access denied. This booking was not explicitly assigned by an admin "
    "through the assign task functionality"
)


def _load_business_booking(
    db: Session, owner: models.User, booking_id: Any
) -> Tuple[models.Business, models.Booking]:
    booking_pk = parse_id(booking_id, "booking")

    business = crud_association.get_business_by_owner(db, owner.id)
    if business is None:
        raise WorkflowError(404, "Business profile not found")

    booking = booking_crud.get_booking(db, booking_pk)
    if booking is None:
        raise WorkflowError(404, "Booking not found")

    service = db.get(models.Service, booking.service_id)
    if service is None or service.business_id != business.id:
        raise WorkflowError(403, "Booking does not belong to your business")
    return business, booking


def apply_business_response(
    db: Session,
    owner: models.User,
    booking_id: Any,
    payload: BookingResponseAction,
) -> models.Booking:
    """Confirm, cancel or reschedule a booking on behalf of its business."""
    _, booking = _load_business_booking(db, owner, booking_id)

    action = payload.action
    if not action:
        raise WorkflowError(400, "Action is required (confirm, cancel, or reschedule)")
    if action not in BUSINESS_ACTIONS:
        raise WorkflowError(400, "Invalid action. Must be one of: confirm, cancel, reschedule")

    if booking.status == BookingStatus.COMPLETED:
        raise WorkflowError(400, "Cannot process actions on completed bookings")
    # A cancelled booking may still be rescheduled
    if booking.status == BookingStatus.CANCELLED and action != "reschedule":
        raise WorkflowError(400, "Cannot process this action on cancelled bookings")
    if booking.status not in RESPONDED_STATUSES:
        raise WorkflowError(400, "This booking does not have a therapist response to process")

    new_date: Optional[datetime] = None
    if action == "reschedule":
        if not payload.new_date or not payload.new_time:
            raise WorkflowError(400, "New date and time are required for rescheduling")
        new_date = parse_date(payload.new_date)
        if new_date is None:
            raise WorkflowError(400, "Invalid date format")
        if not is_valid_time(payload.new_time):
            raise WorkflowError(400, "Invalid time format. Use HH:MM format (24-hour)")

    now = datetime.utcnow()
    # Every business action counts as the business signing off
    booking.confirmed_by_id = owner.id
    booking.confirmed_at = now

    if action == "confirm":
        paid = booking.status == BookingStatus.PAID or booking.payment_status == PaymentStatus.PARTIAL
        if not paid:
            booking.status = BookingStatus.CONFIRMED
    elif action == "cancel":
        booking.status = BookingStatus.CANCELLED
        booking.cancelled_by_id = owner.id
        booking.cancelled_at = now
    else:
        if booking.original_date is None:
            booking.original_date = booking.date
            booking.original_time = booking.time
        booking.date = new_date
        booking.time = payload.new_time
        booking.status = BookingStatus.CONFIRMED
        booking.rescheduled_by_id = owner.id
        booking.rescheduled_at = now

    booking.response_visible_to_business_only = False
    if payload.notes:
        booking.notes = payload.notes

    booking = booking_crud.save(db, booking)
    logger.info("Business user %s applied %s to booking %s", owner.id, action, booking.id)
    return booking


def release_availability_slot(
    db: Session, booking: models.Booking
) -> Optional[models.TherapistAvailability]:
    """Flip the slot covering the booking's day and time back to available.

    A missing slot is not an error.
    """
    if booking.therapist_id is None or booking.date is None or not booking.time:
        return None
    slot = crud_availability.find_slot_containing(db, booking.therapist_id, booking.date, booking.time)
    if slot is None:
        logger.info("No availability slot to release for booking %s", booking.id)
        return None
    crud_availability.mark_available(db, slot)
    logger.info("Released availability slot %s for booking %s", slot.id, booking.id)
    return slot


def _load_assigned_booking(db: Session, owner: models.User, booking_id: Any) -> models.Booking:
    _, booking = _load_business_booking(db, owner, booking_id)
    if not booking.assigned_by_admin:
        raise WorkflowError(403, NOT_ADMIN_ASSIGNED)
    return booking


def confirm_assigned_booking(db: Session, owner: models.User, booking_id: Any) -> models.Booking:
    """Business confirms an admin-assigned booking on the therapist's behalf."""
    booking = _load_assigned_booking(db, owner, booking_id)
    if booking.status not in THERAPIST_CONFIRMABLE_STATUSES:
        raise WorkflowError(400, "Only pending or rescheduled bookings can be confirmed")

    booking.status = BookingStatus.CONFIRMED
    booking.therapist_responded = True
    booking.response_visible_to_business_only = False
    booking.confirmed_by_id = owner.id
    booking.confirmed_at = datetime.utcnow()
    booking = booking_crud.save(db, booking)
    logger.info("Business user %s confirmed assigned booking %s", owner.id, booking.id)
    return booking


def reschedule_assigned_booking(
    db: Session,
    owner: models.User,
    booking_id: Any,
    new_date: Optional[str],
    new_time: Optional[str],
) -> models.Booking:
    """Move an admin-assigned booking to a new day and time.

    The status becomes ``rescheduled`` (the customer may then confirm it),
    unlike the business-response reschedule which lands on ``confirmed``.
    """
    if not new_date or not new_time:
        raise WorkflowError(400, "New date and time are required")
    parsed_date = parse_date(new_date)
    if parsed_date is None:
        raise WorkflowError(400, "Invalid date format")
    if not is_valid_time(new_time):
        raise WorkflowError(400, "Invalid time format. Use HH:MM format (24-hour)")

    booking = _load_assigned_booking(db, owner, booking_id)
    if booking.status not in CANCELLABLE_STATUSES:
        raise WorkflowError(400, "Only pending, confirmed, or rescheduled bookings can be rescheduled")

    if booking.original_date is None or booking.original_time is None:
        booking.original_date = booking.date
        booking.original_time = booking.time
    booking.date = parsed_date
    booking.time = new_time
    booking.status = BookingStatus.RESCHEDULED
    booking.therapist_responded = True
    booking.response_visible_to_business_only = False
    booking.rescheduled_by_id = owner.id
    booking.rescheduled_at = datetime.utcnow()
    booking = booking_crud.save(db, booking)
    logger.info("Business user %s rescheduled assigned booking %s", owner.id, booking.id)
    return booking


def cancel_assigned_booking(
    db: Session, owner: models.User, booking_id: Any
) -> Tuple[models.Booking, Optional[models.TherapistAvailability]]:
    """Cancel an admin-assigned booking and release its availability slot."""
    booking = _load_assigned_booking(db, owner, booking_id)
    if booking.status not in CANCELLABLE_STATUSES:
        raise WorkflowError(400, "Only pending, confirmed, or rescheduled bookings can be cancelled")

    now = datetime.utcnow()
    booking.status = BookingStatus.CANCELLED
    booking.therapist_responded = True
    booking.response_visible_to_business_only = False
    booking.cancelled_by_id = owner.id
    booking.cancelled_at = now
    booking = booking_crud.save(db, booking)
    logger.info("Business user %s cancelled assigned booking %s", owner.id, booking.id)

    slot = release_availability_slot(db, booking)
    return booking, slot


def therapist_respond(
    db: Session, user: models.User, booking_id: Any, action: str
) -> models.Booking:
    """Record the assigned therapist's confirm/cancel on an admin-assigned booking.

    The outcome stays hidden from the customer until the business acts.
    """
    booking_pk = parse_id(booking_id, "booking")

    therapist = crud_association.get_therapist_by_user(db, user.id)
    if therapist is None:
        raise WorkflowError(404, "Therapist profile not found")

    booking = booking_crud.get_booking(db, booking_pk)
    if booking is None:
        raise WorkflowError(404, "Booking not found")
    if booking.therapist_id != therapist.id:
        raise WorkflowError(403, "Access denied. This booking is not assigned to you")
    if not booking.assigned_by_admin:
        raise WorkflowError(403, NOT_ADMIN_ASSIGNED)

    now = datetime.utcnow()
    if action == "confirm":
        if booking.status not in THERAPIST_CONFIRMABLE_STATUSES:
            raise WorkflowError(400, "Only pending or rescheduled bookings can be confirmed")
        booking.status = BookingStatus.THERAPIST_CONFIRMED
        booking.confirmed_by_id = user.id
        booking.confirmed_at = now
    elif action == "cancel":
        if booking.status not in CANCELLABLE_STATUSES:
            raise WorkflowError(400, "Only pending, confirmed, or rescheduled bookings can be cancelled")
        booking.status = BookingStatus.THERAPIST_REJECTED
        booking.cancelled_by_id = user.id
        booking.cancelled_at = now
    else:
        raise WorkflowError(400, "Invalid action. Must be one of: confirm, cancel")

    booking.therapist_responded = True
    booking.response_visible_to_business_only = True
    booking = booking_crud.save(db, booking)
    logger.info("Therapist %s responded %s on booking %s", therapist.id, action, booking.id)
    return booking


def complete_booking(db: Session, user: models.User, booking_id: Any) -> models.Booking:
    """Therapist marks their booking completed and queues their payout.

    ``completed`` is terminal: no business action is accepted afterwards.
    """
    therapist = crud_association.get_therapist_by_user(db, user.id)
    if therapist is None:
        raise WorkflowError(404, "Therapist profile not found")
    if booking_id is None or booking_id == "":
        raise WorkflowError(400, "Booking ID is required")
    booking_pk = parse_id(booking_id, "booking")

    booking = booking_crud.get_booking(db, booking_pk)
    if booking is None:
        raise WorkflowError(404, "Booking not found")
    if booking.status == BookingStatus.COMPLETED:
        raise WorkflowError(400, "Booking is already marked as completed")
    if booking.therapist_id != therapist.id:
        raise WorkflowError(403, "Access denied. This booking is not assigned to you")
    service = db.get(models.Service, booking.service_id)
    if service is None:
        raise WorkflowError(404, "Service not found")

    now = datetime.utcnow()
    booking.status = BookingStatus.COMPLETED
    booking.payment_status = PaymentStatus.COMPLETED
    booking.therapist_payout_status = PayoutStatus.PENDING
    booking.therapist_payout_amount = (Decimal(service.price or 0) * THERAPIST_PAYOUT_SHARE).quantize(
        Decimal("0.01")
    )
    booking.completed_at = now
    booking.confirmed_by_id = user.id
    booking.confirmed_at = now
    booking = booking_crud.save(db, booking)
    logger.info("Therapist %s completed booking %s", therapist.id, booking.id)
    return booking
