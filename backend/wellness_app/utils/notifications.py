"""Booking action notifications: in-app rows plus best-effort email."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from .. import models
from ..models import NotificationDestination, NotificationType
from .email import send_email

logger = logging.getLogger(__name__)

_ACTION_TYPES = {
    "confirm": NotificationType.BOOKING_CONFIRMED,
    "cancel": NotificationType.BOOKING_CANCELLED,
    "reschedule": NotificationType.BOOKING_RESCHEDULED,
}

_ACTION_PAST = {
    "confirm": "Confirmed",
    "cancel": "Cancelled",
    "reschedule": "Rescheduled",
}


def business_subject(action: str, service_name: str, customer_name: str) -> str:
    return f"Booking {_ACTION_PAST[action]}: {service_name} for {customer_name}"


def customer_subject(action: str, service_name: str) -> str:
    return f"Your Booking for {service_name} Has Been {_ACTION_PAST[action]}"


def _email_body(booking: models.Booking, action: str, extra: Dict[str, Any]) -> str:
    lines = [
        f"Booking #{booking.id} was {_ACTION_PAST[action].lower()}.",
        f"Date: {booking.date.date().isoformat() if booking.date else '-'}",
        f"Time: {booking.time or '-'}",
    ]
    if action == "reschedule" and extra.get("newDate"):
        lines.append(f"New date: {extra['newDate']} at {extra.get('newTime') or booking.time}")
    if booking.notes:
        lines.append(f"Notes: {booking.notes}")
    return "\n".join(lines)


def _record_in_app(
    db: Session,
    user_id: int,
    ntype: NotificationType,
    message: str,
    booking_id: int,
) -> models.Notification:
    notif = models.Notification(
        user_id=user_id,
        booking_id=booking_id,
        type=ntype,
        message=message,
        link=f"/bookings/{booking_id}",
    )
    db.add(notif)
    return notif


def destination_for(booking: models.Booking) -> NotificationDestination:
    """The party told about actions on ``booking``.

    While a therapist response is still awaiting business sign-off the
    customer is never told, whatever the booking's stored destination.
    """
    if booking.response_visible_to_business_only:
        return NotificationDestination.BUSINESS
    return booking.notification_destination or NotificationDestination.CUSTOMER


def notify_booking_action(
    db: Session,
    booking: models.Booking,
    action: str,
    *,
    actor_id: Optional[int] = None,
    background_tasks: Optional[BackgroundTasks] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> bool:
    """Notify the parties of a booking about ``action``.

    The destination party (see :func:`destination_for`) gets one email and an
    in-app :class:`Notification`; the assigned therapist gets an in-app row
    too. The acting user is skipped. Never raises: failures are logged and
    ``False`` is returned so the caller's response is unaffected.
    """
    extra = extra or {}
    try:
        if action not in _ACTION_TYPES:
            logger.error("Invalid action for notification: %s", action)
            return False

        service = booking.service
        business = service.business if service is not None else None
        customer = booking.customer
        service_name = service.name if service is not None else "your service"
        customer_name = customer.name if customer is not None else "customer"
        destination = destination_for(booking)

        if destination == NotificationDestination.BUSINESS:
            party_id = business.owner_id if business is not None else None
            subject = business_subject(action, service_name, customer_name)
            address = business.email if business is not None else None
            if not address and business is not None and business.owner is not None:
                address = business.owner.email
        else:
            party_id = customer.id if customer is not None else None
            subject = customer_subject(action, service_name)
            address = customer.email if customer is not None else None

        recipients = [party_id]
        if booking.therapist is not None:
            recipients.append(booking.therapist.user_id)

        seen = set()
        for user_id in recipients:
            if user_id is None or user_id == actor_id or user_id in seen:
                continue
            seen.add(user_id)
            _record_in_app(db, user_id, _ACTION_TYPES[action], subject, booking.id)
        db.commit()

        if address:
            body = _email_body(booking, action, extra)
            if background_tasks is not None:
                background_tasks.add_task(send_email, address, subject, body)
            else:
                send_email(address, subject, body)
        else:
            logger.warning("No %s email found for booking %s notification", destination.value, booking.id)

        logger.info(
            "Booking %s %s notification sent to %s (%d in-app)",
            booking.id,
            action,
            destination.value,
            len(seen),
        )
        return True
    except Exception:
        logger.exception("Error sending booking notification for booking %s", booking.id)
        try:
            db.rollback()
        except Exception:  # pragma: no cover - session already unusable
            logger.warning("Rollback after notification failure also failed")
        return False
