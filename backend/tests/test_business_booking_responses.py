from datetime import datetime

import pytest

from wellness_app.models import Booking, BookingStatus, Business, PaymentStatus, Service


def _patch(client, world, auth_header, booking_id, body):
    return client.patch(
        f"/api/business/therapist-responses/{booking_id}",
        json=body,
        headers=auth_header(world.owner),
    )


def test_confirm_therapist_response(client, world, auth_header):
    booking = world.booking()
    res = _patch(client, world, auth_header, booking.id, {"action": "confirm"})
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Booking confirm action completed successfully"
    assert body["data"]["status"] == "confirmed"
    assert body["data"]["service"]["currency"] == "EUR"
    assert body["data"]["customer"]["firstName"] == "Cara"
    assert body["data"]["customer"]["lastName"] == "Jane Customer"

    stored = world.reload(Booking, booking.id)
    assert stored.status == BookingStatus.CONFIRMED
    assert stored.response_visible_to_business_only is False
    assert stored.confirmed_by_id == world.owner.id
    assert stored.confirmed_at is not None


@pytest.mark.parametrize(
    "status, payment_status",
    [
        (BookingStatus.PAID, PaymentStatus.COMPLETED),
        (BookingStatus.THERAPIST_CONFIRMED, PaymentStatus.PARTIAL),
    ],
)
def test_confirm_preserves_paid_and_partial_bookings(client, world, auth_header, status, payment_status):
    booking = world.booking(status=status, payment_status=payment_status)
    res = _patch(client, world, auth_header, booking.id, {"action": "confirm"})
    assert res.status_code == 200

    stored = world.reload(Booking, booking.id)
    assert stored.status == status
    assert stored.payment_status == payment_status
    assert stored.response_visible_to_business_only is False


def test_cancel_therapist_response(client, world, auth_header):
    booking = world.booking()
    res = _patch(client, world, auth_header, booking.id, {"action": "cancel", "notes": "therapist unwell"})
    assert res.status_code == 200

    stored = world.reload(Booking, booking.id)
    assert stored.status == BookingStatus.CANCELLED
    assert stored.cancelled_by_id == world.owner.id
    assert stored.cancelled_at is not None
    assert stored.response_visible_to_business_only is False
    assert stored.notes == "therapist unwell"


def test_reschedule_captures_original_once(client, world, auth_header):
    booking = world.booking(date=datetime(2025, 5, 20), time="10:00")

    first = _patch(
        client, world, auth_header, booking.id,
        {"action": "reschedule", "newDate": "2025-06-01", "newTime": "14:30"},
    )
    assert first.status_code == 200
    stored = world.reload(Booking, booking.id)
    assert stored.date == datetime(2025, 6, 1)
    assert stored.time == "14:30"
    assert stored.status == BookingStatus.CONFIRMED
    assert stored.rescheduled_by_id == world.owner.id
    assert stored.rescheduled_at is not None
    assert stored.original_date == datetime(2025, 5, 20)
    assert stored.original_time == "10:00"

    second = _patch(
        client, world, auth_header, booking.id,
        {"action": "reschedule", "newDate": "2025-06-08", "newTime": "09:15"},
    )
    assert second.status_code == 200
    stored = world.reload(Booking, booking.id)
    assert stored.date == datetime(2025, 6, 8)
    assert stored.time == "09:15"
    assert stored.original_date == datetime(2025, 5, 20)
    assert stored.original_time == "10:00"


def test_invalid_time_rejected_before_any_write(client, world, auth_header):
    booking = world.booking()
    res = _patch(
        client, world, auth_header, booking.id,
        {"action": "reschedule", "newDate": "2025-06-01", "newTime": "25:00"},
    )
    assert res.status_code == 400
    assert res.json() == {
        "success": False,
        "error": "Invalid time format. Use HH:MM format (24-hour)",
    }
    stored = world.reload(Booking, booking.id)
    assert stored.status == BookingStatus.THERAPIST_CONFIRMED
    assert stored.time == "10:00"
    assert stored.confirmed_at is None
    assert stored.original_date is None


@pytest.mark.parametrize(
    "body, error",
    [
        ({"action": "reschedule", "newTime": "10:00"}, "New date and time are required for rescheduling"),
        ({"action": "reschedule", "newDate": "soon", "newTime": "10:00"}, "Invalid date format"),
        ({"action": "reschedule", "newDate": "2025-06-01", "newTime": "9:30"}, "Invalid time format. Use HH:MM format (24-hour)"),
        ({}, "Action is required (confirm, cancel, or reschedule)"),
        ({"action": "approve"}, "Invalid action. Must be one of: confirm, cancel, reschedule"),
    ],
)
def test_body_validation(client, world, auth_header, body, error):
    booking = world.booking()
    res = _patch(client, world, auth_header, booking.id, body)
    assert res.status_code == 400
    assert res.json()["error"] == error


def test_completed_booking_blocks_every_action(client, world, auth_header):
    booking = world.booking(status=BookingStatus.COMPLETED)
    for action in ("confirm", "cancel", "reschedule"):
        res = _patch(
            client, world, auth_header, booking.id,
            {"action": action, "newDate": "2025-06-01", "newTime": "10:00"},
        )
        assert res.status_code == 400
        assert res.json()["error"] == "Cannot process actions on completed bookings"


def test_cancelled_booking_can_only_be_rescheduled(client, world, auth_header):
    booking = world.booking(status=BookingStatus.CANCELLED)
    for action in ("confirm", "cancel"):
        res = _patch(client, world, auth_header, booking.id, {"action": action})
        assert res.status_code == 400
        assert res.json()["error"] == "Cannot process this action on cancelled bookings"

    res = _patch(
        client, world, auth_header, booking.id,
        {"action": "reschedule", "newDate": "2025-07-01", "newTime": "11:00"},
    )
    assert res.status_code == 200
    assert world.reload(Booking, booking.id).status == BookingStatus.CONFIRMED


def test_booking_of_another_business_is_forbidden(client, world, auth_header):
    db = world.Session()
    rival = Business(owner_id=world.customer.id, name="Rival Spa")
    db.add(rival)
    db.commit()
    service = Service(business_id=rival.id, name="Facial", price=40, duration=30)
    db.add(service)
    db.commit()
    service_id = service.id
    db.close()

    booking = world.booking(service_id=service_id)
    res = _patch(client, world, auth_header, booking.id, {"action": "confirm"})
    assert res.status_code == 403
    assert res.json()["error"] == "Booking does not belong to your business"


def test_path_id_checks(client, world, auth_header):
    res = _patch(client, world, auth_header, "xyz", {"action": "confirm"})
    assert (res.status_code, res.json()["error"]) == (400, "Invalid booking ID format")

    res = _patch(client, world, auth_header, 777, {"action": "confirm"})
    assert (res.status_code, res.json()["error"]) == (404, "Booking not found")
