from datetime import datetime

from wellness_app.models import Booking, BookingStatus


def _confirm(client, world, auth_header, booking_id):
    return client.patch(
        f"/api/business/assigned-bookings/confirm/{booking_id}",
        headers=auth_header(world.owner),
    )


def _reschedule(client, world, auth_header, booking_id, **body):
    return client.patch(
        f"/api/business/assigned-bookings/reschedule/{booking_id}",
        json=body,
        headers=auth_header(world.owner),
    )


def test_confirm_pending_assigned_booking(client, world, auth_header):
    booking = world.booking(status=BookingStatus.PENDING, therapist_responded=False)
    res = _confirm(client, world, auth_header, booking.id)
    assert res.status_code == 200
    assert res.json()["message"] == "Booking confirmed successfully"
    assert res.json()["data"]["status"] == "confirmed"

    stored = world.reload(Booking, booking.id)
    assert stored.status == BookingStatus.CONFIRMED
    assert stored.therapist_responded is True
    assert stored.response_visible_to_business_only is False
    assert stored.confirmed_by_id == world.owner.id
    assert stored.confirmed_at is not None


def test_confirm_rejects_other_statuses(client, world, auth_header):
    booking = world.booking(status=BookingStatus.CONFIRMED)
    res = _confirm(client, world, auth_header, booking.id)
    assert res.status_code == 400
    assert res.json()["error"] == "Only pending or rescheduled bookings can be confirmed"


def test_confirm_requires_admin_assignment(client, world, auth_header):
    booking = world.booking(status=BookingStatus.PENDING, assigned_by_admin=False)
    res = _confirm(client, world, auth_header, booking.id)
    assert res.status_code == 403


def test_reschedule_keeps_first_original(client, world, auth_header):
    booking = world.booking(status=BookingStatus.CONFIRMED)

    first = _reschedule(client, world, auth_header, booking.id, newDate="2025-06-01", newTime="14:30")
    assert first.status_code == 200
    assert first.json()["message"] == "Booking rescheduled successfully"

    second = _reschedule(client, world, auth_header, booking.id, newDate="2025-06-03", newTime="09:15")
    assert second.status_code == 200

    stored = world.reload(Booking, booking.id)
    assert stored.status == BookingStatus.RESCHEDULED
    assert stored.date == datetime(2025, 6, 3)
    assert stored.time == "09:15"
    assert stored.original_date == datetime(2025, 5, 20)
    assert stored.original_time == "10:00"
    assert stored.rescheduled_by_id == world.owner.id
    assert stored.therapist_responded is True


def test_reschedule_requires_date_and_time(client, world, auth_header):
    booking = world.booking(status=BookingStatus.PENDING)
    res = _reschedule(client, world, auth_header, booking.id, newDate="2025-06-01")
    assert res.status_code == 400
    assert res.json()["error"] == "New date and time are required"


def test_reschedule_rejects_bad_time_before_writing(client, world, auth_header):
    booking = world.booking(status=BookingStatus.PENDING)
    res = _reschedule(client, world, auth_header, booking.id, newDate="2025-06-01", newTime="25:00")
    assert res.status_code == 400
    assert res.json()["error"].startswith("Invalid time format")
    assert world.reload(Booking, booking.id).time == "10:00"


def test_reschedule_rejects_closed_bookings(client, world, auth_header):
    booking = world.booking(status=BookingStatus.CANCELLED)
    res = _reschedule(client, world, auth_header, booking.id, newDate="2025-06-01", newTime="14:30")
    assert res.status_code == 400
    assert res.json()["error"] == "Only pending, confirmed, or rescheduled bookings can be rescheduled"
