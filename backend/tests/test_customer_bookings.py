from datetime import datetime

import pytest

from wellness_app.models import BookingStatus


def _rows(client, world, auth_header, **params):
    res = client.get("/api/customer/bookings", params=params, headers=auth_header(world.customer))
    assert res.status_code == 200
    return res.json()


def test_hidden_response_reads_as_pending(client, world, auth_header):
    world.booking(status=BookingStatus.THERAPIST_REJECTED, response_visible_to_business_only=True)
    row = _rows(client, world, auth_header)["data"][0]
    assert row["status"] == "pending"
    assert row["actions"] == {"canCancel": False, "canConfirm": False, "canReschedule": True}
    assert row["business"] == {"id": world.business.id, "name": "Calm Spa", "currency": "EUR"}


@pytest.mark.parametrize(
    "status, actions",
    [
        (BookingStatus.PENDING, (True, False, True)),
        (BookingStatus.CONFIRMED, (True, False, True)),
        (BookingStatus.RESCHEDULED, (True, True, True)),
        (BookingStatus.CANCELLED, (False, False, True)),
        (BookingStatus.COMPLETED, (False, False, False)),
    ],
)
def test_visible_status_and_actions(client, world, auth_header, status, actions):
    world.booking(status=status, response_visible_to_business_only=False)
    row = _rows(client, world, auth_header)["data"][0]
    assert row["status"] == status.value
    assert (
        row["actions"]["canCancel"],
        row["actions"]["canConfirm"],
        row["actions"]["canReschedule"],
    ) == actions


def test_reschedule_flag_and_original_slot(client, world, auth_header):
    world.booking(
        status=BookingStatus.CONFIRMED,
        response_visible_to_business_only=False,
        original_date=datetime(2025, 5, 1),
        original_time="08:00",
    )
    row = _rows(client, world, auth_header)["data"][0]
    assert row["hasBeenRescheduled"] is True
    assert row["originalTime"] == "08:00"


def test_pagination_and_status_filter(client, world, auth_header):
    for _ in range(3):
        world.booking(status=BookingStatus.CONFIRMED, response_visible_to_business_only=False)
    world.booking(status=BookingStatus.CANCELLED, response_visible_to_business_only=False)

    first = _rows(client, world, auth_header, page=1, limit=3)
    assert len(first["data"]) == 3
    assert first["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalBookings": 4,
        "hasNext": True,
        "hasPrev": False,
    }

    second = _rows(client, world, auth_header, page=2, limit=3)
    assert len(second["data"]) == 1
    assert second["pagination"]["hasPrev"] is True

    cancelled = _rows(client, world, auth_header, status="cancelled")
    assert [r["status"] for r in cancelled["data"]] == ["cancelled"]

    unknown = _rows(client, world, auth_header, status="bogus")
    assert unknown["data"] == []
    assert unknown["pagination"]["totalBookings"] == 0


def test_other_roles_are_refused(client, world, auth_header):
    res = client.get("/api/customer/bookings", headers=auth_header(world.owner))
    assert res.status_code == 403
    assert res.json() == {"success": False, "error": "Access denied. Customer role required"}
