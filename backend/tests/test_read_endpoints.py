from datetime import datetime, timedelta

from wellness_app.models import (
    Business,
    BookingStatus,
    BusinessTherapistLink,
    TherapistBusinessLink,
)


def test_therapist_responses_list_excludes_completed(client, world, auth_header):
    world.booking(status=BookingStatus.THERAPIST_CONFIRMED)
    world.booking(status=BookingStatus.THERAPIST_REJECTED)
    world.booking(status=BookingStatus.COMPLETED)

    res = client.get("/api/business/therapist-responses", headers=auth_header(world.owner))
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert sorted(r["status"] for r in body["data"]) == ["therapist_confirmed", "therapist_rejected"]
    assert body["pagination"]["totalBookings"] == 2

    row = body["data"][0]
    assert row["service"] == {
        "id": world.service.id,
        "name": "Deep Tissue",
        "price": 80.0,
        "duration": 60,
        "description": "60 min",
        "currency": "EUR",
    }
    assert row["therapist"] == {
        "id": world.therapist.id,
        "fullName": "Theo Therapist",
        "professionalTitle": "Massage Therapist",
    }
    assert row["duration"] == 60


def test_status_filter_only_narrows_to_therapist_statuses(client, world, auth_header):
    world.booking(status=BookingStatus.THERAPIST_CONFIRMED)
    world.booking(status=BookingStatus.THERAPIST_REJECTED)
    world.booking(status=BookingStatus.PAID)
    headers = auth_header(world.owner)

    narrowed = client.get("/api/business/therapist-responses?status=therapist_rejected", headers=headers)
    assert [r["status"] for r in narrowed.json()["data"]] == ["therapist_rejected"]

    ignored = client.get("/api/business/therapist-responses?status=paid", headers=headers)
    assert ignored.json()["pagination"]["totalBookings"] == 3


def test_booking_responses_only_admin_assigned(client, world, auth_header):
    world.booking(status=BookingStatus.PAID, assigned_by_admin=True, payment_status="completed")
    world.booking(status=BookingStatus.THERAPIST_CONFIRMED, assigned_by_admin=False)

    res = client.get("/api/business/booking-responses", headers=auth_header(world.owner))
    rows = res.json()["data"]
    assert len(rows) == 1
    assert rows[0]["assignedByAdmin"] is True
    assert rows[0]["paymentStatus"] == "completed"


def test_currency_defaults_to_inr(client, world, auth_header):
    db = world.Session()
    business = db.get(Business, world.business.id)
    business.currency = None
    db.commit()
    db.close()
    world.booking()

    res = client.get("/api/business/therapist-responses", headers=auth_header(world.owner))
    assert res.json()["data"][0]["service"]["currency"] == "INR"


def test_limit_is_capped(client, world, auth_header):
    world.booking()
    res = client.get("/api/business/therapist-responses?limit=5000", headers=auth_header(world.owner))
    assert res.status_code == 200
    assert res.json()["pagination"]["totalPages"] == 1


def test_business_requests_are_grouped(client, world, auth_header):
    db = world.Session()
    second = Business(owner_id=world.customer.id, name="Second Spa")
    third = Business(owner_id=world.customer.id, name="Third Spa")
    db.add_all([second, third])
    db.commit()
    now = datetime.utcnow()
    db.add_all([
        TherapistBusinessLink(therapist_id=world.therapist.id, business_id=world.business.id, status="approved", requested_at=now - timedelta(days=2), approved_at=now),
        TherapistBusinessLink(therapist_id=world.therapist.id, business_id=second.id, status="pending", requested_at=now),
        TherapistBusinessLink(therapist_id=world.therapist.id, business_id=third.id, status="rejected", requested_at=now - timedelta(days=1)),
    ])
    db.commit()
    second_id, third_id = second.id, third.id
    db.close()

    res = client.get("/api/therapist/business-requests", headers=auth_header(world.therapist_user))
    assert res.status_code == 200
    data = res.json()["data"]
    assert [r["businessId"] for r in data["allRequests"]] == [second_id, third_id, world.business.id]
    assert [r["businessId"] for r in data["pendingRequests"]] == [second_id]
    assert [r["businessId"] for r in data["approvedRequests"]] == [world.business.id]
    assert [r["businessId"] for r in data["rejectedRequests"]] == [third_id]
    assert data["counts"] == {"total": 3, "pending": 1, "approved": 1, "rejected": 1}
    assert data["allRequests"][0]["business"]["name"] == "Second Spa"


def test_businesses_carry_association_status(client, world, auth_header):
    db = world.Session()
    other = Business(owner_id=world.customer.id, name="Another Spa")
    db.add(other)
    db.commit()
    db.add(TherapistBusinessLink(therapist_id=world.therapist.id, business_id=world.business.id, status="pending"))
    db.add(BusinessTherapistLink(business_id=world.business.id, therapist_id=world.therapist.id, status="pending"))
    db.commit()
    other_id = other.id
    db.close()

    res = client.get("/api/therapist/businesses", headers=auth_header(world.therapist_user))
    statuses = {b["id"]: b["associationStatus"] for b in res.json()["data"]}
    assert statuses == {world.business.id: "pending", other_id: "none"}


def test_business_responses_hide_unreviewed(client, world, auth_header):
    reviewed = world.booking(
        status=BookingStatus.CANCELLED,
        response_visible_to_business_only=False,
        confirmed_at=datetime(2025, 5, 2),
    )
    world.booking(status=BookingStatus.THERAPIST_CONFIRMED, response_visible_to_business_only=True)
    later = world.booking(
        status=BookingStatus.CONFIRMED,
        response_visible_to_business_only=False,
        confirmed_at=datetime(2025, 5, 3),
    )
    headers = auth_header(world.therapist_user)

    res = client.get("/api/therapist/business-responses", headers=headers)
    assert [r["id"] for r in res.json()["data"]] == [later.id, reviewed.id]

    res = client.get("/api/therapist/business-responses?status=cancelled", headers=headers)
    assert [r["id"] for r in res.json()["data"]] == [reviewed.id]
