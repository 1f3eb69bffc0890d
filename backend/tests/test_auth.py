from datetime import timedelta

from wellness_app.api.auth import create_access_token
from wellness_app.models import User, UserRole
from wellness_app.utils.auth import get_password_hash


def test_missing_token(client, world):
    res = client.get("/api/business/therapist-responses")
    assert res.status_code == 401
    assert res.json() == {"success": False, "error": "Authentication token required"}


def test_garbage_and_expired_tokens(client, world):
    res = client.get(
        "/api/business/therapist-responses",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert res.status_code == 401
    assert res.json()["error"] == "Invalid or expired token"

    expired = create_access_token(
        {"id": world.owner.id, "email": world.owner.email, "role": "business"},
        expires_delta=timedelta(minutes=-5),
    )
    res = client.get(
        "/api/business/therapist-responses",
        headers={"Authorization": f"Bearer {expired}"},
    )
    assert res.status_code == 401
    assert res.json()["error"] == "Invalid or expired token"


def test_role_compared_case_insensitively(client, world):
    token = create_access_token({"id": world.owner.id, "email": world.owner.email, "role": "Business"})
    res = client.get(
        "/api/business/therapist-responses",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 200


def test_wrong_role(client, world, auth_header):
    res = client.post(
        "/api/therapist/request-business",
        json={"businessId": world.business.id},
        headers=auth_header(world.owner),
    )
    assert res.status_code == 403
    assert res.json()["error"] == "Access denied. Therapist role required"


def test_user_must_exist(client, world):
    token = create_access_token({"id": 9999, "email": "ghost@spa.test", "role": "business"})
    res = client.get(
        "/api/business/therapist-responses",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 404
    assert res.json()["error"] == "User not found"


def test_login_returns_token_usable_on_routes(client, Session):
    db = Session()
    user = User(
        name="Lena Login",
        email="lena@spa.test",
        password=get_password_hash("s3cret!"),
        role=UserRole.CUSTOMER,
    )
    db.add(user)
    db.commit()
    db.close()

    res = client.post("/api/auth/login", json={"email": "Lena@Spa.test", "password": "s3cret!"})
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["user"]["role"] == "customer"

    listing = client.get(
        "/api/customer/bookings",
        headers={"Authorization": f"Bearer {body['token']}"},
    )
    assert listing.status_code == 200

    bad = client.post("/api/auth/login", json={"email": "lena@spa.test", "password": "nope"})
    assert bad.status_code == 401
    assert bad.json() == {"success": False, "error": "Invalid credentials"}
