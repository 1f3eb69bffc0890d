import os
from datetime import datetime
from pathlib import Path

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Must be set before the application modules are imported
os.environ.setdefault("PYTEST_RUN", "1")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
load_dotenv(Path(__file__).resolve().parents[1] / ".env.test")

from wellness_app.main import app  # noqa: E402
from wellness_app.database import get_db  # noqa: E402
from wellness_app.models import (  # noqa: E402
    Booking,
    BookingStatus,
    Business,
    NotificationDestination,
    Service,
    Therapist,
    TherapistAvailability,
    User,
    UserRole,
)
from wellness_app.models.base import BaseModel  # noqa: E402
from wellness_app.api.auth import create_access_token  # noqa: E402


@pytest.fixture
def Session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    BaseModel.metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def client(Session):
    def override_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth_header(user: User) -> dict:
    token = create_access_token({"id": user.id, "email": user.email, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_header():
    return _auth_header


class World:
    """Small fixture graph: one business with a service, a therapist and a customer."""

    def __init__(self, Session):
        self.Session = Session
        db = Session()
        self.owner = User(name="Olive Owner", email="owner@spa.test", password="x", role=UserRole.BUSINESS)
        self.therapist_user = User(name="Theo Therapist", email="theo@spa.test", password="x", role=UserRole.THERAPIST)
        self.customer = User(name="Cara Jane Customer", email="cara@spa.test", password="x", phone="555-0101", role=UserRole.CUSTOMER)
        db.add_all([self.owner, self.therapist_user, self.customer])
        db.commit()

        self.business = Business(owner_id=self.owner.id, name="Calm Spa", email="desk@spa.test", currency="EUR")
        self.therapist = Therapist(user_id=self.therapist_user.id, full_name="Theo Therapist", professional_title="Massage Therapist")
        db.add_all([self.business, self.therapist])
        db.commit()

        self.service = Service(business_id=self.business.id, name="Deep Tissue", price=80, duration=60, description="60 min")
        db.add(self.service)
        db.commit()
        db.close()

    def booking(self, **overrides) -> Booking:
        values = dict(
            customer_id=self.customer.id,
            therapist_id=self.therapist.id,
            service_id=self.service.id,
            date=datetime(2025, 5, 20),
            time="10:00",
            status=BookingStatus.THERAPIST_CONFIRMED,
            assigned_by_admin=True,
            therapist_responded=True,
            response_visible_to_business_only=True,
            notification_destination=NotificationDestination.BUSINESS,
        )
        values.update(overrides)
        db = self.Session()
        booking = Booking(**values)
        db.add(booking)
        db.commit()
        db.close()
        return booking

    def slot(self, **overrides) -> TherapistAvailability:
        values = dict(
            therapist_id=self.therapist.id,
            date=datetime(2025, 5, 20, 0, 0),
            start_time="09:00",
            end_time="12:00",
            status="booked",
        )
        values.update(overrides)
        db = self.Session()
        slot = TherapistAvailability(**values)
        db.add(slot)
        db.commit()
        db.close()
        return slot

    def reload(self, model, pk):
        db = self.Session()
        try:
            return db.get(model, pk)
        finally:
            db.close()


@pytest.fixture
def world(Session):
    return World(Session)
