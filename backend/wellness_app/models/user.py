# backend/wellness_app/models/user.py

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship
from .base import BaseModel
from .types import CaseInsensitiveEnum
import enum

class UserRole(str, enum.Enum):
    """Enumeration of all supported user roles."""

    CUSTOMER = "customer"
    THERAPIST = "therapist"
    BUSINESS = "business"
    ADMIN = "admin"

    @classmethod
    def _missing_(cls, value: object):
        """Roles arrive capitalised from older tokens (``Business``)."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None

class User(BaseModel):
    __tablename__ = "users"

    id        = Column(Integer, primary_key=True, index=True)
    name      = Column(String, nullable=False)
    email     = Column(String, unique=True, index=True, nullable=False)
    password  = Column(String, nullable=False)
    phone     = Column(String, nullable=True)
    role      = Column(CaseInsensitiveEnum(UserRole), nullable=False)
    is_active = Column(Boolean, default=True)

    # ↔–↔ A business-role user owns at most one business profile
    business = relationship(
        "Business",
        back_populates="owner",
        uselist=False,
    )

    # ↔–↔ A therapist-role user has exactly one therapist profile
    therapist_profile = relationship(
        "Therapist",
        back_populates="user",
        uselist=False,
    )

    # ↔–↔ All bookings where this user is the customer
    bookings_as_customer = relationship(
        "Booking",
        foreign_keys="Booking.customer_id",
        back_populates="customer",
    )
