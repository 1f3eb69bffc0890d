# backend/wellness_app/models/therapist.py

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from datetime import datetime

from .base import BaseModel
from .association_status import AssociationStatus
from .types import CaseInsensitiveEnum


class Therapist(BaseModel):
    __tablename__ = "therapists"

    id                 = Column(Integer, primary_key=True, index=True)
    user_id            = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    full_name          = Column(String, nullable=False)
    professional_title = Column(String, nullable=True)
    experience         = Column(Integer, nullable=True)
    email              = Column(String, nullable=True)
    phone_number       = Column(String, nullable=True)

    user = relationship("User", back_populates="therapist_profile")

    # Ordered like the original embedded array: insertion order
    business_links = relationship(
        "TherapistBusinessLink",
        back_populates="therapist",
        order_by="TherapistBusinessLink.id",
    )
    bookings = relationship("Booking", back_populates="therapist")
    availabilities = relationship("TherapistAvailability", back_populates="therapist")


class TherapistBusinessLink(BaseModel):
    """One entry of a therapist's associated businesses."""

    __tablename__ = "therapist_business_links"

    id           = Column(Integer, primary_key=True, index=True)
    therapist_id = Column(Integer, ForeignKey("therapists.id", ondelete="CASCADE"), nullable=False, index=True)
    business_id  = Column(Integer, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    status       = Column(
        CaseInsensitiveEnum(AssociationStatus),
        default=AssociationStatus.PENDING,
        nullable=False,
    )
    requested_at = Column(DateTime, default=datetime.utcnow)
    approved_at  = Column(DateTime, nullable=True)

    therapist = relationship("Therapist", back_populates="business_links")
    business  = relationship("Business")
