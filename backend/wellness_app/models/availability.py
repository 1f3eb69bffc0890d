# backend/wellness_app/models/availability.py

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
import enum

from .base import BaseModel
from .types import CaseInsensitiveEnum


class AvailabilityStatus(str, enum.Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    UNAVAILABLE = "unavailable"
    ON_LEAVE = "on-leave"


class TherapistAvailability(BaseModel):
    """A time slot on a therapist's calendar.

    Not linked to :class:`Booking` by a foreign key; the two are correlated at
    runtime by therapist, day and time range.
    """

    __tablename__ = "therapist_availabilities"

    id           = Column(Integer, primary_key=True, index=True)
    therapist_id = Column(Integer, ForeignKey("therapists.id", ondelete="CASCADE"), nullable=False, index=True)
    date         = Column(DateTime, nullable=False, index=True)
    start_time   = Column(String(5), nullable=False)
    end_time     = Column(String(5), nullable=False)
    status       = Column(
        CaseInsensitiveEnum(AvailabilityStatus),
        default=AvailabilityStatus.AVAILABLE,
        nullable=False,
    )

    therapist = relationship("Therapist", back_populates="availabilities")
