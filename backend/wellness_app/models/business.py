# backend/wellness_app/models/business.py

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from .base import BaseModel
from .association_status import AssociationStatus
from .types import CaseInsensitiveEnum


class BusinessStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class Business(BaseModel):
    __tablename__ = "businesses"

    id           = Column(Integer, primary_key=True, index=True)
    owner_id     = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name         = Column(String, nullable=False)
    description  = Column(Text, nullable=True)
    email        = Column(String, nullable=True)
    phone        = Column(String, nullable=True)
    website      = Column(String, nullable=True)
    street       = Column(String, nullable=True)
    city         = Column(String, nullable=True)
    state        = Column(String, nullable=True)
    zip_code     = Column(String, nullable=True)
    country      = Column(String, nullable=True)
    currency     = Column(String(3), nullable=True, default="INR")
    opening_time = Column(String(5), nullable=True)
    closing_time = Column(String(5), nullable=True)
    status       = Column(
        CaseInsensitiveEnum(BusinessStatus),
        default=BusinessStatus.ACTIVE,
        nullable=False,
    )

    owner    = relationship("User", back_populates="business")
    services = relationship("Service", back_populates="business", cascade="all, delete-orphan")

    # Mirror of Therapist.business_links; written independently, never via a cascade
    therapist_links = relationship(
        "BusinessTherapistLink",
        back_populates="business",
        order_by="BusinessTherapistLink.id",
    )

    @property
    def address(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "country": self.country,
        }


class BusinessTherapistLink(BaseModel):
    """One entry of a business's therapist roster."""

    __tablename__ = "business_therapist_links"

    id           = Column(Integer, primary_key=True, index=True)
    business_id  = Column(Integer, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    therapist_id = Column(Integer, ForeignKey("therapists.id", ondelete="CASCADE"), nullable=False, index=True)
    status       = Column(
        CaseInsensitiveEnum(AssociationStatus),
        default=AssociationStatus.PENDING,
        nullable=False,
    )
    requested_at = Column(DateTime, default=datetime.utcnow)
    joined_at    = Column(DateTime, nullable=True)

    business  = relationship("Business", back_populates="therapist_links")
    therapist = relationship("Therapist")
