# backend/wellness_app/models/service.py
from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Table, Text
from sqlalchemy.orm import relationship

from ..database import Base
from .base import BaseModel


service_therapists = Table(
    "service_therapists",
    Base.metadata,
    Column("service_id", Integer, ForeignKey("services.id", ondelete="CASCADE"), primary_key=True),
    Column("therapist_id", Integer, ForeignKey("therapists.id", ondelete="CASCADE"), primary_key=True),
)


class Service(BaseModel):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(
        Integer,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    # Minutes
    duration = Column(Integer, nullable=False)

    business = relationship("Business", back_populates="services")
    therapists = relationship("Therapist", secondary=service_therapists)
    bookings = relationship("Booking", back_populates="service")
