# backend/wellness_app/models/booking.py

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from .booking_status import BookingStatus, NotificationDestination, PaymentStatus, PayoutStatus
from .types import CaseInsensitiveEnum

class Booking(BaseModel):
    __tablename__ = "bookings"

    id           = Column(Integer, primary_key=True, index=True)
    customer_id  = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    therapist_id = Column(Integer, ForeignKey("therapists.id"), nullable=True, index=True)
    service_id   = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    date         = Column(DateTime, nullable=False, index=True)
    time         = Column(String(5), nullable=False)  # HH:MM
    duration     = Column(Integer, nullable=True)
    status       = Column(
        CaseInsensitiveEnum(BookingStatus),
        default=BookingStatus.PENDING,
        nullable=False,
        index=True,
    )
    payment_status = Column(
        CaseInsensitiveEnum(PaymentStatus),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    notes        = Column(Text, nullable=True)

    # First reschedule only; later reschedules leave these untouched
    original_date = Column(DateTime, nullable=True)
    original_time = Column(String(5), nullable=True)

    therapist_responded               = Column(Boolean, default=False, nullable=False)
    response_visible_to_business_only = Column(Boolean, default=False, nullable=False)

    assigned_by_admin = Column(Boolean, default=False, nullable=False)
    assigned_by_id    = Column(Integer, ForeignKey("users.id"), nullable=True)
    # Admin-assigned bookings report to the business, not the customer
    notification_destination = Column(
        CaseInsensitiveEnum(NotificationDestination),
        default=NotificationDestination.CUSTOMER,
        nullable=False,
    )

    confirmed_by_id   = Column(Integer, ForeignKey("users.id"), nullable=True)
    confirmed_at      = Column(DateTime, nullable=True)
    cancelled_by_id   = Column(Integer, ForeignKey("users.id"), nullable=True)
    cancelled_at      = Column(DateTime, nullable=True)
    rescheduled_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    rescheduled_at    = Column(DateTime, nullable=True)
    completed_at      = Column(DateTime, nullable=True)

    therapist_payout_status = Column(CaseInsensitiveEnum(PayoutStatus), nullable=True)
    therapist_payout_amount = Column(Numeric(10, 2), nullable=True)

    # Relationships
    customer  = relationship("User", foreign_keys=[customer_id], back_populates="bookings_as_customer")
    therapist = relationship("Therapist", back_populates="bookings")
    service   = relationship("Service", back_populates="bookings")

    @property
    def has_been_rescheduled(self) -> bool:
        return self.original_date is not None or self.original_time is not None
