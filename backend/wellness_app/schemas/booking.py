from pydantic import Field
from typing import Optional, Union
from datetime import datetime

from .common import CamelModel


# Bodies arrive loosely typed so each route can answer with its own 400 text
class BookingResponseAction(CamelModel):
    action: Optional[str] = None
    new_date: Optional[str] = None
    new_time: Optional[str] = None
    notes: Optional[str] = None


class RescheduleIn(CamelModel):
    new_date: Optional[str] = None
    new_time: Optional[str] = None


class MarkCompletedIn(CamelModel):
    booking_id: Optional[Union[int, str]] = None


class CustomerSummary(CamelModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    first_name: str = ""
    last_name: str = ""


class ServiceSummary(CamelModel):
    id: int
    name: str
    price: float
    duration: int
    description: Optional[str] = None
    currency: str


class TherapistSummary(CamelModel):
    id: int
    full_name: str
    professional_title: Optional[str] = None


class BusinessSummary(CamelModel):
    id: int
    name: str
    currency: str


class BookingActions(CamelModel):
    can_cancel: bool
    can_confirm: bool
    can_reschedule: bool


class BookingRow(CamelModel):
    """Booking as listed on the business and therapist dashboards."""

    id: int
    customer: Optional[CustomerSummary] = None
    service: Optional[ServiceSummary] = None
    therapist: Optional[TherapistSummary] = None
    business: Optional[BusinessSummary] = None
    date: datetime
    time: str
    duration: Optional[int] = None
    status: str
    payment_status: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    therapist_responded: bool = False
    response_visible_to_business_only: bool = False
    assigned_by_admin: bool = False
    assigned_by_id: Optional[int] = None
    original_date: Optional[datetime] = None
    original_time: Optional[str] = None
    confirmed_by: Optional[int] = None
    confirmed_at: Optional[datetime] = None
    cancelled_by: Optional[int] = None
    cancelled_at: Optional[datetime] = None
    rescheduled_by: Optional[int] = None
    rescheduled_at: Optional[datetime] = None


class CustomerBookingRow(BookingRow):
    """Customer view: ``status`` may be masked; carries allowed actions."""

    has_been_rescheduled: bool = False
    actions: BookingActions = Field(
        default_factory=lambda: BookingActions(can_cancel=False, can_confirm=False, can_reschedule=False)
    )


class CompletionResult(CamelModel):
    id: int
    status: str
    payment_status: str
    therapist_payout_status: Optional[str] = None
    therapist_payout_amount: Optional[float] = None
    completed_at: Optional[datetime] = None
    confirmed_by: Optional[int] = None
    confirmed_at: Optional[datetime] = None
