from .user import User, UserRole
from .business import Business, BusinessStatus, BusinessTherapistLink
from .therapist import Therapist, TherapistBusinessLink
from .association_status import AssociationStatus
from .service import Service, service_therapists
from .booking import Booking
from .booking_status import BookingStatus, NotificationDestination, PaymentStatus, PayoutStatus
from .availability import TherapistAvailability, AvailabilityStatus
from .notification import Notification, NotificationType
from .base import BaseModel

__all__ = [
    "User",
    "UserRole",
    "Business",
    "BusinessStatus",
    "BusinessTherapistLink",
    "Therapist",
    "TherapistBusinessLink",
    "AssociationStatus",
    "Service",
    "service_therapists",
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "NotificationDestination",
    "PayoutStatus",
    "TherapistAvailability",
    "AvailabilityStatus",
    "Notification",
    "NotificationType",
    "BaseModel",
]
