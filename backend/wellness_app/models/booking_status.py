import enum

class BookingStatus(str, enum.Enum):
    """Lifecycle states a booking moves through as therapist and business act on it."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    THERAPIST_CONFIRMED = "therapist_confirmed"
    THERAPIST_REJECTED = "therapist_rejected"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"
    PAID = "paid"
    NO_SHOW = "no_show"
    COMPLETED = "completed"

    @classmethod
    def _missing_(cls, value: object):
        """Accept the hyphenated legacy spelling ``no-show``."""
        if isinstance(value, str) and value.lower() == "no-show":
            return cls.NO_SHOW
        return None


class PaymentStatus(str, enum.Enum):
    """Payment axis, independent of :class:`BookingStatus`."""
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"


class NotificationDestination(str, enum.Enum):
    """Which party hears about actions on a booking."""
    CUSTOMER = "customer"
    BUSINESS = "business"


class PayoutStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
