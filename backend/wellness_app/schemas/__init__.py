from .common import CamelModel, Pagination, envelope
from .booking import (
    BookingResponseAction,
    RescheduleIn,
    MarkCompletedIn,
    CompletionResult,
    BookingRow,
    CustomerBookingRow,
    BookingActions,
    CustomerSummary,
    ServiceSummary,
    TherapistSummary,
    BusinessSummary,
)
from .association import (
    BusinessRequestIn,
    TherapistDecisionIn,
    DecisionResult,
    BusinessBrief,
    AssociationRequestRow,
    BusinessWithStatus,
    BusinessRequestsView,
    RequestCounts,
)
from .user import LoginIn, UserOut
