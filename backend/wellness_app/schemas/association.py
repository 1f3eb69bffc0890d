from typing import Optional, Union, List
from datetime import datetime

from .common import CamelModel


class BusinessRequestIn(CamelModel):
    business_id: Optional[Union[int, str]] = None


class TherapistDecisionIn(CamelModel):
    therapist_id: Optional[Union[int, str]] = None
    action: Optional[str] = None


class DecisionResult(CamelModel):
    therapist_id: int
    business_id: int
    action: str
    timestamp: datetime


class BusinessBrief(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    address: Optional[dict] = None
    currency: Optional[str] = None


class AssociationRequestRow(CamelModel):
    id: int
    business_id: int
    status: str
    requested_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    business: Optional[BusinessBrief] = None


class BusinessWithStatus(BusinessBrief):
    association_status: str = "none"


class RequestCounts(CamelModel):
    total: int
    pending: int
    approved: int
    rejected: int


class BusinessRequestsView(CamelModel):
    all_requests: List[AssociationRequestRow]
    pending_requests: List[AssociationRequestRow]
    approved_requests: List[AssociationRequestRow]
    rejected_requests: List[AssociationRequestRow]
    counts: RequestCounts
