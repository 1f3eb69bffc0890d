"""Read-side projections of bookings for business, therapist and customer."""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from .. import models
from ..core.config import settings
from ..crud import crud_association
from ..crud.crud_booking import booking as booking_crud
from ..models import AssociationStatus, BookingStatus
from ..schemas.association import (
    AssociationRequestRow,
    BusinessBrief,
    BusinessRequestsView,
    BusinessWithStatus,
    RequestCounts,
)
from ..schemas.booking import (
    BookingActions,
    BookingRow,
    BusinessSummary,
    CustomerBookingRow,
    CustomerSummary,
    ServiceSummary,
    TherapistSummary,
)
from ..schemas.common import Pagination

logger = logging.getLogger(__name__)

THERAPIST_RESPONSE_FILTERS = ("therapist_confirmed", "therapist_rejected")
BUSINESS_RESPONSE_FILTERS = ("confirmed", "cancelled", "rescheduled")

CUSTOMER_CANCELLABLE = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.RESCHEDULED}
)


def clamp_paging(page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else settings.DEFAULT_PAGE_SIZE
    return page, min(limit, settings.MAX_PAGE_SIZE)


def _label(value) -> Optional[str]:
    return getattr(value, "value", value)


def _split_name(name: Optional[str]) -> Tuple[str, str]:
    parts = (name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def _business_for_service(db: Session, service: Optional[models.Service]) -> Optional[models.Business]:
    # One lookup per row
    if service is None or service.business_id is None:
        return None
    try:
        return db.get(models.Business, service.business_id)
    except Exception:
        logger.exception("Error populating business data for service %s", service.id)
        return None


def booking_row(db: Session, booking: models.Booking, row_cls=BookingRow) -> BookingRow:
    service = booking.service
    business = _business_for_service(db, service)
    currency = (business.currency if business is not None else None) or settings.DEFAULT_CURRENCY

    customer = None
    if booking.customer is not None:
        first, last = _split_name(booking.customer.name)
        customer = CustomerSummary(
            id=booking.customer.id,
            name=booking.customer.name,
            email=booking.customer.email,
            phone=booking.customer.phone,
            first_name=first,
            last_name=last,
        )

    service_summary = None
    if service is not None:
        service_summary = ServiceSummary(
            id=service.id,
            name=service.name,
            price=float(service.price or 0),
            duration=service.duration,
            description=service.description,
            currency=currency,
        )

    therapist = None
    if booking.therapist is not None:
        therapist = TherapistSummary(
            id=booking.therapist.id,
            full_name=booking.therapist.full_name,
            professional_title=booking.therapist.professional_title,
        )

    business_summary = None
    if business is not None:
        business_summary = BusinessSummary(id=business.id, name=business.name, currency=currency)

    return row_cls(
        id=booking.id,
        customer=customer,
        service=service_summary,
        therapist=therapist,
        business=business_summary,
        date=booking.date,
        time=booking.time,
        duration=booking.duration or (service.duration if service is not None else None),
        status=_label(booking.status),
        payment_status=_label(booking.payment_status),
        notes=booking.notes,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
        therapist_responded=bool(booking.therapist_responded),
        response_visible_to_business_only=bool(booking.response_visible_to_business_only),
        assigned_by_admin=bool(booking.assigned_by_admin),
        assigned_by_id=booking.assigned_by_id,
        original_date=booking.original_date,
        original_time=booking.original_time,
        confirmed_by=booking.confirmed_by_id,
        confirmed_at=booking.confirmed_at,
        cancelled_by=booking.cancelled_by_id,
        cancelled_at=booking.cancelled_at,
        rescheduled_by=booking.rescheduled_by_id,
        rescheduled_at=booking.rescheduled_at,
    )


def customer_actions(booking: models.Booking) -> BookingActions:
    """What the customer may do with a booking, honouring the visibility gate."""
    can_reschedule = booking.status != BookingStatus.COMPLETED
    if booking.response_visible_to_business_only:
        return BookingActions(can_cancel=False, can_confirm=False, can_reschedule=can_reschedule)
    return BookingActions(
        can_cancel=booking.status in CUSTOMER_CANCELLABLE,
        can_confirm=booking.status == BookingStatus.RESCHEDULED,
        can_reschedule=can_reschedule,
    )


def customer_row(db: Session, booking: models.Booking) -> CustomerBookingRow:
    row = booking_row(db, booking, row_cls=CustomerBookingRow)
    if booking.response_visible_to_business_only:
        row.status = BookingStatus.PENDING.value
    row.has_been_rescheduled = booking.has_been_rescheduled
    row.actions = customer_actions(booking)
    return row


def _page_rows(db: Session, query, page: int, limit: int, order_by=None, row=booking_row):
    items, total = booking_crud.page(query, page, limit, order_by=order_by)
    return [row(db, b).to_json() for b in items], Pagination.build(page, limit, total).to_json()


def business_response_list(
    db: Session,
    business: models.Business,
    page: int,
    limit: int,
    status: Optional[str] = None,
    assigned_only: bool = False,
) -> Tuple[List[dict], dict]:
    query = booking_crud.excluding_status(booking_crud.for_business(db, business.id), BookingStatus.COMPLETED)
    if assigned_only:
        query = query.filter(models.Booking.assigned_by_admin.is_(True))
    if status in THERAPIST_RESPONSE_FILTERS:
        query = booking_crud.with_statuses(query, [BookingStatus(status)])
    return _page_rows(db, query, page, limit)


def therapist_business_responses(
    db: Session,
    therapist: models.Therapist,
    page: int,
    limit: int,
    status: Optional[str] = None,
) -> Tuple[List[dict], dict]:
    query = booking_crud.for_therapist(db, therapist.id).filter(
        models.Booking.therapist_responded.is_(True),
        models.Booking.response_visible_to_business_only.is_(False),
    )
    if status in BUSINESS_RESPONSE_FILTERS:
        query = booking_crud.with_statuses(query, [BookingStatus(status)])
    order = (
        models.Booking.confirmed_at.desc(),
        models.Booking.created_at.desc(),
        models.Booking.id.desc(),
    )
    return _page_rows(db, query, page, limit, order_by=order)


def customer_bookings(
    db: Session,
    customer: models.User,
    page: int,
    limit: int,
    status: Optional[str] = None,
) -> Tuple[List[dict], dict]:
    query = booking_crud.for_customer(db, customer.id)
    if status:
        try:
            wanted = BookingStatus(status)
        except ValueError:
            return [], Pagination.build(page, limit, 0).to_json()
        query = booking_crud.with_statuses(query, [wanted])
    return _page_rows(db, query, page, limit, row=customer_row)


def _business_brief(business: models.Business, cls=BusinessBrief, **extra) -> BusinessBrief:
    return cls(
        id=business.id,
        name=business.name,
        email=business.email,
        phone=business.phone,
        description=business.description,
        address=business.address,
        currency=business.currency or settings.DEFAULT_CURRENCY,
        **extra,
    )


def therapist_business_requests(db: Session, therapist: models.Therapist) -> BusinessRequestsView:
    rows = []
    for link in crud_association.list_therapist_links(db, therapist.id):
        business = link.business
        rows.append(
            AssociationRequestRow(
                id=link.id,
                business_id=link.business_id,
                status=_label(link.status),
                requested_at=link.requested_at,
                approved_at=link.approved_at,
                business=_business_brief(business) if business is not None else None,
            )
        )
    grouped: Dict[str, List[AssociationRequestRow]] = {s.value: [] for s in AssociationStatus}
    for row in rows:
        grouped.setdefault(row.status, []).append(row)
    return BusinessRequestsView(
        all_requests=rows,
        pending_requests=grouped[AssociationStatus.PENDING.value],
        approved_requests=grouped[AssociationStatus.APPROVED.value],
        rejected_requests=grouped[AssociationStatus.REJECTED.value],
        counts=RequestCounts(
            total=len(rows),
            pending=len(grouped[AssociationStatus.PENDING.value]),
            approved=len(grouped[AssociationStatus.APPROVED.value]),
            rejected=len(grouped[AssociationStatus.REJECTED.value]),
        ),
    )


def businesses_with_status(db: Session, therapist: models.Therapist) -> List[BusinessWithStatus]:
    """Every business, tagged with the therapist's first association entry for it."""
    first_status: Dict[int, str] = {}
    for link in therapist.business_links:
        first_status.setdefault(link.business_id, _label(link.status))
    businesses = db.query(models.Business).order_by(models.Business.name, models.Business.id).all()
    return [
        _business_brief(
            b,
            cls=BusinessWithStatus,
            association_status=first_status.get(b.id, "none"),
        )
        for b in businesses
    ]
