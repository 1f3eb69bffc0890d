from sqlalchemy.orm import Query, Session
from typing import Iterable, List, Optional, Tuple

from .. import models
from ..models.booking_status import BookingStatus


class CRUDBooking:
    def get_booking(self, db: Session, booking_id: int) -> Optional[models.Booking]:
        return db.query(models.Booking).filter(models.Booking.id == booking_id).first()

    def for_business(self, db: Session, business_id: int) -> Query:
        """Bookings whose service belongs to ``business_id``."""
        return (
            db.query(models.Booking)
            .join(models.Service, models.Booking.service_id == models.Service.id)
            .filter(models.Service.business_id == business_id)
        )

    def for_therapist(self, db: Session, therapist_id: int) -> Query:
        return db.query(models.Booking).filter(models.Booking.therapist_id == therapist_id)

    def for_customer(self, db: Session, customer_id: int) -> Query:
        return db.query(models.Booking).filter(models.Booking.customer_id == customer_id)

    def with_statuses(self, query: Query, statuses: Iterable[BookingStatus]) -> Query:
        return query.filter(models.Booking.status.in_(list(statuses)))

    def excluding_status(self, query: Query, status: BookingStatus) -> Query:
        return query.filter(models.Booking.status != status)

    def page(
        self,
        query: Query,
        page: int,
        limit: int,
        order_by: Optional[tuple] = None,
    ) -> Tuple[List[models.Booking], int]:
        """Offset page of ``query``: ``skip = (page - 1) * limit``."""
        total = query.order_by(None).count()
        if order_by is None:
            order_by = (models.Booking.created_at.desc(), models.Booking.id.desc())
        items = (
            query.order_by(*order_by)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    def save(self, db: Session, booking: models.Booking) -> models.Booking:
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking


booking = CRUDBooking()
