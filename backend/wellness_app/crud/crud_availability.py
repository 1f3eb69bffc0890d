from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .. import models
from ..models import AvailabilityStatus
from ..utils.parsing import day_bounds


def find_slot_containing(
    db: Session, therapist_id: int, day: datetime, time: str
) -> Optional[models.TherapistAvailability]:
    """First slot of ``therapist_id`` on ``day`` whose range contains ``time``.

    ``start_time <= time < end_time``; HH:MM strings compare lexicographically.
    """
    start, end = day_bounds(day)
    return (
        db.query(models.TherapistAvailability)
        .filter(
            models.TherapistAvailability.therapist_id == therapist_id,
            models.TherapistAvailability.date >= start,
            models.TherapistAvailability.date < end,
            models.TherapistAvailability.start_time <= time,
            models.TherapistAvailability.end_time > time,
        )
        .order_by(models.TherapistAvailability.id)
        .first()
    )


def mark_available(db: Session, slot: models.TherapistAvailability) -> models.TherapistAvailability:
    slot.status = AvailabilityStatus.AVAILABLE
    db.commit()
    return slot
