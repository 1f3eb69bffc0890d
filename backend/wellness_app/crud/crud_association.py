"""Reads and single-row writes for the two mirrored association tables.

Every write commits on its own; callers sequence them and compensate.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..models import AssociationStatus


def get_therapist_by_user(db: Session, user_id: int) -> Optional[models.Therapist]:
    return db.query(models.Therapist).filter(models.Therapist.user_id == user_id).first()


def get_therapist(db: Session, therapist_id: int) -> Optional[models.Therapist]:
    return db.query(models.Therapist).filter(models.Therapist.id == therapist_id).first()


def get_business(db: Session, business_id: int) -> Optional[models.Business]:
    return db.query(models.Business).filter(models.Business.id == business_id).first()


def get_business_by_owner(db: Session, owner_id: int) -> Optional[models.Business]:
    return db.query(models.Business).filter(models.Business.owner_id == owner_id).first()


def find_therapist_link(
    db: Session,
    therapist_id: int,
    business_id: int,
    statuses: Optional[Iterable[AssociationStatus]] = None,
) -> Optional[models.TherapistBusinessLink]:
    """First therapist-side entry for ``business_id`` (insertion order)."""
    query = db.query(models.TherapistBusinessLink).filter(
        models.TherapistBusinessLink.therapist_id == therapist_id,
        models.TherapistBusinessLink.business_id == business_id,
    )
    if statuses is not None:
        query = query.filter(models.TherapistBusinessLink.status.in_(list(statuses)))
    return query.order_by(models.TherapistBusinessLink.id).first()


def find_business_link(
    db: Session,
    business_id: int,
    therapist_id: int,
    statuses: Optional[Iterable[AssociationStatus]] = None,
) -> Optional[models.BusinessTherapistLink]:
    """First business-side entry for ``therapist_id`` (insertion order)."""
    query = db.query(models.BusinessTherapistLink).filter(
        models.BusinessTherapistLink.business_id == business_id,
        models.BusinessTherapistLink.therapist_id == therapist_id,
    )
    if statuses is not None:
        query = query.filter(models.BusinessTherapistLink.status.in_(list(statuses)))
    return query.order_by(models.BusinessTherapistLink.id).first()


def add_therapist_link(
    db: Session, therapist_id: int, business_id: int, requested_at: datetime
) -> models.TherapistBusinessLink:
    link = models.TherapistBusinessLink(
        therapist_id=therapist_id,
        business_id=business_id,
        status=AssociationStatus.PENDING,
        requested_at=requested_at,
    )
    db.add(link)
    db.commit()
    db.refresh(link)
    return link


def add_business_link(
    db: Session, business_id: int, therapist_id: int, requested_at: datetime
) -> models.BusinessTherapistLink:
    link = models.BusinessTherapistLink(
        business_id=business_id,
        therapist_id=therapist_id,
        status=AssociationStatus.PENDING,
        requested_at=requested_at,
    )
    db.add(link)
    db.commit()
    db.refresh(link)
    return link


def delete_therapist_links(db: Session, therapist_id: int, business_id: int) -> int:
    """Remove every therapist-side entry for ``business_id``. Returns rows deleted."""
    deleted = (
        db.query(models.TherapistBusinessLink)
        .filter(
            models.TherapistBusinessLink.therapist_id == therapist_id,
            models.TherapistBusinessLink.business_id == business_id,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def set_therapist_link_status(
    db: Session,
    link_id: int,
    status: AssociationStatus,
    approved_at: Optional[datetime],
) -> Optional[models.TherapistBusinessLink]:
    link = db.get(models.TherapistBusinessLink, link_id)
    if link is None:
        return None
    link.status = status
    link.approved_at = approved_at
    db.commit()
    return link


def set_business_link_status(
    db: Session,
    link_id: int,
    status: AssociationStatus,
    joined_at: Optional[datetime],
) -> Optional[models.BusinessTherapistLink]:
    link = db.get(models.BusinessTherapistLink, link_id)
    if link is None:
        return None
    link.status = status
    if joined_at is not None:
        link.joined_at = joined_at
    db.commit()
    return link


def list_therapist_links(db: Session, therapist_id: int) -> List[models.TherapistBusinessLink]:
    """Therapist-side entries, newest request first."""
    return (
        db.query(models.TherapistBusinessLink)
        .filter(models.TherapistBusinessLink.therapist_id == therapist_id)
        .order_by(
            models.TherapistBusinessLink.requested_at.desc(),
            models.TherapistBusinessLink.id.desc(),
        )
        .all()
    )
