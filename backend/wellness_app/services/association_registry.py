"""Therapist/business association requests and decisions.

The relationship is stored twice, once per side, and each side is written
with its own commit. When the second write fails the first is compensated.
"""

import logging
from datetime import datetime
from typing import Any, Tuple

from sqlalchemy.orm import Session

from .. import models
from ..crud import crud_association
from ..models import AssociationStatus
from ..utils.errors import WorkflowError
from ..utils.parsing import parse_id

logger = logging.getLogger(__name__)

APPROVE = "approve"
REJECT = "reject"

_OPEN = (AssociationStatus.PENDING, AssociationStatus.APPROVED)


def request_business(db: Session, user: models.User, business_id: Any) -> models.TherapistBusinessLink:
    """Record a pending request from the therapist profile of ``user`` to a business."""
    if business_id is None or business_id == "":
        raise WorkflowError(400, "Business ID is required")
    business_pk = parse_id(business_id, "business")

    therapist = crud_association.get_therapist_by_user(db, user.id)
    if therapist is None:
        logger.error("Therapist profile not found for user: %s", user.id)
        raise WorkflowError(400, "Therapist profile not found. Please complete your profile first.")

    business = crud_association.get_business(db, business_pk)
    if business is None:
        raise WorkflowError(404, "Business not found")

    # Each side is checked on its own; the two may disagree
    existing = crud_association.find_therapist_link(db, therapist.id, business.id, _OPEN)
    if existing is not None:
        if existing.status == AssociationStatus.PENDING:
            raise WorkflowError(409, "Already requested this business")
        raise WorkflowError(409, "Already approved for this business")

    mirrored = crud_association.find_business_link(db, business.id, therapist.id, _OPEN)
    if mirrored is not None:
        if mirrored.status == AssociationStatus.PENDING:
            raise WorkflowError(409, "Business already has pending request from you")
        raise WorkflowError(409, "Business already approved you")

    therapist_pk = therapist.id
    now = datetime.utcnow()
    try:
        therapist_link = crud_association.add_therapist_link(db, therapist_pk, business_pk, now)
    except Exception as exc:
        db.rollback()
        logger.error("Therapist association write failed for therapist %s: %s", therapist.id, exc)
        raise WorkflowError(500, "Failed to update therapist associations") from exc

    try:
        crud_association.add_business_link(db, business_pk, therapist_pk, now)
    except Exception as exc:
        db.rollback()
        logger.warning(
            "Business association write failed for business %s; removing therapist entries for it",
            business_pk,
        )
        try:
            crud_association.delete_therapist_links(db, therapist_pk, business_pk)
        except Exception as rollback_exc:
            db.rollback()
            logger.error(
                "Rollback of therapist %s entries for business %s failed: %s",
                therapist_pk,
                business_pk,
                rollback_exc,
            )
        raise WorkflowError(500, "Failed to update business associations") from exc

    logger.info("Therapist %s requested association with business %s", therapist.id, business.id)
    return therapist_link


def decide(
    db: Session,
    owner: models.User,
    therapist_id: Any,
    action: Any,
) -> Tuple[models.Business, models.Therapist, AssociationStatus, datetime]:
    """Approve or reject a pending therapist request on both sides.

    Returns ``(business, therapist, new_status, timestamp)``.
    """
    if therapist_id in (None, "") or not action:
        raise WorkflowError(400, "Therapist ID and action are required")
    if action not in (APPROVE, REJECT):
        raise WorkflowError(400, 'Action must be either "approve" or "reject"')
    therapist_pk = parse_id(therapist_id, "therapist")

    business = crud_association.get_business_by_owner(db, owner.id)
    if business is None:
        raise WorkflowError(404, "Business profile not found")

    therapist = crud_association.get_therapist(db, therapist_pk)
    if therapist is None:
        raise WorkflowError(404, "Therapist not found")

    pending = (AssociationStatus.PENDING,)
    therapist_link = crud_association.find_therapist_link(db, therapist.id, business.id, pending)
    if therapist_link is None:
        raise WorkflowError(404, "No pending request found from this therapist")
    business_link = crud_association.find_business_link(db, business.id, therapist.id, pending)
    if business_link is None:
        raise WorkflowError(404, "No pending request found for this therapist")

    new_status = AssociationStatus.APPROVED if action == APPROVE else AssociationStatus.REJECTED
    now = datetime.utcnow()
    stamp = now if new_status == AssociationStatus.APPROVED else None
    therapist_link_id = therapist_link.id

    try:
        crud_association.set_therapist_link_status(db, therapist_link_id, new_status, stamp)
    except Exception as exc:
        db.rollback()
        logger.error("Therapist-side %s failed for link %s: %s", action, therapist_link_id, exc)
        raise WorkflowError(500, "Failed to update therapist associations") from exc

    try:
        crud_association.set_business_link_status(db, business_link.id, new_status, stamp)
    except Exception as exc:
        db.rollback()
        logger.warning(
            "Business-side %s failed for therapist %s; reverting therapist entry to pending",
            action,
            therapist.id,
        )
        try:
            crud_association.set_therapist_link_status(
                db, therapist_link_id, AssociationStatus.PENDING, None
            )
        except Exception as rollback_exc:
            db.rollback()
            logger.error(
                "Failed to revert therapist entry %s: %s", therapist_link_id, rollback_exc
            )
        raise WorkflowError(500, "Failed to update business associations") from exc

    logger.info(
        "Business %s %s therapist %s", business.id, new_status.value, therapist.id
    )
    return business, therapist, new_status, now
