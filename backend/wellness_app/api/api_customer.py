from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import ORJSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.common import envelope
from ..services import booking_views
from .dependencies import get_current_customer

router = APIRouter(tags=["customer"], default_response_class=ORJSONResponse)


@router.get("/bookings")
def list_customer_bookings(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_customer),
):
    """The caller's bookings; statuses awaiting business sign-off read as ``pending``."""
    page, limit = booking_views.clamp_paging(page, limit)
    rows, pagination = booking_views.customer_bookings(db, current_user, page, limit, status)
    return envelope(data=rows, pagination=pagination)
