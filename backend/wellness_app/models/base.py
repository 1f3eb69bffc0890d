from datetime import datetime
from sqlalchemy import Column, DateTime
from ..database import Base


class BaseModel(Base):
    """Abstract parent adding ``created_at``/``updated_at`` to every table."""

    __abstract__ = True

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
