import enum


class AssociationStatus(str, enum.Enum):
    """State of one side of a therapist/business relationship."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
