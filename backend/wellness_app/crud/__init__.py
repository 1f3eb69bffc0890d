from .crud_booking import booking
from . import crud_association
from . import crud_availability
