from .errors import WorkflowError, error_response
from .email import send_email
from .auth import get_password_hash, verify_password, normalize_email
from .parsing import parse_id, parse_date, is_valid_time, day_bounds
