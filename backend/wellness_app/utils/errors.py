from typing import Dict, Optional
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class WorkflowError(Exception):
    """Raised by workflow/registry code; rendered as ``{success: false, error}``."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def error_response(
    message: str,
    field_errors: Optional[Dict[str, str]] = None,
    code: int = status.HTTP_400_BAD_REQUEST,
) -> HTTPException:
    """Return an HTTPException carrying ``message`` and log details."""
    if code >= 500:
        logger.error("%s %s", message, field_errors or {})
    else:
        logger.info("%s %s", message, field_errors or {})
    return HTTPException(status_code=code, detail=message)


def error_message(detail) -> str:
    """Extract a plain message from an ``HTTPException.detail`` payload."""
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict):
        return str(detail.get("message") or detail.get("error") or detail)
    return str(detail)
