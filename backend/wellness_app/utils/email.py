import asyncio
import logging
from email.message import EmailMessage

import aiosmtplib

from ..core.config import settings

logger = logging.getLogger(__name__)


async def _send_async(msg: EmailMessage) -> None:
    await aiosmtplib.send(
        msg,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USERNAME or None,
        password=settings.SMTP_PASSWORD or None,
        start_tls=bool(settings.SMTP_USERNAME),
    )


def build_message(recipient: str, subject: str, body: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = settings.SMTP_FROM
    msg["To"] = recipient
    msg["Subject"] = subject
    msg.set_content(body)
    return msg


def send_email(recipient: str, subject: str, body: str) -> bool:
    """Send an email via SMTP and log failures.

    With ``EMAIL_ENABLED`` off the message is only logged. Returns whether the
    message was handed to the SMTP server.
    """
    if not settings.EMAIL_ENABLED:
        logger.info("Email disabled; would send %r to %s", subject, recipient)
        return False
    msg = build_message(recipient, subject, body)
    try:
        asyncio.run(_send_async(msg))
        logger.info("Sent email to %s", recipient)
        return True
    except Exception as exc:  # pragma: no cover - network issues
        logger.error("Failed to send email to %s: %s", recipient, exc)
        return False
