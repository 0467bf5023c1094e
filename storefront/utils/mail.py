"""
Outgoing mail through Resend
"""
import logging
from typing import Dict

import resend
from starlette.concurrency import run_in_threadpool

from ..config.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class MailDeliveryError(Exception):
    """Raised when a message could not be handed to the mail provider."""


def _send(payload: Dict[str, object]) -> str:
    if not settings.resend_api_key:
        raise MailDeliveryError("Resend API key is not configured")

    resend.api_key = settings.resend_api_key
    response = resend.Emails.send(payload)

    message_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
    if not message_id:
        raise MailDeliveryError(f"Unexpected response from mail provider: {response}")
    return message_id


async def send_mail(recipient: str, subject: str, html: str) -> str:
    """
    Send an HTML message

    Returns:
        The provider's message ID

    Raises:
        MailDeliveryError: If the message was not accepted
    """
    payload: Dict[str, object] = {
        "from": settings.mail_sender,
        "to": [recipient],
        "subject": subject,
        "html": html,
    }
    try:
        message_id = await run_in_threadpool(_send, payload)
    except MailDeliveryError:
        raise
    except Exception as exc:
        raise MailDeliveryError(str(exc)) from exc

    logger.info(f"Mail '{subject}' sent to {recipient} (ID: {message_id})")
    return message_id


def password_reset_link(user_id: str, token: str) -> str:
    return f"{settings.origin.rstrip('/')}/reset-password/{user_id}/{token}"


def password_reset_html(link: str) -> str:
    return (
        "<p>Click the following link to reset your password: "
        f'<a href="{link}">Reset Password</a></p>'
        f"<p>The link expires in {settings.password_reset_expiration_minutes} minutes.</p>"
    )
