"""
Requester notification. Delivery problems are logged, never raised to the pipeline.
"""

import asyncio
import logging
from typing import Callable, Optional, Protocol, Tuple

import aiohttp

from ..pipeline.errors import NotificationFailure

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


def render_notification(video_url: str, original_file_name: Optional[str]) -> Tuple[str, str]:
    """Return (subject, body) for the "your response is ready" message."""
    subject = "Your AI debate response video is ready"
    body = (
        "Hello!\n\n"
        "Your AI debate response video is ready!\n\n"
        f"Original file: {original_file_name or 'your upload'}\n"
        f"Response video: {video_url}\n\n"
        "Thank you for using our AI Debate Response System!\n"
    )
    return subject, body


class Notifier(Protocol):
    async def notify(self, user_email: str, video_url: str, original_file_name: Optional[str]) -> None:
        ...


class LoggingNotifier:
    """Logs the message instead of sending it."""

    async def notify(self, user_email: str, video_url: str, original_file_name: Optional[str]) -> None:
        subject, body = render_notification(video_url, original_file_name)
        logger.info(f"Email notification would be sent to {user_email} with video URL: {video_url}")
        logger.info(f"Email content: {subject}\n{body}")


def _default_session() -> aiohttp.ClientSession:
    return aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=30))


class SendGridNotifier:
    """Sends the message through the SendGrid v3 mail API."""

    def __init__(self, api_key: str, from_email: str,
                 session_factory: Callable[[], aiohttp.ClientSession] = _default_session):
        self.api_key = api_key
        self.from_email = from_email
        self.session_factory = session_factory

    async def notify(self, user_email: str, video_url: str, original_file_name: Optional[str]) -> None:
        subject, body = render_notification(video_url, original_file_name)
        payload = {
            "personalizations": [{"to": [{"email": user_email}]}],
            "from": {"email": self.from_email},
            "subject": subject,
            "content": [{"type": "text/plain", "value": body}],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with self.session_factory() as client:
                async with client.post(SENDGRID_URL, json=payload, headers=headers) as response:
                    response.raise_for_status()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NotificationFailure(f"Email notification to {user_email} failed: {e}") from e
        logger.info(f"Email notification sent to {user_email}")


async def notify_safely(notifier: Notifier, user_email: str, video_url: str,
                        original_file_name: Optional[str]) -> bool:
    """Deliver a notification; any failure is logged and reported as False."""
    try:
        await notifier.notify(user_email, video_url, original_file_name)
        return True
    except Exception as e:
        logger.warning(f"Email notification error (ignored): {e}")
        return False
