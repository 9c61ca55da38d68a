"""
Delivery module: object storage publishing and requester notification.
"""

from .notifier import LoggingNotifier, Notifier, SendGridNotifier, notify_safely, render_notification
from .publisher import GCSPublisher, Publisher, response_blob_name

__all__ = [
    "GCSPublisher",
    "LoggingNotifier",
    "Notifier",
    "Publisher",
    "SendGridNotifier",
    "notify_safely",
    "render_notification",
    "response_blob_name",
]
