import asyncio
import logging
import os
from unittest.mock import MagicMock

import aiohttp
import pytest

from debate_response.delivery.notifier import (
    LoggingNotifier,
    SendGridNotifier,
    notify_safely,
    render_notification,
)
from debate_response.delivery.publisher import GCSPublisher, response_blob_name
from debate_response.pipeline.errors import NotificationFailure, PublishFailure

from fakes import FailingNotifier, RecordingNotifier, make_bucket


def _final_video(tmp_path):
    path = tmp_path / "abc123_final.mp4"
    path.write_bytes(b"final video")
    return str(path)


def test_publish_uploads_public_object_with_metadata(tmp_path):
    bucket = make_bucket("debate-bucket")
    video = _final_video(tmp_path)

    url = asyncio.run(GCSPublisher(bucket).publish(video, "abc123", "speaker@example.com"))

    assert url == "https://storage.googleapis.com/debate-bucket/responses/response_abc123.mp4"
    bucket.blob.assert_called_once_with("responses/response_abc123.mp4")
    blob = bucket.blob.return_value
    blob.upload_from_filename.assert_called_once_with(video, content_type="video/mp4")
    blob.make_public.assert_called_once_with()
    assert blob.metadata["originalFileId"] == "abc123"
    assert blob.metadata["userEmail"] == "speaker@example.com"
    assert blob.metadata["type"] == "ai_response"
    assert "processedAt" in blob.metadata
    assert not os.path.exists(video)


def test_publish_uses_configured_storage_host(tmp_path):
    publisher = GCSPublisher(make_bucket("b"), storage_host="storage.example.test")
    url = asyncio.run(publisher.publish(_final_video(tmp_path), "x", "a@example.com"))
    assert url == "https://storage.example.test/b/responses/response_x.mp4"


def test_storage_error_becomes_publish_failure_without_retry(tmp_path):
    bucket = make_bucket()
    blob = bucket.blob.return_value
    blob.upload_from_filename.side_effect = RuntimeError("403 Forbidden")
    video = _final_video(tmp_path)

    with pytest.raises(PublishFailure, match="403 Forbidden"):
        asyncio.run(GCSPublisher(bucket).publish(video, "abc123", "a@example.com"))

    assert blob.upload_from_filename.call_count == 1
    blob.make_public.assert_not_called()
    assert os.path.exists(video)


def test_response_blob_name():
    assert response_blob_name("abc123") == "responses/response_abc123.mp4"


def test_render_notification_mentions_file_and_url():
    subject, body = render_notification("https://example.test/v.mp4", "opening.mp4")
    assert "ready" in subject
    assert "Original file: opening.mp4" in body
    assert "Response video: https://example.test/v.mp4" in body


def test_logging_notifier_logs_message(caplog):
    with caplog.at_level(logging.INFO, logger="debate_response.delivery.notifier"):
        asyncio.run(LoggingNotifier().notify("a@example.com", "https://example.test/v.mp4", None))
    assert "a@example.com" in caplog.text
    assert "https://example.test/v.mp4" in caplog.text


def test_notify_safely_swallows_failures(caplog):
    notifier = FailingNotifier()
    with caplog.at_level(logging.WARNING):
        delivered = asyncio.run(notify_safely(notifier, "a@example.com", "u", "f"))
    assert delivered is False
    assert notifier.attempts == 1
    assert "smtp unreachable" in caplog.text


def test_notify_safely_reports_success():
    notifier = RecordingNotifier()
    assert asyncio.run(notify_safely(notifier, "a@example.com", "u", "f")) is True
    assert notifier.sent == [("a@example.com", "u", "f")]


class _Session:
    def __init__(self, status=202):
        self.status = status
        self.posts = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def post(self, url, json=None, headers=None):
        self.posts.append((url, json, headers))
        session = self

        class _Response:
            async def __aenter__(self):
                return self

            async def __aexit__(self, *exc):
                return False

            def raise_for_status(self):
                if session.status >= 400:
                    raise aiohttp.ClientResponseError(
                        request_info=MagicMock(), history=(), status=session.status, message="Unauthorized"
                    )

        return _Response()


def test_sendgrid_notifier_posts_message():
    session = _Session()
    notifier = SendGridNotifier("sg-key", "noreply@example.test", session_factory=lambda: session)

    asyncio.run(notifier.notify("a@example.com", "https://example.test/v.mp4", "opening.mp4"))

    url, payload, headers = session.posts[0]
    assert url == "https://api.sendgrid.com/v3/mail/send"
    assert payload["personalizations"][0]["to"] == [{"email": "a@example.com"}]
    assert payload["from"] == {"email": "noreply@example.test"}
    assert "https://example.test/v.mp4" in payload["content"][0]["value"]
    assert headers["Authorization"] == "Bearer sg-key"


def test_sendgrid_rejection_raises_notification_failure():
    notifier = SendGridNotifier("bad", "noreply@example.test", session_factory=lambda: _Session(401))
    with pytest.raises(NotificationFailure):
        asyncio.run(notifier.notify("a@example.com", "u", None))
