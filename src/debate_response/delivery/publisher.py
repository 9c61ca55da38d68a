"""
Publishes finished response videos to Google Cloud Storage.
"""

import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Protocol

from ..pipeline.errors import PublishFailure

logger = logging.getLogger(__name__)

RESPONSE_PREFIX = "responses"


def response_blob_name(file_id: str) -> str:
    return f"{RESPONSE_PREFIX}/response_{file_id}.mp4"


class Publisher(Protocol):
    async def publish(self, video_path: str, file_id: str, user_email: str) -> str:
        ...


class GCSPublisher:
    """Uploads the final artifact, marks it public-read and returns its URL."""

    def __init__(self, bucket, storage_host: str = "storage.googleapis.com"):
        """
        Args:
            bucket: google.cloud.storage.Bucket receiving the responses
            storage_host: Host part of the public object URL
        """
        self.bucket = bucket
        self.storage_host = storage_host

    def public_url(self, blob_name: str) -> str:
        return f"https://{self.storage_host}/{self.bucket.name}/{blob_name}"

    @staticmethod
    def build_metadata(file_id: str, user_email: str) -> Dict[str, str]:
        return {
            "originalFileId": file_id,
            "userEmail": user_email,
            "processedAt": datetime.now(timezone.utc).isoformat(),
            "type": "ai_response",
        }

    def _upload(self, video_path: str, blob_name: str, metadata: Dict[str, str]):
        blob = self.bucket.blob(blob_name)
        blob.metadata = metadata
        blob.upload_from_filename(video_path, content_type="video/mp4")
        blob.make_public()

    async def publish(self, video_path: str, file_id: str, user_email: str) -> str:
        """
        Upload video_path as responses/response_<file_id>.mp4.

        Returns:
            Public URL of the uploaded object

        Raises:
            PublishFailure: on any storage error; the local file is kept
        """
        blob_name = response_blob_name(file_id)
        metadata = self.build_metadata(file_id, user_email)
        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._upload, video_path, blob_name, metadata)
        except Exception as e:
            logger.error(f"Upload error for {blob_name}: {e}")
            raise PublishFailure(f"Final video upload failed: {e}") from e

        try:
            os.remove(video_path)
        except OSError as e:
            logger.warning(f"Failed to cleanup file {video_path}: {e}")

        url = self.public_url(blob_name)
        logger.info(f"Published {video_path} -> {url}")
        return url
