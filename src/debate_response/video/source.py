"""
Source video retrieval for a job: uploaded bytes, HTTP(S) URLs or gs:// objects.
"""

import asyncio
import logging

import aiohttp

from ..pipeline.errors import IngestFailure
from ..pipeline.models import Job

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1 << 16


async def fetch_source(job: Job, destination: str, storage_client=None) -> str:
    """
    Materialize the job's source video at destination.

    Args:
        job: Job carrying either video_bytes or video_url
        destination: Local path for the input stage artifact
        storage_client: google.cloud.storage.Client used for gs:// URLs

    Returns:
        destination

    Raises:
        IngestFailure: if the source cannot be retrieved
    """
    if job.video_bytes is not None:
        with open(destination, "wb") as f:
            f.write(job.video_bytes)
        logger.info(f"Wrote {len(job.video_bytes)} uploaded bytes for job {job.file_id}")
        return destination

    url = job.video_url or ""
    if url.startswith("gs://"):
        await _download_gcs(url, destination, storage_client)
    elif url.startswith(("http://", "https://")):
        await _download_http(url, destination)
    else:
        raise IngestFailure(f"Unsupported video URL scheme: {url}")

    logger.info(f"Downloaded {url} -> {destination}")
    return destination


async def _download_http(url: str, destination: str):
    timeout = aiohttp.ClientTimeout(total=None)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as client:
            async with client.get(url, allow_redirects=True) as response:
                response.raise_for_status()
                with open(destination, "wb") as f:
                    async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                        f.write(chunk)
    except aiohttp.ClientResponseError as e:
        logger.error(f"HTTP error downloading video: {e.status} - {e.message}")
        raise IngestFailure(f"Video download failed: {e.status} {e.message}") from e
    except (aiohttp.ClientError, OSError) as e:
        logger.error(f"Error downloading video from {url}: {e}")
        raise IngestFailure(f"Video download failed: {e}") from e


async def _download_gcs(url: str, destination: str, storage_client):
    if storage_client is None:
        raise IngestFailure(f"No storage client configured to fetch {url}")
    bucket_name, _, blob_name = url[len("gs://"):].partition("/")
    if not bucket_name or not blob_name:
        raise IngestFailure(f"Malformed storage URL: {url}")

    def _download():
        blob = storage_client.bucket(bucket_name).blob(blob_name)
        blob.download_to_filename(destination)

    try:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _download)
    except Exception as e:
        logger.error(f"Error downloading {url}: {e}")
        raise IngestFailure(f"Video download failed: {e}") from e
