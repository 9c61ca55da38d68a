"""
Job and stage artifact model for the debate response pipeline.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .errors import ValidationFailure

logger = logging.getLogger(__name__)

# Job ids become part of temp file names, so they must not contain separators.
FILE_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")

# stage name -> file extension
STAGE_EXTENSIONS = {
    "input": "mp4",
    "audio": "wav",
    "response": "wav",
    "captions": "mp4",
    "final": "mp4",
}


def validate_file_id(file_id: str) -> str:
    if not FILE_ID_PATTERN.match(file_id):
        raise ValidationFailure(
            f"Invalid fileId {file_id!r}: use letters, digits, '.', '_' or '-' (max 128 chars)"
        )
    return file_id


@dataclass
class Job:
    """
    One end-to-end request to turn an input video into a response video.

    Fields:
        file_id: Caller-supplied identifier, keys every stage artifact.
        user_email: Requester address for metadata and notification.
        video_url: Source locator (http(s):// or gs://).
        video_bytes: Uploaded source bytes, used instead of video_url when set.
        file_name: Original file name, only used in the notification.
        topic: Debate topic forwarded to the prompt.
        started_at: Processing start time (UTC).
    """

    file_id: str
    user_email: str
    video_url: Optional[str] = None
    video_bytes: Optional[bytes] = field(default=None, repr=False)
    file_name: Optional[str] = None
    topic: Optional[str] = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        validate_file_id(self.file_id)
        if not self.video_url and self.video_bytes is None:
            raise ValidationFailure("A job needs either a video URL or uploaded video bytes")


@dataclass
class PipelineResult:
    """Outcome of a successfully processed job."""
    file_id: str
    final_video_url: str
    transcription: str
    ai_response: str
    processing_time_ms: int


class ArtifactWorkspace:
    """Stage artifact paths for a single job, all keyed by the job id."""

    def __init__(self, temp_dir: str, file_id: str):
        self.temp_dir = Path(temp_dir)
        self.file_id = validate_file_id(file_id)
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        self._issued: List[str] = []

    def path(self, stage: str, extension: Optional[str] = None) -> str:
        """Return the artifact path for a stage, e.g. /tmp/abc123_captions.mp4."""
        if stage not in STAGE_EXTENSIONS:
            raise KeyError(f"Unknown stage: {stage}")
        file_path = str(self.temp_dir / f"{self.file_id}_{stage}.{extension or STAGE_EXTENSIONS[stage]}")
        if file_path not in self._issued:
            self._issued.append(file_path)
        return file_path

    def discard(self, *paths: str):
        """Best-effort removal of consumed artifacts."""
        for file_path in paths:
            try:
                if os.path.exists(file_path):
                    os.remove(file_path)
            except OSError as e:
                logger.warning(f"Failed to cleanup file {file_path}: {e}")

    def leftovers(self) -> List[str]:
        """Artifacts of this job that still exist on disk."""
        defaults = [self.path(stage) for stage in STAGE_EXTENSIONS]
        candidates = self._issued + [p for p in defaults if p not in self._issued]
        return [p for p in candidates if os.path.exists(p)]

    def sweep(self) -> List[str]:
        """Remove every leftover artifact of this job; returns what was removed."""
        removed = self.leftovers()
        self.discard(*removed)
        if removed:
            logger.info(f"Swept {len(removed)} leftover artifacts for job {self.file_id}")
        return removed
