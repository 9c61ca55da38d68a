"""
Transcriber capability and the placeholder implementation.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

PLACEHOLDER_TRANSCRIPT = (
    "This is a mock transcription of the debate video. The speaker discusses important "
    "topics and presents arguments that need to be addressed."
)


class Transcriber(Protocol):
    """
    Speech-to-text capability.

    Accepts audio of any length. Output is not guaranteed to be deterministic,
    callers must not depend on the exact text.
    """

    async def transcribe(self, audio_path: str) -> str:
        ...


class PlaceholderTranscriber:
    """Returns a fixed transcript regardless of the audio."""

    def __init__(self, transcript: str = PLACEHOLDER_TRANSCRIPT):
        self.transcript = transcript

    async def transcribe(self, audio_path: str) -> str:
        logger.debug(f"Placeholder transcription for {audio_path}")
        return self.transcript
