"""
Transcription module: placeholder and faster-whisper speech-to-text.
"""

from .transcriber import PLACEHOLDER_TRANSCRIPT, PlaceholderTranscriber, Transcriber
from .whisper_client import TranscriptionSegment, WhisperTranscriber

__all__ = [
    "PLACEHOLDER_TRANSCRIPT",
    "PlaceholderTranscriber",
    "Transcriber",
    "TranscriptionSegment",
    "WhisperTranscriber",
]
