"""
Faster-whisper client for audio transcription.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

try:
    from faster_whisper import WhisperModel
except ImportError:
    WhisperModel = None

from ..pipeline.errors import TranscriptionFailure

logger = logging.getLogger(__name__)


@dataclass
class TranscriptionSegment:
    """Represents a transcribed segment with timing information."""
    start: float  # Start time in seconds
    end: float    # End time in seconds
    text: str     # Transcribed text


class WhisperTranscriber:
    """Transcriber backed by a local faster-whisper model."""

    def __init__(self, model_size: str = "base", device: str = "cpu", compute_type: str = "int8", language: Optional[str] = None):
        """
        Initialize the whisper transcriber.

        Args:
            model_size: Whisper model size (tiny, base, small, medium, large)
            device: Device to run on (cpu, cuda)
            compute_type: CTranslate2 compute type (int8, float16, float32)
            language: Language code for transcription (None for auto-detect)
        """
        if WhisperModel is None:
            raise ImportError("faster-whisper not installed. Install with: pip install faster-whisper")

        self.model_size = model_size
        self.device = device
        self.compute_type = compute_type
        self.language = language
        self.model = None
        self.download_root = Path(os.environ.get("MODEL_DIR", "/models"))
        self._lock = asyncio.Lock()

    async def initialize(self):
        """Load the whisper model once, off the event loop."""
        async with self._lock:
            if self.model is None:
                logger.info(f"Loading whisper model: {self.model_size} on {self.device}")
                self.download_root.mkdir(parents=True, exist_ok=True)

                loop = asyncio.get_running_loop()
                self.model = await loop.run_in_executor(
                    None,
                    lambda: WhisperModel(
                        self.model_size,
                        device=self.device,
                        compute_type=self.compute_type,
                        download_root=str(self.download_root),
                    ),
                )
                logger.info(f"Whisper model loaded: {self.get_model_info()}")

    async def transcribe_segments(self, audio_path: str) -> List[TranscriptionSegment]:
        """
        Transcribe an audio file into timed segments.

        Args:
            audio_path: Path to the audio file

        Returns:
            List of transcription segments with timing
        """
        if self.model is None:
            await self.initialize()

        def _transcribe():
            # faster-whisper yields segments lazily; consume them in the worker thread
            segments, info = self.model.transcribe(audio_path, language=self.language)
            return list(segments), info

        try:
            loop = asyncio.get_running_loop()
            segments, info = await loop.run_in_executor(None, _transcribe)
        except Exception as e:
            logger.error(f"Error transcribing {audio_path}: {e}")
            raise TranscriptionFailure(f"Transcription failed: {e}") from e

        logger.debug(
            f"Transcribed {len(segments)} segments from {audio_path} "
            f"(language={getattr(info, 'language', None)}, p={getattr(info, 'language_probability', 0.0):.3f})"
        )
        return [
            TranscriptionSegment(start=segment.start, end=segment.end, text=segment.text.strip())
            for segment in segments
        ]

    async def transcribe(self, audio_path: str) -> str:
        segments = await self.transcribe_segments(audio_path)
        return " ".join(segment.text for segment in segments if segment.text)

    def get_model_info(self) -> Dict[str, Any]:
        """Get information about the loaded model."""
        return {
            "model": self.model_size,
            "device": self.device,
            "loaded": self.model is not None,
            "language": self.language,
        }
