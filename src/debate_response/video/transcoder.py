"""
Transcoder capability used by the pipeline for extraction, caption rendering and muxing.
"""

from typing import List, Protocol


class Transcoder(Protocol):
    """Audio/video operations the pipeline needs from an external tool."""

    async def extract_audio(self, video_path: str, audio_path: str) -> str:
        """Write a mono 16 kHz 16-bit PCM track of video_path to audio_path."""
        ...

    async def render_captions(self, sentences: List[str], output_path: str) -> str:
        """Render a silent caption video lasting 3 seconds per sentence."""
        ...

    async def mux(self, video_path: str, audio_path: str, output_path: str) -> str:
        """Combine a video track and an audio track, cut to the shorter input."""
        ...
