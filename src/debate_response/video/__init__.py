"""
Video module: transcoder capability, ffmpeg implementation and source retrieval.
"""

from .ffmpeg_transcoder import FFmpegTranscoder
from .source import fetch_source
from .transcoder import Transcoder

__all__ = [
    "FFmpegTranscoder",
    "Transcoder",
    "fetch_source",
]
