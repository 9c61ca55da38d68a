"""
Caption module: splits generated text into timed drawtext captions.
"""

from .caption_track import (
    CaptionCue,
    CaptionStyle,
    build_caption_filter,
    build_cues,
    caption_duration,
    escape_drawtext,
    split_sentences,
)

__all__ = [
    "CaptionCue",
    "CaptionStyle",
    "build_caption_filter",
    "build_cues",
    "caption_duration",
    "escape_drawtext",
    "split_sentences",
]
