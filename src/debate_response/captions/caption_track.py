"""
Caption track construction: sentence splitting, cue timing and drawtext filters.
"""

import re
from dataclasses import dataclass
from typing import List


SECONDS_PER_SENTENCE = 3
DISPLAY_SECONDS = 2.5

_SENTENCE_END = re.compile(r"[.!?]+")

# Characters with meaning to the drawtext option parser, and to the
# filtergraph parser one level up.
_OPTION_SPECIAL = ("\\", "'", ":")
_FILTERGRAPH_SPECIAL = ("\\", "'", "[", "]", ",", ";")


@dataclass
class CaptionCue:
    """A sentence and the window during which it is drawn."""
    index: int
    start: float  # seconds
    end: float    # seconds
    text: str


@dataclass
class CaptionStyle:
    """Visual settings for the rendered caption track."""
    width: int = 1280
    height: int = 720
    frame_rate: int = 30
    background: str = "black"
    font_size: int = 24
    font_color: str = "white"
    box_color: str = "black@0.5"
    bottom_margin: int = 50


def split_sentences(text: str) -> List[str]:
    """Split text on runs of '.', '!' and '?', dropping empty fragments.

    >>> split_sentences("A. B! C?")
    ['A', 'B', 'C']
    """
    return [fragment.strip() for fragment in _SENTENCE_END.split(text or "") if fragment.strip()]


def build_cues(sentences: List[str]) -> List[CaptionCue]:
    """Sentence i is shown from 3i to 3i + 2.5 seconds."""
    return [
        CaptionCue(
            index=i,
            start=float(i * SECONDS_PER_SENTENCE),
            end=i * SECONDS_PER_SENTENCE + DISPLAY_SECONDS,
            text=sentence,
        )
        for i, sentence in enumerate(sentences)
    ]


def caption_duration(sentence_count: int) -> int:
    """Total rendered duration in seconds for a number of sentences."""
    return SECONDS_PER_SENTENCE * sentence_count


def _backslash_escape(text: str, special) -> str:
    # backslash must be handled first so later escapes are not doubled
    for char in special:
        text = text.replace(char, "\\" + char)
    return text


def escape_drawtext(text: str) -> str:
    """
    Escape a sentence for use as an unquoted drawtext ``text`` value.

    The value passes through two parsers: the drawtext option parser, which
    treats quotes, backslashes and colons specially, and the filtergraph parser,
    which additionally splits on commas, semicolons and brackets.

    Args:
        text: Raw sentence

    Returns:
        Escaped text that decodes back to the original sentence
    """
    return _backslash_escape(_backslash_escape(text, _OPTION_SPECIAL), _FILTERGRAPH_SPECIAL)


def _format_seconds(value: float) -> str:
    return f"{value:g}"


def build_drawtext_filter(cue: CaptionCue, style: CaptionStyle) -> str:
    start = _format_seconds(cue.start)
    end = _format_seconds(cue.end)
    return (
        f"drawtext=text={escape_drawtext(cue.text)}"
        f":expansion=none"
        f":fontsize={style.font_size}"
        f":fontcolor={style.font_color}"
        f":x=(w-text_w)/2"
        f":y=h-th-{style.bottom_margin}"
        f":enable='between(t,{start},{end})'"
        f":box=1:boxcolor={style.box_color}"
    )


def build_caption_filter(cues: List[CaptionCue], style: CaptionStyle) -> str:
    """Chain one drawtext filter per cue into a single -vf argument."""
    return ",".join(build_drawtext_filter(cue, style) for cue in cues)
