"""
Speech module: silent placeholder and edge-tts voice synthesis.
"""

from .synthesizer import EdgeSpeechSynthesizer, SilentSynthesizer, Synthesizer, write_wav

__all__ = [
    "EdgeSpeechSynthesizer",
    "SilentSynthesizer",
    "Synthesizer",
    "write_wav",
]
