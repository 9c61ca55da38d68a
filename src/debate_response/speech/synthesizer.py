"""
Speech synthesis for the generated rebuttal.
"""

import asyncio
import logging
import wave
from typing import Protocol

import numpy as np

try:
    import edge_tts
except ImportError:
    edge_tts = None

from ..pipeline.errors import SynthesisFailure

logger = logging.getLogger(__name__)


class Synthesizer(Protocol):
    """
    Text-to-speech capability.

    Accepts text of any length and writes an audio file; the audio is not
    guaranteed to be identical between calls.
    """

    extension: str

    async def synthesize(self, text: str, output_path: str) -> str:
        ...


def write_wav(samples: np.ndarray, sample_rate: int, output_path: str) -> str:
    """Write float samples in [-1, 1], shaped (frames,) or (frames, channels), as 16-bit PCM."""
    if samples.ndim == 1:
        samples = samples[:, np.newaxis]
    pcm16 = np.clip(samples, -1.0, 1.0)
    pcm16 = (pcm16 * 32767.0).astype(np.int16)
    with wave.open(output_path, "wb") as wf:
        wf.setnchannels(pcm16.shape[1])
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm16.tobytes())
    return output_path


class SilentSynthesizer:
    """Placeholder that writes a fixed-length silent stereo track."""

    extension = "wav"

    def __init__(self, duration_seconds: int = 60, sample_rate: int = 44100, channels: int = 2):
        self.duration_seconds = duration_seconds
        self.sample_rate = sample_rate
        self.channels = channels

    async def synthesize(self, text: str, output_path: str) -> str:
        frames = int(self.duration_seconds * self.sample_rate)
        silence = np.zeros((frames, self.channels), dtype=np.float32)
        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, write_wav, silence, self.sample_rate, output_path)
        except OSError as e:
            raise SynthesisFailure(f"Voice generation failed: {e}") from e
        logger.debug(f"Wrote {self.duration_seconds}s of silence for {len(text)} chars to {output_path}")
        return output_path


class EdgeSpeechSynthesizer:
    """Text-to-speech through the Microsoft Edge read-aloud service."""

    extension = "mp3"

    def __init__(self, voice: str = "en-US-GuyNeural"):
        if edge_tts is None:
            raise ImportError("edge-tts not installed. Install with: pip install edge-tts")
        self.voice = voice

    async def synthesize(self, text: str, output_path: str) -> str:
        try:
            communicate = edge_tts.Communicate(text, self.voice)
            await communicate.save(output_path)
        except Exception as e:
            logger.error(f"Voice generation error: {e}")
            raise SynthesisFailure(f"Voice generation failed: {e}") from e
        logger.info(f"Synthesized {len(text)} chars with voice {self.voice} to {output_path}")
        return output_path
