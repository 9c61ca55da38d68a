"""
FFmpeg-based transcoder for audio extraction, caption rendering and muxing.
"""

import asyncio
import logging
import os
from typing import List, Optional

from ..captions.caption_track import CaptionStyle, build_caption_filter, build_cues, caption_duration
from ..pipeline.errors import TranscodeFailure

logger = logging.getLogger(__name__)


class FFmpegTranscoder:
    """Transcoder that shells out to the ffmpeg binary."""

    def __init__(self,
                 ffmpeg_binary: str = "ffmpeg",
                 audio_sample_rate: int = 16000,
                 caption_style: Optional[CaptionStyle] = None):
        """
        Initialize the transcoder.

        Args:
            ffmpeg_binary: Name or path of the ffmpeg executable
            audio_sample_rate: Sample rate of extracted audio in Hz
            caption_style: Canvas and text settings for rendered captions
        """
        self.ffmpeg_binary = ffmpeg_binary
        self.audio_sample_rate = audio_sample_rate
        self.caption_style = caption_style or CaptionStyle()

    async def extract_audio(self, video_path: str, audio_path: str) -> str:
        """Extract a mono 16-bit PCM track from the input video."""
        cmd = [
            self.ffmpeg_binary, '-y',
            '-i', video_path,
            '-vn',  # No video
            '-acodec', 'pcm_s16le',
            '-ar', str(self.audio_sample_rate),
            '-ac', '1',  # Mono audio
            audio_path,
        ]
        await self._run(cmd, audio_path, "audio extraction")
        return audio_path

    async def render_captions(self, sentences: List[str], output_path: str) -> str:
        """
        Render a silent video with one timed drawtext overlay per sentence.

        Args:
            sentences: Caption sentences in display order
            output_path: Where to write the rendered video

        Returns:
            output_path

        Raises:
            TranscodeFailure: if there are no sentences or ffmpeg fails
        """
        if not sentences:
            # a zero-duration lavfi source is not a valid input
            raise TranscodeFailure("Captions creation failed: no caption sentences to render")

        style = self.caption_style
        duration = caption_duration(len(sentences))
        source = (
            f"color=size={style.width}x{style.height}"
            f":duration={duration}:rate={style.frame_rate}:color={style.background}"
        )
        cmd = [
            self.ffmpeg_binary, '-y',
            '-f', 'lavfi',
            '-i', source,
            '-vf', build_caption_filter(build_cues(sentences), style),
            '-c:v', 'libx264', '-preset', 'fast', '-crf', '23',
            '-pix_fmt', 'yuv420p',
            output_path,
        ]
        await self._run(cmd, output_path, "caption rendering")
        logger.debug(f"Rendered {len(sentences)} captions ({duration}s) to {output_path}")
        return output_path

    async def mux(self, video_path: str, audio_path: str, output_path: str) -> str:
        """Copy the video stream, re-encode audio to AAC, stop at the shorter input."""
        cmd = [
            self.ffmpeg_binary, '-y',
            '-i', video_path,
            '-i', audio_path,
            '-map', '0:v:0',
            '-map', '1:a:0',
            '-c:v', 'copy',
            '-c:a', 'aac',
            '-shortest',
            output_path,
        ]
        await self._run(cmd, output_path, "video combination")
        return output_path

    async def _run(self, cmd: List[str], output_file: str, step: str):
        """Run ffmpeg and raise TranscodeFailure unless output_file was produced."""
        logger.debug(f"Running ffmpeg for {step}: {cmd}")
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            raise TranscodeFailure(f"Could not start {self.ffmpeg_binary} for {step}: {e}") from e

        _, stderr = await process.communicate()
        diagnostics = stderr.decode(errors="replace") if stderr else ""

        if process.returncode != 0:
            logger.error(f"FFmpeg {step} failed with exit code {process.returncode}: {diagnostics}")
            raise TranscodeFailure(f"FFmpeg {step} failed", stderr=diagnostics)

        if not (os.path.exists(output_file) and os.path.getsize(output_file) > 0):
            raise TranscodeFailure(f"FFmpeg {step} produced no output at {output_file}", stderr=diagnostics)

        logger.debug(f"FFmpeg {step} finished: {diagnostics[-500:]}")
