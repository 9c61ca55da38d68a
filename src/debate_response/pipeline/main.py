"""
Orchestrates one debate response job from source video to published response.

Stages run strictly in order, each awaited before the next:
fetch -> extract audio -> transcribe -> generate -> synthesize -> captions
-> mux -> publish -> notify. Any failure before notify aborts the job.
"""

import logging
import time

from ..captions.caption_track import CaptionStyle, caption_duration, split_sentences
from ..delivery.notifier import LoggingNotifier, Notifier, SendGridNotifier, notify_safely
from ..delivery.publisher import GCSPublisher, Publisher
from ..generation.gemini_client import GeminiResponseGenerator, ResponseGenerator
from ..speech.synthesizer import EdgeSpeechSynthesizer, SilentSynthesizer, Synthesizer
from ..transcription.transcriber import PlaceholderTranscriber, Transcriber
from ..transcription.whisper_client import WhisperTranscriber
from ..video.ffmpeg_transcoder import FFmpegTranscoder
from ..video.source import fetch_source
from ..video.transcoder import Transcoder
from .config import PipelineConfig
from .errors import PipelineError, TranscriptionFailure
from .models import ArtifactWorkspace, Job, PipelineResult

logger = logging.getLogger(__name__)


class ResponsePipeline:
    """Runs jobs through the stage sequence using injected collaborators."""

    def __init__(
        self,
        config: PipelineConfig,
        transcoder: Transcoder,
        transcriber: Transcriber,
        generator: ResponseGenerator,
        synthesizer: Synthesizer,
        publisher: Publisher,
        notifier: Notifier,
        storage_client=None,
    ):
        self.config = config
        self.transcoder = transcoder
        self.transcriber = transcriber
        self.generator = generator
        self.synthesizer = synthesizer
        self.publisher = publisher
        self.notifier = notifier
        self.storage_client = storage_client

    async def process(self, job: Job) -> PipelineResult:
        """
        Process a job end to end.

        Args:
            job: The validated job

        Returns:
            PipelineResult with the public URL and generated texts

        Raises:
            PipelineError: the first stage failure; leftover artifacts are swept first
        """
        start = time.monotonic()
        workspace = ArtifactWorkspace(self.config.temp_dir, job.file_id)
        logger.info(
            f"Processing video: fileId={job.file_id} fileName={job.file_name} topic={job.topic} "
            f"startedAt={job.started_at.isoformat()}"
        )

        try:
            logger.info("Step 1: Downloading video and extracting audio...")
            video_path = await fetch_source(job, workspace.path("input"), self.storage_client)
            audio_path = await self.transcoder.extract_audio(video_path, workspace.path("audio"))

            logger.info("Step 2: Transcribing audio...")
            transcription = await self._transcribe(audio_path)
            workspace.discard(video_path, audio_path)
            logger.info(f"Transcription completed: {transcription[:100]}...")

            logger.info("Step 3: Generating AI response...")
            ai_response = await self.generator.generate(transcription, job.topic)
            logger.info(f"AI Response generated: {ai_response[:100]}...")

            logger.info("Step 4: Generating voice-over...")
            speech_path = workspace.path("response", getattr(self.synthesizer, "extension", None))
            speech_path = await self.synthesizer.synthesize(ai_response, speech_path)

            logger.info("Step 5: Creating animated captions...")
            sentences = split_sentences(ai_response)
            captions_path = await self.transcoder.render_captions(sentences, workspace.path("captions"))
            logger.info(f"Rendered {len(sentences)} captions, {caption_duration(len(sentences))}s")

            logger.info("Step 6: Combining into final video...")
            final_path = await self.transcoder.mux(captions_path, speech_path, workspace.path("final"))
            workspace.discard(captions_path, speech_path)

            logger.info("Step 7: Uploading final video...")
            final_video_url = await self.publisher.publish(final_path, job.file_id, job.user_email)
        except PipelineError as e:
            logger.error(f"Video processing error for {job.file_id}: {e}")
            workspace.sweep()
            raise
        except Exception:
            logger.exception(f"Unexpected error processing {job.file_id}")
            workspace.sweep()
            raise

        logger.info("Step 8: Sending email notification...")
        await notify_safely(self.notifier, job.user_email, final_video_url, job.file_name)

        processing_time_ms = int((time.monotonic() - start) * 1000)
        logger.info(f"Video processing completed in {processing_time_ms}ms")
        return PipelineResult(
            file_id=job.file_id,
            final_video_url=final_video_url,
            transcription=transcription,
            ai_response=ai_response,
            processing_time_ms=processing_time_ms,
        )

    async def _transcribe(self, audio_path: str) -> str:
        try:
            return await self.transcriber.transcribe(audio_path)
        except PipelineError:
            raise
        except Exception as e:
            raise TranscriptionFailure(f"Transcription failed: {e}") from e


def build_transcriber(config: PipelineConfig) -> Transcriber:
    if config.transcriber_backend == "placeholder":
        return PlaceholderTranscriber()
    if config.transcriber_backend == "whisper":
        return WhisperTranscriber(
            model_size=config.whisper_model,
            device=config.whisper_device,
            compute_type=config.compute_type,
            language=config.whisper_language,
        )
    raise ValueError(f"Unknown transcriber backend: {config.transcriber_backend}")


def build_synthesizer(config: PipelineConfig) -> Synthesizer:
    if config.synthesizer_backend == "silent":
        return SilentSynthesizer(duration_seconds=config.placeholder_speech_seconds)
    if config.synthesizer_backend == "edge":
        return EdgeSpeechSynthesizer(voice=config.tts_voice)
    raise ValueError(f"Unknown synthesizer backend: {config.synthesizer_backend}")


def build_notifier(config: PipelineConfig) -> Notifier:
    if config.notifier_backend == "log":
        return LoggingNotifier()
    if config.notifier_backend == "sendgrid":
        if not config.sendgrid_api_key:
            raise ValueError("SENDGRID_API_KEY is required for the sendgrid notifier")
        return SendGridNotifier(config.sendgrid_api_key, config.notify_from_email)
    raise ValueError(f"Unknown notifier backend: {config.notifier_backend}")


def build_pipeline(config: PipelineConfig, storage_client=None) -> ResponsePipeline:
    """Wire the production implementations described by config."""
    if storage_client is None:
        from google.cloud import storage
        storage_client = storage.Client()

    caption_style = CaptionStyle(
        font_size=config.caption_font_size,
        font_color=config.caption_color,
        box_color=config.caption_box_color,
    )
    return ResponsePipeline(
        config=config,
        transcoder=FFmpegTranscoder(ffmpeg_binary=config.ffmpeg_binary, caption_style=caption_style),
        transcriber=build_transcriber(config),
        generator=GeminiResponseGenerator(
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            base_url=config.gemini_base_url,
        ),
        synthesizer=build_synthesizer(config),
        publisher=GCSPublisher(storage_client.bucket(config.bucket_name), storage_host=config.storage_host),
        notifier=build_notifier(config),
        storage_client=storage_client,
    )
