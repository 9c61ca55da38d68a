"""
Configuration management for the debate response pipeline.
"""

import os
import tempfile
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PipelineConfig:
    """Configuration for the debate response pipeline."""

    # Object storage
    bucket_name: str = "ai-debate-uploads"
    storage_host: str = "storage.googleapis.com"

    # Generative language API
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Server
    port: int = 8080
    environment: str = "development"  # development, staging, production
    log_level: str = "INFO"

    # Stage artifacts
    temp_dir: str = field(default_factory=tempfile.gettempdir)
    ffmpeg_binary: str = "ffmpeg"

    # Transcription settings
    transcriber_backend: str = "placeholder"  # placeholder, whisper
    whisper_model: str = "base"  # tiny, base, small, medium, large
    whisper_language: Optional[str] = None  # Auto-detect if None
    whisper_device: str = "cpu"  # cpu, cuda
    compute_type: str = "int8"  # float16, float32, int8, etc.

    # Speech synthesis settings
    synthesizer_backend: str = "silent"  # silent, edge
    tts_voice: str = "en-US-GuyNeural"
    placeholder_speech_seconds: int = 60

    # Notification settings
    notifier_backend: str = "log"  # log, sendgrid
    sendgrid_api_key: Optional[str] = None
    notify_from_email: str = "noreply@ai-debate.app"

    # Caption settings
    caption_font_size: int = 24
    caption_color: str = "white"
    caption_box_color: str = "black@0.5"

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Create configuration from environment variables."""
        return cls(
            bucket_name=os.getenv("UPLOAD_BUCKET", cls.bucket_name),
            storage_host=os.getenv("STORAGE_HOST", cls.storage_host),
            gemini_api_key=os.getenv("GEMINI_API_KEY", cls.gemini_api_key),
            gemini_model=os.getenv("GEMINI_MODEL", cls.gemini_model),
            gemini_base_url=os.getenv("GEMINI_BASE_URL", cls.gemini_base_url),
            port=int(os.getenv("PORT", cls.port)),
            environment=os.getenv("ENVIRONMENT", cls.environment),
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            temp_dir=os.getenv("TEMP_DIR", tempfile.gettempdir()),
            ffmpeg_binary=os.getenv("FFMPEG_BINARY", cls.ffmpeg_binary),
            transcriber_backend=os.getenv("TRANSCRIBER_BACKEND", cls.transcriber_backend),
            whisper_model=os.getenv("WHISPER_MODEL", cls.whisper_model),
            whisper_language=os.getenv("WHISPER_LANGUAGE", cls.whisper_language),
            whisper_device=os.getenv("WHISPER_DEVICE", cls.whisper_device),
            compute_type=os.getenv("COMPUTE_TYPE", cls.compute_type),
            synthesizer_backend=os.getenv("SYNTHESIZER_BACKEND", cls.synthesizer_backend),
            tts_voice=os.getenv("TTS_VOICE", cls.tts_voice),
            placeholder_speech_seconds=int(os.getenv("PLACEHOLDER_SPEECH_SECONDS", cls.placeholder_speech_seconds)),
            notifier_backend=os.getenv("NOTIFIER_BACKEND", cls.notifier_backend),
            sendgrid_api_key=os.getenv("SENDGRID_API_KEY", cls.sendgrid_api_key),
            notify_from_email=os.getenv("NOTIFY_FROM_EMAIL", cls.notify_from_email),
            caption_font_size=int(os.getenv("CAPTION_FONT_SIZE", cls.caption_font_size)),
            caption_color=os.getenv("CAPTION_COLOR", cls.caption_color),
            caption_box_color=os.getenv("CAPTION_BOX_COLOR", cls.caption_box_color),
        )
