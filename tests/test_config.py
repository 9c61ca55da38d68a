import pytest

from debate_response.pipeline.config import PipelineConfig
from debate_response.pipeline.main import build_notifier, build_synthesizer, build_transcriber
from debate_response.speech.synthesizer import SilentSynthesizer
from debate_response.transcription.transcriber import PlaceholderTranscriber


def test_defaults(monkeypatch):
    for key in ("UPLOAD_BUCKET", "PORT", "ENVIRONMENT", "GEMINI_API_KEY"):
        monkeypatch.delenv(key, raising=False)
    config = PipelineConfig.from_env()
    assert config.bucket_name == "ai-debate-uploads"
    assert config.port == 8080
    assert config.environment == "development"
    assert config.gemini_api_key is None
    assert config.storage_host == "storage.googleapis.com"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("UPLOAD_BUCKET", "my-bucket")
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("PORT", "9090")
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("CAPTION_FONT_SIZE", "32")
    monkeypatch.setenv("TEMP_DIR", "/var/tmp/debate")

    config = PipelineConfig.from_env()

    assert config.bucket_name == "my-bucket"
    assert config.gemini_api_key == "secret"
    assert config.port == 9090
    assert config.environment == "production"
    assert config.caption_font_size == 32
    assert config.temp_dir == "/var/tmp/debate"


def test_default_backends_are_placeholders():
    config = PipelineConfig(placeholder_speech_seconds=5)
    assert isinstance(build_transcriber(config), PlaceholderTranscriber)
    synthesizer = build_synthesizer(config)
    assert isinstance(synthesizer, SilentSynthesizer)
    assert synthesizer.duration_seconds == 5


@pytest.mark.parametrize("builder, field", [
    (build_transcriber, "transcriber_backend"),
    (build_synthesizer, "synthesizer_backend"),
    (build_notifier, "notifier_backend"),
])
def test_unknown_backend_is_rejected(builder, field):
    with pytest.raises(ValueError, match="Unknown"):
        builder(PipelineConfig(**{field: "carrier-pigeon"}))


def test_sendgrid_notifier_requires_key():
    with pytest.raises(ValueError, match="SENDGRID_API_KEY"):
        build_notifier(PipelineConfig(notifier_backend="sendgrid"))
