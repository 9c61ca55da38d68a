import pytest

from debate_response.delivery.publisher import GCSPublisher
from debate_response.pipeline.config import PipelineConfig
from debate_response.pipeline.main import ResponsePipeline
from debate_response.speech.synthesizer import SilentSynthesizer
from debate_response.transcription.transcriber import PlaceholderTranscriber

from fakes import FakeTranscoder, RecordingNotifier, StaticGenerator, make_bucket, make_storage_client


@pytest.fixture
def config(tmp_path):
    return PipelineConfig(bucket_name="test-bucket", temp_dir=str(tmp_path / "work"))


@pytest.fixture
def bucket():
    return make_bucket("test-bucket")


@pytest.fixture
def make_pipeline(config, bucket):
    """Build a pipeline from fakes; keyword arguments replace individual collaborators."""

    def _make(**overrides):
        collaborators = dict(
            transcoder=FakeTranscoder(),
            transcriber=PlaceholderTranscriber(),
            generator=StaticGenerator(),
            synthesizer=SilentSynthesizer(duration_seconds=4, sample_rate=8000),
            publisher=GCSPublisher(bucket),
            notifier=RecordingNotifier(),
            storage_client=make_storage_client(),
        )
        collaborators.update(overrides)
        return ResponsePipeline(config=config, **collaborators)

    return _make
