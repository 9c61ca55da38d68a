import asyncio

import pytest
from fastapi.testclient import TestClient

from debate_response.server.app import create_app

from fakes import FailingNotifier, StaticGenerator

VALID_BODY = {
    "videoUrl": "gs://uploads/abc123.mp4",
    "fileId": "abc123",
    "fileName": "opening.mp4",
    "userEmail": "speaker@example.com",
    "topic": "Homework should be optional",
}


@pytest.fixture
def make_client(make_pipeline, config):
    def _make(**overrides):
        return TestClient(create_app(pipeline=make_pipeline(**overrides), config=config))

    return _make


def test_health(make_client):
    response = make_client().get("/")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "OK"
    assert payload["message"]
    assert "timestamp" in payload


@pytest.mark.parametrize("missing", ["videoUrl", "fileId", "userEmail"])
def test_missing_required_field_returns_400(make_client, missing):
    body = {k: v for k, v in VALID_BODY.items() if k != missing}
    response = make_client().post("/processDebateVideo", json=body)

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert missing in payload["error"]


def test_blank_required_field_returns_400(make_client):
    response = make_client().post("/processDebateVideo", json={**VALID_BODY, "userEmail": "   "})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_unsafe_file_id_returns_400(make_client):
    response = make_client().post("/processDebateVideo", json={**VALID_BODY, "fileId": "../../etc/passwd"})
    assert response.status_code == 400
    assert "Invalid fileId" in response.json()["error"]


def test_non_json_body_returns_400(make_client):
    response = make_client().post(
        "/processDebateVideo", content=b"not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_successful_request(make_client):
    long_response = "This is a long rebuttal sentence. " * 20
    response = make_client(generator=StaticGenerator(long_response)).post("/processDebateVideo", json=VALID_BODY)

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["fileId"] == "abc123"
    assert payload["finalVideoUrl"] == "https://storage.googleapis.com/test-bucket/responses/response_abc123.mp4"
    assert isinstance(payload["processingTime"], int)
    assert payload["aiResponse"] == long_response[:200] + "..."
    assert payload["transcription"].endswith("...")
    assert len(payload["transcription"]) <= 203


def test_storage_failure_returns_500_without_retry(make_client, bucket):
    blob = bucket.blob.return_value
    blob.upload_from_filename.side_effect = RuntimeError("storage unavailable")

    response = make_client().post("/processDebateVideo", json=VALID_BODY)

    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "Video processing failed"
    assert "storage unavailable" in payload["details"]
    assert blob.upload_from_filename.call_count == 1


def test_notifier_failure_keeps_200(make_client):
    response = make_client(notifier=FailingNotifier()).post("/processDebateVideo", json=VALID_BODY)
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_unexpected_error_returns_500(make_client):
    class _Exploding:
        async def generate(self, transcript, topic=None):
            raise KeyError("candidates")

    response = make_client(generator=_Exploding()).post("/processDebateVideo", json=VALID_BODY)
    assert response.status_code == 500
    assert response.json()["error"] == "Internal server error"


def test_pipeline_is_built_once_at_startup_off_the_event_loop(monkeypatch, make_pipeline, config):
    from debate_response.server import app as app_module

    builds = []

    def _build(cfg):
        try:
            asyncio.get_running_loop()
            in_loop = True
        except RuntimeError:
            in_loop = False
        builds.append((cfg, in_loop))
        return make_pipeline()

    monkeypatch.setattr(app_module, "build_pipeline", _build)

    with TestClient(create_app(config=config)) as client:
        assert builds == [(config, False)]
        assert client.post("/processDebateVideo", json=VALID_BODY).status_code == 200
        assert client.post("/processDebateVideo", json={**VALID_BODY, "fileId": "def456"}).status_code == 200

    assert len(builds) == 1
