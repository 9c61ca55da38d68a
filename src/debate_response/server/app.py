"""FastAPI server exposing the debate response pipeline.

Run with:
uvicorn debate_response.server.app:app --host 0.0.0.0 --port 8080

or through the ``debate-response-server`` console script.

POST /processDebateVideo
Content-Type: application/json
{
    "videoUrl": "https://storage.googleapis.com/ai-debate-uploads/uploads/abc123.mp4",
    "fileId": "abc123",
    "fileName": "opening-statement.mp4",
    "userEmail": "speaker@example.com",
    "topic": "Remote work is better than office work"
}

The request blocks until the whole pipeline has finished or failed.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..pipeline.config import PipelineConfig
from ..pipeline.errors import PipelineError, ValidationFailure
from ..pipeline.main import ResponsePipeline, build_pipeline
from ..pipeline.models import Job

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 200
REQUIRED_FIELDS = ("videoUrl", "fileId", "userEmail")

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------
# Required fields are optional here so that missing values produce the
# service's own 400 payload instead of FastAPI's 422.


class ProcessVideoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_url: Optional[str] = Field(None, alias="videoUrl", description="Source video URL")
    file_id: Optional[str] = Field(None, alias="fileId", description="Caller-supplied job id")
    file_name: Optional[str] = Field(None, alias="fileName", description="Original file name")
    user_email: Optional[str] = Field(None, alias="userEmail", description="Requester address")
    topic: Optional[str] = Field(None, description="Debate topic")

    @field_validator("video_url", "file_id", "user_email", "file_name", "topic")
    def _strip(cls, v):  # noqa: D401
        if isinstance(v, str):
            return v.strip() or None
        return v

    def to_job(self) -> Job:
        missing = [
            name for name, value in zip(REQUIRED_FIELDS, (self.video_url, self.file_id, self.user_email))
            if not value
        ]
        if missing:
            raise ValidationFailure(f"Missing required parameters: {', '.join(missing)}")
        return Job(
            file_id=self.file_id,
            user_email=self.user_email,
            video_url=self.video_url,
            file_name=self.file_name,
            topic=self.topic,
        )


def _preview(text: str) -> str:
    return text[:PREVIEW_CHARS] + "..."


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def create_app(pipeline: Optional[ResponsePipeline] = None, config: Optional[PipelineConfig] = None) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        pipeline: Pre-wired pipeline; built from config at startup when None
        config: Pipeline configuration; read from the environment when None
    """
    async def get_pipeline() -> ResponsePipeline:
        if app.state.pipeline is None:
            # storage client construction does blocking credential discovery
            loop = asyncio.get_running_loop()
            app.state.pipeline = await loop.run_in_executor(None, build_pipeline, app.state.config)
        return app.state.pipeline

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        await get_pipeline()
        yield

    app = FastAPI(title="AI Debate Video Processor", lifespan=lifespan)
    app.state.config = config or PipelineConfig.from_env()
    app.state.pipeline = pipeline

    # -----------------------------------------------------------------------
    # Error handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError):
        return _error(400, f"Invalid request body: {exc.errors()}")

    @app.exception_handler(ValidationFailure)
    async def _validation_failure(request: Request, exc: ValidationFailure):
        return _error(400, str(exc))

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    @app.get("/")
    async def health():
        return {
            "status": "OK",
            "message": "AI Debate Video Processor is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.post("/processDebateVideo")
    async def process_debate_video(request: ProcessVideoRequest):
        logger.info("Starting video processing...")
        job = request.to_job()

        try:
            pipeline = await get_pipeline()
            result = await pipeline.process(job)
        except PipelineError as exc:
            logger.error(f"Video processing error: {exc}")
            return _error(500, "Video processing failed", str(exc))
        except Exception as exc:
            logger.exception("Unhandled error during video processing")
            return _error(500, "Internal server error", str(exc))

        return {
            "success": True,
            "message": "Video processing completed successfully",
            "fileId": result.file_id,
            "finalVideoUrl": result.final_video_url,
            "processingTime": result.processing_time_ms,
            "transcription": _preview(result.transcription),
            "aiResponse": _preview(result.ai_response),
        }

    return app


def main():
    import uvicorn

    config = PipelineConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.info(f"AI Debate Video Processor listening on port {config.port}")
    logger.info(f"Environment: {config.environment}")
    logger.info(f"Upload bucket: {config.bucket_name}")
    uvicorn.run(create_app(config=config), host="0.0.0.0", port=config.port)


app = create_app()


if __name__ == "__main__":
    main()
