"""
Error taxonomy for the debate response pipeline.

Every stage failure derives from PipelineError so the HTTP layer can map
ValidationFailure to 400 and everything else to 500.
"""

from typing import Optional


class PipelineError(Exception):
    """Base error for the debate response pipeline."""


class ValidationFailure(PipelineError):
    """Raised when a request is missing required fields or carries invalid values."""


class IngestFailure(PipelineError):
    """Raised when the source video cannot be fetched."""


class TranscodeFailure(PipelineError):
    """Raised when the external transcoder exits non-zero or produces no output."""

    def __init__(self, message: str, stderr: Optional[str] = None):
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}: {self.stderr.strip()}"
        return message


class TranscriptionFailure(PipelineError):
    """Raised when speech-to-text fails."""


class GenerationFailure(PipelineError):
    """Raised when the generative-language API call fails."""


class SynthesisFailure(PipelineError):
    """Raised when text-to-speech fails."""


class PublishFailure(PipelineError):
    """Raised when the final artifact cannot be written to object storage."""


class NotificationFailure(PipelineError):
    """Raised by notifiers when delivery fails. Never fatal for a job."""
