"""
Gemini client that turns a debate transcript into a spoken rebuttal.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Protocol

import aiohttp

from ..pipeline.errors import GenerationFailure

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "General debate"

PROMPT_TEMPLATE = """You are an expert debate coach and AI assistant. Analyze the following debate video transcription and provide a thoughtful, engaging response.

Transcription: "{transcript}"

Topic: {topic}

Please provide:
1. A brief acknowledgment of the speaker's points
2. A thoughtful counter-argument or additional perspective
3. Constructive feedback or suggestions
4. An encouraging conclusion

Make your response engaging, respectful, and educational. Aim for approximately 150-200 words that would take about 60-90 seconds to speak naturally."""


def build_prompt(transcript: str, topic: Optional[str] = None) -> str:
    """Render the fixed rebuttal prompt; transcript and topic are inserted verbatim."""
    return PROMPT_TEMPLATE.format(transcript=transcript, topic=topic or DEFAULT_TOPIC)


class ResponseGenerator(Protocol):
    async def generate(self, transcript: str, topic: Optional[str] = None) -> str:
        ...


def _default_session() -> aiohttp.ClientSession:
    return aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))


class GeminiResponseGenerator:
    """Client for the Generative Language API generateContent endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        temperature: Optional[float] = None,
        session_factory: Callable[[], aiohttp.ClientSession] = _default_session,
    ):
        """
        Initialize the generator.

        Args:
            api_key: Generative Language API key
            model: Model name, without the "models/" prefix
            base_url: API root, overridable for proxies and tests
            temperature: Sampling temperature, model default when None
            session_factory: Creates the HTTP session used per request
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.session_factory = session_factory

    def _payload(self, prompt: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if self.temperature is not None:
            payload["generationConfig"] = {"temperature": self.temperature}
        return payload

    @staticmethod
    def _extract_text(result: Dict[str, Any]) -> str:
        candidates = result.get("candidates") or []
        if not candidates:
            feedback = result.get("promptFeedback", {})
            raise GenerationFailure(f"AI response generation failed: no candidates returned {feedback}".strip())
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts).strip()

    async def generate(self, transcript: str, topic: Optional[str] = None) -> str:
        """
        Send the transcript to Gemini and return the generated rebuttal.

        Raises:
            GenerationFailure: on a missing key, any upstream error or an empty completion
        """
        if not self.api_key:
            raise GenerationFailure("AI response generation failed: GEMINI_API_KEY is not set")

        prompt = build_prompt(transcript, topic)
        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        logger.info(f"Sending prompt to {url}, transcript length={len(transcript)}")

        try:
            async with self.session_factory() as client:
                async with client.post(url, json=self._payload(prompt), headers=headers) as response:
                    response.raise_for_status()
                    result = await response.json()
        except aiohttp.ClientResponseError as e:
            logger.error(f"HTTP error from Gemini API: {e.status} - {e.message}")
            raise GenerationFailure(f"AI response generation failed: {e.status} {e.message}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Error calling Gemini API: {e}")
            raise GenerationFailure(f"AI response generation failed: {e}") from e

        text = self._extract_text(result)
        if not text:
            raise GenerationFailure("AI response generation failed: empty completion")

        logger.info(f"Gemini response received, length={len(text)}")
        return text
