"""
Generation module for the LLM-written debate rebuttal.
"""

from .gemini_client import DEFAULT_TOPIC, GeminiResponseGenerator, ResponseGenerator, build_prompt

__all__ = [
    "DEFAULT_TOPIC",
    "GeminiResponseGenerator",
    "ResponseGenerator",
    "build_prompt",
]
