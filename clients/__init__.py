"""API clients for the external model capabilities (text and vision)."""

from .anthropic_client import AnthropicClient
from .gemini_client import GeminiClient, guess_mime_type

__all__ = [
    "AnthropicClient",
    "GeminiClient",
    "guess_mime_type",
]
