"""Anthropic Claude API client for storyboard, refinement and commentary text."""

import asyncio
import logging
from typing import Optional

import anthropic
from anthropic import AsyncAnthropic

from director_studio import config
from director_studio.errors import TransportError, ValidationError

logger = logging.getLogger(__name__)


class AnthropicClient:
    """Client for the Anthropic Messages API (the text model behind the Voice)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = config.TEXT_MODEL,
        timeout: float = config.TEXT_MODEL_TIMEOUT,
        max_retries: int = config.MAX_TRANSPORT_RETRIES,
    ):
        self.api_key = api_key or config.ANTHROPIC_API_KEY
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self._client: Optional[AsyncAnthropic] = None

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _require_api_key(self):
        """Raise error if API key is missing (called before actual API use)."""
        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY not found in environment")

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            self._require_api_key()
            # The SDK retries connection errors, 429 and 5xx with exponential backoff.
            self._client = AsyncAnthropic(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=self.max_retries,
            )
        return self._client

    async def generate(
        self,
        prompt: str,
        system_prompt: str = "",
        max_tokens: int = 1500,
        temperature: float = 0.7,
        model: Optional[str] = None,
    ) -> str:
        """Generate a completion using Claude.

        Args:
            prompt: The user prompt
            system_prompt: System instructions
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature
            model: Override for the configured model

        Returns:
            The generated text response

        Raises:
            TransportError: The API could not be reached, timed out, or
                            answered with an error status.
            ValidationError: The API returned empty content on both the
                             initial call and the retry.
        """
        kwargs = {
            "model": model or self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            kwargs["system"] = system_prompt

        text = await self._create(kwargs)
        if text:
            return text

        # Empty content: retry once after a short delay
        logger.warning("Anthropic API returned empty content, retrying in 2s")
        await asyncio.sleep(2)
        text = await self._create(kwargs)
        if text:
            return text

        raise ValidationError("Anthropic API returned empty content on both attempts")

    async def _create(self, kwargs: dict) -> str:
        try:
            response = await self.client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise TransportError(f"Anthropic API error: {e}") from e
        return self._extract_text(response)

    @staticmethod
    def _extract_text(response) -> str:
        """Extract text from a response that may contain mixed content blocks."""
        if not response.content:
            return ""
        text_parts = []
        for block in response.content:
            if hasattr(block, "text"):
                text_parts.append(block.text)
        return "\n".join(text_parts).strip()

    async def check_health(self) -> dict:
        """Send a tiny prompt and report whether the API answered."""
        if not self.is_configured():
            return {"healthy": False, "message": "Anthropic API key not configured"}
        try:
            await self.generate("ping", max_tokens=10, temperature=0.0)
        except (TransportError, ValidationError) as e:
            logger.warning("Anthropic health check failed: %s", e)
            return {"healthy": False, "message": str(e)}
        return {"healthy": True, "message": f"{self.model} operational"}
