"""Google Gemini API client for brand image analysis (the Eye)."""

import asyncio
import base64
import logging
from typing import Optional

import httpx

from director_studio import config
from director_studio.errors import TransportError, ValidationError

logger = logging.getLogger(__name__)

# Status codes worth another attempt; everything else fails fast.
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}


def guess_mime_type(image_url: str) -> str:
    """Detect MIME type from the URL, defaulting to JPEG."""
    lowered = image_url.lower()
    if ".png" in lowered:
        return "image/png"
    if ".webp" in lowered:
        return "image/webp"
    return "image/jpeg"


class GeminiClient:
    """Client for Google Gemini API (REST-based, no SDK dependency)."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = config.VISION_MODEL,
        timeout: float = config.VISION_MODEL_TIMEOUT,
        max_retries: int = config.MAX_TRANSPORT_RETRIES,
        backoff_base: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or config.GEMINI_API_KEY
        self.model = model
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.backoff_base = backoff_base
        # Injected in tests to serve canned responses
        self._transport = transport
        if not self.api_key:
            logger.info("GEMINI_API_KEY not found - image analysis is unavailable")

    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != "xxx"

    def _require_api_key(self):
        """Raise error if API key is missing (called before actual API use)."""
        if not self.is_configured():
            raise ValueError("GEMINI_API_KEY not found in environment")

    def _http(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout, follow_redirects=True, transport=self._transport
        )

    async def analyze_image(
        self,
        image_url: str,
        prompt: str,
        temperature: float = 0.2,
        max_output_tokens: int = 2048,
    ) -> str:
        """Send an image plus instructions to Gemini and return the raw text.

        Args:
            image_url: Public URL of the image to analyze
            prompt: Analysis instructions (expects a JSON answer)
            temperature: Sampling temperature
            max_output_tokens: Output budget

        Returns:
            The model's text answer, expected to contain a JSON object

        Raises:
            TransportError: Image download or API call failed after all retries
            ValidationError: The API answered without any text candidate
        """
        self._require_api_key()

        image_data = await self._fetch_image_base64(image_url)
        url = f"{self.BASE_URL}/models/{self.model}:generateContent"
        payload = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt},
                        {
                            "inline_data": {
                                "mime_type": guess_mime_type(image_url),
                                "data": image_data,
                            }
                        },
                    ]
                }
            ],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

        data = await self._post_with_retry(url, payload)
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ValidationError(f"Gemini response had no text candidate: {e}") from e

    async def _post_with_retry(self, url: str, payload: dict) -> dict:
        """POST with bounded attempts and exponential backoff."""
        params = {"key": self.api_key}
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                async with self._http(self.timeout) as client:
                    response = await client.post(url, params=params, json=payload)
                    response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                last_error = e
                status = e.response.status_code
                if status not in RETRYABLE_STATUS_CODES:
                    raise TransportError(f"Gemini API error: {status}") from e
                logger.warning("Gemini attempt %d failed (%d)", attempt + 1, status)
            except httpx.HTTPError as e:
                last_error = e
                logger.warning("Gemini attempt %d failed: %s", attempt + 1, e)
            except ValueError as e:
                raise ValidationError(f"Gemini response was not JSON: {e}") from e

            if attempt < self.max_retries - 1:
                await asyncio.sleep(self.backoff_base * (2 ** attempt))

        raise TransportError(
            f"Gemini API unreachable after {self.max_retries} attempts: {last_error}"
        ) from last_error

    async def _fetch_image_base64(self, url: str) -> str:
        """Download an image and return its base64-encoded content."""
        try:
            async with self._http(30.0) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to fetch image {url}: {e}") from e

        return base64.b64encode(response.content).decode("utf-8")

    async def check_health(self) -> dict:
        """Report whether the Gemini API answers a trivial text prompt."""
        if not self.is_configured():
            return {"healthy": False, "message": "Gemini API key not configured"}

        url = f"{self.BASE_URL}/models/{self.model}:generateContent"
        payload = {"contents": [{"parts": [{"text": "Respond with OK"}]}]}
        try:
            data = await self._post_with_retry(url, payload)
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (TransportError, ValidationError, KeyError, IndexError, TypeError) as e:
            return {"healthy": False, "message": str(e)}

        return {"healthy": "ok" in text.lower(), "message": f"{self.model} operational"}
