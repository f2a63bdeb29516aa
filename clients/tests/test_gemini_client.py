"""Tests for the Gemini REST client using httpx.MockTransport (no network)."""

import asyncio
import base64
import json

import httpx
import pytest

from clients.gemini_client import GeminiClient, guess_mime_type
from director_studio.errors import TransportError, ValidationError

IMAGE_URL = "https://cdn.example.com/logo.png"
IMAGE_BYTES = b"\x89PNG fake image bytes"


def gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def make_client(handler, max_retries=3):
    return GeminiClient(
        api_key="test-key",
        max_retries=max_retries,
        backoff_base=0,
        transport=httpx.MockTransport(handler),
    )


class TestGuessMimeType:
    def test_png(self):
        assert guess_mime_type("https://x.com/a.PNG") == "image/png"

    def test_webp(self):
        assert guess_mime_type("https://x.com/a.webp?v=2") == "image/webp"

    def test_default_jpeg(self):
        assert guess_mime_type("https://x.com/a") == "image/jpeg"


class TestAnalyzeImage:
    def test_inlines_image_and_returns_text(self):
        seen = {}

        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, content=IMAGE_BYTES)
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=gemini_body('{"physics_score": 5}'))

        client = make_client(handler)
        text = asyncio.run(client.analyze_image(IMAGE_URL, "Score this"))

        assert text == '{"physics_score": 5}'
        assert ":generateContent" in seen["url"]
        assert "key=test-key" in seen["url"]
        parts = seen["body"]["contents"][0]["parts"]
        assert parts[0] == {"text": "Score this"}
        assert parts[1]["inline_data"]["mime_type"] == "image/png"
        assert base64.b64decode(parts[1]["inline_data"]["data"]) == IMAGE_BYTES
        assert seen["body"]["generationConfig"]["responseMimeType"] == "application/json"

    def test_retries_transient_errors(self):
        calls = {"post": 0}

        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, content=IMAGE_BYTES)
            calls["post"] += 1
            if calls["post"] < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=gemini_body("ok"))

        client = make_client(handler)
        assert asyncio.run(client.analyze_image(IMAGE_URL, "p")) == "ok"
        assert calls["post"] == 3

    def test_gives_up_after_max_retries(self):
        calls = {"post": 0}

        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, content=IMAGE_BYTES)
            calls["post"] += 1
            raise httpx.ConnectTimeout("timed out", request=request)

        client = make_client(handler, max_retries=2)
        with pytest.raises(TransportError):
            asyncio.run(client.analyze_image(IMAGE_URL, "p"))
        assert calls["post"] == 2

    def test_client_error_not_retried(self):
        calls = {"post": 0}

        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, content=IMAGE_BYTES)
            calls["post"] += 1
            return httpx.Response(400, json={"error": {"message": "bad request"}})

        client = make_client(handler)
        with pytest.raises(TransportError):
            asyncio.run(client.analyze_image(IMAGE_URL, "p"))
        assert calls["post"] == 1

    def test_missing_candidate_is_validation_error(self):
        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, content=IMAGE_BYTES)
            return httpx.Response(200, json={"candidates": []})

        with pytest.raises(ValidationError):
            asyncio.run(make_client(handler).analyze_image(IMAGE_URL, "p"))

    def test_image_download_failure(self):
        def handler(request):
            return httpx.Response(404)

        with pytest.raises(TransportError):
            asyncio.run(make_client(handler).analyze_image(IMAGE_URL, "p"))

    def test_requires_api_key(self, monkeypatch):
        monkeypatch.setattr("director_studio.config.GEMINI_API_KEY", None)
        client = GeminiClient(api_key=None)
        assert client.is_configured() is False
        with pytest.raises(ValueError):
            asyncio.run(client.analyze_image(IMAGE_URL, "p"))


class TestHealth:
    def test_unconfigured(self, monkeypatch):
        monkeypatch.setattr("director_studio.config.GEMINI_API_KEY", None)
        result = asyncio.run(GeminiClient(api_key=None).check_health())
        assert result["healthy"] is False

    def test_healthy(self):
        def handler(request):
            return httpx.Response(200, json=gemini_body("OK"))

        result = asyncio.run(make_client(handler).check_health())
        assert result["healthy"] is True
