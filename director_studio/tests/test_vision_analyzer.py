"""Tests for the Eye: strict validation of the vision model answer."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from director_studio.errors import AnalysisError, TransportError, ValidationError
from director_studio.vision_analyzer import SCORING_MATRIX_PROMPT, VisionAnalyzer

IMAGE_URL = "https://cdn.example.com/brand/sneaker.png"

VALID_ANALYSIS = {
    "brand_attributes": {
        "primary_colors": ["#FF0000", "#FFFFFF"],
        "typography_style": "bold sans-serif",
        "mood": "energetic",
        "tone": ["bold", "sporty"],
        "industry": "Sportswear fashion",
    },
    "visual_elements": {
        "primary_subject": "red running sneaker on concrete",
        "composition": "centered hero shot",
        "focal_points": ["sneaker", "logo"],
        "style_keywords": ["dynamic", "urban"],
        "detected_objects": ["sneaker", "concrete slab"],
        "detected_text": ["RUN FAST"],
    },
    "color_palette": {"dominant": ["#FF0000"], "mood": "warm"},
    "quality_score": 8.5,
    "integrity_score": 0.9,
    "physics_score": 7.5,
    "vibe_score": 6.0,
    "logic_score": 8.0,
    "scoring_rationale": {"physics": "Ready to run", "vibe": "Punchy", "logic": "Clear product"},
}


def make_analyzer(response=None, side_effect=None, timeout=None):
    model = MagicMock()
    model.analyze_image = AsyncMock(return_value=response, side_effect=side_effect)
    return VisionAnalyzer(model, timeout=timeout), model


def analysis_with(**overrides):
    data = json.loads(json.dumps(VALID_ANALYSIS))
    data.update(overrides)
    return data


class TestValidAnalysis:
    def test_scores_and_facts(self):
        analyzer, model = make_analyzer(json.dumps(VALID_ANALYSIS))
        raw = asyncio.run(analyzer.analyze(IMAGE_URL))

        assert (raw.physics, raw.vibe, raw.logic) == (7.5, 6.0, 8.0)
        assert raw.integrity == 0.9
        assert raw.quality == 8.5
        assert raw.image_url == IMAGE_URL
        assert raw.facts.primary_subject == "red running sneaker on concrete"
        assert raw.facts.detected_text == ("RUN FAST",)
        assert raw.facts.tone == ("bold", "sporty")
        assert raw.facts.color_mood == "warm"
        assert "physics: Ready to run" in raw.scoring_rationale
        model.analyze_image.assert_awaited_once_with(IMAGE_URL, SCORING_MATRIX_PROMPT)

    def test_fenced_answer(self):
        analyzer, _ = make_analyzer("```json\n" + json.dumps(VALID_ANALYSIS) + "\n```")
        raw = asyncio.run(analyzer.analyze(IMAGE_URL))
        assert raw.logic == 8.0

    def test_subject_falls_back_to_focal_point(self):
        data = analysis_with()
        del data["visual_elements"]["primary_subject"]
        analyzer, _ = make_analyzer(json.dumps(data))
        raw = asyncio.run(analyzer.analyze(IMAGE_URL))
        assert raw.facts.primary_subject == "sneaker"

    def test_single_string_where_list_expected(self):
        data = analysis_with()
        data["brand_attributes"]["tone"] = "minimal"
        analyzer, _ = make_analyzer(json.dumps(data))
        raw = asyncio.run(analyzer.analyze(IMAGE_URL))
        assert raw.facts.tone == ("minimal",)

    def test_boundary_scores_accepted(self):
        analyzer, _ = make_analyzer(json.dumps(analysis_with(physics_score=0, vibe_score=10)))
        raw = asyncio.run(analyzer.analyze(IMAGE_URL))
        assert (raw.physics, raw.vibe) == (0, 10)


class TestStrictValidation:
    @pytest.mark.parametrize("field", ["physics_score", "vibe_score", "logic_score", "integrity_score"])
    def test_missing_score_fails(self, field):
        data = analysis_with()
        del data[field]
        analyzer, _ = make_analyzer(json.dumps(data))
        with pytest.raises(AnalysisError) as exc:
            asyncio.run(analyzer.analyze(IMAGE_URL))
        assert exc.value.reason == "validation"

    @pytest.mark.parametrize("overrides", [
        {"vibe_score": 11},
        {"physics_score": -0.5},
        {"integrity_score": 1.5},
        {"logic_score": "high"},
    ])
    def test_out_of_range_fails(self, overrides):
        analyzer, _ = make_analyzer(json.dumps(analysis_with(**overrides)))
        with pytest.raises(AnalysisError):
            asyncio.run(analyzer.analyze(IMAGE_URL))

    def test_unparseable_answer_fails(self):
        analyzer, _ = make_analyzer("Sorry, I can't see the image.")
        with pytest.raises(AnalysisError) as exc:
            asyncio.run(analyzer.analyze(IMAGE_URL))
        assert exc.value.reason == "validation"
        assert isinstance(exc.value.__cause__, ValidationError)


class TestTransportFailures:
    def test_transport_error_wrapped(self):
        analyzer, _ = make_analyzer(side_effect=TransportError("503 after 3 attempts"))
        with pytest.raises(AnalysisError) as exc:
            asyncio.run(analyzer.analyze(IMAGE_URL))
        assert exc.value.reason == "transport"
        assert isinstance(exc.value.__cause__, TransportError)

    def test_empty_candidate_is_validation_failure(self):
        analyzer, _ = make_analyzer(side_effect=ValidationError("no text candidate"))
        with pytest.raises(AnalysisError) as exc:
            asyncio.run(analyzer.analyze(IMAGE_URL))
        assert exc.value.reason == "validation"

    def test_timeout(self):
        async def slow(image_url, prompt):
            await asyncio.sleep(1)
            return json.dumps(VALID_ANALYSIS)

        model = MagicMock()
        model.analyze_image = slow
        analyzer = VisionAnalyzer(model, timeout=0.01)
        with pytest.raises(AnalysisError) as exc:
            asyncio.run(analyzer.analyze(IMAGE_URL))
        assert exc.value.reason == "transport"

    def test_missing_key_wrapped(self):
        analyzer, _ = make_analyzer(side_effect=ValueError("GEMINI_API_KEY not found in environment"))
        with pytest.raises(AnalysisError) as exc:
            asyncio.run(analyzer.analyze(IMAGE_URL))
        assert exc.value.reason == "transport"

    def test_unconfigured_gemini_client(self, monkeypatch):
        from clients.gemini_client import GeminiClient

        monkeypatch.setattr("director_studio.config.GEMINI_API_KEY", None)
        analyzer = VisionAnalyzer(GeminiClient(api_key=""), timeout=None)
        with pytest.raises(AnalysisError) as exc:
            asyncio.run(analyzer.analyze(IMAGE_URL))
        assert isinstance(exc.value.__cause__, ValueError)
