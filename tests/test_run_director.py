"""End-to-end CLI tests with both model clients replaced by fakes."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import run_director

ANALYSIS = json.dumps({
    "brand_attributes": {"industry": "tech", "tone": ["sleek"]},
    "visual_elements": {"primary_subject": "smart speaker", "detected_text": ["ECHO"]},
    "physics_score": 3.0,
    "vibe_score": 6.0,
    "logic_score": 9.0,
    "integrity_score": 0.9,
})

STORYBOARD = json.dumps({
    "selected_style_id": "TECH_CLEAN_V1",
    "invariant_token": "white smart speaker",
    "scenes": [{"action_token": "light ring pulses"}, {"action_token": "slow orbit"}],
})


def fake_clients(text_response):
    text_model = MagicMock()
    text_model.generate = AsyncMock(return_value=text_response)
    text_model.check_health = AsyncMock(return_value={"healthy": True, "message": "ok"})
    text_model.model = "claude-test"
    vision_model = MagicMock()
    vision_model.analyze_image = AsyncMock(return_value=ANALYSIS)
    vision_model.check_health = AsyncMock(return_value={"healthy": True, "message": "ok"})
    return text_model, vision_model


def run_cli(argv, text_response=STORYBOARD):
    text_model, vision_model = fake_clients(text_response)
    with patch.object(run_director, "AnthropicClient", return_value=text_model), \
         patch.object(run_director, "GeminiClient", return_value=vision_model):
        code = asyncio.run(run_director._cli_main(argv))
    return code, text_model, vision_model


class TestStoryboardCommand:
    def test_json_output_hides_reference_asset(self, capsys):
        code, text_model, _ = run_cli(["storyboard", "https://x.com/speaker.jpg", "--json"])

        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["selected_style_id"] == "TECH_CLEAN_V1"
        assert len(payload["scenes"]) == 3
        assert payload["scenes"][2]["action_token"] == "slow orbit - alternate angle"
        assert all("hidden_ref_url" not in s for s in payload["scenes"])

    def test_recommended_director_by_default(self, capsys):
        _, text_model, _ = run_cli(["storyboard", "https://x.com/speaker.jpg"])
        assert "The Minimalist" in text_model.generate.call_args.kwargs["system_prompt"]


class TestOtherCommands:
    def test_analyze_json(self, capsys):
        code, text_model, _ = run_cli(["analyze", "https://x.com/speaker.jpg", "--json"])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["logic"] == 9.0
        text_model.generate.assert_not_awaited()

    def test_lounge_pitches_fall_back_on_bad_text(self, capsys):
        code, _, vision_model = run_cli(
            ["lounge", "https://x.com/speaker.jpg", "--json"], text_response="no beats here"
        )
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert len(payload["pitches"]) == 4
        assert all(p["used_fallback"] for p in payload["pitches"])
        assert vision_model.analyze_image.await_count == 1

    def test_analysis_failure_exit_code(self, capsys):
        text_model, vision_model = fake_clients(STORYBOARD)
        vision_model.analyze_image = AsyncMock(return_value="not json")
        with patch.object(run_director, "AnthropicClient", return_value=text_model), \
             patch.object(run_director, "GeminiClient", return_value=vision_model):
            code = asyncio.run(run_director._cli_main(["analyze", "https://x.com/a.jpg"]))
        assert code == 1
        assert "Analysis failed" in capsys.readouterr().out

    def test_health(self, capsys):
        code, _, _ = run_cli(["health"])
        assert code == 0
        assert "Gemini: ok" in capsys.readouterr().out

    def test_health_reports_failing_client(self, capsys):
        text_model, vision_model = fake_clients(STORYBOARD)
        text_model.check_health = AsyncMock(
            return_value={"healthy": False, "message": "Anthropic API key not configured"}
        )
        with patch.object(run_director, "AnthropicClient", return_value=text_model), \
             patch.object(run_director, "GeminiClient", return_value=vision_model):
            code = asyncio.run(run_director._cli_main(["health"]))
        assert code == 1
        assert "❌ Anthropic: Anthropic API key not configured" in capsys.readouterr().out

    def test_missing_vision_key_exit_code(self, capsys, monkeypatch):
        from clients.gemini_client import GeminiClient

        monkeypatch.setattr("director_studio.config.GEMINI_API_KEY", None)
        text_model, _ = fake_clients(STORYBOARD)
        with patch.object(run_director, "AnthropicClient", return_value=text_model), \
             patch.object(run_director, "GeminiClient", return_value=GeminiClient(api_key="")):
            code = asyncio.run(run_director._cli_main(["analyze", "https://x.com/a.jpg"]))
        assert code == 1
        assert "Analysis failed (transport)" in capsys.readouterr().out
