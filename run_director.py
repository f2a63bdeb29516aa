"""Run the Director pipeline against one brand image.

Commands:
    analyze     Run the Eye and print Trinity scores and visual facts
    lounge      Analyze once, then hear all four Directors pitch in parallel
    storyboard  Analyze, then build a 3-scene storyboard
    health      Check that both model APIs are configured and answering
"""

import asyncio
import json
import logging
import sys

from clients import AnthropicClient, GeminiClient
from director_studio import (
    AnalysisError,
    DirectorLounge,
    DirectorVoice,
    StoryboardBuilder,
    VisionAnalyzer,
    available_presets,
)
from persona_engine import PersonaRegistry, recommend_director


def _print_analysis(raw):
    print(f"\n🔍 Trinity scores for {raw.image_url}")
    print(f"   Physics:   {raw.physics:.1f}")
    print(f"   Vibe:      {raw.vibe:.1f}")
    print(f"   Logic:     {raw.logic:.1f}")
    print(f"   Integrity: {raw.integrity:.2f}")
    if raw.facts.primary_subject:
        print(f"   Subject:   {raw.facts.primary_subject}")
    if raw.facts.detected_text:
        print(f"   Text:      {', '.join(raw.facts.detected_text)}")
    print(f"   Recommended director: {recommend_director(raw)}")


def _print_pitch(pitch):
    print(f"\n🎬 {pitch.director_name} ({pitch.routing.engine.value}, {pitch.risk_level.value})")
    print(
        f"   Scores: physics={pitch.biased_scores.physics} "
        f"vibe={pitch.biased_scores.vibe} logic={pitch.biased_scores.logic}"
    )
    for line in pitch.commentary.as_text().splitlines():
        print(f"   {line}")
    if pitch.used_fallback:
        print("   ⚠️ fallback pitch")


def _print_storyboard(storyboard):
    print(f"\n📋 Storyboard {storyboard.job_id}")
    print(f"   Style: {storyboard.selected_style_id}")
    print(f"   Invariant: {storyboard.invariant_token}")
    if storyboard.used_fallback:
        print("   ⚠️ fallback storyboard")
    for scene in storyboard.scenes:
        camera = f" [{scene.camera_movement}]" if scene.camera_movement else ""
        print(f"   {scene.sequence_index}. ({scene.duration}s){camera} {scene.action_token}")


async def _cli_main(argv=None):
    """CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Director pipeline: brand image -> Trinity scores -> pitches -> storyboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  python run_director.py analyze https://example.com/brand.jpg
  python run_director.py lounge https://example.com/brand.jpg
  python run_director.py storyboard https://example.com/brand.jpg --director visionary --json
""",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_cmd = subparsers.add_parser("analyze", help="Run the Eye only")
    analyze_cmd.add_argument("image_url", help="Public URL of the brand image")

    lounge_cmd = subparsers.add_parser("lounge", help="All Directors pitch in parallel")
    lounge_cmd.add_argument("image_url", help="Public URL of the brand image")

    storyboard_cmd = subparsers.add_parser("storyboard", help="Build a 3-scene storyboard")
    storyboard_cmd.add_argument("image_url", help="Public URL of the brand image")
    storyboard_cmd.add_argument(
        "--director",
        help="Director id to shape the storyboard (default: recommended for the image)",
    )
    storyboard_cmd.add_argument(
        "--free-plan",
        action="store_true",
        help="Only offer non-premium style presets",
    )

    for cmd in (analyze_cmd, lounge_cmd, storyboard_cmd):
        cmd.add_argument("--json", action="store_true", help="Print JSON instead of text")

    subparsers.add_parser("health", help="Check both model APIs")

    args = parser.parse_args(argv)

    text_model = AnthropicClient()
    vision_model = GeminiClient()

    if args.command == "health":
        text = await text_model.check_health()
        vision = await vision_model.check_health()
        print(f"{'✅' if text['healthy'] else '❌'} Anthropic: {text['message']}")
        print(f"{'✅' if vision['healthy'] else '❌'} Gemini: {vision['message']}")
        return 0 if text["healthy"] and vision["healthy"] else 1

    voice = DirectorVoice(text_model, PersonaRegistry())
    lounge = DirectorLounge(VisionAnalyzer(vision_model), voice)

    try:
        raw = await lounge.analyze(args.image_url)
    except AnalysisError as e:
        print(f"\n❌ Analysis failed ({e.reason}): {e}")
        return 1

    if args.command == "analyze":
        if args.json:
            print(json.dumps(raw.to_dict(), indent=2, ensure_ascii=False))
        else:
            _print_analysis(raw)

    elif args.command == "lounge":
        pitches = await lounge.pitch_all(raw)
        if args.json:
            print(json.dumps(
                {"analysis": raw.to_dict(), "pitches": [p.to_dict() for p in pitches]},
                indent=2, ensure_ascii=False,
            ))
        else:
            _print_analysis(raw)
            for pitch in pitches:
                _print_pitch(pitch)

    elif args.command == "storyboard":
        director_id = args.director or recommend_director(raw)
        lounge.choose(raw, director_id)
        storyboard = await StoryboardBuilder(voice).build_storyboard(
            raw,
            available_presets(include_premium=not args.free_plan),
            director_id=director_id,
        )
        if args.json:
            payload = storyboard.to_dict()
            payload["scenes"] = [s.public_view() for s in storyboard.scenes]
            print(json.dumps(payload, indent=2, ensure_ascii=False))
        else:
            _print_analysis(raw)
            _print_storyboard(storyboard)

    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    sys.exit(asyncio.run(_cli_main()))
