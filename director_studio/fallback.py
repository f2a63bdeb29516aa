"""
Deterministic stand-ins for the Voice.

Used whenever a text-model call fails or its answer does not validate.
Nothing here calls out, and every result satisfies the storyboard
invariants: three scenes, one shared invariant token, sanitized tokens.
"""

import uuid
from typing import Optional, Sequence

from director_studio import config
from director_studio.models import (
    Commentary,
    DirectorPitch,
    RawAnalysis,
    SceneStatus,
    Storyboard,
    VideoScene,
)
from director_studio.style_presets import STYLE_PRESETS, StylePreset, select_best_style
from director_studio.text_utils import sanitize_token
from persona_engine.bias import apply_bias, route
from persona_engine.directors import DirectorProfile, ProductionEngine


def best_style_for(raw: RawAnalysis, presets: Sequence[StylePreset] = STYLE_PRESETS) -> StylePreset:
    facts = raw.facts
    return select_best_style(
        tone=facts.tone,
        industry=facts.industry,
        color_mood=facts.color_mood,
        presets=presets,
    )


def fallback_invariant(raw: RawAnalysis) -> str:
    return sanitize_token(raw.facts.primary_subject) or config.DEFAULT_INVARIANT_TOKEN


def fallback_storyboard(
    raw: RawAnalysis,
    presets: Sequence[StylePreset] = STYLE_PRESETS,
    job_id: Optional[str] = None,
) -> Storyboard:
    """Known-good storyboard built from the canonical action triplet."""
    style = best_style_for(raw, presets)
    invariant = fallback_invariant(raw)
    scenes = [
        VideoScene.compose(index, invariant, action, style)
        for index, action in enumerate(config.FALLBACK_ACTIONS, start=1)
    ]
    return Storyboard(
        job_id=job_id or str(uuid.uuid4()),
        scenes=scenes,
        selected_style_id=style.id,
        invariant_token=invariant,
        used_fallback=True,
    )


def fallback_action(action: str, mode: SceneStatus) -> str:
    """RED reimagines the current action; YELLOW keeps it as is."""
    if mode == SceneStatus.RED:
        return sanitize_token(f"{action}{config.REIMAGINED_SUFFIX}")
    return sanitize_token(action)


_ENGINE_MAGIC = {
    ProductionEngine.KLING: "Kling keeps every move grounded and real.",
    ProductionEngine.LUMA: "Luma lets light and mood carry the story.",
}


def _short(text: str, words: int = 8) -> str:
    return " ".join(text.split()[:words])


def fallback_commentary(raw: RawAnalysis, engine: ProductionEngine) -> Commentary:
    facts = raw.facts
    subject = _short(facts.primary_subject) or "Your product"
    vision = f"{subject} takes center stage."

    if facts.detected_text:
        safety = f"Keep \"{_short(facts.detected_text[0], 5)}\" sharp and readable."
    elif raw.integrity >= 0.8:
        safety = "Protect the logo, the colors and every clean edge."
    else:
        safety = "Keep the brand colors true from start to finish."

    magic = _ENGINE_MAGIC.get(engine, _ENGINE_MAGIC[ProductionEngine.KLING])
    return Commentary(vision=vision, safety=safety, magic=magic)


def fallback_pitch(profile: DirectorProfile, raw: RawAnalysis) -> DirectorPitch:
    """Pitch built from scores and facts alone."""
    biased = apply_bias(profile, raw)
    routing = route(profile, biased)
    return DirectorPitch(
        director_id=profile.id,
        director_name=profile.name,
        commentary=fallback_commentary(raw, routing.engine),
        biased_scores=biased,
        routing=routing,
        used_fallback=True,
    )
