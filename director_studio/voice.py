"""
The Voice: cheap, repeatable text-model calls.

Three jobs: a 3-beat pitch per Director, the storyboard draft, and single
scene refinements. ``pitch`` never raises (it degrades to a deterministic
pitch); the storyboard and refinement calls raise and leave the fallback to
their callers, which own the decision of what to substitute.
"""

import json
import logging
import re
from typing import Optional, Protocol, Sequence

from director_studio import config
from director_studio.errors import ValidationError
from director_studio.fallback import fallback_pitch
from director_studio.models import Commentary, DirectorPitch, RawAnalysis, SceneStatus, VideoScene
from director_studio.schemas import RefinementPayload, StoryboardPayload, parse_payload
from director_studio.style_presets import StylePreset
from director_studio.text_utils import sanitize_token, truncate_payload
from persona_engine.bias import BiasedScores, RoutingDecision, apply_bias, route
from persona_engine.directors import DirectorProfile, PersonaRegistry

logger = logging.getLogger(__name__)


class TextModel(Protocol):
    async def generate(
        self,
        prompt: str,
        system_prompt: str = "",
        max_tokens: int = 1500,
        temperature: float = 0.7,
    ) -> str: ...


# ==================== PITCH ====================

FORBIDDEN_ACADEMIC_WORDS = (
    "resonance", "paramount", "juxtaposition", "utilize", "exemplify",
    "articulate", "profound", "decisively", "brilliantly",
)

PITCH_FORMAT_RULES = f"""
## DIRECTOR COMMENTARY - THE 3-BEAT FORMAT
Answer with EXACTLY these three lines and nothing else:

👀 Vision: [What's the subject? One simple sentence, max 15 words.]
🛡️ Safety: [What must we protect? Text, faces, colors, logos? Max 15 words.]
✨ The Magic: [Why this engine? What feeling are we creating? Max 15 words.]

TONE GUIDE (CRITICAL)
- FORBIDDEN WORDS: {", ".join(FORBIDDEN_ACADEMIC_WORDS)}
- USE: Simple English. Short sentences. Punchy words.
- BE: A creative partner, not a robot. Excited, not academic."""

# Beat label at line start, tolerating emoji, "The" and markdown bold
_BEAT_PATTERNS = {
    name: re.compile(
        rf"^\W*(?:the\s+)?{name}\**\s*[:\-]\s*\**\s*(.+)", re.IGNORECASE
    )
    for name in ("vision", "safety", "magic")
}
MAX_BEAT_LENGTH = 200


def parse_commentary(text: str) -> Commentary:
    """Pull the three beats out of free-text commentary.

    Raises:
        ValidationError: Any beat is missing or empty
    """
    beats = {}
    for line in (text or "").splitlines():
        for name, pattern in _BEAT_PATTERNS.items():
            if name in beats:
                continue
            match = pattern.search(line)
            if match:
                beat = sanitize_token(match.group(1), MAX_BEAT_LENGTH)
                if beat:
                    beats[name] = beat
                break

    missing = [name for name in _BEAT_PATTERNS if name not in beats]
    if missing:
        raise ValidationError(f"Commentary missing beats: {', '.join(missing)}")
    return Commentary(**beats)


def persona_system_prompt(profile: DirectorProfile) -> str:
    voice = profile.voice
    lines = [profile.system_prompt_modifier, "", f"Tone: {voice.tone}"]
    if voice.vocabulary:
        lines.append(f"Favour words like: {', '.join(voice.vocabulary)}")
    if voice.forbidden:
        lines.append(f"Never use: {', '.join(voice.forbidden)}")
    return "\n".join(lines)


def facts_context(raw: RawAnalysis, limit: int = config.FACTS_PAYLOAD_LIMIT) -> str:
    """Visual facts as compact JSON, cut to ``limit`` characters."""
    return truncate_payload(json.dumps(raw.facts.to_dict(), ensure_ascii=False), limit)


# ==================== STORYBOARD ====================

STORYBOARD_SYSTEM_PROMPT = """You are an elite commercial film director creating short-form video content from a brand analysis.

TASK: Generate a 3-scene storyboard for a short-form video advertisement.

1. EXTRACT "INVARIANT_TOKEN":
   - The core visual subject that MUST remain identical across ALL frames
   - Typically the product, logo, or hero element
   - Descriptive phrase, max 50 words
   - Example: "matte black premium headphones with rose gold accents on white surface"

2. SELECT BEST STYLE PRESET:
   - Choose from the available presets based on brand tone and industry
   - Return the preset ID exactly as listed

3. CREATE 3 SCENES:
   - Each scene has a distinct action/motion
   - Scenes flow logically as a narrative
   - Include camera movements where appropriate
   - Duration: 4-6 seconds per scene

OUTPUT FORMAT (JSON):
{
  "selected_style_id": "PRESET_ID",
  "invariant_token": "core visual subject description",
  "scenes": [
    {
      "sequence_index": 1,
      "action_token": "specific motion/action description",
      "duration": 5,
      "camera_movement": "slow dolly in / static / orbit"
    }
  ],
  "reasoning": "brief explanation of creative choices"
}

IMPORTANT:
- Action tokens describe MOTION, not static descriptions
- Use cinematic language: dolly, pan, orbit, reveal, emerge
- Keep action tokens under 30 words
- Never repeat the invariant token inside an action token"""

STORYBOARD_USER_TEMPLATE = """BRAND ANALYSIS:
{facts}

TRINITY SCORES: physics={physics} vibe={vibe} logic={logic} integrity={integrity}

AVAILABLE STYLE PRESETS:
{presets}

Generate a compelling {scene_count}-scene storyboard for this brand. Return ONLY valid JSON."""


# ==================== REFINEMENT ====================

REFINE_SYSTEM_PROMPT = """You are an elite commercial film director refining one video scene.

TASK: Generate an improved action token for the scene.

RULES:
- The invariant token (core visual subject) is fixed. Do not describe it differently.
- Keep the action under 30 words
- Use cinematic motion language

OUTPUT FORMAT (JSON):
{
  "new_action_token": "improved action/motion description",
  "changes_made": "brief explanation of adjustments"
}"""

REJECT_INSTRUCTION = (
    "The scene was REJECTED. Generate a completely NEW action that is different "
    "from the current one."
)
TWEAK_INSTRUCTION = (
    'The scene needs TWEAKING. User feedback: "{feedback}". '
    "Adjust the action to address the feedback while keeping the core motion."
)

REFINE_USER_TEMPLATE = """INVARIANT TOKEN (do not change): "{invariant}"
CURRENT ACTION: "{action}"
STYLE CONTEXT: {style}

{instruction}

Return ONLY valid JSON."""


class DirectorVoice:
    """Text-model front end for pitches, storyboards and refinements."""

    def __init__(self, text_model: TextModel, registry: Optional[PersonaRegistry] = None):
        self.text_model = text_model
        self.registry = registry or PersonaRegistry()

    def frame(self, raw: RawAnalysis, director_id: Optional[str]) -> tuple[DirectorProfile, BiasedScores, RoutingDecision]:
        """Resolve the Director and compute its biased scores and routing."""
        profile = self.registry.get(director_id)
        biased = apply_bias(profile, raw)
        return profile, biased, route(profile, biased)

    async def pitch(self, raw: RawAnalysis, director_id: Optional[str]) -> DirectorPitch:
        """3-beat pitch from one Director. Falls back on any failure."""
        profile, biased, routing = self.frame(raw, director_id)
        prompt = (
            f"BRAND FACTS:\n{facts_context(raw)}\n\n"
            f"YOUR SCORES (after your bias): physics={biased.physics} "
            f"vibe={biased.vibe} logic={biased.logic}\n"
            f"INTEGRITY: {raw.integrity}\n"
            f"ENGINE: {routing.engine.value} ({routing.reason})\n"
            f"RISK LEVEL: {routing.risk_label.value}\n\n"
            "Pitch your take on this video."
        )
        try:
            text = await self.text_model.generate(
                prompt,
                system_prompt=persona_system_prompt(profile) + "\n" + PITCH_FORMAT_RULES,
                max_tokens=config.PITCH_MAX_TOKENS,
                temperature=config.PITCH_TEMPERATURE,
            )
            commentary = parse_commentary(text)
        except Exception as e:
            logger.warning("Pitch from %s failed, using fallback: %s", profile.id, e)
            return fallback_pitch(profile, raw)

        logger.info("Pitch ready from %s (%s)", profile.id, routing.engine.value)
        return DirectorPitch(
            director_id=profile.id,
            director_name=profile.name,
            commentary=commentary,
            biased_scores=biased,
            routing=routing,
        )

    async def draft_storyboard(
        self,
        raw: RawAnalysis,
        presets: Sequence[StylePreset],
        director_id: Optional[str] = None,
        scene_count: int = config.DEFAULT_SCENE_COUNT,
    ) -> StoryboardPayload:
        """One generator call for a storyboard draft.

        Raises:
            TransportError: The text model could not be reached
            ValidationError: The answer did not fit the storyboard schema
        """
        system_prompt = STORYBOARD_SYSTEM_PROMPT
        if director_id:
            profile = self.registry.get(director_id)
            system_prompt = f"{STORYBOARD_SYSTEM_PROMPT}\n\n{persona_system_prompt(profile)}"

        prompt = STORYBOARD_USER_TEMPLATE.format(
            facts=facts_context(raw),
            physics=raw.physics,
            vibe=raw.vibe,
            logic=raw.logic,
            integrity=raw.integrity,
            presets="\n".join(p.summary() for p in presets),
            scene_count=scene_count,
        )
        text = await self.text_model.generate(
            prompt,
            system_prompt=system_prompt,
            max_tokens=config.STORYBOARD_MAX_TOKENS,
            temperature=config.STORYBOARD_TEMPERATURE,
        )
        return parse_payload(text, StoryboardPayload)

    async def refine_action(
        self, scene: VideoScene, mode: SceneStatus, feedback: Optional[str] = None
    ) -> str:
        """Ask for a new action token for ``scene``.

        RED asks for something completely different at a high temperature;
        YELLOW applies the feedback and keeps the core motion.

        Raises:
            TransportError: The text model could not be reached
            ValidationError: The answer did not fit the refinement schema
        """
        if mode == SceneStatus.RED:
            instruction = REJECT_INSTRUCTION
            temperature = config.REJECT_TEMPERATURE
        else:
            instruction = TWEAK_INSTRUCTION.format(feedback=feedback or "")
            temperature = config.TWEAK_TEMPERATURE

        prompt = REFINE_USER_TEMPLATE.format(
            invariant=scene.invariant_token,
            action=scene.action_token,
            style=scene.style_token,
            instruction=instruction,
        )
        text = await self.text_model.generate(
            prompt,
            system_prompt=REFINE_SYSTEM_PROMPT,
            max_tokens=config.REFINE_MAX_TOKENS,
            temperature=temperature,
        )
        payload = parse_payload(text, RefinementPayload)
        return sanitize_token(payload.new_action_token)
