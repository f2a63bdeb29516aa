"""
The Eye: one expensive vision call per brand image.

Produces persona-independent Trinity scores plus visual facts. Output is
validated strictly: a missing or out-of-range score is a failed analysis,
never a partial one. There is no deterministic substitute for brand facts,
so failures surface as AnalysisError.
"""

import asyncio
import logging
from typing import Optional, Protocol

from director_studio import config
from director_studio.errors import AnalysisError, TransportError, ValidationError
from director_studio.models import RawAnalysis, VisualFacts
from director_studio.schemas import VisionPayload, parse_payload
from director_studio.text_utils import sanitize_token

logger = logging.getLogger(__name__)


class VisionModel(Protocol):
    async def analyze_image(self, image_url: str, prompt: str) -> str: ...


SCORING_MATRIX_PROMPT = """You are a Senior Creative Director analyzing a brand image for short-form video production.

## PROPRIETARY SCORING MATRIX (The Trinity)

**PHYSICS SCORE (0-10)**: Motion complexity and dynamic potential
- High (7-10): Cars, machinery, sports, explosions, water, fire
- Medium (4-6): People walking, subtle animations, product rotations
- Low (0-3): Static portraits, logos, still life, abstract patterns

**VIBE SCORE (0-10)**: Emotional impact and aesthetic appeal
- High (7-10): Cinematic lighting, strong emotion, luxury feel
- Medium (4-6): Professional but standard, neutral mood
- Low (0-3): Plain, utilitarian, low aesthetic investment

**LOGIC SCORE (0-10)**: Narrative clarity and message coherence
- High (7-10): Clear product focus, obvious brand story, strong CTA
- Medium (4-6): Implied message, subtle branding, lifestyle imagery
- Low (0-3): Abstract, unclear purpose, no obvious narrative

**INTEGRITY SCORE (0-1)**: How much of the image must survive motion untouched
(legible text, logos, faces). 1.0 means everything must stay pixel-faithful.

## RULES
- Describe only what is actually visible. Do not invent objects or text.
- detected_text lists every readable word or logo text, verbatim.
- primary_subject is one short noun phrase (max 10 words) naming the hero of the image.

Return ONLY valid JSON:

{
  "brand_attributes": {
    "primary_colors": ["#hexcolor1", "#hexcolor2", "#hexcolor3"],
    "typography_style": "description of font style if visible",
    "mood": "overall emotional tone",
    "tone": ["adjective1", "adjective2"],
    "industry": "likely industry category"
  },
  "visual_elements": {
    "primary_subject": "the hero subject",
    "composition": "description of layout and visual hierarchy",
    "focal_points": ["primary focus", "secondary elements"],
    "style_keywords": ["keyword1", "keyword2", "keyword3", "keyword4", "keyword5"],
    "detected_objects": ["object1", "object2"],
    "detected_text": ["visible text"]
  },
  "color_palette": {
    "dominant": ["#hexcolor1", "#hexcolor2"],
    "mood": "one or two words, e.g. warm, moody, pastel"
  },
  "quality_score": 8.5,
  "integrity_score": 0.95,
  "physics_score": 6.5,
  "vibe_score": 8.0,
  "logic_score": 7.5,
  "scoring_rationale": {
    "physics": "Brief explanation",
    "vibe": "Brief explanation",
    "logic": "Brief explanation"
  }
}"""


def _clean_list(values) -> tuple[str, ...]:
    cleaned = (sanitize_token(v) for v in values)
    return tuple(v for v in cleaned if v)


def facts_from_payload(payload: VisionPayload) -> VisualFacts:
    brand = payload.brand_attributes
    visual = payload.visual_elements
    palette = payload.color_palette

    subject = visual.primary_subject or (visual.focal_points[0] if visual.focal_points else "")
    return VisualFacts(
        primary_subject=sanitize_token(subject),
        detected_objects=_clean_list(visual.detected_objects),
        detected_text=_clean_list(visual.detected_text),
        primary_colors=_clean_list(brand.primary_colors or palette.dominant),
        mood=sanitize_token(brand.mood),
        tone=_clean_list(brand.tone),
        industry=sanitize_token(brand.industry),
        color_mood=sanitize_token(palette.mood or brand.mood),
        composition=sanitize_token(visual.composition),
        style_keywords=_clean_list(visual.style_keywords),
    )


class VisionAnalyzer:
    """Turns a brand image into a validated RawAnalysis."""

    def __init__(
        self,
        vision_model: VisionModel,
        prompt: str = SCORING_MATRIX_PROMPT,
        timeout: Optional[float] = config.VISION_MODEL_TIMEOUT,
    ):
        self.vision_model = vision_model
        self.prompt = prompt
        self.timeout = timeout

    async def analyze(self, image_url: str) -> RawAnalysis:
        """Run the scoring matrix over one image.

        Raises:
            AnalysisError: The call failed or timed out (reason "transport"),
                           or the answer did not validate (reason "validation")
        """
        logger.info("Analyzing image: %s", image_url)
        try:
            call = self.vision_model.analyze_image(image_url, self.prompt)
            if self.timeout:
                text = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                text = await call
        except asyncio.TimeoutError as e:
            raise AnalysisError(
                f"Vision model timed out after {self.timeout}s", reason="transport"
            ) from e
        except (TransportError, ValueError) as e:
            raise AnalysisError(f"Vision model unreachable: {e}", reason="transport") from e
        except ValidationError as e:
            raise AnalysisError(f"Vision model answer unusable: {e}", reason="validation") from e

        try:
            payload = parse_payload(text, VisionPayload)
        except ValidationError as e:
            logger.error("Vision payload rejected: %s", e)
            raise AnalysisError(f"Invalid analysis structure: {e}", reason="validation") from e

        analysis = RawAnalysis(
            image_url=image_url,
            physics=payload.physics_score,
            vibe=payload.vibe_score,
            logic=payload.logic_score,
            integrity=payload.integrity_score,
            quality=payload.quality_score,
            scoring_rationale=payload.rationale_text(),
            facts=facts_from_payload(payload),
        )
        logger.info(
            "Trinity scores: physics=%.1f vibe=%.1f logic=%.1f integrity=%.2f",
            analysis.physics, analysis.vibe, analysis.logic, analysis.integrity,
        )
        return analysis
