"""
Storyboard builder.

Turns one Voice draft into exactly three VideoScenes bound to a shared
invariant token and a style preset. Storyboard creation never hard-fails:
any problem with the draft degrades to the deterministic fallback.
"""

import logging
import uuid
from typing import Optional, Sequence

from director_studio import config
from director_studio.errors import ValidationError
from director_studio.fallback import best_style_for, fallback_invariant, fallback_storyboard
from director_studio.models import RawAnalysis, Storyboard, VideoScene
from director_studio.schemas import ScenePayload
from director_studio.style_presets import STYLE_PRESETS, StylePreset, get_style_preset
from director_studio.text_utils import sanitize_token
from director_studio.voice import DirectorVoice

logger = logging.getLogger(__name__)


def _order_key(item: tuple[int, ScenePayload]):
    position, draft = item
    index = draft.sequence_index if draft.sequence_index is not None else position + 1
    return index, position


def normalize_scene_count(
    drafts: Sequence[ScenePayload], count: int = config.DEFAULT_SCENE_COUNT
) -> list[ScenePayload]:
    """Return exactly ``count`` scene drafts.

    Extra drafts are dropped after ordering by sequence index (position
    breaks ties and stands in for a missing index). Missing drafts are
    synthesized: first an alternate angle of the last real action, then the
    canonical final reveal shot.

    Raises:
        ValidationError: There is no usable draft to pad from
    """
    usable = [d for d in drafts if sanitize_token(d.action_token)]
    if not usable:
        raise ValidationError("Storyboard draft contained no usable scenes")

    ordered = [draft for _, draft in sorted(enumerate(usable), key=_order_key)]
    normalized = ordered[:count]

    if len(normalized) < count:
        last_action = sanitize_token(normalized[-1].action_token)
        normalized.append(
            ScenePayload(action_token=f"{last_action}{config.ALTERNATE_ANGLE_SUFFIX}")
        )
    while len(normalized) < count:
        normalized.append(ScenePayload(action_token=config.FINAL_REVEAL_ACTION))

    return normalized


class StoryboardBuilder:
    """Builds three-scene storyboards from a RawAnalysis."""

    def __init__(self, voice: DirectorVoice, scene_count: int = config.DEFAULT_SCENE_COUNT):
        self.voice = voice
        self.scene_count = scene_count

    async def build_storyboard(
        self,
        raw: RawAnalysis,
        available_presets: Optional[Sequence[StylePreset]] = None,
        director_id: Optional[str] = None,
        job_id: Optional[str] = None,
    ) -> Storyboard:
        """Draft, validate and assemble a storyboard.

        Never raises for generator trouble; the result's ``used_fallback``
        tells the caller whether the canonical storyboard was substituted.
        """
        presets = list(available_presets or STYLE_PRESETS)
        job_id = job_id or str(uuid.uuid4())

        try:
            draft = await self.voice.draft_storyboard(
                raw, presets, director_id=director_id, scene_count=self.scene_count
            )
            drafts = normalize_scene_count(draft.scenes, self.scene_count)
            style, invariant, scenes = self._assemble(raw, draft, drafts, presets)
        except Exception as e:
            logger.warning("Storyboard generation failed, using fallback: %s", e)
            return fallback_storyboard(raw, presets, job_id=job_id)

        logger.info("Storyboard %s ready: %d scenes, style %s", job_id, len(scenes), style.id)
        return Storyboard(
            job_id=job_id,
            scenes=scenes,
            selected_style_id=style.id,
            invariant_token=invariant,
        )

    @staticmethod
    def _assemble(raw, draft, drafts, presets):
        style = get_style_preset(draft.selected_style_id, presets)
        if style is None:
            style = best_style_for(raw, presets)
            logger.info(
                "Style '%s' not in catalogue, picked %s", draft.selected_style_id, style.id
            )

        invariant = sanitize_token(draft.invariant_token) or fallback_invariant(raw)
        scenes = [
            VideoScene.compose(
                index,
                invariant,
                scene.action_token,
                style,
                duration=scene.duration,
                camera_movement=scene.camera_movement,
            )
            for index, scene in enumerate(drafts, start=1)
        ]
        return style, invariant, scenes
