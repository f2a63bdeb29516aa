"""
Scene refinement state machine (the traffic light).

    PENDING --approve--> GREEN
    any     --reject---> RED    --new action--> PENDING
    any     --tweak----> YELLOW --revised action--> PENDING

Only the action token (and the full prompt composed from it) ever changes;
the invariant token is fixed at storyboard creation. Generator failures
never surface: RED falls back to a reimagined suffix, YELLOW keeps the
current action.
"""

import asyncio
import logging
from typing import Iterable, Optional

from director_studio import config
from director_studio.errors import NotFoundError, RefinementLimitError, ValidationError
from director_studio.fallback import fallback_action
from director_studio.models import ProductionRequest, SceneStatus, Storyboard, VideoScene
from director_studio.text_utils import sanitize_token
from director_studio.voice import DirectorVoice

logger = logging.getLogger(__name__)


def validate_feedback(feedback: Optional[str]) -> str:
    """Sanitized tweak feedback.

    Raises:
        ValidationError: Feedback is empty or longer than MAX_FEEDBACK_LENGTH
    """
    cleaned = sanitize_token(feedback, max_length=len(feedback or ""))
    if not cleaned:
        raise ValidationError("Feedback is required for a tweak")
    if len(cleaned) > config.MAX_FEEDBACK_LENGTH:
        raise ValidationError(
            f"Feedback is {len(cleaned)} characters, max is {config.MAX_FEEDBACK_LENGTH}"
        )
    return cleaned


class StoryboardSession:
    """Owns one storyboard and serializes refinements per scene."""

    def __init__(
        self,
        storyboard: Storyboard,
        voice: DirectorVoice,
        max_attempts: int = config.MAX_REFINE_ATTEMPTS,
    ):
        self.storyboard = storyboard
        self.voice = voice
        self.max_attempts = max_attempts
        self._locks: dict[str, asyncio.Lock] = {}

    def get_scene(self, scene_id: str) -> VideoScene:
        scene = self.storyboard.scene(scene_id)
        if scene is None:
            raise NotFoundError(f"Scene {scene_id} not found in job {self.storyboard.job_id}")
        return scene

    def _lock(self, scene_id: str) -> asyncio.Lock:
        lock = self._locks.get(scene_id)
        if lock is None:
            lock = self._locks[scene_id] = asyncio.Lock()
        return lock

    def _check_attempts(self, scene: VideoScene):
        if self.max_attempts > 0 and scene.attempt_count >= self.max_attempts:
            raise RefinementLimitError(
                f"Scene {scene.id} reached {self.max_attempts} refinement attempts"
            )

    async def approve(self, scene_id: str) -> VideoScene:
        """GREEN light. No generation call; approving twice is a no-op."""
        scene = self.get_scene(scene_id)
        async with self._lock(scene_id):
            scene.status = SceneStatus.GREEN
        logger.info("Scene %d approved", scene.sequence_index)
        return scene

    async def reject(self, scene_id: str) -> VideoScene:
        """RED light: replace the action with something completely new."""
        scene = self.get_scene(scene_id)
        async with self._lock(scene_id):
            self._check_attempts(scene)
            scene.status = SceneStatus.RED
            scene.user_feedback = None
            new_action = await self._refine(scene, SceneStatus.RED)
            if new_action == scene.action_token:
                new_action = fallback_action(scene.action_token, SceneStatus.RED)
            self._apply(scene, new_action)
        return scene

    async def tweak(self, scene_id: str, feedback: str) -> VideoScene:
        """YELLOW light: revise the action according to ``feedback``."""
        scene = self.get_scene(scene_id)
        cleaned = validate_feedback(feedback)
        async with self._lock(scene_id):
            self._check_attempts(scene)
            scene.status = SceneStatus.YELLOW
            scene.user_feedback = cleaned
            new_action = await self._refine(scene, SceneStatus.YELLOW, cleaned)
            self._apply(scene, new_action)
        return scene

    async def _refine(
        self, scene: VideoScene, mode: SceneStatus, feedback: Optional[str] = None
    ) -> str:
        try:
            new_action = await self.voice.refine_action(scene, mode, feedback)
        except Exception as e:
            logger.warning(
                "Refinement of scene %d failed, using fallback: %s", scene.sequence_index, e
            )
            return fallback_action(scene.action_token, mode)
        return new_action or fallback_action(scene.action_token, mode)

    @staticmethod
    def _apply(scene: VideoScene, new_action: str):
        scene.rewrite_action(new_action)
        scene.attempt_count += 1
        scene.status = SceneStatus.PENDING
        logger.info(
            "Scene %d refined (attempt %d): %s",
            scene.sequence_index, scene.attempt_count, scene.action_token[:80],
        )

    def submit_for_production(self, scene_ids: Iterable[str]) -> ProductionRequest:
        """Freeze the approved scenes into a production request.

        Raises:
            ValidationError: No ids given, or a scene is not GREEN
            NotFoundError: An id does not belong to this storyboard
        """
        ids = list(dict.fromkeys(scene_ids))
        if not ids:
            raise ValidationError("At least one approved scene is required")

        scenes = [self.get_scene(scene_id) for scene_id in ids]
        pending = [s.sequence_index for s in scenes if s.status != SceneStatus.GREEN]
        if pending:
            raise ValidationError(f"Scenes not approved: {pending}")

        scenes.sort(key=lambda s: s.sequence_index)
        request = ProductionRequest.snapshot(self.storyboard, scenes)
        logger.info(
            "Production request for job %s: %d scenes, %d credits",
            request.job_id, len(request.scenes), request.cost_estimate,
        )
        return request
