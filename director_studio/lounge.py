"""
The Director's Lounge: one analysis, every Director.

The Eye runs at most once per image for the lifetime of a lounge; all
Directors then pitch in parallel off the shared RawAnalysis. Each pitch is
bounded by its own timeout and degrades to a fallback pitch on its own, so
one slow Director never holds up or sinks the others.
"""

import asyncio
import logging
from typing import Optional, Sequence

from director_studio import config
from director_studio.fallback import fallback_pitch
from director_studio.models import DirectorPitch, RawAnalysis
from director_studio.vision_analyzer import VisionAnalyzer
from director_studio.voice import DirectorVoice
from persona_engine.bias import SelectionDelta, recommend_director, selection_delta

logger = logging.getLogger(__name__)


class DirectorLounge:
    def __init__(
        self,
        analyzer: VisionAnalyzer,
        voice: DirectorVoice,
        pitch_timeout: float = config.PITCH_TIMEOUT,
    ):
        self.analyzer = analyzer
        self.voice = voice
        self.registry = voice.registry
        self.pitch_timeout = pitch_timeout
        self._analyses: dict[str, RawAnalysis] = {}
        self._analysis_locks: dict[str, asyncio.Lock] = {}

    async def analyze(self, image_url: str) -> RawAnalysis:
        """Cached Eye call. Concurrent first calls for one URL share a single analysis.

        Raises:
            AnalysisError: Propagated from the analyzer (nothing is cached)
        """
        cached = self._analyses.get(image_url)
        if cached is not None:
            return cached

        lock = self._analysis_locks.setdefault(image_url, asyncio.Lock())
        async with lock:
            cached = self._analyses.get(image_url)
            if cached is None:
                cached = await self.analyzer.analyze(image_url)
                self._analyses[image_url] = cached
        return cached

    async def _pitch_one(self, raw: RawAnalysis, director_id: str) -> DirectorPitch:
        try:
            return await asyncio.wait_for(
                self.voice.pitch(raw, director_id), timeout=self.pitch_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Director %s timed out after %ss, using fallback", director_id, self.pitch_timeout
            )
            return fallback_pitch(self.registry.get(director_id), raw)

    async def pitch_all(
        self, raw: RawAnalysis, director_ids: Optional[Sequence[str]] = None
    ) -> list[DirectorPitch]:
        """Scatter one pitch per Director, gather them in roster order."""
        ids = list(director_ids) if director_ids else list(self.registry.ids())
        logger.info("Lounge: %d directors pitching", len(ids))
        return list(await asyncio.gather(*(self._pitch_one(raw, i) for i in ids)))

    async def consult(
        self, image_url: str, director_ids: Optional[Sequence[str]] = None
    ) -> tuple[RawAnalysis, list[DirectorPitch]]:
        """Analyze once, then hear every Director."""
        raw = await self.analyze(image_url)
        return raw, await self.pitch_all(raw, director_ids)

    def cards(self, raw: RawAnalysis) -> list[dict]:
        """Director cards with biased scores and routing. No model calls."""
        recommended = recommend_director(raw)
        cards = []
        for profile in self.registry.all():
            _, biased, routing = self.voice.frame(raw, profile.id)
            card = profile.to_card()
            card.update(
                biased_scores={"physics": biased.physics, "vibe": biased.vibe, "logic": biased.logic},
                engine=routing.engine.value,
                routing_reason=routing.reason,
                recommended=profile.id == recommended,
            )
            cards.append(card)
        return cards

    def choose(self, raw: RawAnalysis, director_id: str) -> SelectionDelta:
        """Record the user's Director pick as a learning signal."""
        delta = selection_delta(raw, self.registry.get(director_id).id)
        logger.info(
            "Director chosen: %s (objective winner %s, override=%s)",
            delta.director_id, delta.objective_winner, delta.was_override,
        )
        return delta
