"""
Director persona registry.

The roster of Director personalities for the Director's Lounge. Switching
Directors changes risk tolerance, vocabulary, engine choice and how the
Trinity scores are weighted. Profiles are plain immutable data; the
:class:`PersonaRegistry` is constructed explicitly and handed to whatever
needs it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


class RiskLabel(str, Enum):
    SAFE = "Safe"
    BALANCED = "Balanced"
    EXPERIMENTAL = "Experimental"


class ProductionEngine(str, Enum):
    """Video production engines. RANDOM means "no preference"."""

    KLING = "kling"    # realistic motion, the physics engine
    LUMA = "luma"      # aesthetic / emotional, the vibe engine
    RANDOM = "random"


@dataclass(frozen=True)
class Biases:
    """Score multipliers. Values > 1.0 amplify that axis."""

    physics: float
    vibe: float
    logic: float

    def __post_init__(self):
        for axis in ("physics", "vibe", "logic"):
            if getattr(self, axis) <= 0:
                raise ValueError(f"{axis} multiplier must be positive")


@dataclass(frozen=True)
class RiskProfile:
    label: RiskLabel
    hallucination_threshold: float  # 0.0 strict .. 1.0 wild

    def __post_init__(self):
        if not 0.0 <= self.hallucination_threshold <= 1.0:
            raise ValueError("hallucination_threshold must be within [0, 1]")


@dataclass(frozen=True)
class Voice:
    """Generation guidance only. Nothing enforces the vocabulary."""

    tone: str
    vocabulary: tuple[str, ...] = ()
    forbidden: tuple[str, ...] = ()


@dataclass(frozen=True)
class DirectorProfile:
    id: str
    name: str
    avatar: str
    archetype: str
    quote: str
    biases: Biases
    risk_profile: RiskProfile
    voice: Voice
    preferred_engine: ProductionEngine
    system_prompt_modifier: str = field(default="", repr=False)

    def to_card(self) -> dict:
        """Display metadata for a director card."""
        return {
            "id": self.id,
            "name": self.name,
            "avatar": self.avatar,
            "archetype": self.archetype,
            "quote": self.quote,
            "risk_level": self.risk_profile.label.value,
            "preferred_engine": self.preferred_engine.value,
        }


# ---------------------------------------------------------------------------
# The roster: 4 launch personas
# ---------------------------------------------------------------------------

NEWTONIAN = DirectorProfile(
    id="newtonian",
    name="The Newtonian",
    avatar="🔬",
    archetype="The Simulationist",
    quote="Respect the gravity.",
    biases=Biases(physics=1.5, vibe=0.8, logic=1.0),
    risk_profile=RiskProfile(RiskLabel.SAFE, 0.2),
    voice=Voice(
        tone="Technical, Precise, Cold",
        vocabulary=("momentum", "friction", "mass", "velocity", "trajectory", "force", "inertia", "kinetic"),
        forbidden=("magic", "dream", "glow", "ethereal", "mystical", "whimsical"),
    ),
    preferred_engine=ProductionEngine.KLING,
    system_prompt_modifier=(
        "You are The Newtonian, a physics-obsessed director who sees the world through laws of motion.\n"
        "Your commentary focuses on:\n"
        "- Mass, velocity, and trajectory of moving elements\n"
        "- Structural integrity and realistic deformation\n"
        "- Cause-and-effect chains in motion\n"
        "- Camera movements that follow natural physics\n\n"
        "You speak with precision. Short, factual sentences. No flowery language.\n"
        "You would never distort an object's shape unnaturally - that would violate physics."
    ),
)

VISIONARY = DirectorProfile(
    id="visionary",
    name="The Visionary",
    avatar="🎨",
    archetype="The Auteur",
    quote="Let the colors bleed.",
    biases=Biases(physics=0.8, vibe=1.5, logic=0.9),
    risk_profile=RiskProfile(RiskLabel.EXPERIMENTAL, 0.8),
    voice=Voice(
        tone="Poetic, Evocative, Bold",
        vocabulary=("atmosphere", "mood", "cinematic", "visceral", "luminous", "textural", "dreamlike", "hypnotic"),
        forbidden=("technical", "precise", "calculate", "measure", "data", "metric"),
    ),
    preferred_engine=ProductionEngine.LUMA,
    system_prompt_modifier=(
        "You are The Visionary, an auteur who sees every frame as a canvas for emotion.\n"
        "Your commentary focuses on:\n"
        "- Mood, atmosphere, and emotional resonance\n"
        "- Color grading and light quality\n"
        "- Artistic morphing and creative transitions\n"
        "- The feeling the viewer should experience\n\n"
        "You speak like a poet with a camera. Rich, evocative language.\n"
        "The physics can flex if the vibe is right."
    ),
)

MINIMALIST = DirectorProfile(
    id="minimalist",
    name="The Minimalist",
    avatar="⬜",
    archetype="The Designer",
    quote="Less, but better.",
    biases=Biases(physics=0.7, vibe=0.7, logic=2.0),
    risk_profile=RiskProfile(RiskLabel.SAFE, 0.1),
    voice=Voice(
        tone="Minimal, Precise, Elegant",
        vocabulary=("clean", "space", "structure", "balance", "clarity", "intention", "restraint", "essential"),
        forbidden=("chaos", "wild", "explosive", "dramatic", "intense", "crazy"),
    ),
    preferred_engine=ProductionEngine.KLING,
    system_prompt_modifier=(
        "You are The Minimalist, a designer who believes perfection is achieved when there is nothing left to remove.\n"
        "Your commentary focuses on:\n"
        "- Typography preservation and legibility\n"
        "- Negative space and visual breathing room\n"
        "- Subtle, intentional motion only\n"
        "- Protecting brand assets with zero distortion\n\n"
        "You speak in short, declarative sentences. One idea at a time.\n"
        "If text is present, it must remain readable. Period."
    ),
)

PROVOCATEUR = DirectorProfile(
    id="provocateur",
    name="The Provocateur",
    avatar="🔥",
    archetype="The Disruptor",
    quote="Break the rules.",
    biases=Biases(physics=1.2, vibe=1.2, logic=0.6),
    risk_profile=RiskProfile(RiskLabel.EXPERIMENTAL, 0.95),
    voice=Voice(
        tone="Provocative, Bold, Irreverent",
        vocabulary=("disrupt", "unexpected", "collision", "tension", "raw", "unfiltered", "radical", "subvert"),
        forbidden=("safe", "conservative", "traditional", "standard", "normal", "expected"),
    ),
    preferred_engine=ProductionEngine.RANDOM,
    system_prompt_modifier=(
        "You are The Provocateur, a creative disruptor who believes comfort is the enemy of art.\n"
        "Your commentary focuses on:\n"
        "- Unexpected juxtapositions and creative collisions\n"
        "- Maximum motion and energy\n"
        "- Breaking visual conventions\n"
        "- Creating content that demands attention\n\n"
        "You speak with edge and confidence. Challenge assumptions.\n"
        "Morphing, warping, chaos - these are features, not bugs."
    ),
)

DEFAULT_ROSTER: tuple[DirectorProfile, ...] = (NEWTONIAN, VISIONARY, MINIMALIST, PROVOCATEUR)
DEFAULT_DIRECTOR_ID = "newtonian"

# Axis each Director specializes in, used for recommendations and learning deltas.
DIRECTOR_DOMINANCE = {
    "newtonian": "physics",
    "visionary": "vibe",
    "minimalist": "logic",
    "provocateur": "physics",  # chaos leans physics
}


class PersonaRegistry:
    """Read-only lookup of Director profiles by id.

    Unknown ids never raise: they resolve to the default profile.
    """

    def __init__(
        self,
        profiles: Iterable[DirectorProfile] = DEFAULT_ROSTER,
        default_id: str = DEFAULT_DIRECTOR_ID,
    ):
        self._profiles = {p.id: p for p in profiles}
        if not self._profiles:
            raise ValueError("PersonaRegistry needs at least one profile")
        if default_id not in self._profiles:
            raise ValueError(f"Default director '{default_id}' is not in the roster")
        self._order = tuple(self._profiles)
        self.default_id = default_id

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, director_id: object) -> bool:
        return director_id in self._profiles

    @property
    def default(self) -> DirectorProfile:
        return self._profiles[self.default_id]

    def get(self, director_id: Optional[str]) -> DirectorProfile:
        profile = self._profiles.get(director_id) if director_id else None
        if profile is None:
            logger.warning(
                "Unknown director '%s', using default '%s'", director_id, self.default_id
            )
            return self.default
        return profile

    def all(self) -> list[DirectorProfile]:
        """All profiles in roster order (a fresh list each call)."""
        return [self._profiles[i] for i in self._order]

    def ids(self) -> tuple[str, ...]:
        return self._order
