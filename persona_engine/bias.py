"""
Persona bias engine.

Pure functions that reinterpret raw Trinity scores through a Director:
multiply, clamp, route to a production engine. Running all four Directors
over the same analysis costs nothing and needs no new model call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from persona_engine.directors import (
    DIRECTOR_DOMINANCE,
    DirectorProfile,
    ProductionEngine,
    RiskLabel,
)

SCORE_MIN = 0.0
SCORE_MAX = 10.0

REASON_PERSONA = "persona preference"
REASON_SCORES = "score-based routing"

AXES = ("physics", "vibe", "logic")

# Axis -> Director that specializes in it
AXIS_SPECIALISTS = {
    "physics": "newtonian",
    "vibe": "visionary",
    "logic": "minimalist",
}


class TrinityScores(Protocol):
    physics: float
    vibe: float
    logic: float


@dataclass(frozen=True)
class BiasedScores:
    physics: float
    vibe: float
    logic: float


@dataclass(frozen=True)
class RoutingDecision:
    engine: ProductionEngine
    reason: str
    risk_label: RiskLabel


@dataclass(frozen=True)
class SelectionDelta:
    """Learning signal recorded when a user picks a Director."""

    director_id: str
    objective_winner: str
    director_dominance: str
    was_override: bool


def _clamp(value: float) -> float:
    return round(min(SCORE_MAX, max(SCORE_MIN, value)), 2)


def apply_bias(profile: DirectorProfile, raw: TrinityScores) -> BiasedScores:
    """Apply the Director's multipliers to the raw scores, clamped to [0, 10]."""
    return BiasedScores(
        physics=_clamp(raw.physics * profile.biases.physics),
        vibe=_clamp(raw.vibe * profile.biases.vibe),
        logic=_clamp(raw.logic * profile.biases.logic),
    )


def route(profile: DirectorProfile, biased: BiasedScores) -> RoutingDecision:
    """Pick the production engine for a Director.

    A concrete preferred engine always wins. Otherwise the larger of
    physics and vibe decides; a tie goes to the physics engine.
    """
    risk = profile.risk_profile.label
    if profile.preferred_engine != ProductionEngine.RANDOM:
        return RoutingDecision(profile.preferred_engine, REASON_PERSONA, risk)

    if biased.physics >= biased.vibe:
        return RoutingDecision(ProductionEngine.KLING, REASON_SCORES, risk)
    return RoutingDecision(ProductionEngine.LUMA, REASON_SCORES, risk)


def objective_winner(raw: TrinityScores) -> str:
    """Axis with the highest raw score. Ties favour physics, then vibe."""
    if raw.physics >= raw.vibe and raw.physics >= raw.logic:
        return "physics"
    if raw.vibe >= raw.logic:
        return "vibe"
    return "logic"


def recommend_director(raw: TrinityScores) -> str:
    """Director id whose specialty matches the image's strongest axis."""
    return AXIS_SPECIALISTS[objective_winner(raw)]


def selection_delta(raw: TrinityScores, director_id: str) -> SelectionDelta:
    """Compare the user's Director choice with what the scores suggest."""
    winner = objective_winner(raw)
    dominance = DIRECTOR_DOMINANCE.get(director_id, "physics")
    return SelectionDelta(
        director_id=director_id,
        objective_winner=winner,
        director_dominance=dominance,
        was_override=dominance != winner,
    )
