"""
Persona engine: the Director roster and the pure bias/routing layer.

Usage:
    from persona_engine import PersonaRegistry, apply_bias, route

    registry = PersonaRegistry()
    director = registry.get("visionary")
    biased = apply_bias(director, raw_analysis)
    decision = route(director, biased)
"""

from .bias import (
    BiasedScores,
    RoutingDecision,
    SelectionDelta,
    apply_bias,
    objective_winner,
    recommend_director,
    route,
    selection_delta,
)
from .directors import (
    DEFAULT_DIRECTOR_ID,
    DEFAULT_ROSTER,
    Biases,
    DirectorProfile,
    PersonaRegistry,
    ProductionEngine,
    RiskLabel,
    RiskProfile,
    Voice,
)

__all__ = [
    "BiasedScores",
    "Biases",
    "DEFAULT_DIRECTOR_ID",
    "DEFAULT_ROSTER",
    "DirectorProfile",
    "PersonaRegistry",
    "ProductionEngine",
    "RiskLabel",
    "RiskProfile",
    "RoutingDecision",
    "SelectionDelta",
    "Voice",
    "apply_bias",
    "objective_winner",
    "recommend_director",
    "route",
    "selection_delta",
]
