"""Tests for the pure bias and routing layer."""

from dataclasses import dataclass

import pytest

from persona_engine.bias import (
    REASON_PERSONA,
    REASON_SCORES,
    BiasedScores,
    apply_bias,
    objective_winner,
    recommend_director,
    route,
    selection_delta,
)
from persona_engine.directors import PersonaRegistry, ProductionEngine, RiskLabel


@dataclass(frozen=True)
class Scores:
    physics: float
    vibe: float
    logic: float


REGISTRY = PersonaRegistry()


class TestApplyBias:
    def test_newtonian_scenario(self):
        """physics 9 x 1.5 clamps to 10, vibe 4 x 0.8 = 3.2, logic unchanged."""
        biased = apply_bias(REGISTRY.get("newtonian"), Scores(9, 4, 6))
        assert biased == BiasedScores(physics=10.0, vibe=3.2, logic=6.0)

    def test_pure(self):
        profile = REGISTRY.get("visionary")
        raw = Scores(7.3, 5.1, 2.2)
        assert apply_bias(profile, raw) == apply_bias(profile, raw)

    @pytest.mark.parametrize("director_id", ["newtonian", "visionary", "minimalist", "provocateur"])
    @pytest.mark.parametrize("raw", [Scores(10, 10, 10), Scores(0, 0, 0), Scores(9.9, 0.1, 6.5)])
    def test_always_within_range(self, director_id, raw):
        biased = apply_bias(REGISTRY.get(director_id), raw)
        for value in (biased.physics, biased.vibe, biased.logic):
            assert 0.0 <= value <= 10.0

    def test_minimalist_doubles_logic(self):
        biased = apply_bias(REGISTRY.get("minimalist"), Scores(5, 5, 4))
        assert biased.logic == 8.0
        assert biased.physics == 3.5


class TestRoute:
    def test_newtonian_scenario_routes_to_kling(self):
        profile = REGISTRY.get("newtonian")
        decision = route(profile, apply_bias(profile, Scores(9, 4, 6)))
        assert decision.engine == ProductionEngine.KLING
        assert decision.reason == REASON_PERSONA
        assert decision.risk_label == RiskLabel.SAFE

    def test_preferred_engine_beats_scores(self):
        profile = REGISTRY.get("visionary")
        decision = route(profile, BiasedScores(physics=10, vibe=0, logic=0))
        assert decision.engine == ProductionEngine.LUMA
        assert decision.reason == REASON_PERSONA

    def test_no_preference_uses_scores(self):
        profile = REGISTRY.get("provocateur")
        assert route(profile, BiasedScores(8, 3, 5)).engine == ProductionEngine.KLING
        decision = route(profile, BiasedScores(3, 8, 5))
        assert decision.engine == ProductionEngine.LUMA
        assert decision.reason == REASON_SCORES

    def test_tie_goes_to_physics_engine(self):
        profile = REGISTRY.get("provocateur")
        decisions = {route(profile, BiasedScores(6, 6, 1)) for _ in range(5)}
        assert len(decisions) == 1
        assert decisions.pop().engine == ProductionEngine.KLING

    def test_logic_never_routes(self):
        profile = REGISTRY.get("provocateur")
        assert route(profile, BiasedScores(1, 2, 10)).engine == ProductionEngine.LUMA


class TestRecommendation:
    def test_strongest_axis_picks_specialist(self):
        assert recommend_director(Scores(8, 3, 2)) == "newtonian"
        assert recommend_director(Scores(3, 8, 2)) == "visionary"
        assert recommend_director(Scores(3, 2, 8)) == "minimalist"

    def test_ties_favour_physics_then_vibe(self):
        assert objective_winner(Scores(5, 5, 5)) == "physics"
        assert objective_winner(Scores(4, 6, 6)) == "vibe"

    def test_selection_delta_flags_override(self):
        delta = selection_delta(Scores(9, 2, 3), "visionary")
        assert delta.objective_winner == "physics"
        assert delta.director_dominance == "vibe"
        assert delta.was_override is True

    def test_selection_delta_agreeing_choice(self):
        delta = selection_delta(Scores(9, 2, 3), "provocateur")
        assert delta.director_dominance == "physics"
        assert delta.was_override is False
