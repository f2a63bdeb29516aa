"""
Data model for the analysis-and-direction pipeline.

RawAnalysis is produced once per image by the Eye and never changes.
VideoScene is the only mutable record: the refinement state machine rewrites
its action token, full prompt, status and attempt counter in place.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from director_studio import config
from director_studio.style_presets import StylePreset
from director_studio.text_utils import build_full_prompt, sanitize_token
from persona_engine.bias import BiasedScores, RoutingDecision
from persona_engine.directors import RiskLabel


class SceneStatus(str, Enum):
    """Traffic-light approval status of a scene."""

    PENDING = "PENDING"
    GREEN = "GREEN"    # approved
    YELLOW = "YELLOW"  # tweak requested
    RED = "RED"        # full rejection


@dataclass(frozen=True)
class VisualFacts:
    primary_subject: str = ""
    detected_objects: tuple[str, ...] = ()
    detected_text: tuple[str, ...] = ()
    primary_colors: tuple[str, ...] = ()
    mood: str = ""
    tone: tuple[str, ...] = ()
    industry: str = ""
    color_mood: str = ""
    composition: str = ""
    style_keywords: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {k: list(v) if isinstance(v, tuple) else v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: dict) -> "VisualFacts":
        kwargs = {}
        for name in cls.__dataclass_fields__:
            if name not in data or data[name] is None:
                continue
            value = data[name]
            kwargs[name] = tuple(value) if isinstance(value, list) else value
        return cls(**kwargs)


@dataclass(frozen=True)
class RawAnalysis:
    """Persona-independent output of the Eye."""

    image_url: str
    physics: float
    vibe: float
    logic: float
    integrity: float
    facts: VisualFacts = field(default_factory=VisualFacts)
    quality: Optional[float] = None
    scoring_rationale: Optional[str] = None

    def __post_init__(self):
        for axis in ("physics", "vibe", "logic"):
            value = getattr(self, axis)
            if not 0 <= value <= 10:
                raise ValueError(f"{axis} score {value} outside [0, 10]")
        if not 0 <= self.integrity <= 1:
            raise ValueError(f"integrity score {self.integrity} outside [0, 1]")
        if self.quality is not None and not 0 <= self.quality <= 10:
            raise ValueError(f"quality score {self.quality} outside [0, 10]")

    def to_dict(self) -> dict:
        return {
            "image_url": self.image_url,
            "physics": self.physics,
            "vibe": self.vibe,
            "logic": self.logic,
            "integrity": self.integrity,
            "quality": self.quality,
            "scoring_rationale": self.scoring_rationale,
            "facts": self.facts.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RawAnalysis":
        return cls(
            image_url=data["image_url"],
            physics=data["physics"],
            vibe=data["vibe"],
            logic=data["logic"],
            integrity=data["integrity"],
            quality=data.get("quality"),
            scoring_rationale=data.get("scoring_rationale"),
            facts=VisualFacts.from_dict(data.get("facts") or {}),
        )


def clamp_duration(seconds) -> int:
    try:
        seconds = int(round(float(seconds)))
    except (TypeError, ValueError, OverflowError):
        return config.DEFAULT_SCENE_DURATION
    return max(config.MIN_SCENE_DURATION, min(config.MAX_SCENE_DURATION, seconds))


@dataclass
class VideoScene:
    sequence_index: int
    invariant_token: str
    action_token: str
    style_token: str
    full_prompt: str
    hidden_ref_url: Optional[str] = None
    duration: int = config.DEFAULT_SCENE_DURATION
    camera_movement: Optional[str] = None
    status: SceneStatus = SceneStatus.PENDING
    attempt_count: int = 0
    user_feedback: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        self.duration = clamp_duration(self.duration)
        self.status = SceneStatus(self.status)

    @classmethod
    def compose(
        cls,
        sequence_index: int,
        invariant: str,
        action: str,
        preset: StylePreset,
        duration=None,
        camera_movement: Optional[str] = None,
    ) -> "VideoScene":
        """Build a fresh PENDING scene with sanitized tokens and its full prompt."""
        invariant = sanitize_token(invariant)
        action = sanitize_token(action)
        return cls(
            sequence_index=sequence_index,
            invariant_token=invariant,
            action_token=action,
            style_token=sanitize_token(preset.prompt_layer),
            full_prompt=build_full_prompt(invariant, action, preset.prompt_layer),
            hidden_ref_url=preset.hidden_ref_url,
            duration=config.DEFAULT_SCENE_DURATION if duration is None else duration,
            camera_movement=sanitize_token(camera_movement) or None,
        )

    def rewrite_action(self, action: str) -> None:
        """Swap the action token and recompose the full prompt. The invariant never changes."""
        self.action_token = sanitize_token(action)
        self.full_prompt = build_full_prompt(
            self.invariant_token, self.action_token, self.style_token
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    def public_view(self) -> dict:
        """Scene as shown to the end user (no hidden reference asset)."""
        data = self.to_dict()
        data.pop("hidden_ref_url", None)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "VideoScene":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class Storyboard:
    job_id: str
    scenes: list[VideoScene]
    selected_style_id: str
    invariant_token: str
    used_fallback: bool = False

    def scene(self, scene_id: str) -> Optional[VideoScene]:
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None

    def to_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "selected_style_id": self.selected_style_id,
            "invariant_token": self.invariant_token,
            "used_fallback": self.used_fallback,
            "scenes": [s.to_dict() for s in self.scenes],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Storyboard":
        return cls(
            job_id=data["job_id"],
            selected_style_id=data["selected_style_id"],
            invariant_token=data["invariant_token"],
            used_fallback=data.get("used_fallback", False),
            scenes=[VideoScene.from_dict(s) for s in data["scenes"]],
        )


@dataclass(frozen=True)
class Commentary:
    """3-beat Director commentary."""

    vision: str
    safety: str
    magic: str

    def as_text(self) -> str:
        return f"👀 Vision: {self.vision}\n🛡️ Safety: {self.safety}\n✨ The Magic: {self.magic}"


@dataclass(frozen=True)
class DirectorPitch:
    director_id: str
    director_name: str
    commentary: Commentary
    biased_scores: BiasedScores
    routing: RoutingDecision
    used_fallback: bool = False

    @property
    def risk_level(self) -> RiskLabel:
        return self.routing.risk_label

    def to_dict(self) -> dict:
        return {
            "director_id": self.director_id,
            "director_name": self.director_name,
            "commentary": asdict(self.commentary),
            "biased_scores": asdict(self.biased_scores),
            "engine": self.routing.engine.value,
            "routing_reason": self.routing.reason,
            "risk_level": self.risk_level.value,
            "used_fallback": self.used_fallback,
        }


@dataclass(frozen=True)
class ProductionRequest:
    """Immutable hand-off of approved scenes to the renderer."""

    job_id: str
    selected_style_id: str
    scenes: tuple[VideoScene, ...]
    cost_estimate: int
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def snapshot(cls, storyboard: Storyboard, scenes: list[VideoScene]) -> "ProductionRequest":
        copies = tuple(replace(s) for s in scenes)
        return cls(
            job_id=storyboard.job_id,
            selected_style_id=storyboard.selected_style_id,
            scenes=copies,
            cost_estimate=len(copies),
        )

    def to_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "selected_style_id": self.selected_style_id,
            "scenes": [s.to_dict() for s in self.scenes],
            "cost_estimate": self.cost_estimate,
            "created_at": self.created_at.isoformat(),
        }
