"""Pydantic contracts for JSON returned by the vision and text models.

Every model answer goes through ``parse_payload`` before any pipeline logic
touches it; anything that does not fit raises our ``ValidationError``.
"""

from __future__ import annotations

from typing import Optional, Type, TypeVar, Union

import pydantic
from pydantic import BaseModel, Field, field_validator

from director_studio.errors import ValidationError
from director_studio.text_utils import parse_json_object

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def _as_list(value):
    """Models sometimes answer a single string where a list was asked for."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return value


# ═══════════════════════════════════════════════════════════════
# VISION (the Eye)
# ═══════════════════════════════════════════════════════════════


class BrandAttributes(BaseModel):
    primary_colors: list[str] = Field(default_factory=list)
    typography_style: Optional[str] = None
    mood: Optional[str] = None
    tone: list[str] = Field(default_factory=list, description="2-4 tone adjectives")
    industry: Optional[str] = None

    @field_validator("primary_colors", "tone", mode="before")
    @classmethod
    def coerce_lists(cls, value):
        return _as_list(value)


class VisualElements(BaseModel):
    primary_subject: Optional[str] = None
    composition: Optional[str] = None
    focal_points: list[str] = Field(default_factory=list)
    style_keywords: list[str] = Field(default_factory=list)
    detected_objects: list[str] = Field(default_factory=list)
    detected_text: list[str] = Field(default_factory=list)

    @field_validator(
        "focal_points", "style_keywords", "detected_objects", "detected_text", mode="before"
    )
    @classmethod
    def coerce_lists(cls, value):
        return _as_list(value)


class ColorPalette(BaseModel):
    dominant: list[str] = Field(default_factory=list)
    mood: Optional[str] = None

    @field_validator("dominant", mode="before")
    @classmethod
    def coerce_lists(cls, value):
        return _as_list(value)


class VisionPayload(BaseModel):
    brand_attributes: BrandAttributes = Field(default_factory=BrandAttributes)
    visual_elements: VisualElements = Field(default_factory=VisualElements)
    color_palette: ColorPalette = Field(default_factory=ColorPalette)
    physics_score: float = Field(ge=0, le=10)
    vibe_score: float = Field(ge=0, le=10)
    logic_score: float = Field(ge=0, le=10)
    integrity_score: float = Field(ge=0, le=1)
    quality_score: Optional[float] = Field(default=None, ge=0, le=10)
    scoring_rationale: Union[dict[str, str], str, None] = None

    def rationale_text(self) -> Optional[str]:
        if not self.scoring_rationale:
            return None
        if isinstance(self.scoring_rationale, str):
            return self.scoring_rationale
        return "; ".join(f"{k}: {v}" for k, v in self.scoring_rationale.items())


# ═══════════════════════════════════════════════════════════════
# STORYBOARD (the Voice)
# ═══════════════════════════════════════════════════════════════


class ScenePayload(BaseModel):
    action_token: Optional[str] = None
    duration: Optional[float] = None
    camera_movement: Optional[str] = None
    sequence_index: Optional[int] = None


class StoryboardPayload(BaseModel):
    selected_style_id: Optional[str] = None
    invariant_token: Optional[str] = None
    scenes: list[ScenePayload] = Field(min_length=1)
    reasoning: Optional[str] = None


class RefinementPayload(BaseModel):
    new_action_token: str = Field(min_length=1)
    changes_made: Optional[str] = None


def parse_payload(text: str, model: Type[PayloadT]) -> PayloadT:
    """Extract the JSON object from ``text`` and validate it against ``model``.

    Raises:
        ValidationError: No JSON object, or it does not fit the schema
    """
    data = parse_json_object(text)
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"{model.__name__} failed validation: {e}") from e
