"""
Director studio: brand image -> Trinity scores -> Director pitches -> storyboard.

Usage:
    from clients import AnthropicClient, GeminiClient
    from director_studio import DirectorLounge, DirectorVoice, StoryboardBuilder, VisionAnalyzer

    voice = DirectorVoice(AnthropicClient())
    lounge = DirectorLounge(VisionAnalyzer(GeminiClient()), voice)
    raw, pitches = await lounge.consult(image_url)
    storyboard = await StoryboardBuilder(voice).build_storyboard(raw)
"""

from .errors import (
    AnalysisError,
    DirectorError,
    NotFoundError,
    RefinementLimitError,
    TransportError,
    ValidationError,
)
from .fallback import fallback_action, fallback_pitch, fallback_storyboard
from .lounge import DirectorLounge
from .models import (
    Commentary,
    DirectorPitch,
    ProductionRequest,
    RawAnalysis,
    SceneStatus,
    Storyboard,
    VideoScene,
    VisualFacts,
)
from .refinement import StoryboardSession
from .storyboard_builder import StoryboardBuilder, normalize_scene_count
from .style_presets import (
    STYLE_PRESETS,
    StylePreset,
    available_presets,
    get_style_preset,
    presets_by_category,
    select_best_style,
)
from .text_utils import build_full_prompt, sanitize_token
from .vision_analyzer import VisionAnalyzer
from .voice import DirectorVoice

__all__ = [
    "AnalysisError",
    "Commentary",
    "DirectorError",
    "DirectorLounge",
    "DirectorPitch",
    "DirectorVoice",
    "NotFoundError",
    "ProductionRequest",
    "RawAnalysis",
    "RefinementLimitError",
    "STYLE_PRESETS",
    "SceneStatus",
    "Storyboard",
    "StoryboardBuilder",
    "StoryboardSession",
    "StylePreset",
    "TransportError",
    "ValidationError",
    "VideoScene",
    "VisionAnalyzer",
    "VisualFacts",
    "available_presets",
    "build_full_prompt",
    "fallback_action",
    "fallback_pitch",
    "fallback_storyboard",
    "get_style_preset",
    "normalize_scene_count",
    "presets_by_category",
    "sanitize_token",
    "select_best_style",
]
