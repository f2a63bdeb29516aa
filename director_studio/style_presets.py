"""
Style preset catalogue.

Predefined visual styles for video generation. ``prompt_layer`` is appended
to every scene prompt; ``hidden_ref_url`` biases the renderer and is never
shown to the user. Callers may pass their own catalogue (e.g. loaded from
persisted configuration); the built-in list is the default.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

REF_BASE_URL = "https://s3.longevity-valley.com/styles"

CATEGORIES = ("luxury", "tech", "nature", "urban", "minimal", "dramatic")

# Industry keywords -> category that gets the bonus
INDUSTRY_CATEGORIES = (
    (("tech",), "tech"),
    (("luxury", "fashion"), "luxury"),
    (("nature", "organic"), "nature"),
)
INDUSTRY_MATCH_SCORE = 10
TONE_MATCH_SCORE = 5
COLOR_MOOD_MATCH_SCORE = 3


@dataclass(frozen=True)
class StylePreset:
    id: str
    name: str
    description: str
    category: str
    prompt_layer: str
    hidden_ref_url: str
    is_premium: bool = False

    @property
    def search_text(self) -> str:
        return f"{self.name} {self.description} {self.prompt_layer}".lower()

    def summary(self) -> str:
        """One catalogue line for the storyboard prompt."""
        return f"- {self.id}: {self.name} - {self.description}"


def _preset(id, name, description, category, prompt_layer, is_premium=False):
    return StylePreset(
        id=id,
        name=name,
        description=description,
        category=category,
        prompt_layer=prompt_layer,
        hidden_ref_url=f"{REF_BASE_URL}/ref_{id.lower()}.jpg",
        is_premium=is_premium,
    )


STYLE_PRESETS: tuple[StylePreset, ...] = (
    # Luxury
    _preset(
        "LUXURY_MINIMAL_V1", "Ethereal Luxury",
        "High-key, soft diffused lighting, spa-like atmosphere with clean aesthetics.",
        "luxury",
        "shot on Phantom Flex, soft diffused lighting, 8k resolution, slow motion, commercial aesthetic, "
        "clean white background, premium product photography",
    ),
    _preset(
        "LUXURY_GOLD_V1", "Golden Hour Opulence",
        "Warm golden tones, rich textures, high-end fashion photography feel.",
        "luxury",
        "golden hour lighting, warm amber tones, bokeh background, luxury fashion photography, "
        "shot on medium format, rich shadows, elegant composition",
        is_premium=True,
    ),
    # Tech
    _preset(
        "TECH_NOIR_V1", "Cyberpunk Tech",
        "Dark environment, neon rim lighting (blue/magenta), futuristic dystopian feel.",
        "tech",
        "neon rim lights, deep blacks, blue and magenta contrast, volumetric fog, cyberpunk aesthetic, "
        "futuristic, blade runner inspired",
    ),
    _preset(
        "TECH_CLEAN_V1", "Apple Minimal",
        "Clean, minimalist tech aesthetic. White/grey backgrounds, precise lighting.",
        "tech",
        "clean white background, precise studio lighting, minimalist composition, "
        "Apple product photography style, sharp focus, 8k, commercial",
    ),
    _preset(
        "TECH_HOLOGRAM_V1", "Holographic Future",
        "Iridescent, holographic materials, sci-fi interface elements.",
        "tech",
        "holographic materials, iridescent reflections, sci-fi aesthetic, floating UI elements, "
        "cyan and purple color scheme, volumetric lighting",
        is_premium=True,
    ),
    # Nature
    _preset(
        "NATURE_SERENE_V1", "Zen Garden",
        "Peaceful, natural lighting, organic textures, calming atmosphere.",
        "nature",
        "natural soft lighting, organic textures, zen garden aesthetic, peaceful atmosphere, earth tones, "
        "shallow depth of field, National Geographic style",
    ),
    _preset(
        "NATURE_DRAMATIC_V1", "Storm Chaser",
        "Dramatic skies, powerful natural forces, high contrast.",
        "nature",
        "dramatic storm clouds, moody lighting, high contrast, powerful atmosphere, epic scale, "
        "cinematic wide shot, nature documentary style",
        is_premium=True,
    ),
    # Urban
    _preset(
        "URBAN_STREET_V1", "Street Culture",
        "Raw urban energy, graffiti, street photography aesthetic.",
        "urban",
        "street photography, urban environment, raw authentic feel, graffiti backgrounds, natural lighting, "
        "documentary style, 35mm film grain",
    ),
    _preset(
        "URBAN_NIGHT_V1", "Neon Nights",
        "Night cityscape, neon signs, wet streets reflecting lights.",
        "urban",
        "night photography, neon signs, wet streets reflecting lights, urban nightlife, "
        "cinematic color grading, Tokyo aesthetic",
    ),
    # Minimal
    _preset(
        "MINIMAL_MONO_V1", "Monochrome",
        "Black and white, high contrast, architectural precision.",
        "minimal",
        "black and white photography, high contrast, architectural precision, minimalist composition, "
        "geometric shapes, fine art photography",
    ),
    _preset(
        "MINIMAL_PASTEL_V1", "Pastel Dreams",
        "Soft pastel colors, airy composition, dreamy aesthetic.",
        "minimal",
        "soft pastel colors, airy composition, dreamy aesthetic, light and shadow play, feminine elegance, "
        "editorial fashion photography",
    ),
    # Dramatic
    _preset(
        "DRAMATIC_CINEMA_V1", "Cinematic Epic",
        "Wide aspect ratio, dramatic lighting, movie poster quality.",
        "dramatic",
        "cinematic lighting, anamorphic lens flare, 2.39:1 aspect ratio, movie poster quality, "
        "dramatic shadows, epic scale, Hollywood blockbuster",
        is_premium=True,
    ),
    _preset(
        "DRAMATIC_NOIR_V1", "Film Noir",
        "Classic noir lighting, venetian blind shadows, mysterious mood.",
        "dramatic",
        "film noir lighting, venetian blind shadows, high contrast black and white, mysterious mood, "
        "1940s detective aesthetic, smoke and fog",
        is_premium=True,
    ),
)


def get_style_preset(
    preset_id: Optional[str], presets: Sequence[StylePreset] = STYLE_PRESETS
) -> Optional[StylePreset]:
    for preset in presets:
        if preset.id == preset_id:
            return preset
    return None


def presets_by_category(category: str) -> list[StylePreset]:
    return [p for p in STYLE_PRESETS if p.category == category]


def available_presets(include_premium: bool = True) -> list[StylePreset]:
    """Presets a user can pick from; free plans only see non-premium ones."""
    if include_premium:
        return list(STYLE_PRESETS)
    return [p for p in STYLE_PRESETS if not p.is_premium]


def score_preset(
    preset: StylePreset, tone: Iterable[str], industry: str, color_mood: str
) -> int:
    score = 0
    search_text = preset.search_text
    industry = (industry or "").lower()

    for keywords, category in INDUSTRY_CATEGORIES:
        if preset.category == category and any(k in industry for k in keywords):
            score += INDUSTRY_MATCH_SCORE

    for term in tone:
        if term and term.lower() in search_text:
            score += TONE_MATCH_SCORE

    if color_mood and color_mood.lower() in search_text:
        score += COLOR_MOOD_MATCH_SCORE

    return score


def select_best_style(
    tone: Iterable[str] = (),
    industry: str = "",
    color_mood: str = "",
    presets: Sequence[StylePreset] = STYLE_PRESETS,
) -> StylePreset:
    """Pick the preset that best matches the brand's tone, industry and colour mood.

    Highest score wins; ties keep catalogue order, so with no signal at all
    the first preset is returned. Never returns None.
    """
    presets = list(presets) or list(STYLE_PRESETS)
    tone = [t for t in tone or () if t]
    best = presets[0]
    best_score = score_preset(best, tone, industry, color_mood)
    for preset in presets[1:]:
        score = score_preset(preset, tone, industry, color_mood)
        if score > best_score:
            best, best_score = preset, score
    return best
