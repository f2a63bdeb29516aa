"""Configuration constants and environment variable loading for the director studio."""

import os
from dotenv import load_dotenv

load_dotenv()

# ==================== API KEYS ====================
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")

# ==================== MODELS ====================
TEXT_MODEL = os.getenv("DIRECTOR_TEXT_MODEL", "claude-sonnet-4-5-20250929")
VISION_MODEL = os.getenv("DIRECTOR_VISION_MODEL", "gemini-2.5-flash")

# ==================== TRANSPORT ====================
TEXT_MODEL_TIMEOUT = float(os.getenv("TEXT_MODEL_TIMEOUT", "60"))
VISION_MODEL_TIMEOUT = float(os.getenv("VISION_MODEL_TIMEOUT", "60"))
MAX_TRANSPORT_RETRIES = int(os.getenv("MAX_TRANSPORT_RETRIES", "3"))
PITCH_TIMEOUT = float(os.getenv("PITCH_TIMEOUT", "45"))

# ==================== REFINEMENT ====================
MAX_REFINE_ATTEMPTS = int(os.getenv("MAX_REFINE_ATTEMPTS", "5"))  # 0 disables the cap

# ==================== TOKENS ====================
MAX_PROMPT_LENGTH = 500
MAX_FULL_PROMPT_LENGTH = MAX_PROMPT_LENGTH * 3
MAX_FEEDBACK_LENGTH = 500
FACTS_PAYLOAD_LIMIT = 2000

# ==================== STORYBOARD ====================
DEFAULT_SCENE_COUNT = 3
DEFAULT_SCENE_DURATION = 5
MIN_SCENE_DURATION = 1
MAX_SCENE_DURATION = 60

ALTERNATE_ANGLE_SUFFIX = " - alternate angle"
FINAL_REVEAL_ACTION = "final reveal shot"
REIMAGINED_SUFFIX = " - reimagined"
DEFAULT_INVARIANT_TOKEN = "product hero shot"

FALLBACK_ACTIONS = (
    "slow reveal from shadow into light",
    "gentle 360 degree orbit rotation",
    "dramatic pull back to wide shot",
)

# ==================== TEMPERATURES ====================
STORYBOARD_TEMPERATURE = 0.7
REJECT_TEMPERATURE = 0.9
TWEAK_TEMPERATURE = 0.5
PITCH_TEMPERATURE = 0.8

STORYBOARD_MAX_TOKENS = 1500
REFINE_MAX_TOKENS = 500
PITCH_MAX_TOKENS = 400
