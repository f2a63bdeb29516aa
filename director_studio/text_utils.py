"""Token sanitization, prompt composition and JSON extraction for model output."""

import json
import re

from director_studio import config
from director_studio.errors import ValidationError

# C0 and C1 control characters other than tab, newline and carriage return
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def sanitize_token(text, max_length: int = config.MAX_PROMPT_LENGTH) -> str:
    """Make a token safe to persist and send to a renderer.

    Control characters are removed, whitespace runs (tabs and newlines too)
    collapse to one space, and the result is truncated to ``max_length``.
    Applying it twice gives the same string as applying it once.
    """
    if text is None:
        return ""
    cleaned = _CONTROL_CHARS.sub("", str(text))
    cleaned = " ".join(cleaned.split())
    return cleaned[:max_length].rstrip()


def build_full_prompt(invariant: str, action: str, style: str) -> str:
    """Compose ``invariant. action. style`` and sanitize it."""
    parts = []
    for part in (invariant, action, style):
        part = sanitize_token(part, config.MAX_FULL_PROMPT_LENGTH).rstrip(". ")
        if part:
            parts.append(part)
    return sanitize_token(". ".join(parts), config.MAX_FULL_PROMPT_LENGTH)


def parse_json_object(text: str) -> dict:
    """Robustly parse a JSON object out of a model response.

    Handles markdown fences, prose around the object and trailing commas.

    Raises:
        ValidationError: No JSON object could be recovered
    """
    if not text or not text.strip():
        raise ValidationError("Model response was empty")

    # Step 1: Remove markdown code blocks
    clean = text.replace("```json", "").replace("```", "").strip()

    # Step 2: Try direct parse
    try:
        return _require_object(json.loads(clean))
    except json.JSONDecodeError:
        pass

    # Step 3: Extract from the first { to the last }
    start_idx = clean.find("{")
    end_idx = clean.rfind("}")
    if start_idx != -1 and end_idx > start_idx:
        json_portion = clean[start_idx : end_idx + 1]
        try:
            return _require_object(json.loads(json_portion))
        except json.JSONDecodeError:
            pass

        # Step 4: Remove trailing commas before } or ]
        fixed = _TRAILING_COMMA.sub(r"\1", json_portion)
        try:
            return _require_object(json.loads(fixed))
        except json.JSONDecodeError:
            pass

    raise ValidationError(f"Could not parse JSON from model response: {text[:200]}")


def _require_object(value) -> dict:
    if not isinstance(value, dict):
        raise ValidationError(f"Expected a JSON object, got {type(value).__name__}")
    return value


def truncate_payload(text: str, limit: int = config.FACTS_PAYLOAD_LIMIT) -> str:
    """Cut an oversized prompt payload down to ``limit`` characters."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
