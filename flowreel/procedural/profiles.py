"""
Prompt + style → SceneProfile using only our keyword tables and palettes.
No neural network, no external model. The generator itself only consumes the finished profile;
this builder exists so the CLI and pipeline can go from text to video in one call.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from .data.keywords import (
    DEFAULT_MOTION,
    DEFAULT_PALETTE,
    KEYWORD_TO_DENSITY,
    KEYWORD_TO_LIGHTING,
    KEYWORD_TO_MOOD,
    KEYWORD_TO_MOTION,
    KEYWORD_TO_PALETTE,
)
from .data.palettes import PALETTES
from .schema import MotionProfile, Palette, SceneProfile, VideoStyle

# style → (density, amplitude, frequency, turbulence, drift, lighting, texture)
STYLE_PRESETS: dict[VideoStyle, tuple[float, float, float, float, float, str, str]] = {
    VideoStyle.CINEMATIC: (0.55, 0.55, 0.45, 0.3, 0.25, "volumetric", "bloom"),
    VideoStyle.CYBERPUNK: (0.7, 0.7, 0.8, 0.75, 0.4, "neon glow", "glitch"),
    VideoStyle.DREAMSCAPE: (0.5, 0.8, 0.35, 0.4, 0.5, "ethereal", "soft"),
    VideoStyle.DOCUMENTARY: (0.45, 0.35, 0.3, 0.15, 0.15, "daylight", "grain"),
    VideoStyle.SKETCH: (0.3, 0.25, 0.25, 0.1, 0.1, "flat", "pencil"),
}

# motion curve → multipliers on (amplitude, frequency, turbulence)
MOTION_CURVES: dict[str, tuple[float, float, float]] = {
    "slow": (0.8, 0.6, 0.6),
    "wave": (1.2, 0.9, 0.8),
    "flow": (1.0, 1.0, 1.0),
    "fast": (1.1, 1.6, 1.4),
    "pulse": (0.9, 1.4, 1.2),
}

STYLE_DEFAULT_PALETTE: dict[VideoStyle, str] = {
    VideoStyle.CINEMATIC: "warm_sunset",
    VideoStyle.CYBERPUNK: "neon",
    VideoStyle.DREAMSCAPE: "dreamy",
    VideoStyle.DOCUMENTARY: "forest",
    VideoStyle.SKETCH: "mono",
}


def _first_hint(words: list[str], table: dict[str, Any]) -> Any | None:
    for w in words:
        if w in table:
            return table[w]
    return None


def _theme_from_prompt(prompt: str, max_words: int = 6) -> str:
    words = prompt.split()
    if not words:
        return "Untitled scene"
    theme = " ".join(words[:max_words]).rstrip(".,;:!?")
    return theme[0].upper() + theme[1:]


def build_profile(prompt: str, style: VideoStyle | str = VideoStyle.CINEMATIC) -> SceneProfile:
    """
    Turn a prompt into a scene profile. The style sets the base motion and lighting; the first
    matching keyword of each kind (in prompt order) picks palette, motion curve, density and mood.
    """
    style = VideoStyle(style)
    text = (prompt or "").strip()
    words = re.findall(r"[a-z]+", text.lower())

    density, amplitude, frequency, turbulence, drift, lighting, texture = STYLE_PRESETS[style]
    curve = _first_hint(words, KEYWORD_TO_MOTION) or DEFAULT_MOTION
    amp_k, freq_k, turb_k = MOTION_CURVES.get(curve, MOTION_CURVES[DEFAULT_MOTION])

    palette_name = (
        _first_hint(words, KEYWORD_TO_PALETTE)
        or STYLE_DEFAULT_PALETTE.get(style)
        or DEFAULT_PALETTE
    )
    background, accents = PALETTES.get(palette_name, PALETTES[DEFAULT_PALETTE])

    hinted_density = _first_hint(words, KEYWORD_TO_DENSITY)
    if hinted_density is not None:
        density = hinted_density

    return SceneProfile(
        theme=_theme_from_prompt(text),
        mood=_first_hint(words, KEYWORD_TO_MOOD) or "contemplative",
        lighting=_first_hint(words, KEYWORD_TO_LIGHTING) or lighting,
        texture=texture,
        density=max(0.0, min(1.0, float(density))),
        motion=MotionProfile(
            curve=curve,
            amplitude=round(amplitude * amp_k, 4),
            frequency=round(frequency * freq_k, 4),
            turbulence=round(turbulence * turb_k, 4),
            drift=drift,
        ),
        palette=Palette(background=background, accents=accents),
    )


def load_profile(path: Path) -> SceneProfile:
    """Load a hand-authored profile from YAML (or JSON, which YAML accepts)."""
    import yaml

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile file {path} must contain a mapping")
    profile = SceneProfile.from_dict(data)
    profile.validate()
    return profile
