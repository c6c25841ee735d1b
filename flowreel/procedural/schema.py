"""
Generation schema: settings, scene profile, status and result.
Settings and profiles are immutable for the lifetime of one generation.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from .errors import PreconditionError
from .surface import parse_color


class VideoStyle(str, Enum):
    """Render style chosen alongside the prompt."""

    CINEMATIC = "cinematic"
    CYBERPUNK = "cyberpunk"
    DREAMSCAPE = "dreamscape"
    DOCUMENTARY = "documentary"
    SKETCH = "sketch"


# (label, description) per style
STYLE_OPTIONS: dict[VideoStyle, tuple[str, str]] = {
    VideoStyle.CINEMATIC: ("Cinematic", "Balanced motion, volumetric lighting and lens bloom."),
    VideoStyle.CYBERPUNK: ("Cyberpunk", "Aggressive parallax, neon accents, high turbulence."),
    VideoStyle.DREAMSCAPE: ("Dreamscape", "Fluid organic morphing with surreal gradients."),
    VideoStyle.DOCUMENTARY: ("Documentary", "Grounded pacing, observational light sweeps."),
    VideoStyle.SKETCH: ("Concept Sketch", "Minimalist motion with illustrative shading."),
}

# label → (width, height)
RESOLUTION_OPTIONS: dict[str, tuple[int, int]] = {
    "512 x 512": (512, 512),
    "720p Square": (720, 720),
    "1080 x 608": (1080, 608),
}

MIN_DURATION_SECONDS = 3.0
MAX_DURATION_SECONDS = 12.0
DURATION_STEP_SECONDS = 0.5


def is_recommended_duration(seconds: float) -> bool:
    """True when `seconds` lies in the usual range and on the half-second grid."""
    if not MIN_DURATION_SECONDS <= seconds <= MAX_DURATION_SECONDS:
        return False
    steps = (seconds - MIN_DURATION_SECONDS) / DURATION_STEP_SECONDS
    return math.isclose(steps, round(steps), abs_tol=1e-9)


class GenerationStatus(str, Enum):
    IDLE = "idle"
    RENDERING = "rendering"
    ENCODING = "encoding"
    COMPLETE = "complete"
    ERROR = "error"


STATUS_LABELS: dict[GenerationStatus, str] = {
    GenerationStatus.IDLE: "Ready for prompt",
    GenerationStatus.RENDERING: "Rendering particle field",
    GenerationStatus.ENCODING: "Encoding timeline",
    GenerationStatus.COMPLETE: "Sequence ready",
    GenerationStatus.ERROR: "Generation failed",
}


@dataclass(frozen=True)
class GenerationSettings:
    width: int
    height: int
    fps: int
    duration: float  # seconds
    seed: int = 0
    style: VideoStyle = VideoStyle.CINEMATIC

    @property
    def total_frames(self) -> int:
        return int(math.floor(self.duration * self.fps))

    def validate(self) -> None:
        """Raise PreconditionError if this run could not produce a single frame."""
        if int(self.width) <= 0 or int(self.height) <= 0:
            raise PreconditionError(
                f"Resolution must be positive, got {self.width}x{self.height}", field="width"
            )
        if int(self.fps) <= 0:
            raise PreconditionError(f"fps must be positive, got {self.fps}", field="fps")
        if not math.isfinite(self.duration):
            raise PreconditionError(f"duration must be finite, got {self.duration}", field="duration")
        if not self.duration > 0:
            raise PreconditionError(f"duration must be positive, got {self.duration}", field="duration")
        if self.total_frames < 1:
            raise PreconditionError(
                f"duration {self.duration}s at {self.fps} fps yields no frames", field="duration"
            )

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["style"] = VideoStyle(self.style).value
        return d


@dataclass(frozen=True)
class MotionProfile:
    curve: str = "flow"
    amplitude: float = 0.5
    frequency: float = 0.5
    turbulence: float = 0.3
    drift: float = 0.2


@dataclass(frozen=True)
class Palette:
    background: tuple[str, ...]
    accents: tuple[str, ...]


@dataclass(frozen=True)
class SceneProfile:
    """Externally authored look of a generation: mood, motion and palette."""

    theme: str
    mood: str
    lighting: str
    texture: str
    density: float
    motion: MotionProfile
    palette: Palette

    def validate(self) -> None:
        if not 0.0 <= self.density <= 1.0:
            raise PreconditionError(f"density must be within [0, 1], got {self.density}", field="density")
        if not self.palette.background:
            raise PreconditionError("palette.background needs at least one color", field="palette.background")
        if not self.palette.accents:
            raise PreconditionError("palette.accents needs at least one color", field="palette.accents")
        for name in ("amplitude", "frequency", "turbulence", "drift"):
            if getattr(self.motion, name) < 0:
                raise PreconditionError(f"motion.{name} must be >= 0", field=f"motion.{name}")
        for color in (*self.palette.background, *self.palette.accents):
            try:
                parse_color(color)
            except ValueError as e:
                raise PreconditionError(str(e), field="palette") from e

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["palette"] = {
            "background": list(self.palette.background),
            "accents": list(self.palette.accents),
        }
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "SceneProfile":
        """Build from a YAML/JSON mapping (e.g. a --profile file)."""
        motion = d.get("motion") or {}
        palette = d.get("palette") or {}
        motion_fields = {f for f in MotionProfile.__dataclass_fields__}
        return cls(
            theme=str(d.get("theme", "")),
            mood=str(d.get("mood", "")),
            lighting=str(d.get("lighting", "")),
            texture=str(d.get("texture", "")),
            density=float(d.get("density", 0.5)),
            motion=MotionProfile(**{k: v for k, v in motion.items() if k in motion_fields}),
            palette=Palette(
                background=tuple(palette.get("background") or ()),
                accents=tuple(palette.get("accents") or ()),
            ),
        )


@dataclass(frozen=True)
class GenerationResult:
    """Encoded artifact handed to the caller. The handle stays revocable by the generator."""

    resource_handle: str
    artifact_bytes: bytes = field(repr=False)
    mime_type: str = "video/webm"
