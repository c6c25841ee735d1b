# Procedural video engine: our algorithms and data only, no external "model"

from .errors import (
    EncoderRuntimeError,
    EnvironmentUnsupportedError,
    GenerationCancelledError,
    GenerationError,
    PreconditionError,
)
from .flow_field import FlowField, Particle, build_flow_field
from .generator import FrameScheduler, ProceduralVideoGenerator
from .profiles import build_profile, load_profile
from .renderer import render_frame
from .schema import (
    GenerationResult,
    GenerationSettings,
    GenerationStatus,
    MotionProfile,
    Palette,
    SceneProfile,
    VideoStyle,
)
from .surface import DrawingSurface

__all__ = [
    "EncoderRuntimeError",
    "EnvironmentUnsupportedError",
    "GenerationCancelledError",
    "GenerationError",
    "PreconditionError",
    "FlowField",
    "Particle",
    "build_flow_field",
    "FrameScheduler",
    "ProceduralVideoGenerator",
    "build_profile",
    "load_profile",
    "render_frame",
    "GenerationResult",
    "GenerationSettings",
    "GenerationStatus",
    "MotionProfile",
    "Palette",
    "SceneProfile",
    "VideoStyle",
    "DrawingSurface",
]
