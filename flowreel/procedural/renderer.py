"""
Procedural frame renderer: flow field + frame index → pixels on the drawing surface.
Three passes composited in order: background gradient and wash, particles with glow, light sweep.
Pure function of its inputs; rendering the same frame index twice yields the same pixels.
"""
import math

from .flow_field import FlowField
from .schema import GenerationSettings, SceneProfile
from .surface import SCREEN, SOURCE_OVER, DrawingContext, DrawingSurface, parse_color, with_alpha

WASH_COLOR = "#ffffff10"
GLOW_ALPHA = 0x80 / 255.0
LIGHT_FADE = "#ffffff00"


def light_alpha(shimmer: float) -> float:
    """Inner light stop alpha: 150 ± 50 on the 0-255 scale, clamped to a valid channel."""
    return max(0, min(255, round(150 + shimmer * 50))) / 255.0


def _draw_background(ctx: DrawingContext, width: int, height: int, field: FlowField, progress: float) -> None:
    stops = field.gradient_stops
    span = max(1, len(stops) - 1)
    ctx.fill_linear_gradient(0, 0, width, height, [(i / span, color) for i, color in enumerate(stops)])

    ctx.global_alpha = 0.28 + math.sin(progress * math.pi * 2) * 0.12
    ctx.fill_color(WASH_COLOR)
    ctx.global_alpha = 1.0


def _render_particles(
    ctx: DrawingContext,
    settings: GenerationSettings,
    profile: SceneProfile,
    field: FlowField,
    frame_index: int,
    total_frames: int,
) -> None:
    time = frame_index / total_frames
    motion = profile.motion
    width, height = settings.width, settings.height
    speed = 1 + motion.frequency * 1.8
    turbulence = motion.turbulence * 2.4
    curve_strength = motion.amplitude * 0.45
    wobble = motion.turbulence * 0.12

    for p in field.particles:
        phase = (
            time * speed
            + p.depth * 0.5
            + p.noise * 1.2
            + math.sin(time * (2 + motion.frequency) + p.id) * turbulence * 0.2
        )
        offset_x = (
            math.sin(phase * math.pi * 2 * 0.5) * curve_strength
            + math.sin(phase * 4) * wobble
            + p.drift * 0.6
        )
        offset_y = (
            math.cos(phase * math.pi * 2 * 0.5) * curve_strength * 0.82
            + math.sin(phase * 5) * wobble
            + p.drift * 0.4
        )

        ctx.global_alpha = 0.25 + p.depth * 0.75
        ctx.fill_disc(
            (p.base_x + offset_x) * width,
            (p.base_y + offset_y) * height,
            p.radius * (0.5 + p.depth * 0.5),
            p.hue,
            glow_color=with_alpha(p.hue, GLOW_ALPHA),
            glow_blur=8 + p.depth * 18 + motion.turbulence * 8,
        )
    ctx.global_alpha = 1.0


def _render_light_pass(
    ctx: DrawingContext,
    settings: GenerationSettings,
    profile: SceneProfile,
    frame_index: int,
    total_frames: int,
) -> None:
    progress = frame_index / total_frames
    shimmer = math.sin(progress * math.pi * 2 * profile.motion.frequency)
    w, h = settings.width, settings.height
    r, g, b, _ = parse_color(profile.palette.accents[0])

    ctx.composite_operation = SCREEN
    ctx.global_alpha = 0.16 + profile.motion.amplitude * 0.22
    ctx.fill_radial_gradient(
        w * 0.5, h * 0.35, w * 0.08,
        w * 0.5, h * 0.5, w * 0.6,
        [(0.0, (r, g, b, light_alpha(shimmer))), (1.0, LIGHT_FADE)],
    )
    ctx.composite_operation = SOURCE_OVER
    ctx.global_alpha = 1.0


def render_frame(
    surface: DrawingSurface,
    settings: GenerationSettings,
    profile: SceneProfile,
    field: FlowField,
    frame_index: int,
    total_frames: int,
) -> None:
    """Paint frame `frame_index` of `total_frames` onto `surface` (in place)."""
    if settings.width <= 0 or settings.height <= 0:
        raise ValueError(f"Invalid surface dimensions {settings.width}x{settings.height}")
    ctx = surface.get_context()
    ctx.reset_state()
    # Translucent backgrounds must not blend over the previous frame
    ctx.clear()
    _draw_background(ctx, settings.width, settings.height, field, frame_index / total_frames)
    _render_particles(ctx, settings, profile, field, frame_index, total_frames)
    _render_light_pass(ctx, settings, profile, frame_index, total_frames)
