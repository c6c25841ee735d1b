"""
Pipeline: one prompt → one video file. Builds a scene profile from the prompt (unless one is given),
runs the generator on a fresh event loop, writes the artifact bytes and an optional poster frame.
"""
import asyncio
import logging
from pathlib import Path
from typing import Any, Callable

from .config import get_output_dir, load_config, resolve_output_config
from .encoder import FORMAT_CANDIDATES
from .procedural.generator import ProceduralVideoGenerator
from .procedural.profiles import build_profile
from .procedural.schema import GenerationResult, GenerationSettings, SceneProfile, VideoStyle
from .procedural.surface import DrawingSurface
from .video_generator.base import VideoGenerator
from .workflow_utils import log_structured, setup_graceful_shutdown

logger = logging.getLogger(__name__)


def build_settings(
    config: dict[str, Any],
    *,
    duration_seconds: float | None = None,
    style: VideoStyle | str | None = None,
    seed: int | None = None,
    width: int | None = None,
    height: int | None = None,
    fps: int | None = None,
) -> GenerationSettings:
    """Explicit arguments win; otherwise output/generation config (quality preset applied)."""
    out = resolve_output_config(config)
    gen = config.get("generation", {})
    return GenerationSettings(
        width=int(width or out.get("width", 512)),
        height=int(height or out.get("height", 512)),
        fps=int(fps or out.get("fps", 24)),
        duration=float(duration_seconds if duration_seconds is not None else gen.get("duration", 4.0)),
        seed=int(seed if seed is not None else gen.get("seed", 0)),
        style=VideoStyle(style or gen.get("style", VideoStyle.CINEMATIC)),
    )


def generate_video(
    prompt: str,
    duration_seconds: float | None = None,
    *,
    style: VideoStyle | str | None = None,
    seed: int | None = None,
    output_path: Path | None = None,
    config: dict[str, Any] | None = None,
    profile: SceneProfile | None = None,
    width: int | None = None,
    height: int | None = None,
    fps: int | None = None,
    poster_path: Path | None = None,
    generator: VideoGenerator | None = None,
    listener: Callable[[str, Any], None] | None = None,
) -> Path:
    """
    Generate one clip from one prompt. Returns the path of the written file.
    The extension follows the negotiated container (.webm or .mp4) unless output_path has one.
    """
    if config is None:
        config = load_config()
    settings = build_settings(
        config, duration_seconds=duration_seconds, style=style, seed=seed,
        width=width, height=height, fps=fps,
    )
    if profile is None:
        profile = build_profile(prompt, settings.style)
    if generator is None:
        generator = ProceduralVideoGenerator(config)
    generator.attach_surface(DrawingSurface())
    unsubscribe = generator.subscribe(listener) if listener is not None else None

    try:
        result = asyncio.run(_run(generator, settings, profile))
    finally:
        if unsubscribe is not None:
            unsubscribe()

    if output_path is None:
        out_dir = get_output_dir(config)
        out_dir.mkdir(parents=True, exist_ok=True)
        output_path = out_dir / _next_filename(config, "flowreel", _extension_for(result.mime_type))
    output_path = Path(output_path)
    if output_path.suffix == "":
        output_path = output_path.with_suffix(_extension_for(result.mime_type))
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.artifact_bytes)

    poster = getattr(generator, "last_frame", None)
    if poster_path is not None:
        if poster is None:
            logger.warning("No poster frame available; skipping %s", poster_path)
        else:
            poster.save(Path(poster_path))

    log_structured(
        "info",
        event="video_generated",
        path=str(output_path),
        bytes=len(result.artifact_bytes),
        mime_type=result.mime_type,
        frames=settings.total_frames,
        settings=settings.to_dict(),
    )
    return output_path


async def _run(
    generator: VideoGenerator,
    settings: GenerationSettings,
    profile: SceneProfile,
) -> GenerationResult:
    setup_graceful_shutdown(generator, loop=asyncio.get_running_loop())
    try:
        return await generator.generate(settings, profile)
    finally:
        # The bytes travel in the result; the handle is not needed past this run
        generator.teardown()


def _extension_for(mime_type: str) -> str:
    for fmt in FORMAT_CANDIDATES:
        if fmt.mime_type == mime_type:
            return fmt.extension
    return ".mp4" if mime_type.startswith("video/mp4") else ".webm"


def _next_filename(config: dict[str, Any], default_prefix: str, extension: str = ".webm") -> str:
    """Simple next filename: prefix + timestamp to avoid overwrites."""
    from datetime import datetime
    prefix = config.get("output", {}).get("filename_prefix", default_prefix)
    return f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}{extension}"
