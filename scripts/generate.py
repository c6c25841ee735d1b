#!/usr/bin/env python3
"""
CLI: Generate one clip from one prompt. One output file (.webm, or .mp4 when VP8/VP9 are unavailable).
Usage:
  python scripts/generate.py "Aurora over a quiet ocean"
  python scripts/generate.py "Neon rain" --style cyberpunk --duration 6 --seed 7
  python scripts/generate.py "Anything" --profile my_profile.yaml --output clip.webm --poster clip.png
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import argparse
import logging

from flowreel.config import load_config
from flowreel.pipeline import generate_video
from flowreel.procedural import (
    GenerationCancelledError,
    GenerationError,
    ProceduralVideoGenerator,
    load_profile,
)
from flowreel.procedural.schema import (
    DURATION_STEP_SECONDS,
    MAX_DURATION_SECONDS,
    MIN_DURATION_SECONDS,
    RESOLUTION_OPTIONS,
    STATUS_LABELS,
    STYLE_OPTIONS,
    GenerationStatus,
    VideoStyle,
    is_recommended_duration,
)

logger = logging.getLogger("flowreel.cli")


def _progress_listener():
    last_bucket = [-1]

    def listener(name, value) -> None:
        if name == "status":
            logger.info("%s", STATUS_LABELS[GenerationStatus(value)])
        elif name == "progress":
            bucket = int(value * 10)
            if bucket > last_bucket[0]:
                last_bucket[0] = bucket
                logger.info("Progress: %d%%", round(value * 100))
        elif name == "error" and value:
            logger.error("Encoder error: %s", value)

    return listener


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a procedural particle-field clip from a single prompt (local, no external APIs)."
    )
    parser.add_argument(
        "prompt",
        type=str,
        help="Text prompt describing the scene.",
    )
    parser.add_argument(
        "--duration",
        "-d",
        type=float,
        default=None,
        help=f"Duration in seconds ({MIN_DURATION_SECONDS:g}-{MAX_DURATION_SECONDS:g} recommended; default from config).",
    )
    parser.add_argument(
        "--style",
        type=str,
        choices=[s.value for s in VideoStyle],
        default=None,
        help="; ".join(f"{s.value}: {label}" for s, (label, _) in STYLE_OPTIONS.items()),
    )
    parser.add_argument(
        "--resolution",
        type=str,
        choices=list(RESOLUTION_OPTIONS),
        default=None,
        help="Resolution preset (default from config).",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=None,
        help="Frames per second (default from config).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed; the same seed and profile give the same frames.",
    )
    parser.add_argument(
        "--profile",
        type=Path,
        default=None,
        help="Scene profile YAML/JSON; skips building one from the prompt.",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output video path (default: output/<prefix>_<timestamp>.webm).",
    )
    parser.add_argument(
        "--poster",
        type=Path,
        default=None,
        help="Also save the final frame as an image (e.g. poster.png).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config YAML (default: config/default.yaml).",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    config = load_config(args.config)
    width = height = None
    if args.resolution:
        width, height = RESOLUTION_OPTIONS[args.resolution]
    print(f"Prompt: {args.prompt[:60]}{'...' if len(args.prompt) > 60 else ''}")
    if args.duration is not None and not is_recommended_duration(args.duration):
        logger.warning(
            "Duration %gs is off the usual %g-%g s range in %g s steps",
            args.duration, MIN_DURATION_SECONDS, MAX_DURATION_SECONDS, DURATION_STEP_SECONDS,
        )

    try:
        profile = load_profile(args.profile) if args.profile else None
        path = generate_video(
            args.prompt,
            args.duration,
            style=args.style,
            seed=args.seed,
            output_path=args.output,
            config=config,
            profile=profile,
            width=width,
            height=height,
            fps=args.fps,
            poster_path=args.poster,
            generator=ProceduralVideoGenerator(config),
            listener=_progress_listener(),
        )
    except GenerationCancelledError:
        print("Cancelled.")
        return 130
    except GenerationError as e:
        logger.error("Generation failed: %s", e)
        return 1
    print(f"Done. Video: {path}")
    if args.poster:
        print(f"Poster: {args.poster}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
