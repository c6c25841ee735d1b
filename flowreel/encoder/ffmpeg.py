"""
FFmpeg-backed encoder session. Frames are piped to an ffmpeg process through imageio
(imageio-ffmpeg ships the binary) into a container file in a private temp directory. Muxers rewrite
headers on close, so the finished file is only read back (as one chunk) once the writer is closed.
"""
from __future__ import annotations

import functools
import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

import imageio_ffmpeg

from .base import FORMAT_CANDIDATES, EncoderSession, EncodingFormat

if TYPE_CHECKING:
    from ..procedural.surface import DrawingSurface

logger = logging.getLogger(__name__)


def find_ffmpeg() -> str | None:
    """Path to an ffmpeg binary (imageio-ffmpeg's bundled one first, then PATH), or None."""
    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError as e:
        logger.debug("imageio-ffmpeg binary unavailable (%s); trying PATH", e)
    return shutil.which("ffmpeg")


def _list_encoders(ffmpeg_bin: str) -> set[str]:
    r = subprocess.run(
        [ffmpeg_bin, "-hide_banner", "-encoders"],
        capture_output=True,
        text=True,
        timeout=10,
    )
    if r.returncode != 0:
        raise RuntimeError(f"ffmpeg -encoders failed: {r.stderr.strip()[:200]}")
    names = set()
    in_table = False
    for line in r.stdout.splitlines():
        parts = line.split()
        if not in_table:
            # Legend rows (" V..... = Video") precede the " ------" separator
            in_table = bool(parts) and set(parts[0]) == {"-"}
            continue
        # Encoder rows look like " V....D libvpx-vp9   libvpx VP9 ..."
        if len(parts) >= 2 and len(parts[0]) == 6 and parts[0][0] in "VAS":
            names.add(parts[1])
    return names


@functools.lru_cache(maxsize=1)
def probe_supported_formats() -> tuple[EncodingFormat, ...] | None:
    """
    Capability query: candidate formats this host can encode, in preference order.
    None means there is no streaming encoder at all (no ffmpeg).
    """
    ffmpeg_bin = find_ffmpeg()
    if ffmpeg_bin is None:
        logger.warning("No ffmpeg binary found; video encoding unavailable")
        return None
    try:
        names = _list_encoders(ffmpeg_bin)
    except (OSError, subprocess.SubprocessError, RuntimeError) as e:
        logger.warning("Could not list ffmpeg encoders (%s); assuming generic container only", e)
        return ()
    return tuple(f for f in FORMAT_CANDIDATES if f.encoder in names)


class FFmpegEncoderSession(EncoderSession):
    """Encoder session writing through imageio's FFMPEG writer."""

    def __init__(
        self,
        surface: "DrawingSurface",
        fps: int,
        fmt: EncodingFormat,
        *,
        bitrate: str | None = "4M",
        loop=None,
    ):
        super().__init__(surface, fps, fmt, loop=loop)
        self.bitrate = bitrate
        self._writer: Any = None
        self._tmpdir: tempfile.TemporaryDirectory | None = None
        self._path: Path | None = None

    def _open(self) -> None:
        try:
            import imageio.v2 as imageio
        except ImportError:
            raise ImportError(
                "Video encoding needs 'imageio' to write video. "
                "Install with: pip install imageio imageio-ffmpeg"
            ) from None

        self._tmpdir = tempfile.TemporaryDirectory(prefix="flowreel-")
        self._path = Path(self._tmpdir.name) / f"capture{self.format.extension}"
        logger.debug("Starting %s encoder → %s", self.format.encoder, self._path)
        self._writer = imageio.get_writer(
            str(self._path),
            format="FFMPEG",
            mode="I",
            fps=self.fps,
            codec=self.format.encoder,
            bitrate=self.bitrate,
            quality=None,
            pixelformat="yuv420p",
            macro_block_size=2,
            ffmpeg_log_level="error",
        )

    def _write(self, frame) -> bytes | None:
        self._writer.append_data(frame)
        return None

    def _close(self) -> bytes | None:
        try:
            if self._writer is not None:
                self._writer.close()
            if self._path is None or not self._path.exists():
                return b""
            return self._path.read_bytes()
        finally:
            self._writer = None
            self._cleanup()

    def _abort(self) -> None:
        writer, self._writer = self._writer, None
        try:
            if writer is not None:
                writer.close()
        finally:
            self._cleanup()

    def _cleanup(self) -> None:
        if self._tmpdir is not None:
            self._tmpdir.cleanup()
            self._tmpdir = None
        self._path = None
