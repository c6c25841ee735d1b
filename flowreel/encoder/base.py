"""
Abstract streaming encoder session. Captures frames from a drawing surface and reports back through
three callbacks (data available, error, stop) dispatched on the running asyncio loop so they
interleave with frame production. Data notifications always precede the stop notification.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

if TYPE_CHECKING:
    from ..procedural.surface import DrawingSurface

logger = logging.getLogger(__name__)


class EncoderState(str, Enum):
    INACTIVE = "inactive"
    RECORDING = "recording"


@dataclass(frozen=True)
class EncodingFormat:
    """One negotiable container/codec pair. `encoder` is the ffmpeg encoder name."""

    mime_type: str
    encoder: str
    extension: str


# Preference order: most modern streaming codec, older variant, generic fallback
FORMAT_CANDIDATES: tuple[EncodingFormat, ...] = (
    EncodingFormat("video/webm;codecs=vp9", "libvpx-vp9", ".webm"),
    EncodingFormat("video/webm;codecs=vp8", "libvpx", ".webm"),
    EncodingFormat("video/mp4", "libx264", ".mp4"),
)


def select_format(
    supported: Iterable[EncodingFormat],
    preference: Sequence[str] | None = None,
) -> EncodingFormat:
    """
    First candidate (in preference order) the host supports. `preference` is an optional list of
    mime types reordering the candidates. Falls back to the generic container when nothing matches.
    """
    candidates = list(FORMAT_CANDIDATES)
    if preference:
        rank = {mime: i for i, mime in enumerate(preference)}
        candidates.sort(key=lambda f: rank.get(f.mime_type, len(rank)))
    available = {f.mime_type for f in supported}
    for fmt in candidates:
        if fmt.mime_type in available:
            return fmt
    return FORMAT_CANDIDATES[-1]


def describe_error(exc: BaseException | None, fallback: str = "Recording error") -> str:
    """Human-readable summary of an encoder failure."""
    if exc is None:
        return fallback
    message = str(exc).strip()
    if message:
        return message.splitlines()[0]
    return type(exc).__name__ or fallback


class EncoderSession(ABC):
    """
    One recording of one surface. start() → capture_frame()* → stop().
    Subclasses implement the actual encoding; this class owns state and callback dispatch.
    """

    def __init__(
        self,
        surface: "DrawingSurface",
        fps: int,
        fmt: EncodingFormat,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.surface = surface
        self.fps = fps
        self.format = fmt
        self.state = EncoderState.INACTIVE
        self.on_data_available: Callable[[bytes], Any] | None = None
        self.on_error: Callable[[BaseException], Any] | None = None
        self.on_stop: Callable[[], Any] | None = None
        self._loop = loop
        self.frames_captured = 0

    def start(self) -> None:
        if self.state is EncoderState.RECORDING:
            raise RuntimeError("Encoder session already recording")
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._open()
        self.state = EncoderState.RECORDING

    def capture_frame(self) -> None:
        """Encode the surface's current pixels as the next frame."""
        if self.state is not EncoderState.RECORDING:
            return
        try:
            chunk = self._write(self.surface.to_frame())
        except Exception as e:
            self._fail(e)
            return
        self.frames_captured += 1
        if chunk:
            self._emit(self.on_data_available, chunk)

    def stop(self) -> None:
        """Finalize. No-op when already inactive; otherwise emits the final data, then stop."""
        if self.state is EncoderState.INACTIVE:
            return
        self.state = EncoderState.INACTIVE
        try:
            tail = self._close()
        except Exception as e:
            self._fail(e)
            return
        if tail:
            self._emit(self.on_data_available, tail)
        self._emit(self.on_stop)

    def _fail(self, exc: BaseException) -> None:
        logger.error("Encoder session failed (%s): %s", self.format.mime_type, exc, exc_info=exc)
        self.state = EncoderState.INACTIVE
        try:
            self._abort()
        except Exception as abort_exc:
            logger.warning("Encoder cleanup after failure also failed: %s", abort_exc)
        self._emit(self.on_error, exc)

    def _emit(self, callback: Callable[..., Any] | None, *args: Any) -> None:
        if callback is None:
            return
        if self._loop is None or self._loop.is_closed():
            logger.debug("Event loop closed; dropping encoder notification %s", callback)
            return
        self._loop.call_soon(callback, *args)

    @abstractmethod
    def _open(self) -> None:
        """Acquire encoder resources."""
        ...

    @abstractmethod
    def _write(self, frame: "Any") -> bytes | None:
        """Encode one RGB uint8 frame. Returns newly available encoded bytes, if any."""
        ...

    @abstractmethod
    def _close(self) -> bytes | None:
        """Flush and release resources. Returns the remaining encoded bytes."""
        ...

    @abstractmethod
    def _abort(self) -> None:
        """Release resources after a failure; output is discarded."""
        ...
