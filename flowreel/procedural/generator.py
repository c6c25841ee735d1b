"""
Procedural video generator: settings + scene profile → flow field → frames → encoder → artifact.
No external "model": only our algorithms and data.

State machine: idle → rendering → encoding → complete, or → error on any encoder failure.
Frame production and encoder notifications share one asyncio loop; each frame tick yields back to
the loop, and encoder callbacks arrive in between. The artifact is assembled only after the stop
notification, by which point every earlier data notification has been appended in order.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Sequence

from ..artifacts import ArtifactStore
from ..encoder import (
    EncoderSession,
    EncoderState,
    EncodingFormat,
    FFmpegEncoderSession,
    describe_error,
    probe_supported_formats,
    select_format,
)
from ..video_generator.base import VideoGenerator
from .errors import (
    EncoderRuntimeError,
    EnvironmentUnsupportedError,
    GenerationCancelledError,
    GenerationError,
)
from .flow_field import FlowField, build_flow_field
from .renderer import render_frame
from .schema import GenerationResult, GenerationSettings, GenerationStatus, SceneProfile
from .surface import DrawingSurface

if TYPE_CHECKING:
    from PIL import Image

logger = logging.getLogger(__name__)

# Leading 5% for setup, 92% for frames, the rest for encoder finalization
PROGRESS_SETUP = 0.05
PROGRESS_RENDER_SPAN = 0.92
PROGRESS_FINALIZING = 0.94

EncoderFactory = Callable[[DrawingSurface, int, EncodingFormat], EncoderSession]
FormatProbe = Callable[[], "Sequence[EncodingFormat] | None"]
Listener = Callable[[str, Any], None]


def frame_progress(frame_index: int, total_frames: int) -> float:
    return min(frame_index / total_frames, 1.0) * PROGRESS_RENDER_SPAN + PROGRESS_SETUP


class FrameScheduler:
    """Cooperative frame clock. Each tick yields to the loop; refresh_rate > 0 also paces ticks."""

    def __init__(self, refresh_rate: float = 0.0):
        self.refresh_rate = refresh_rate

    async def next_tick(self) -> None:
        await asyncio.sleep(1.0 / self.refresh_rate if self.refresh_rate > 0 else 0)


@dataclass
class RenderRun:
    """Everything one run mutates, owned by the generator and passed into each tick."""

    settings: GenerationSettings
    profile: SceneProfile
    flow_field: FlowField
    total_frames: int
    format: EncodingFormat
    frame_index: int = 0
    chunks: list[bytes] = field(default_factory=list)
    cancelled: bool = False
    task: asyncio.Task | None = None


class RunOutcome:
    """Settle-once result of a run. The first success or failure wins; later signals are logged."""

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._future: asyncio.Future = loop.create_future()
        # Mark failures as retrieved so an unawaited cancelled run does not warn at shutdown
        self._future.add_done_callback(lambda f: f.cancelled() or f.exception())

    @property
    def settled(self) -> bool:
        return self._future.done()

    @property
    def cancelled(self) -> bool:
        """The awaiting task was cancelled, which cancels the outcome with it."""
        return self._future.cancelled()

    def succeed(self, result: GenerationResult) -> bool:
        if self.settled:
            logger.warning("Run already settled; ignoring late success")
            return False
        self._future.set_result(result)
        return True

    def fail(self, error: BaseException) -> bool:
        if self.settled:
            logger.warning("Run already settled; ignoring late failure: %s", error)
            return False
        self._future.set_exception(error)
        return True

    def __await__(self):
        return self._future.__await__()


class ProceduralVideoGenerator(VideoGenerator):
    """
    Generates clips from a scene profile using only our procedural engine:
    profile → (flow field) → (renderer) → frames → (encoder) → artifact handle.
    Owns the encoder session and the artifact handle it issues; one live handle at a time.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        store: ArtifactStore | None = None,
        encoder_factory: EncoderFactory | None = None,
        format_probe: FormatProbe | None = None,
        scheduler: FrameScheduler | None = None,
    ):
        cfg = config or {}
        gen_cfg = cfg.get("generation", {}) or {}
        enc_cfg = cfg.get("encoder", {}) or {}
        self._store = store or ArtifactStore()
        self._encoder_factory = encoder_factory or partial(FFmpegEncoderSession, bitrate=enc_cfg.get("bitrate", "4M"))
        self._format_probe = format_probe or probe_supported_formats
        self._codec_preference = gen_cfg.get("codec_preference")
        self._scheduler = scheduler or FrameScheduler(float(gen_cfg.get("refresh_rate") or 0))

        self._surface: DrawingSurface | None = None
        self._listeners: list[Listener] = []
        self._status = GenerationStatus.IDLE
        self._progress = 0.0
        self._resource_handle: str | None = None
        self._error: str | None = None
        self._owned_handle: str | None = None
        self._last_frame: "Image.Image | None" = None

        self._run: RenderRun | None = None
        self._outcome: RunOutcome | None = None
        self._session: EncoderSession | None = None

    # Observable outputs

    @property
    def status(self) -> GenerationStatus:
        return self._status

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def resource_handle(self) -> str | None:
        return self._resource_handle

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def last_frame(self) -> "Image.Image | None":
        """Final rendered frame of the last finished run (poster)."""
        return self._last_frame

    @property
    def store(self) -> ArtifactStore:
        return self._store

    @property
    def is_active(self) -> bool:
        return self._outcome is not None and not self._outcome.settled

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, name: str, value: Any) -> None:
        attr = f"_{name}"
        if getattr(self, attr) == value:
            return
        setattr(self, attr, value)
        for listener in list(self._listeners):
            try:
                listener(name, value)
            except Exception:
                logger.exception("Listener failed on %s=%r", name, value)

    def _set_progress(self, value: float) -> None:
        # Monotonic within a run; reset() is the only way back down
        self._set("progress", max(self._progress, min(1.0, value)))

    # Boundary operations

    def attach_surface(self, surface: DrawingSurface) -> None:
        self._surface = surface

    def reset(self) -> None:
        self._set("status", GenerationStatus.IDLE)
        self._set("progress", 0.0)
        self._set("error", None)
        self._set("resource_handle", None)

    def load_from_history(self, resource_handle: str) -> None:
        self._cancel_active_run()
        if self._owned_handle is not None and self._owned_handle != resource_handle:
            self._release_owned_handle()
        self._owned_handle = resource_handle
        self._set("error", None)
        self._set("progress", 1.0)
        self._set("resource_handle", resource_handle)
        self._set("status", GenerationStatus.COMPLETE)

    def teardown(self) -> None:
        self._cancel_active_run()
        self._release_owned_handle()

    async def generate(self, settings: GenerationSettings, profile: SceneProfile) -> GenerationResult:
        supported = await self._check_environment()
        settings.validate()
        profile.validate()

        self._cancel_active_run()
        self._release_owned_handle()
        self.reset()

        fmt = select_format(supported, self._codec_preference)
        surface = self._surface
        surface.resize(settings.width, settings.height)
        loop = asyncio.get_running_loop()

        run = RenderRun(
            settings=settings,
            profile=profile,
            flow_field=build_flow_field(settings, profile),
            total_frames=settings.total_frames,
            format=fmt,
        )
        outcome = RunOutcome(loop)
        session = self._encoder_factory(surface, settings.fps, fmt)
        session.on_data_available = partial(self._on_data_available, run)
        session.on_error = partial(self._on_encoder_error, run, outcome)
        session.on_stop = partial(self._on_encoder_stop, run, outcome)
        self._run, self._outcome, self._session = run, outcome, session

        logger.info(
            "Generating %dx%d @ %d fps: %d frames, seed %d, style %s, %d particles, %s",
            settings.width, settings.height, settings.fps, run.total_frames, settings.seed,
            getattr(settings.style, "value", settings.style), len(run.flow_field.particles), fmt.mime_type,
        )
        self._set_progress(PROGRESS_SETUP)
        self._set("status", GenerationStatus.RENDERING)

        try:
            session.start()
        except Exception as e:
            logger.error("Encoder failed to start: %s", e, exc_info=True)
            self._fail_run(run, outcome, describe_error(e), EncoderRuntimeError(describe_error(e), cause=e))
        else:
            run.task = loop.create_task(self._frame_loop(run, session, outcome))

        try:
            return await outcome
        except asyncio.CancelledError:
            if self._run is run:
                self._cancel_active_run()
            raise
        finally:
            if run.task is not None and not run.task.done():
                run.task.cancel()

    # Internals

    async def _check_environment(self) -> Sequence[EncodingFormat]:
        if self._surface is None:
            raise EnvironmentUnsupportedError("Drawing surface is not attached.", missing="surface")
        # The default lookup shells out to ffmpeg; keep it off the loop
        supported = await asyncio.to_thread(self._format_probe)
        if supported is None:
            raise EnvironmentUnsupportedError(
                "Streaming video encoding is not supported on this host.", missing="encoder"
            )
        if self._surface.get_context() is None:
            raise EnvironmentUnsupportedError("Unable to create 2D rendering context.", missing="context")
        return supported

    async def _frame_loop(self, run: RenderRun, session: EncoderSession, outcome: RunOutcome) -> None:
        surface = self._surface
        try:
            while run.frame_index < run.total_frames:
                await self._scheduler.next_tick()
                if run.cancelled or outcome.settled:
                    return
                render_frame(surface, run.settings, run.profile, run.flow_field, run.frame_index, run.total_frames)
                session.capture_frame()
                run.frame_index += 1
                self._set_progress(frame_progress(run.frame_index, run.total_frames))
            self._last_frame = surface.to_image()
            session.stop()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Rendering frame %d failed: %s", run.frame_index, e, exc_info=True)
            message = f"Rendering failed: {describe_error(e)}"
            self._fail_run(run, outcome, message, GenerationError(message))

    def _on_data_available(self, run: RenderRun, chunk: bytes) -> None:
        if run.cancelled:
            logger.debug("Dropping %d bytes from a cancelled run", len(chunk))
            return
        if chunk:
            run.chunks.append(chunk)

    def _on_encoder_stop(self, run: RenderRun, outcome: RunOutcome) -> None:
        if outcome.settled:
            logger.warning("Encoder stop arrived after the run settled; ignoring")
            return
        self._set("status", GenerationStatus.ENCODING)
        self._set_progress(PROGRESS_FINALIZING)
        data = b"".join(run.chunks)
        handle = self._store.create(data, run.format.mime_type)
        self._owned_handle = handle
        self._session = None
        self._set("resource_handle", handle)
        self._set_progress(1.0)
        self._set("status", GenerationStatus.COMPLETE)
        logger.info("Generation complete: %d frames, %d bytes (%s)", run.frame_index, len(data), handle)
        outcome.succeed(GenerationResult(resource_handle=handle, artifact_bytes=data, mime_type=run.format.mime_type))

    def _on_encoder_error(self, run: RenderRun, outcome: RunOutcome, exc: BaseException | None) -> None:
        if outcome.settled:
            logger.warning("Encoder error after the run settled; ignoring: %s", exc)
            return
        reason = describe_error(exc)
        self._fail_run(run, outcome, reason, EncoderRuntimeError(reason, reason=reason, cause=exc))

    def _fail_run(self, run: RenderRun, outcome: RunOutcome, message: str, error: BaseException) -> None:
        run.cancelled = True
        run.chunks.clear()
        if self._run is not run:
            outcome.fail(error)
            return
        session = self._session
        self._session = None
        if session is not None:
            self._stop_silently(session)
        self._set("error", message)
        self._set("status", GenerationStatus.ERROR)
        outcome.fail(error)

    @staticmethod
    def _stop_silently(session: EncoderSession) -> None:
        session.on_data_available = None
        session.on_error = None
        session.on_stop = None
        if session.state is not EncoderState.INACTIVE:
            session.stop()

    def _cancel_active_run(self) -> None:
        run, outcome, session = self._run, self._outcome, self._session
        self._run = self._outcome = self._session = None
        if session is not None:
            self._stop_silently(session)
        if run is None:
            return
        run.cancelled = True
        if run.task is not None and not run.task.done():
            run.task.cancel()
        if outcome is None or (outcome.settled and not outcome.cancelled):
            return
        logger.info("Cancelling generation at frame %d/%d", run.frame_index, run.total_frames)
        if not outcome.settled:
            outcome.fail(GenerationCancelledError("Generation was cancelled before it finished"))
        self.reset()

    def _release_owned_handle(self) -> None:
        handle, self._owned_handle = self._owned_handle, None
        if handle is None:
            return
        self._store.revoke(handle)
        if self._resource_handle == handle:
            self._set("resource_handle", None)
