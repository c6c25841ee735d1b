"""
Workflow utilities: structured logging, graceful shutdown.
"""
import asyncio
import json
import logging
import signal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .video_generator.base import VideoGenerator

logger = logging.getLogger(__name__)


def setup_graceful_shutdown(
    generator: "VideoGenerator | None" = None,
    loop: asyncio.AbstractEventLoop | None = None,
) -> None:
    """
    Register SIGTERM/SIGINT handlers for graceful exit. With a generator, the handler also tears it
    down so the encoder stops and the pending generate call is rejected as cancelled.
    With a loop, handlers run on that loop (required when tearing down mid-run).
    """

    def _handle(*_args: Any) -> None:
        logger.warning("Shutdown requested")
        if generator is not None:
            logger.info("Tearing down generator")
            generator.teardown()

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            if loop is not None:
                loop.add_signal_handler(sig, _handle)
            else:
                signal.signal(sig, _handle)
        except (AttributeError, ValueError, NotImplementedError, RuntimeError) as e:
            logger.debug("Signal handler for %s not installed: %s", sig, e)  # Windows or unsupported


def log_structured(level: str, **kwargs: Any) -> None:
    """Emit structured (JSON) log for monitoring."""
    record = {"level": level, **kwargs}
    line = json.dumps(record, default=str)
    if level == "error":
        logger.error("%s", line)
    elif level == "warning":
        logger.warning("%s", line)
    else:
        logger.info("%s", line)
