"""
Artifact store: opaque, revocable handles to encoded video bytes (the Python analogue of a blob URL).
Handles are distinct from the bytes; revoking a handle makes it unresolvable. In-memory only.
"""
import logging
import uuid

logger = logging.getLogger(__name__)

HANDLE_PREFIX = "artifact:"


class ArtifactStore:
    """Registry of live artifact handles → (bytes, mime type)."""

    def __init__(self) -> None:
        self._artifacts: dict[str, tuple[bytes, str]] = {}

    def create(self, data: bytes, mime_type: str) -> str:
        handle = f"{HANDLE_PREFIX}{uuid.uuid4().hex}"
        self._artifacts[handle] = (bytes(data), mime_type)
        logger.debug("Created %s (%d bytes, %s)", handle, len(data), mime_type)
        return handle

    def register(self, handle: str, data: bytes, mime_type: str) -> str:
        """Track an externally issued handle (e.g. one restored from history)."""
        self._artifacts[handle] = (bytes(data), mime_type)
        return handle

    def resolve(self, handle: str) -> tuple[bytes, str]:
        """Return (bytes, mime type). Raises KeyError for unknown or revoked handles."""
        try:
            return self._artifacts[handle]
        except KeyError:
            raise KeyError(f"Artifact handle {handle!r} is not live") from None

    def revoke(self, handle: str) -> bool:
        """Release a handle. Idempotent: returns False if it was not live."""
        released = self._artifacts.pop(handle, None) is not None
        if released:
            logger.debug("Revoked %s", handle)
        return released

    def is_live(self, handle: str) -> bool:
        return handle in self._artifacts

    def live_handles(self) -> list[str]:
        return list(self._artifacts)
