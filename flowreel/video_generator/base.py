"""
Abstract interface for video generation: the boundary the presentation side talks to.
Attach a surface, generate from settings + scene profile, observe status/progress, reset,
restore a finished artifact from history, tear down.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from ..procedural.schema import GenerationResult, GenerationSettings, GenerationStatus, SceneProfile
    from ..procedural.surface import DrawingSurface


class VideoGenerator(ABC):
    """
    Generates one clip per `generate` call. Implementations expose observable outputs
    (status, progress, resource_handle, error) and own every resource they hand out.
    """

    @abstractmethod
    def attach_surface(self, surface: "DrawingSurface") -> None:
        """Supply the drawing target; required before generate."""
        ...

    @abstractmethod
    async def generate(self, settings: "GenerationSettings", profile: "SceneProfile") -> "GenerationResult":
        """Render and encode one clip. Resolves only once a terminal state is reached."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Return to idle, clearing error, progress and the artifact reference."""
        ...

    @abstractmethod
    def load_from_history(self, resource_handle: str) -> None:
        """Show an already-encoded artifact without re-running synthesis."""
        ...

    @abstractmethod
    def teardown(self) -> None:
        """Stop any active encoder and release the owned artifact handle. Safe to repeat."""
        ...

    @abstractmethod
    def subscribe(self, listener: Callable[[str, Any], None]) -> Callable[[], None]:
        """Call listener(name, value) on every observable change. Returns an unsubscribe callable."""
        ...

    @property
    @abstractmethod
    def status(self) -> "GenerationStatus":
        ...

    @property
    @abstractmethod
    def progress(self) -> float:
        ...
