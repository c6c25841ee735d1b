from .base import VideoGenerator

__all__ = ["VideoGenerator"]
