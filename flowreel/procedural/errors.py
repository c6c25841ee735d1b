"""
Generation failures. Environment problems reject `generate` outright; encoder failures end a run
in the error state; precondition violations are caller errors and never retried.
"""


class GenerationError(Exception):
    """Base class for every failure raised by the generation pipeline."""


class EnvironmentUnsupportedError(GenerationError):
    """No drawing surface, no 2D context, or no streaming encoder on this host."""

    def __init__(self, message: str, missing: str = ""):
        super().__init__(message)
        self.missing = missing


class EncoderRuntimeError(GenerationError):
    """The encoder reported an error while a run was active."""

    def __init__(self, message: str, reason: str | None = None, cause: BaseException | None = None):
        super().__init__(message)
        self.reason = reason or message
        self.cause = cause


class GenerationCancelledError(GenerationError):
    """The generator was torn down (or a new run started) before this run finished."""


class PreconditionError(GenerationError, ValueError):
    """Invalid settings or scene profile supplied by the caller."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field
