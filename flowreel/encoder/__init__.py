"""
Streaming video encoders: capability probing, format negotiation, encoder sessions.
"""
from .base import (
    FORMAT_CANDIDATES,
    EncoderSession,
    EncoderState,
    EncodingFormat,
    describe_error,
    select_format,
)
from .ffmpeg import FFmpegEncoderSession, probe_supported_formats

__all__ = [
    "FORMAT_CANDIDATES",
    "EncoderSession",
    "EncoderState",
    "EncodingFormat",
    "describe_error",
    "select_format",
    "FFmpegEncoderSession",
    "probe_supported_formats",
]
