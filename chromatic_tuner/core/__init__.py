"""Core components for the Chromatic Tuner application."""

# Import interfaces for easier access
from .interfaces import (
    IAudioInput,
    IPitchDetector,
)
from .errors import TunerError, CaptureUnavailable, InvalidSampleBlock

__all__ = [
    "IAudioInput",
    "IPitchDetector",
    "TunerError",
    "CaptureUnavailable",
    "InvalidSampleBlock",
]
