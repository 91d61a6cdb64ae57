"""Exceptions raised by Chromatic Tuner components."""


class TunerError(Exception):
    """Base class for all tuner errors."""


class CaptureUnavailable(TunerError):
    """The audio source could not be acquired when starting the tuner."""


class InvalidSampleBlock(TunerError, ValueError):
    """A sample block handed to the engine is malformed (empty, non-finite, ...)."""
