"""Pitch estimation and smoothing stages."""

from .autocorrelator import Autocorrelator
from .smoothing import SmoothingStage, SmoothedPitch

__all__ = ["Autocorrelator", "SmoothingStage", "SmoothedPitch"]
