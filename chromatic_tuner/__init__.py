"""Chromatic Tuner - real-time monophonic pitch detection for a tuning needle."""

__version__ = "0.1.0"
