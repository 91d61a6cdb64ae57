"""Defines the core interfaces for the Chromatic Tuner application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Callable

import numpy as np


class IAudioInput(ABC):
    """Interface for audio input handlers (the sample source)."""

    @abstractmethod
    def start(self, callback: Callable[[np.ndarray, float], None]) -> None:
        """Start capturing audio.

        Raises:
            CaptureUnavailable: If the audio source cannot be acquired
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if audio is running."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the audio stream."""
        pass


class IPitchDetector(ABC):
    """Interface for fundamental-frequency estimators."""

    @abstractmethod
    def estimate(self, samples: np.ndarray, sample_rate: int) -> Optional[float]:
        """Estimate the pitch of one block in Hz, or None when there is no pitch."""
        pass
