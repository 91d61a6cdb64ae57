"""Shared base for audio input handlers."""

from abc import ABC

from ..core.interfaces import IAudioInput


class AudioInputHandler(IAudioInput, ABC):
    """Abstract base class for audio input handlers."""

    _running: bool = False
    _sample_rate: int = 44100

    def is_running(self) -> bool:
        """Check if audio input is running.

        Returns:
            True if audio input is running, False otherwise
        """
        return self._running

    @property
    def sample_rate(self) -> int:
        return self._sample_rate
