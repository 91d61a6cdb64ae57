from .audio.base import AudioInputHandler
from .core.errors import CaptureUnavailable


class MockAudioInput(AudioInputHandler):
    """A mock audio input for unit tests. Allows manual pushing of sample blocks."""

    def __init__(self, sample_rate=44100, fail_on_start=False):
        self._sample_rate = sample_rate
        self._fail_on_start = fail_on_start
        self._running = False
        self.callback = None
        self.start_calls = 0
        self.stop_calls = 0

    def start(self, callback):
        self.start_calls += 1
        if self._fail_on_start:
            raise CaptureUnavailable("Mock capture refused")
        self.callback = callback
        self._running = True

    def stop(self):
        self.stop_calls += 1
        self._running = False

    def push(self, samples, timestamp=0.0):
        """Deliver a block as the capture thread would."""
        if self._running and self.callback:
            self.callback(samples, timestamp)
