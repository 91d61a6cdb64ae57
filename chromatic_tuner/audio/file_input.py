"""Audio file input, for offline analysis or simulating a live source."""

from __future__ import annotations
import threading
import time
from typing import Callable, Iterator, Optional

import numpy as np
import soundfile as sf

from ..logger import get_logger
from ..core.errors import CaptureUnavailable
from .base import AudioInputHandler

logger = get_logger(__name__)


class WavFileInput(AudioInputHandler):
    """Provides audio blocks by reading from a sound file (WAV, FLAC, OGG...)."""

    def __init__(
        self,
        file_path: str,
        frames_per_buffer: int = 2048,
        gain: float = 1.0,
        realtime: bool = True,
    ) -> None:
        """Initialize the file input.

        Args:
            file_path: Path of the sound file
            frames_per_buffer: Samples per block
            gain: Linear gain applied to every block
            realtime: Pace blocks at the file's sample rate when streaming

        Raises:
            CaptureUnavailable: If the file cannot be opened
        """
        if frames_per_buffer < 1:
            raise ValueError("frames_per_buffer must be positive")

        self._file_path = file_path
        self._frames_per_buffer = frames_per_buffer
        self._gain = gain
        self._realtime = realtime
        self._callback: Optional[Callable[[np.ndarray, float], None]] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None

        try:
            with sf.SoundFile(self._file_path) as f:
                self._sample_rate = f.samplerate
                self._channels = f.channels
        except (sf.LibsndfileError, OSError) as e:
            raise CaptureUnavailable(f"Cannot open audio file {file_path}: {e}") from e

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def frames_per_buffer(self) -> int:
        return self._frames_per_buffer

    def iter_blocks(self) -> Iterator[np.ndarray]:
        """Yield mono float32 blocks of ``frames_per_buffer`` samples.

        The final partial block is zero-padded.
        """
        with sf.SoundFile(self._file_path) as f:
            for data in f.blocks(
                blocksize=self._frames_per_buffer,
                dtype="float32",
                always_2d=True,
                fill_value=0.0,
            ):
                yield self._to_mono(data)

    def _to_mono(self, data: np.ndarray) -> np.ndarray:
        mono = np.mean(data, axis=1, dtype=np.float32)
        if self._gain != 1.0:
            mono = mono * self._gain
        return mono

    def start(self, callback: Callable[[np.ndarray, float], None]) -> None:
        if self._running:
            logger.warning("File input already running")
            return

        self._callback = callback
        self._running = True
        self._thread = threading.Thread(target=self._stream_data, daemon=True)
        self._thread.start()
        logger.info(f"Streaming {self._file_path} at {self._sample_rate} Hz")

    def stop(self) -> None:
        self._running = False
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the stream reaches the end of the file."""
        if self._thread:
            self._thread.join(timeout)

    def _stream_data(self) -> None:
        block_seconds = self._frames_per_buffer / self._sample_rate
        try:
            for block in self.iter_blocks():
                if not self._running:
                    break
                if self._callback:
                    self._callback(block, time.time())
                if self._realtime:
                    time.sleep(block_seconds)
        except (sf.LibsndfileError, OSError) as e:
            logger.error(f"Error streaming audio file: {e}")
        finally:
            self._running = False
