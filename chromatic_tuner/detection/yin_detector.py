"""YIN pitch estimation backed by aubio."""

from __future__ import annotations
import numpy as np
import aubio
from typing import Optional, ClassVar

from ..logger import get_logger
from ..core.interfaces import IPitchDetector

logger = get_logger(__name__)


class YinPitchDetector(IPitchDetector):
    """Alternative pitch detector using aubio's YIN implementation.

    aubio needs a fixed hop size, so the pitch object is rebuilt whenever the block
    length or sample rate changes.
    """

    DEFAULT_MIN_CONFIDENCE: ClassVar[float] = 0.8
    NOISE_FLOOR: ClassVar[float] = 0.01

    def __init__(
        self,
        tolerance: float = 0.8,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        noise_floor: float = NOISE_FLOOR,
    ) -> None:
        if not 0.0 <= tolerance <= 1.0:
            raise ValueError("Tolerance must be between 0.0 and 1.0")
        self._tolerance = tolerance
        self._min_confidence = min_confidence
        self._noise_floor = noise_floor
        self._pitch_detector = None
        self._shape = (0, 0)

    def _detector_for(self, block_size: int, sample_rate: int):
        if self._pitch_detector is None or self._shape != (block_size, sample_rate):
            logger.info(
                f"Creating aubio yin detector: block_size={block_size}, sample_rate={sample_rate}"
            )
            self._pitch_detector = aubio.pitch("yin", block_size, block_size, sample_rate)
            self._pitch_detector.set_unit("Hz")
            self._pitch_detector.set_tolerance(self._tolerance)
            self._shape = (block_size, sample_rate)
        return self._pitch_detector

    def estimate(self, samples: np.ndarray, sample_rate: int) -> Optional[float]:
        audio_data = np.asarray(samples, dtype=np.float32)
        if audio_data.size == 0:
            return None

        rms = float(np.sqrt(np.mean(audio_data**2)))
        if rms < self._noise_floor:
            return None

        detector = self._detector_for(len(audio_data), int(sample_rate))
        pitch = float(detector(audio_data)[0])
        confidence = float(detector.get_confidence())
        logger.debug(f"yin pitch={pitch:.2f}Hz confidence={confidence:.2f}")

        if pitch <= 0 or confidence < self._min_confidence:
            return None
        return pitch
