"""Autocorrelation pitch estimation for a single block of audio."""

from __future__ import annotations
import numpy as np
from typing import Optional, ClassVar

from ..logger import get_logger
from ..core.interfaces import IPitchDetector

logger = get_logger(__name__)


class Autocorrelator(IPitchDetector):
    """Estimate the fundamental frequency of a block by normalized difference correlation.

    The block is compared against lagged copies of itself using the mean absolute
    difference, ``corr = 1 - mean(|x[i] - x[i + lag]|)``. The scan walks the lags
    upward, locks on once the correlation climbs above ``correlation_threshold``,
    and stops on the first lag after the peak. The peak lag is then refined to a
    fraction of a sample before being turned into a frequency.

    Accuracy range: the refinement can move the lag by -0.25 to +0.22 samples, so
    estimates stay within 1% while the period is at least about 28 samples (roughly
    1.6 kHz at 44.1 kHz). The threshold is applied to an unnormalized difference,
    so full-scale tones above about 2.4 kHz at 44.1 kHz can lock onto twice the
    period and read an octave low.
    """

    NOISE_FLOOR: ClassVar[float] = 0.01  # RMS below this is silence or noise
    CORRELATION_THRESHOLD: ClassVar[float] = 0.9  # Minimum correlation of a usable peak
    MIN_FALLBACK_CORRELATION: ClassVar[float] = 0.01

    # Sub-lag refinement grid: 16 candidates, 1/32 sample apart, centred on step 8
    REFINE_STEPS: ClassVar[int] = 16
    REFINE_CENTER: ClassVar[int] = 8
    REFINE_RESOLUTION: ClassVar[int] = 32

    def __init__(
        self,
        noise_floor: float = NOISE_FLOOR,
        correlation_threshold: float = CORRELATION_THRESHOLD,
    ) -> None:
        """Initialize the autocorrelator.

        Args:
            noise_floor: RMS level below which a block is reported as "no pitch"
            correlation_threshold: Correlation a rising peak must exceed to be accepted
        """
        if noise_floor < 0:
            raise ValueError("noise_floor must not be negative")
        if not 0.0 < correlation_threshold < 1.0:
            raise ValueError("correlation_threshold must be between 0.0 and 1.0")
        self._noise_floor = noise_floor
        self._correlation_threshold = correlation_threshold

    @property
    def noise_floor(self) -> float:
        return self._noise_floor

    @property
    def correlation_threshold(self) -> float:
        return self._correlation_threshold

    def estimate(self, samples: np.ndarray, sample_rate: int) -> Optional[float]:
        """Estimate the pitch of one block.

        Args:
            samples: 1-D array of mono samples
            sample_rate: Sample rate in Hz

        Returns:
            Frequency in Hz, or None when the block carries no usable pitch. The
            value is not checked for finiteness; callers must do that.
        """
        buffer = np.asarray(samples, dtype=np.float64)
        size = len(buffer)
        if size == 0:
            return None

        rms = float(np.sqrt(np.mean(buffer**2)))
        if rms < self._noise_floor:
            logger.debug(f"Signal below noise floor: rms={rms:.4f}")
            return None

        max_samples = size // 2
        head = buffer[:max_samples]

        best_offset = -1
        best_correlation = 0.0
        found_good_correlation = False
        last_correlation = 1.0

        for offset in range(max_samples):
            lagged = buffer[offset : offset + max_samples]
            correlation = 1.0 - float(np.sum(np.abs(head - lagged))) / max_samples

            if correlation > self._correlation_threshold and correlation > last_correlation:
                found_good_correlation = True
                if correlation > best_correlation:
                    best_correlation = correlation
                    best_offset = offset
            elif found_good_correlation:
                # The peak was the previous lag; the fundamental period has just passed
                shift = self.refine(buffer, max_samples, best_offset)
                logger.debug(
                    f"Peak at lag {best_offset} (corr={best_correlation:.4f}), shift {shift:+.4f}"
                )
                return sample_rate / (best_offset + shift)
            last_correlation = correlation

        if best_correlation > self.MIN_FALLBACK_CORRELATION:
            logger.debug(f"Scan ended while rising, using lag {best_offset} unrefined")
            return sample_rate / best_offset

        return None

    def refine(self, samples: np.ndarray, max_lag: int, coarse_offset: int) -> float:
        """Fractional correction to ``coarse_offset`` from a short local search.

        Step ``i`` evaluates the cumulative absolute difference at the lag
        ``coarse_offset + (i - 8) / 32`` and at the lag one step before it. The step
        with the smallest difference wins, and the walk stops once the difference
        starts growing again.

        Args:
            samples: The block the coarse lag was found in
            max_lag: Number of samples compared per lag (half the block)
            coarse_offset: Integer lag of the correlation peak

        Returns:
            Shift in samples, ``(best_step - 8) / 32``
        """
        buffer = np.asarray(samples, dtype=np.float64)
        head = buffer[:max_lag]
        step = 1.0 / self.REFINE_RESOLUTION

        best_step = self.REFINE_CENTER
        best_difference = 0.0
        for i in range(self.REFINE_STEPS):
            lag = coarse_offset + (i - self.REFINE_CENTER) * step
            difference = self._difference_at(buffer, head, lag)
            previous = self._difference_at(buffer, head, lag - step)
            if difference is None or previous is None:
                break
            if i == 0 or difference < best_difference:
                best_difference = difference
                best_step = i
            if difference > previous:
                break

        return (best_step - self.REFINE_CENTER) / self.REFINE_RESOLUTION

    @staticmethod
    def _difference_at(buffer: np.ndarray, head: np.ndarray, lag: float) -> Optional[float]:
        """Sum of |x[j] - x[j + lag]| with x linearly interpolated between samples."""
        base = int(np.floor(lag))
        frac = lag - base
        end = base + len(head) + 1
        if base < 0 or end > len(buffer):
            return None
        lagged = (1.0 - frac) * buffer[base : end - 1] + frac * buffer[base + 1 : end]
        return float(np.sum(np.abs(head - lagged)))
