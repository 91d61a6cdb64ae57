"""Tuner engine: runs the pitch pipeline once per block and owns all cross-cycle state."""

from __future__ import annotations
import math
import numbers
import queue
import time
from typing import Optional, Union, Sequence, ClassVar, Tuple

import numpy as np

from .logger import get_logger
from .note_types import SampleBlock, TunerReading, TunerState, TuningState
from .note_utils import A4_FREQUENCY, get_note_name
from .core.errors import CaptureUnavailable, InvalidSampleBlock
from .core.events import TunerEvents
from .core.interfaces import IAudioInput, IPitchDetector
from .detection.autocorrelator import Autocorrelator
from .detection.smoothing import SmoothingStage

logger = get_logger(__name__)

BlockLike = Union[SampleBlock, np.ndarray, Sequence[float]]


class TunerEngine:
    """Turns blocks of mono audio into tuning-needle readings.

    Each call to :meth:`process_block` runs estimation, note mapping and smoothing
    for one block. The engine is not thread-safe: exactly one caller may run
    ``process_block`` at a time. Capture threads hand blocks over with
    :meth:`submit_block` and a single consumer drains them with :meth:`next_reading`.
    """

    DEFAULT_SAMPLE_RATE: ClassVar[int] = 44100
    DEFAULT_QUEUE_SIZE: ClassVar[int] = 8

    def __init__(
        self,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        audio_input: Optional[IAudioInput] = None,
        pitch_detector: Optional[IPitchDetector] = None,
        a4: float = A4_FREQUENCY,
        noise_floor: float = Autocorrelator.NOISE_FLOOR,
        correlation_threshold: float = Autocorrelator.CORRELATION_THRESHOLD,
        frequency_history: int = 10,
        note_history: int = 5,
        cents_decay: float = 0.8,
        in_tune_cents: float = 5.0,
        max_needle_angle: float = 45.0,
        reset_cents_on_silence: bool = False,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        """Initialize the engine.

        Args:
            sample_rate: Sample rate used for blocks passed without one
            audio_input: Capture source started and stopped with the engine, or None
                when blocks are supplied by the caller
            pitch_detector: Pitch estimator, or None for an Autocorrelator
            a4: Reference frequency of A4 in Hz
            noise_floor: RMS below which a block has no pitch (default detector only)
            correlation_threshold: Minimum peak correlation (default detector only)
            frequency_history: Number of recent frequencies averaged
            note_history: Number of recent note names voted on
            cents_decay: Share of the previous cents value kept each cycle
            in_tune_cents: Half-width of the in-tune band in cents
            max_needle_angle: Needle deflection limit in degrees
            reset_cents_on_silence: Also zero the decayed cents when pitch is lost
            queue_size: Capacity of the capture hand-over queue
        """
        if sample_rate <= 0:
            raise ValueError("Sample rate must be positive")

        self._sample_rate = int(sample_rate)
        self._audio_input = audio_input
        self._pitch_detector = pitch_detector or Autocorrelator(
            noise_floor=noise_floor, correlation_threshold=correlation_threshold
        )
        self._smoothing = SmoothingStage(
            frequency_history=frequency_history,
            note_history=note_history,
            cents_decay=cents_decay,
            a4=a4,
        )
        self._a4 = a4
        self._in_tune_cents = in_tune_cents
        self._max_needle_angle = max_needle_angle
        self._reset_cents_on_silence = reset_cents_on_silence

        self._blocks: "queue.Queue[Tuple[SampleBlock, float]]" = queue.Queue(maxsize=queue_size)
        self._state = TunerState.IDLE
        self.events = TunerEvents()

    # Lifecycle

    @property
    def state(self) -> TunerState:
        return self._state

    @property
    def is_listening(self) -> bool:
        return self._state is TunerState.LISTENING

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def start(self) -> None:
        """Acquire the audio input (if any) and begin listening.

        Raises:
            CaptureUnavailable: If the audio input cannot be started. The engine
                stays idle; retrying is up to the caller.
        """
        if self._state is TunerState.LISTENING:
            logger.warning("Tuner already listening")
            return

        self.reset()
        self._drain_queue()
        if self._audio_input is not None:
            try:
                self._audio_input.start(self.submit_block)
            except CaptureUnavailable:
                logger.error("Audio input unavailable, tuner stays idle")
                raise
            except Exception as e:
                logger.error(f"Error starting audio input: {e}")
                raise CaptureUnavailable(f"Could not start audio input: {e}") from e
            # The device may have settled on a different rate than requested
            self._sample_rate = int(self._audio_input.sample_rate)

        self._state = TunerState.LISTENING
        logger.info(f"Tuner listening at {self._sample_rate} Hz")

    def stop(self) -> TunerReading:
        """Stop listening, clear all state and return the neutral reading."""
        if self._audio_input is not None and self._audio_input.is_running():
            self._audio_input.stop()

        self._drain_queue()
        self.reset()
        self._state = TunerState.IDLE
        logger.info("Tuner stopped")

        reading = self._neutral_reading(time.time())
        self.events.emit_stopped(reading)
        return reading

    def reset(self, clear_cents: bool = True) -> None:
        """Clear frequency and note histories, and the decayed cents unless told otherwise."""
        self._smoothing.reset(clear_cents=clear_cents)

    # State views

    @property
    def frequency_history(self) -> Tuple[float, ...]:
        return self._smoothing.frequency_history

    @property
    def note_history(self) -> Tuple[str, ...]:
        return self._smoothing.note_history

    @property
    def smoothed_cents(self) -> float:
        return self._smoothing.smoothed_cents

    # Capture hand-over

    def submit_block(self, samples: np.ndarray, timestamp: Optional[float] = None) -> bool:
        """Queue a block from a capture thread for the consumer.

        Returns:
            True if queued, False if the queue was full and the block was dropped
        """
        block = SampleBlock(np.array(samples, dtype=np.float32, copy=True), self._sample_rate)
        try:
            self._blocks.put_nowait((block, time.time() if timestamp is None else timestamp))
            return True
        except queue.Full:
            logger.debug("Block queue full, dropping block")
            return False

    def next_reading(self, timeout: Optional[float] = None) -> Optional[TunerReading]:
        """Process the next queued block, waiting up to ``timeout`` seconds for one.

        Returns:
            The reading, or None if no block arrived in time
        """
        try:
            block, timestamp = self._blocks.get(timeout=timeout)
        except queue.Empty:
            return None
        return self.process_block(block, timestamp)

    def _drain_queue(self) -> None:
        while True:
            try:
                self._blocks.get_nowait()
            except queue.Empty:
                return

    # Processing

    def process_block(self, block: BlockLike, timestamp: Optional[float] = None) -> TunerReading:
        """Run the pitch pipeline once.

        Args:
            block: A SampleBlock, or bare samples at the engine's sample rate
            timestamp: Time of the block in seconds, defaults to now

        Returns:
            The reading for this cycle

        Raises:
            InvalidSampleBlock: If the block is malformed. Engine state is untouched.
        """
        samples, sample_rate = self._validate(block)
        if timestamp is None:
            timestamp = time.time()

        frequency = self._pitch_detector.estimate(samples, sample_rate)
        if frequency is None or not math.isfinite(frequency) or frequency <= 0:
            return self._lose_pitch(timestamp)

        pitch = self._smoothing.update(float(frequency))
        reading = TunerReading(
            frequency=pitch.frequency,
            note_name=pitch.note_name,
            cents=pitch.cents,
            needle_angle_degrees=self._needle_angle(pitch.cents),
            tuning_state=self._tuning_state(pitch.cents),
            raw_frequency=float(frequency),
            note_index=pitch.note_index,
            raw_cents=pitch.raw_cents,
            stable_note_index=pitch.stable_note_index,
            timestamp=timestamp,
        )
        logger.debug(
            f"{reading.label()} {reading.frequency:.2f}Hz "
            f"(raw {get_note_name(frequency, a4=self._a4)} {frequency:.2f}Hz) "
            f"cents={reading.cents:+.1f} {reading.tuning_state.name}"
        )
        self.events.emit_reading(reading)
        return reading

    def _lose_pitch(self, timestamp: float) -> TunerReading:
        had_pitch = bool(self._smoothing.frequency_history)
        self.reset(clear_cents=self._reset_cents_on_silence)

        reading = self._neutral_reading(timestamp)
        self.events.emit_reading(reading)
        if had_pitch:
            logger.debug("Pitch lost, histories cleared")
            self.events.emit_signal_lost(reading)
        return reading

    def _validate(self, block: BlockLike) -> Tuple[np.ndarray, int]:
        if isinstance(block, SampleBlock):
            raw, sample_rate = block.samples, block.sample_rate
        else:
            raw, sample_rate = block, self._sample_rate

        try:
            samples = np.asarray(raw, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidSampleBlock(f"Samples are not numeric: {e}") from e

        if samples.ndim != 1:
            raise InvalidSampleBlock(f"Expected mono samples, got shape {samples.shape}")
        if samples.size == 0:
            raise InvalidSampleBlock("Sample block is empty")
        if not np.all(np.isfinite(samples)):
            raise InvalidSampleBlock("Sample block contains non-finite values")
        if (
            not isinstance(sample_rate, numbers.Real)
            or not math.isfinite(sample_rate)
            or sample_rate <= 0
        ):
            raise InvalidSampleBlock(f"Invalid sample rate: {sample_rate!r}")
        return samples, int(sample_rate)

    def _needle_angle(self, cents: float) -> float:
        return max(-self._max_needle_angle, min(self._max_needle_angle, cents / 2))

    def _tuning_state(self, cents: float) -> TuningState:
        if abs(cents) < self._in_tune_cents:
            return TuningState.IN_TUNE
        if cents < 0:
            return TuningState.FLAT
        return TuningState.SHARP

    @staticmethod
    def _neutral_reading(timestamp: float) -> TunerReading:
        return TunerReading(
            frequency=None,
            note_name=None,
            cents=0.0,
            needle_angle_degrees=0.0,
            tuning_state=TuningState.ABSENT,
            timestamp=timestamp,
        )
