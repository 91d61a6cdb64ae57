"""Type definitions for the Chromatic Tuner project."""

from enum import Enum
from typing import Optional
from dataclasses import dataclass

import numpy as np

from .note_utils import note_label


class TunerState(Enum):
    """Capture lifecycle of a tuner engine."""

    IDLE = "idle"  # Not capturing
    LISTENING = "listening"  # Capturing and processing each cycle


class TuningState(Enum):
    """How the current reading sits relative to the nearest note."""

    IN_TUNE = "In tune"
    FLAT = "Flat"
    SHARP = "Sharp"
    ABSENT = ""

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True, eq=False)
class SampleBlock:
    """One analysis window of mono audio."""

    samples: np.ndarray  # 1-D float samples, roughly in [-1, 1]
    sample_rate: int  # Hz, constant for the session

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class TunerReading:
    """Result of one processing cycle, ready for a needle display."""

    frequency: Optional[float]  # Smoothed frequency in Hz, None when no pitch
    note_name: Optional[str]  # Stable note name (e.g., 'A', 'C#'), None when no pitch
    cents: float  # Smoothed deviation from the note, negative is flat
    needle_angle_degrees: float  # Needle rotation, clamped to +/- max angle
    tuning_state: TuningState
    raw_frequency: Optional[float] = None  # Unsmoothed estimate for this block
    note_index: Optional[int] = None  # MIDI-like note number of the smoothed frequency
    raw_cents: Optional[int] = None  # Unsmoothed cents of the smoothed frequency
    stable_note_index: Optional[int] = None  # Note number of note_name, gives its octave
    timestamp: float = 0.0

    @property
    def is_pitched(self) -> bool:
        return self.tuning_state is not TuningState.ABSENT

    @property
    def octave(self) -> Optional[int]:
        """Scientific pitch notation octave of ``note_name`` (A4 is octave 4)."""
        if self.stable_note_index is None:
            return None
        return (self.stable_note_index // 12) - 1

    def label(self, use_flats: bool = False) -> str:
        """Stable note in SPN (e.g., 'A4', 'Bb3'), or '-' when there is no pitch."""
        if self.stable_note_index is None:
            return self.note_name or "-"
        return note_label(self.stable_note_index, use_flats)
