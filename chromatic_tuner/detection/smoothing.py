from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Tuple

from ..logger import get_logger
from ..note_utils import (
    A4_FREQUENCY,
    cents_offset,
    nearest_index_for_name,
    note_index_from_frequency,
    note_name_from_index,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class SmoothedPitch:
    """Output of one smoothing cycle."""

    frequency: float  # Mean of the frequency history
    note_index: int  # Note number of the smoothed frequency
    note_name: str  # Most frequent note name in the note history
    stable_note_index: int  # Note number carrying note_name, nearest to note_index
    raw_cents: int  # Cents of the smoothed frequency against its own note
    cents: float  # Exponentially decayed cents


class SmoothingStage:
    """
    Stabilizes a stream of pitch estimates so the displayed note and needle do not flicker.
    """

    def __init__(
        self,
        frequency_history: int = 10,
        note_history: int = 5,
        cents_decay: float = 0.8,
        a4: float = A4_FREQUENCY,
    ):
        if frequency_history < 1 or note_history < 1:
            raise ValueError("history sizes must be at least 1")
        if not 0.0 <= cents_decay < 1.0:
            raise ValueError("cents_decay must be in [0.0, 1.0)")

        self._cents_decay = cents_decay
        self._a4 = a4

        self._frequencies: Deque[float] = deque(maxlen=frequency_history)
        self._notes: Deque[str] = deque(maxlen=note_history)
        self._smoothed_cents = 0.0

    @property
    def frequency_history(self) -> Tuple[float, ...]:
        return tuple(self._frequencies)

    @property
    def note_history(self) -> Tuple[str, ...]:
        return tuple(self._notes)

    @property
    def smoothed_cents(self) -> float:
        return self._smoothed_cents

    def update(self, frequency: float) -> SmoothedPitch:
        """Fold one valid pitch estimate into the histories."""
        self._frequencies.append(frequency)
        smoothed_frequency = sum(self._frequencies) / len(self._frequencies)

        note_index = note_index_from_frequency(smoothed_frequency, self._a4)
        self._notes.append(note_name_from_index(note_index))
        stable_note = self._most_frequent_note()

        raw_cents = cents_offset(smoothed_frequency, note_index, self._a4)
        self._smoothed_cents = (
            self._smoothed_cents * self._cents_decay
            + raw_cents * (1.0 - self._cents_decay)
        )

        return SmoothedPitch(
            frequency=smoothed_frequency,
            note_index=note_index,
            note_name=stable_note,
            stable_note_index=nearest_index_for_name(stable_note, note_index),
            raw_cents=raw_cents,
            cents=self._smoothed_cents,
        )

    def reset(self, clear_cents: bool = True) -> None:
        """Drop both histories, and the decayed cents unless told to keep them."""
        self._frequencies.clear()
        self._notes.clear()
        if clear_cents:
            self._smoothed_cents = 0.0

    def _most_frequent_note(self) -> str:
        # Highest count wins; on a tie the note heard most recently wins.
        counts: Dict[str, int] = {}
        last_seen: Dict[str, int] = {}
        for position, note in enumerate(self._notes):
            counts[note] = counts.get(note, 0) + 1
            last_seen[note] = position
        return max(counts, key=lambda note: (counts[note], last_seen[note]))
