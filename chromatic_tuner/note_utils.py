"""Utility functions for working with musical notes and frequencies."""

import math
import logging

import numpy as np

# Get logger for this module
logger = logging.getLogger(__name__)

A4_FREQUENCY = 440.0  # Pitch standard, Hz
A4_INDEX = 69  # MIDI note number of A4

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
NOTE_NAMES_FLATS = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]


def note_index_from_frequency(freq: float, a4: float = A4_FREQUENCY) -> int:
    """Nearest equal-tempered note number for a frequency.

    Args:
        freq: Frequency in Hz, must be positive and finite
        a4: Reference frequency of A4 in Hz

    Returns:
        MIDI-like note number (A4 = 69)
    """
    half_steps = round(12 * np.log2(freq / a4))
    return int(half_steps) + A4_INDEX


def frequency_of_note(note_index: int, a4: float = A4_FREQUENCY) -> float:
    """Exact frequency of an equal-tempered note number."""
    return a4 * 2.0 ** ((note_index - A4_INDEX) / 12.0)


def cents_offset(freq: float, note_index: int, a4: float = A4_FREQUENCY) -> int:
    """Signed deviation of ``freq`` from ``note_index`` in whole cents.

    Negative values mean the frequency is flat (below the note), positive sharp.
    """
    return math.floor(1200 * np.log2(freq / frequency_of_note(note_index, a4)))


def note_name_from_index(note_index: int, use_flats: bool = False) -> str:
    """Pitch-class name of a note number (e.g., 69 -> 'A')."""
    names = NOTE_NAMES_FLATS if use_flats else NOTE_NAMES
    return names[note_index % 12]


def nearest_index_for_name(note_name: str, near_index: int) -> int:
    """Note number named ``note_name`` that lies closest to ``near_index``.

    Used to give a pitch-class name an octave, e.g. ('B', 72) -> 71 (B4, next to C5).
    """
    names = NOTE_NAMES_FLATS if note_name in NOTE_NAMES_FLATS else NOTE_NAMES
    pitch_class = names.index(note_name)
    return near_index + (pitch_class - near_index % 12 + 6) % 12 - 6


def note_label(note_index: int, use_flats: bool = False) -> str:
    """SPN label of a note number (e.g., 69 -> 'A4', 70 -> 'Bb4' with flats)."""
    octave = (note_index // 12) - 1
    return f"{note_name_from_index(note_index, use_flats)}{octave}"


def get_note_name(freq: float, use_flats: bool = False, a4: float = A4_FREQUENCY) -> str:
    """Convert frequency to note name using Scientific Pitch Notation (SPN).

    Args:
        freq: Frequency in Hz
        use_flats: If True, use flat notes (e.g., 'Bb') instead of sharps (e.g., 'A#')
        a4: Reference frequency of A4 in Hz

    Returns:
        Note name with octave in SPN (e.g., 'A4', 'C#4', 'Bb3'), or '---' for
        frequencies that have no pitch

    Note:
        - Middle C is C4 (261.63 Hz)
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    if not np.isfinite(freq) or freq <= 0:
        logger.debug(f"No note for frequency {freq}")
        return "---"

    return note_label(note_index_from_frequency(freq, a4), use_flats)
