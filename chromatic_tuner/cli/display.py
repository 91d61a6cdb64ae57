"""Terminal rendering of tuner readings."""

from typing import Optional

import pyfiglet

from ..note_types import TunerReading

NEEDLE_WIDTH = 21  # odd, so the centre mark is a single column


def needle_bar(angle: float, max_angle: float = 45.0, width: int = NEEDLE_WIDTH) -> str:
    """Draw the needle as a one-line gauge, e.g. ``[----------|-----*----]``."""
    half = width // 2
    position = half + round(max(-1.0, min(1.0, angle / max_angle)) * half)
    cells = ["-"] * width
    cells[half] = "|"
    cells[position] = "*"
    return "[" + "".join(cells) + "]"


def format_reading(
    reading: TunerReading, elapsed: Optional[float] = None, use_flats: bool = False
) -> str:
    """One-line summary of a reading, with the note in SPN (e.g. ``A4``)."""
    prefix = f"{elapsed:7.2f}s  " if elapsed is not None else ""
    if not reading.is_pitched:
        return f"{prefix}{'-':<4}{'-':>9} Hz {'':>12}  {needle_bar(0.0)}"

    return (
        f"{prefix}{reading.label(use_flats):<4}{reading.frequency:9.2f} Hz "
        f"{reading.cents:+6.1f} cents  {needle_bar(reading.needle_angle_degrees)}  "
        f"{reading.tuning_state.label}"
    )


def big_note(note_name: str, font: str = "standard") -> str:
    """Large ASCII-art banner for the current note."""
    return pyfiglet.figlet_format(note_name or "-", font=font)
