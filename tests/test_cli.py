"""Tests for the command line interface and terminal display."""

import pytest
import soundfile as sf
from click.testing import CliRunner

from chromatic_tuner.cli.display import big_note, format_reading, needle_bar
from chromatic_tuner.cli.main import cli
from chromatic_tuner.note_types import TunerReading, TuningState
from tones import SAMPLE_RATE, sine, silence


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, tmp_path, *args):
    return runner.invoke(cli, ["--config-dir", str(tmp_path / "config"), *args], obj={})


def test_analyze_tone(runner, tmp_path):
    path = tmp_path / "a440.wav"
    sf.write(str(path), sine(440.0, length=SAMPLE_RATE), SAMPLE_RATE)

    result = invoke(runner, tmp_path, "analyze", str(path))

    assert result.exit_code == 0, result.output
    assert "Most common note: A4 " in result.output
    assert "In tune" in result.output


def test_analyze_summary_only(runner, tmp_path):
    path = tmp_path / "a440.wav"
    sf.write(str(path), sine(440.0, length=4096), SAMPLE_RATE)

    result = invoke(runner, tmp_path, "analyze", "--summary", str(path))

    assert result.exit_code == 0, result.output
    assert result.output.strip().splitlines()[-1] == "Most common note: A4 (2/2 pitched blocks of 2)"


def test_analyze_silence(runner, tmp_path):
    path = tmp_path / "silence.wav"
    sf.write(str(path), silence(4096), SAMPLE_RATE)

    result = invoke(runner, tmp_path, "analyze", "--summary", str(path))

    assert result.exit_code == 0, result.output
    assert "No pitch detected in 2 blocks" in result.output


def test_analyze_missing_file(runner, tmp_path):
    result = invoke(runner, tmp_path, "analyze", str(tmp_path / "nope.wav"))
    assert result.exit_code != 0


def test_needle_bar():
    assert needle_bar(0.0) == "[----------*----------]"
    assert needle_bar(45.0) == "[----------|---------*]"
    assert needle_bar(-90.0) == "[*---------|----------]"


def test_format_reading():
    reading = TunerReading(
        frequency=440.0,
        note_name="A",
        cents=1.0,
        needle_angle_degrees=0.5,
        tuning_state=TuningState.IN_TUNE,
        note_index=69,
        stable_note_index=69,
    )
    line = format_reading(reading, elapsed=1.5)

    assert line.startswith("   1.50s  A4")
    assert "440.00 Hz" in line
    assert "+1.0 cents" in line
    assert line.endswith("In tune")


def test_format_reading_with_flats():
    reading = TunerReading(
        frequency=466.16,
        note_name="A#",
        cents=0.0,
        needle_angle_degrees=0.0,
        tuning_state=TuningState.IN_TUNE,
        stable_note_index=70,
    )
    assert format_reading(reading).startswith("A#4")
    assert format_reading(reading, use_flats=True).startswith("Bb4")


def test_analyze_with_flats(runner, tmp_path):
    path = tmp_path / "a_sharp.wav"
    sf.write(str(path), sine(466.16, length=4096), SAMPLE_RATE)

    result = invoke(runner, tmp_path, "analyze", "--summary", "--flats", str(path))

    assert result.exit_code == 0, result.output
    assert "Most common note: Bb4 " in result.output


def test_format_absent_reading():
    reading = TunerReading(None, None, 0.0, 0.0, TuningState.ABSENT)
    assert "Hz" in format_reading(reading)
    assert "In tune" not in format_reading(reading)


def test_big_note():
    banner = big_note("A#")
    assert len(banner.splitlines()) > 1
