import numpy as np
import pytest

from chromatic_tuner.detection.autocorrelator import Autocorrelator
from tones import SAMPLE_RATE, sine, silence


@pytest.fixture
def detector():
    return Autocorrelator()


@pytest.mark.parametrize("frequency", [82.41, 110.0, 196.0, 220.0, 440.0, 466.16, 880.0, 1000.0])
def test_sine_within_one_percent(detector, frequency):
    estimate = detector.estimate(sine(frequency), SAMPLE_RATE)

    assert estimate is not None
    assert abs(estimate - frequency) / frequency < 0.01


def test_full_scale_sine(detector):
    estimate = detector.estimate(sine(440.0, amplitude=1.0), SAMPLE_RATE)
    assert estimate == pytest.approx(440.0, rel=0.01)


def test_other_sample_rate(detector):
    estimate = detector.estimate(sine(329.63, sample_rate=48000), 48000)
    assert estimate == pytest.approx(329.63, rel=0.01)


def test_silence_has_no_pitch(detector):
    assert detector.estimate(silence(), SAMPLE_RATE) is None


def test_signal_below_noise_floor(detector):
    quiet = sine(440.0, amplitude=0.005)  # RMS ~0.0035
    assert detector.estimate(quiet, SAMPLE_RATE) is None


def test_configurable_noise_floor():
    detector = Autocorrelator(noise_floor=0.5)
    # RMS of a 0.5 amplitude sine is ~0.35
    assert detector.estimate(sine(440.0), SAMPLE_RATE) is None


def test_empty_block(detector):
    assert detector.estimate(np.array([], dtype=np.float32), SAMPLE_RATE) is None


def test_integer_period_needs_no_shift(detector):
    # 441 Hz at 44.1 kHz repeats every 100 samples exactly
    block = sine(441.0).astype(np.float64)
    assert detector.refine(block, len(block) // 2, 100) == 0.0
    assert detector.estimate(block, SAMPLE_RATE) == pytest.approx(441.0, abs=1e-6)


def test_refine_stays_on_grid(detector):
    block = sine(440.0)
    shift = detector.refine(block, len(block) // 2, 100)

    assert -0.25 <= shift <= 0.21875
    assert (shift * 32) == int(shift * 32)
    # The true period is ~100.23 samples, so the shift points upward
    assert shift > 0


def test_refine_shift_is_capped(detector):
    # 1448.3 Hz repeats every ~30.45 samples, further than the grid reaches from lag 30
    block = sine(SAMPLE_RATE / 30.45)
    assert detector.refine(block, len(block) // 2, 30) == pytest.approx(7 / 32)


@pytest.mark.parametrize("amplitude", [0.5, 1.0])
@pytest.mark.parametrize("frequency", [1200.0, 1400.0, 1500.0])
def test_accurate_up_to_1500_hz(detector, frequency, amplitude):
    estimate = detector.estimate(sine(frequency, amplitude=amplitude), SAMPLE_RATE)

    assert estimate is not None
    assert abs(estimate - frequency) / frequency < 0.01


def test_refine_outside_block_is_neutral(detector):
    block = sine(440.0, length=256)
    assert detector.refine(block, 128, 130) == 0.0


@pytest.mark.parametrize("kwargs", [{"noise_floor": -1.0}, {"correlation_threshold": 1.5}])
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        Autocorrelator(**kwargs)
