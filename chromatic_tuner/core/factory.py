"""Factory for creating Chromatic Tuner components."""

from typing import Optional, Dict, Callable

from ..logger import get_logger
from ..detection.autocorrelator import Autocorrelator
from ..audio.file_input import WavFileInput
from ..tuner_engine import TunerEngine
from .config import ConfigManager
from .interfaces import IPitchDetector, IAudioInput

logger = get_logger(__name__)


def _yin_detector(**kwargs) -> IPitchDetector:
    # aubio is an optional extra
    from ..detection.yin_detector import YinPitchDetector

    return YinPitchDetector(**kwargs)


def _sounddevice_input(**kwargs) -> IAudioInput:
    # Loading sounddevice needs PortAudio, so only do it when a microphone is wanted
    from ..audio.audio_input import SoundDeviceInput

    return SoundDeviceInput(**kwargs)


class ComponentFactory:
    """Factory for creating Chromatic Tuner components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        # Register default component implementations
        self.pitch_detector_classes: Dict[str, Callable[..., IPitchDetector]] = {
            "autocorrelation": Autocorrelator,
            "yin": _yin_detector,
        }

        self.audio_input_classes: Dict[str, Callable[..., IAudioInput]] = {
            "sounddevice": _sounddevice_input,
            "file": WavFileInput,
        }

    def create_pitch_detector(
        self, implementation: str = "autocorrelation", **kwargs
    ) -> IPitchDetector:
        """Create a pitch detector.

        The autocorrelator picks up ``noise_floor`` and ``correlation_threshold``
        from the ``tuner`` configuration.

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.pitch_detector_classes:
            raise ValueError(f"Unknown pitch detector implementation: {implementation}")

        if implementation == "autocorrelation":
            tuner_config = self.config_manager.get_config("tuner")
            config = {
                "noise_floor": tuner_config["noise_floor"],
                "correlation_threshold": tuner_config["correlation_threshold"],
            }
            config.update(kwargs)
        else:
            config = dict(kwargs)

        instance = self.pitch_detector_classes[implementation](**config)
        logger.info(f"Created pitch detector: {implementation}")
        return instance

    def create_audio_input(
        self, implementation: str = "sounddevice", **kwargs
    ) -> IAudioInput:
        """Create an audio input.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Audio input instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.audio_input_classes:
            raise ValueError(f"Unknown audio input implementation: {implementation}")

        config = {}
        audio_config = self.config_manager.get_config("audio_input")
        if implementation == "sounddevice":
            config.update(audio_config)
        else:
            config["frames_per_buffer"] = audio_config["frames_per_buffer"]
        config.update(kwargs)

        instance = self.audio_input_classes[implementation](**config)
        logger.info(f"Created audio input: {implementation}")
        return instance

    def create_engine(
        self,
        audio_input: Optional[IAudioInput] = None,
        detector: str = "autocorrelation",
        **kwargs,
    ) -> TunerEngine:
        """Create a tuner engine from the ``tuner`` configuration.

        Args:
            audio_input: Capture source to bind, or None for caller-fed blocks
            detector: Name of the pitch detector implementation
            **kwargs: Overrides for the ``tuner`` configuration

        Returns:
            Tuner engine instance
        """
        config = self.config_manager.get_config("tuner")
        config.update(kwargs)

        if "pitch_detector" not in config:
            detector_config = {}
            if detector == "autocorrelation":
                detector_config["noise_floor"] = config["noise_floor"]
                detector_config["correlation_threshold"] = config["correlation_threshold"]
            config["pitch_detector"] = self.create_pitch_detector(detector, **detector_config)

        if "sample_rate" not in config:
            if audio_input is not None:
                config["sample_rate"] = audio_input.sample_rate
            else:
                config["sample_rate"] = self.config_manager.get_config("audio_input")["sample_rate"]

        engine = TunerEngine(audio_input=audio_input, **config)
        logger.info(f"Created tuner engine with {detector} detector")
        return engine
