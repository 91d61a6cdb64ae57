"""Microphone capture for the tuner."""

from __future__ import annotations
import numpy as np
import sounddevice as sd
import time
from typing import Optional, Dict, Any, List, Callable, ClassVar, Union

from ..logger import get_logger
from ..core.errors import CaptureUnavailable
from .base import AudioInputHandler

logger = get_logger(__name__)


def list_input_devices() -> List[Dict[str, Any]]:
    """Return the capture-capable devices known to PortAudio.

    Each entry carries ``id``, ``name``, ``channels`` and ``default_samplerate``.
    """
    try:
        known = sd.query_devices()
    except sd.PortAudioError as e:
        raise CaptureUnavailable(f"Cannot query audio devices: {e}") from e

    devices = []
    for device_id, device in enumerate(known):
        if device["max_input_channels"] > 0:
            devices.append(
                {
                    "id": device_id,
                    "name": device["name"],
                    "channels": device["max_input_channels"],
                    "default_samplerate": device["default_samplerate"],
                }
            )
    return devices


class SoundDeviceInput(AudioInputHandler):
    """Audio input handler using sounddevice library."""

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    FRAMES_PER_BUFFER: ClassVar[int] = 2048  # One analysis window per callback
    CHANNELS: ClassVar[int] = 1  # Mono audio
    FALLBACK_RATES: ClassVar[List[int]] = [44100, 48000, 22050, 16000]

    def __init__(
        self,
        device_id: Optional[Union[int, str]] = None,
        sample_rate: Optional[int] = None,
        frames_per_buffer: Optional[int] = None,
        channels: Optional[int] = None,
    ) -> None:
        """Initialize the audio input handler.

        Args:
            device_id: Input device index, a substring of its name, or None for the default
            sample_rate: Sample rate in Hz, or None for default (44100)
            frames_per_buffer: Samples per callback, or None for default (2048)
            channels: Number of channels to open; only the first is analysed
        """
        self._device_id = device_id
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._frames_per_buffer = frames_per_buffer or self.FRAMES_PER_BUFFER
        self._channels = channels or self.CHANNELS

        self._stream: Optional[sd.InputStream] = None
        self._callback: Optional[Callable[[np.ndarray, float], None]] = None
        self._running = False

    def _resolve_device(self) -> Optional[int]:
        """Turn a device name fragment into an index."""
        if self._device_id is None or isinstance(self._device_id, int):
            return self._device_id

        wanted = str(self._device_id).lower()
        for device in list_input_devices():
            if wanted in device["name"].lower():
                logger.info(f"Found input device: {device['name']}")
                return device["id"]
        raise CaptureUnavailable(f"No input device matching '{self._device_id}'")

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info: dict,
        status: sd.CallbackFlags,
    ) -> None:
        """Callback for processing audio data from the input stream.

        Note:
            This is called from a separate audio thread, so it should be fast
            and avoid any blocking operations to prevent audio glitches.
        """
        if status:
            logger.warning(f"Audio callback status: {status}")

        if self._callback:
            # Extract mono audio data (take first channel if multi-channel)
            audio_data = indata[:, 0] if indata.ndim > 1 else indata
            self._callback(audio_data, time.time())

    def start(self, callback: Callable[[np.ndarray, float], None]) -> None:
        """Start capturing audio and pass each block to the callback.

        The requested sample rate is tried first, then the common fallback rates.

        Args:
            callback: Function to call with audio data and timestamp

        Raises:
            CaptureUnavailable: If no sample rate can be opened on the device
        """
        if self._running:
            logger.warning("Audio input already running")
            return

        self._callback = callback
        device = self._resolve_device()

        rates = [self._sample_rate] + [r for r in self.FALLBACK_RATES if r != self._sample_rate]
        errors = []
        for rate in rates:
            try:
                logger.info(f"Trying to start audio input with sample rate: {rate} Hz")
                stream = sd.InputStream(
                    device=device,
                    samplerate=rate,
                    blocksize=self._frames_per_buffer,
                    channels=self._channels,
                    dtype="float32",
                    callback=self._audio_callback,
                )
                stream.start()
            except (sd.PortAudioError, ValueError) as e:
                logger.warning(f"Failed to start audio input with sample rate {rate} Hz: {e}")
                errors.append(e)
                continue

            self._stream = stream
            self._sample_rate = rate
            self._running = True
            logger.info(f"Audio input started with sample rate {rate} Hz")
            return

        self._callback = None
        raise CaptureUnavailable(
            "Could not start audio input with any sample rate"
        ) from (errors[-1] if errors else None)

    def stop(self) -> None:
        """Stop capturing audio."""
        if not self._running:
            return

        try:
            if self._stream:
                self._stream.stop()
                self._stream.close()
        except sd.PortAudioError as e:
            logger.error(f"Error stopping audio input: {e}")
        finally:
            self._stream = None
            self._running = False
            logger.info("Audio input stopped")
