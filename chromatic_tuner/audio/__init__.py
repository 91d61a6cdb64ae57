"""Audio sources and the live tuner service.

The microphone input lives in :mod:`chromatic_tuner.audio.audio_input` and is not
imported here, since loading ``sounddevice`` requires the PortAudio library.
"""

from .base import AudioInputHandler
from .file_input import WavFileInput
from .tuner_service import TunerService

__all__ = ["AudioInputHandler", "WavFileInput", "TunerService"]
